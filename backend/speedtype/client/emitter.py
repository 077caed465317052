"""
Fire-and-forget delivery of finished attempts.

Gameplay never waits on the backend: a failed submission is logged and
dropped, and the async variant runs the blocking HTTP call on a worker thread.
"""

import asyncio
import logging
import uuid
from typing import Optional, Set

from speedtype.client.api_client import ApiError, SpeedTypeClient
from speedtype.services.session_engine import AttemptCandidate

logger = logging.getLogger(__name__)


class ResultEmitter:
    def __init__(self, client: SpeedTypeClient, user_id: Optional[str]):
        self.client = client
        self.user_id = user_id
        self._pending: Set[asyncio.Task] = set()

    def emit(self, candidate: AttemptCandidate) -> Optional[str]:
        """Submits one result.

        Returns:
            Optional[str]: The stored result id, or None when nothing was stored.
        """
        if not self.user_id:
            # Anonymous players keep their result local
            return None

        payload = candidate.to_payload(self.user_id, attempt_id=uuid.uuid4().hex)
        try:
            data = self.client.save_result(payload)
        except ApiError as e:
            logger.warning("Could not save result: %s", e)
            return None
        if not isinstance(data, dict):
            logger.warning("Unexpected result payload: %r", data)
            return None
        return data.get("resultId")

    def emit_async(self, candidate: AttemptCandidate) -> asyncio.Task:
        """Schedules :meth:`emit` on a worker thread from inside an event loop."""
        task = asyncio.get_running_loop().create_task(
            asyncio.to_thread(self.emit, candidate)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Waits for scheduled submissions, e.g. before shutting down."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
