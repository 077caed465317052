from typing import Dict
from fastapi import APIRouter, Depends
from sqlmodel import Session

from speedtype.core.database import get_session, ping
from speedtype.core.errors import ServiceUnavailable

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/live")
def liveness() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/ready")
def readiness(session: Session = Depends(get_session)) -> Dict[str, str]:
    """Reports whether the store answers queries.

    Raises:
        ServiceUnavailable: If the database cannot be reached.
    """
    if not ping(session):
        raise ServiceUnavailable()
    return {"status": "ready", "database": "ok"}
