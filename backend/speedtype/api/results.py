from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from speedtype.core.database import get_session
from speedtype.core.security import get_current_user
from speedtype.models.models import User
from speedtype.schemas.stats_models import ResultCreate, ResultCreated
from speedtype.services import stats_service

router = APIRouter(tags=["Results"])


@router.post("/results", status_code=201, response_model=ResultCreated)
def save_result(
    result: ResultCreate,
    response: Response,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Records a finished typing attempt for the current user.

    A resubmission carrying an already recorded ``attemptId`` stores nothing
    and answers 200 with the original result id.

    Args:
        result (ResultCreate): The attempt measurements.
        response (Response): Used to downgrade the status on duplicates.
        user (User): The current authenticated user.
        session (Session): The database session.

    Returns:
        ResultCreated: The id of the stored result.
    """
    outcome = stats_service.record_attempt(session, user, result)
    if not outcome["created"]:
        response.status_code = status.HTTP_200_OK
    return {"result_id": outcome["result_id"]}
