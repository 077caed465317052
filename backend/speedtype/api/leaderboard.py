from fastapi import APIRouter, Depends
from sqlmodel import Session

from speedtype.core.database import get_session
from speedtype.schemas.stats_models import LeaderboardResponse
from speedtype.services import stats_service

router = APIRouter(tags=["Leaderboard"])


@router.get("/leaderboard", response_model=LeaderboardResponse)
def get_leaderboard(session: Session = Depends(get_session)):
    """Lists up to ten accounts ranked by best WPM. No authentication required."""
    return stats_service.get_leaderboard(session)
