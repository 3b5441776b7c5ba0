from fastapi import APIRouter, Query, status

from ..database import SessionDep
from . import service
from .schemas import ActivityCreate, ActivityOut, ActivityRecorded, ActivityStats

router = APIRouter(prefix="/activity", tags=["activity"])


@router.post("", response_model=ActivityRecorded, status_code=status.HTTP_201_CREATED)
async def record_activity(body: ActivityCreate, db: SessionDep):
    activity = await service.record_activity(db, body)
    return ActivityRecorded(success=True, activity=ActivityOut.model_validate(activity))


@router.get("", response_model=ActivityStats)
async def get_stats(db: SessionDep, days: int = Query(7, ge=1, le=365)):
    return await service.get_stats(db, days=days)
