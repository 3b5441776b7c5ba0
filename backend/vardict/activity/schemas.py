from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..models import CustomModel


class ActivityCreate(CustomModel):
    activity_type: str = Field(..., min_length=1, max_length=30, description="translation, validation, rag_suggestion, ...")
    query: Optional[str] = None
    result: Optional[str] = None
    session_id: Optional[str] = Field(None, max_length=100)
    success: bool = True
    metadata: Optional[Dict[str, Any]] = None


class ActivityOut(CustomModel):
    id: int
    activity_type: str
    query: Optional[str] = None
    result: Optional[str] = None
    session_id: Optional[str] = None
    success: bool
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="extra")
    created_at: datetime


class RecentActivity(CustomModel):
    id: int
    activity_type: str
    query: Optional[str] = None
    success: bool
    created_at: datetime


class ActivityRecorded(CustomModel):
    success: bool
    activity: ActivityOut


class DailyStatsOut(CustomModel):
    date: date
    total_translations: int = 0
    total_validations: int = 0
    total_rag_suggestions: int = 0


class ActivityStats(CustomModel):
    daily_stats: List[DailyStatsOut]
    total_stats: Dict[str, int]
    recent_activities: List[RecentActivity]
    today_stats: DailyStatsOut
