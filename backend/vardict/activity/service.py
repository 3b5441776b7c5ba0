import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from .models import DAILY_COUNTERS, DailyStats, UserActivity
from .schemas import ActivityCreate, ActivityStats, DailyStatsOut, RecentActivity

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10


async def _upsert_daily_stats(db: AsyncSession, day: date, activity_type: str) -> None:
    """date 기준 INSERT .. ON CONFLICT 로 카운터를 DB에서 원자적으로 증가시킨다."""
    insert = pg_insert if db.bind.dialect.name == "postgresql" else sqlite_insert
    counter = DAILY_COUNTERS.get(activity_type)

    values = {"date": day, "total_translations": 0, "total_validations": 0, "total_rag_suggestions": 0}
    if counter:
        values[counter] = 1
    stmt = insert(DailyStats).values(**values)
    if counter:
        stmt = stmt.on_conflict_do_update(
            index_elements=[DailyStats.date],
            set_={counter: getattr(DailyStats, counter) + 1, "updated_at": func.now()},
        )
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=[DailyStats.date])
    await db.execute(stmt)


async def record_activity(db: AsyncSession, data: ActivityCreate, *, today: Optional[date] = None) -> UserActivity:
    """활동 로그를 남기고 오늘 날짜 통계를 증가시킵니다."""
    activity = UserActivity(
        activity_type=data.activity_type,
        query=data.query,
        result=data.result,
        session_id=data.session_id,
        success=data.success,
        extra=data.metadata,
    )
    db.add(activity)
    await _upsert_daily_stats(db, today or date.today(), data.activity_type)
    await db.commit()
    await db.refresh(activity)
    logger.debug(f"Recorded activity: {activity!r}")
    return activity


async def get_stats(db: AsyncSession, *, days: int = 7, today: Optional[date] = None) -> ActivityStats:
    today = today or date.today()
    start_date = today - timedelta(days=days)

    daily = (await db.execute(
        select(DailyStats)
        .where(DailyStats.date >= start_date)
        .order_by(DailyStats.date.asc())
        .execution_options(populate_existing=True)
    )).scalars().all()

    totals = (await db.execute(
        select(UserActivity.activity_type, func.count(UserActivity.id)).group_by(UserActivity.activity_type)
    )).all()

    recent = (await db.execute(
        select(UserActivity)
        .order_by(UserActivity.created_at.desc(), UserActivity.id.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    )).scalars().all()

    today_row = next((row for row in daily if row.date == today), None)

    return ActivityStats(
        daily_stats=[DailyStatsOut.model_validate(row) for row in daily],
        total_stats={activity_type: count for activity_type, count in totals},
        recent_activities=[RecentActivity.model_validate(row) for row in recent],
        today_stats=DailyStatsOut.model_validate(today_row) if today_row else DailyStatsOut(date=today),
    )


async def count_activities(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(UserActivity.id)))).scalar_one()
