# backend/vardict/activity/models.py
from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, Text, DateTime, Date, Boolean, JSON, Index
from sqlalchemy.sql import func
from ..database import Base


class ActivityType(str, PyEnum):
    TRANSLATION = "translation"
    VALIDATION = "validation"
    RAG_SUGGESTION = "rag_suggestion"
    DICTIONARY_ADD = "dictionary_add"


# activity_type → DailyStats 카운터 컬럼
DAILY_COUNTERS = {
    ActivityType.TRANSLATION.value: "total_translations",
    ActivityType.VALIDATION.value: "total_validations",
    ActivityType.RAG_SUGGESTION.value: "total_rag_suggestions",
}


class UserActivity(Base):
    """사용자 활동 로그 (append-only)"""
    __tablename__ = "user_activities"
    __table_args__ = (
        Index("ix_user_activities_type", "activity_type"),
        Index("ix_user_activities_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    activity_type = Column(String(30), nullable=False)
    query = Column(Text, nullable=True)
    result = Column(Text, nullable=True)
    session_id = Column(String(100), nullable=True)
    success = Column(Boolean, nullable=False, default=True)
    # 'metadata'는 Declarative 예약어라 속성명만 다르게 둔다
    extra = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"UserActivity(id={self.id}, activity_type={self.activity_type!r}, success={self.success})"


class DailyStats(Base):
    """일별 집계 카운터 (date 기준 upsert)"""
    __tablename__ = "daily_stats"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, unique=True, nullable=False, index=True)
    total_translations = Column(Integer, nullable=False, default=0)
    total_validations = Column(Integer, nullable=False, default=0)
    total_rag_suggestions = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"DailyStats(date={self.date}, translations={self.total_translations}, validations={self.total_validations})"
