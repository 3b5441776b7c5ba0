# backend/vardict/dictionary/models.py
from enum import Enum as PyEnum
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Float, JSON,
    UniqueConstraint, Index
)
from sqlalchemy.sql import func
from ..database import Base


class MappingSource(str, PyEnum):
    MANUAL = "manual"
    RAG = "rag"
    IMPORT = "import"
    SEED = "seed"


class VariableMapping(Base):
    """한글 용어 ↔ 영어 식별자 매핑"""
    __tablename__ = "variable_mappings"
    __table_args__ = (
        UniqueConstraint("korean", "english", name="uq_variable_mappings_korean_english"),
        Index("ix_variable_mappings_korean", "korean"),
        Index("ix_variable_mappings_english", "english"),
        Index("ix_variable_mappings_category", "category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    korean = Column(String(100), nullable=False)
    english = Column(String(100), nullable=False)
    type = Column(String(30), nullable=False, default="변수")       # 변수, 함수, 클래스, 상수 ...
    category = Column(String(50), nullable=True, default="일반")
    description = Column(Text, nullable=True)
    usage = Column(Text, nullable=True)                               # 사용 예시 코드
    tags = Column(JSON, nullable=True)                                # JSON 배열: ["사용자", "user"]
    source = Column(String(20), nullable=False, default=MappingSource.MANUAL.value)
    confidence = Column(Float, nullable=True)                         # RAG 채택 시 신뢰도
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"VariableMapping(id={self.id}, korean={self.korean!r}, english={self.english!r}, type={self.type!r})"
    def __str__(self) -> str:
        return f"{self.korean} → {self.english}"


class SearchHistory(Base):
    """번역 검색 이력 (append-only)"""
    __tablename__ = "search_history"
    __table_args__ = (
        Index("ix_search_history_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    query = Column(String(255), nullable=False)
    result_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"SearchHistory(id={self.id}, query={self.query!r}, result_count={self.result_count})"
