from sqlalchemy import Column, Integer, String, Text, DateTime, Index
from sqlalchemy.sql import func
from ..database import Base


class RAGSuggestionLog(Base):
    """RAG 제안 호출 로그 (append-only)"""
    __tablename__ = "rag_suggestion_logs"
    __table_args__ = (
        Index("ix_rag_logs_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    query = Column(String(255), nullable=False)
    context = Column(Text, nullable=True)
    language = Column(String(5), nullable=False, server_default="ko")
    suggestion_count = Column(Integer, nullable=False, default=0)
    top_suggestion = Column(Text, nullable=True)  # n8n 에이전트가 긴 문장을 돌려주기도 함
    rag_version = Column(String(20), nullable=False)  # "1.0" | "fallback"
    response_time = Column(Integer, nullable=False, default=0)  # ms
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"RAGSuggestionLog(id={self.id}, query={self.query!r}, rag_version={self.rag_version!r})"
