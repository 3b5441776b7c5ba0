from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from ..models import CustomModel


class MappingCreate(CustomModel):
    """사전 매핑 생성 (수동 입력, RAG 채택, 일괄 임포트 공통)"""
    korean: Optional[str] = Field(None, max_length=100)
    english: Optional[str] = Field(None, max_length=100)
    type: Optional[str] = Field(None, max_length=30, description="변수, 함수, 클래스, 상수")
    category: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    usage: Optional[str] = None
    tags: Optional[List[str]] = None
    source: Literal["manual", "rag", "import", "seed"] = "manual"
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)

    @field_validator("korean", "english", "type", "category")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, v):
        """쉼표 구분 문자열도 허용"""
        if isinstance(v, str):
            return [tag.strip() for tag in v.split(",") if tag.strip()]
        return v


class MappingOut(CustomModel):
    id: int
    korean: str
    english: str
    type: str
    category: Optional[str] = None
    description: Optional[str] = None
    usage: Optional[str] = None
    tags: Optional[List[str]] = None
    source: str
    confidence: Optional[float] = None
    created_at: datetime
    updated_at: datetime


class TranslationResult(CustomModel):
    id: int
    korean: str
    english: str
    type: str
    category: Optional[str] = None
    description: Optional[str] = None
    usage: Optional[str] = None
    match: Literal["exact", "partial", "english"]


class TranslationResponse(CustomModel):
    query: str
    results: List[TranslationResult]
    total: int


class MappingAddResponse(CustomModel):
    success: bool
    message: str
    data: Optional[MappingOut] = None


class BulkResult(CustomModel):
    """대량 작업 결과"""
    created: int
    skipped: int
    total: int
    details: Optional[Dict[str, Any]] = Field(None, description="추가 상세 정보")
