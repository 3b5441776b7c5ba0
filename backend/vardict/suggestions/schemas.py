from typing import List, Literal, Optional

from pydantic import Field

from ..models import CustomModel

SuggestionType = Literal["variable", "function", "class"]


class RAGSuggestion(CustomModel):
    english: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    type: SuggestionType = "variable"
    category: str = "일반"


class SuggestionRequest(CustomModel):
    query: Optional[str] = Field(None, max_length=255, description="영어 이름이 필요한 한글 용어")
    context: Optional[str] = Field(None, description="사용 맥락 (캐시 키에 포함)")
    language: Literal["ko", "en"] = "ko"


class SuggestionMetadata(CustomModel):
    rag_version: str = Field(..., description="'1.0' 또는 'fallback'")
    response_time: int = Field(..., description="밀리초")


class SuggestionResponse(CustomModel):
    suggestions: List[RAGSuggestion]
    metadata: SuggestionMetadata
