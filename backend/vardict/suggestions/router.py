import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import SessionDep
from .models import RAGSuggestionLog
from .schemas import SuggestionRequest, SuggestionResponse
from .service import SuggestionService, get_suggestion_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rag", tags=["rag"])

SuggestionServiceDep = Annotated[SuggestionService, Depends(get_suggestion_service)]


async def log_suggestion(db: AsyncSession, body: SuggestionRequest, result: SuggestionResponse) -> None:
    top = result.suggestions[0].english if result.suggestions else None
    db.add(RAGSuggestionLog(
        query=body.query,
        context=body.context,
        language=body.language,
        suggestion_count=len(result.suggestions),
        top_suggestion=top,
        rag_version=result.metadata.rag_version,
        response_time=result.metadata.response_time,
    ))
    await db.commit()


@router.post("/suggest", response_model=SuggestionResponse)
async def suggest(body: SuggestionRequest, db: SessionDep, suggestion_service: SuggestionServiceDep):
    if not body.query or not body.query.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="검색어를 입력해주세요")

    result = await suggestion_service.suggest(body.query, body.context, body.language)
    await log_suggestion(db, body, result)
    return result
