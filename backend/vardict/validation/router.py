from fastapi import APIRouter, HTTPException, status

from ..suggestions.router import SuggestionServiceDep
from . import service
from .schemas import ValidationRequest, ValidationResult

router = APIRouter(prefix="/validate", tags=["validation"])


@router.post("", response_model=ValidationResult)
async def validate_code(body: ValidationRequest, suggestion_service: SuggestionServiceDep):
    if not body.code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="코드를 입력해주세요")

    rag_suggester = suggestion_service.top_english if body.use_rag else None
    return await service.validate_code(body.code, rag_suggester=rag_suggester)
