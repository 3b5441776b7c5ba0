from fastapi import APIRouter, HTTPException, Response, status

from ..database import SessionDep
from . import service
from .schemas import MappingAddResponse, MappingCreate, MappingOut, TranslationResponse

router = APIRouter(prefix="/dictionary", tags=["dictionary"])
translate_router = APIRouter(tags=["dictionary"])


@translate_router.get("/translate", response_model=TranslationResponse)
async def translate(db: SessionDep, q: str | None = None):
    query = (q or "").strip()
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query parameter is required")
    return await service.translate(db, query)


@router.post("/add", response_model=MappingAddResponse)
async def add_mapping(body: MappingCreate, db: SessionDep, response: Response):
    mapping, created = await service.add_mapping(db, body)
    if not created:
        return MappingAddResponse(success=True, message="이미 등록된 변수명입니다", data=MappingOut.model_validate(mapping))
    response.status_code = status.HTTP_201_CREATED
    return MappingAddResponse(success=True, message="변수명이 성공적으로 추가되었습니다", data=MappingOut.model_validate(mapping))


@router.get("/", response_model=list[MappingOut])
async def list_mappings(
    db: SessionDep,
    category: str | None = None,
    source: str | None = None,
    q: str | None = None,
    skip: int = 0,
    limit: int = 50,
):
    return await service.list_mappings(db, category=category, source=source, q=q, skip=skip, limit=limit)


@router.get("/{mapping_id}", response_model=MappingOut)
async def get_mapping(mapping_id: int, db: SessionDep):
    mapping = await service.get_by_id(db, mapping_id)
    if not mapping:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Mapping not found")
    return mapping
