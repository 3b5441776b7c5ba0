import logging
from typing import Iterable, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SearchHistory, VariableMapping
from .schemas import BulkResult, MappingCreate, MappingOut, TranslationResponse, TranslationResult

logger = logging.getLogger(__name__)

MAX_TRANSLATION_RESULTS = 10
HISTORY_QUERY_MAX_LENGTH = 255  # SearchHistory.query 컬럼 길이
BULK_IMPORT_LIMIT = 1000

_MATCH_RANK = {"exact": 0, "partial": 1, "english": 2}


def generate_tags(korean: str, english: str, description: Optional[str]) -> List[str]:
    """한글/영어 원문 + 설명 속 3글자 이상 단어 (순서 유지, 중복 제거)"""
    candidates = [korean.lower(), english.lower()]
    candidates += [word for word in (description or "").lower().split(" ") if len(word) > 2]
    return list(dict.fromkeys(candidates))


def generate_usage_example(english: str, type_: str) -> str:
    if type_ == "함수":
        return f"{english}();"
    if type_ == "클래스":
        return f"const instance = new {english}();"
    if type_ == "상수":
        return f"const {english.upper()} = '{english}';"
    # 변수 및 기타
    return f"const {english} = get{english[:1].upper() + english[1:]}();"


def _match_kind(mapping: VariableMapping, query: str) -> str:
    if mapping.korean == query:
        return "exact"
    if query in mapping.korean:
        return "partial"
    return "english"


async def translate(db: AsyncSession, query: str) -> TranslationResponse:
    """
    사전에서 한글(정확/부분) 및 영어(부분, 대소문자 무시) 일치를 찾아 정렬합니다.
    정확 일치 → 한글 부분 일치 → 영어 일치, 그룹 안에서는 confidence 내림차순.
    """
    stmt = select(VariableMapping).where(
        or_(
            VariableMapping.korean.contains(query, autoescape=True),
            func.lower(VariableMapping.english).contains(query.lower(), autoescape=True),
        )
    )
    rows = (await db.execute(stmt)).scalars().all()

    ranked = sorted(
        rows,
        key=lambda m: (_MATCH_RANK[_match_kind(m, query)], -(m.confidence or 0.0), m.id),
    )
    results = [
        TranslationResult(
            id=m.id,
            korean=m.korean,
            english=m.english,
            type=m.type,
            category=m.category,
            description=m.description,
            usage=m.usage,
            match=_match_kind(m, query),
        )
        for m in ranked[:MAX_TRANSLATION_RESULTS]
    ]

    db.add(SearchHistory(query=query[:HISTORY_QUERY_MAX_LENGTH], result_count=len(ranked)))
    await db.commit()

    logger.info(f"Translate '{query}': {len(ranked)} matches")
    return TranslationResponse(query=query, results=results, total=len(ranked))


async def get_by_id(db: AsyncSession, mapping_id: int) -> Optional[VariableMapping]:
    result = await db.execute(select(VariableMapping).where(VariableMapping.id == mapping_id))
    return result.scalar_one_or_none()


async def list_mappings(
    db: AsyncSession,
    *,
    category: Optional[str] = None,
    source: Optional[str] = None,
    q: Optional[str] = None,
    skip: int = 0,
    limit: int = 50,
):
    conditions = []
    if category:
        conditions.append(VariableMapping.category == category)
    if source:
        conditions.append(VariableMapping.source == source)
    if q:
        ilike = f"%{q}%"
        conditions.append(or_(VariableMapping.korean.ilike(ilike), VariableMapping.english.ilike(ilike)))
    stmt = (
        select(VariableMapping)
        .where(and_(*conditions) if conditions else True)
        .order_by(VariableMapping.id.desc())
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return result.scalars().all()


async def find_existing(db: AsyncSession, korean: str, english: str) -> Optional[VariableMapping]:
    """같은 쌍이 있으면 그것을, 없으면 한글 또는 영어가 겹치는 첫 매핑을 반환"""
    exact = await db.execute(
        select(VariableMapping).where(VariableMapping.korean == korean, VariableMapping.english == english)
    )
    found = exact.scalar_one_or_none()
    if found:
        return found
    overlap = await db.execute(
        select(VariableMapping)
        .where(or_(VariableMapping.korean == korean, VariableMapping.english == english))
        .order_by(VariableMapping.id)
        .limit(1)
    )
    return overlap.scalar_one_or_none()


async def add_mapping(db: AsyncSession, data: MappingCreate) -> Tuple[VariableMapping, bool]:
    """
    매핑을 추가합니다.

    Returns:
        (매핑, 새로 생성 여부). 완전히 같은 쌍이 이미 있으면 기존 매핑과 False.

    Raises:
        HTTPException(400): korean/english/type 누락
        HTTPException(409): 같은 한글에 다른 영어, 또는 다른 한글에 같은 영어
    """
    if not data.korean or not data.english or not data.type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="필수 필드가 누락되었습니다 (korean, english, type)",
        )

    existing = await find_existing(db, data.korean, data.english)
    if existing:
        if existing.korean == data.korean and existing.english == data.english:
            return existing, False
        logger.warning(f"Mapping conflict: {data.korean} → {data.english} vs {existing}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": f"충돌하는 변수명이 존재합니다: {existing.korean} → {existing.english}",
                "existing": MappingOut.model_validate(existing).model_dump(),
            },
        )

    mapping = VariableMapping(
        korean=data.korean,
        english=data.english,
        type=data.type,
        category=data.category or "일반",
        description=data.description or "",
        usage=data.usage or generate_usage_example(data.english, data.type),
        tags=data.tags or generate_tags(data.korean, data.english, data.description),
        source=data.source,
        confidence=data.confidence,
    )
    db.add(mapping)
    try:
        await db.commit()
        await db.refresh(mapping)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="이미 존재하는 변수명입니다")
    return mapping, True


async def delete_all(db: AsyncSession) -> int:
    result = await db.execute(delete(VariableMapping))
    await db.commit()
    return result.rowcount or 0


async def count_mappings(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(VariableMapping.id)))).scalar_one()


async def bulk_import(db: AsyncSession, items: Iterable[MappingCreate], *, mode: str = "error") -> BulkResult:
    items = list(items)
    if len(items) > BULK_IMPORT_LIMIT:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Bulk import supports up to {BULK_IMPORT_LIMIT} items per request",
        )
    created = 0
    skipped = 0
    errors = []

    for i, item in enumerate(items):
        try:
            _, is_new = await add_mapping(db, item)
        except HTTPException as e:
            if e.status_code == status.HTTP_409_CONFLICT and mode == "skip":
                skipped += 1
                continue
            # 그 외는 에러로 기록하고 계속 진행 (전체 실패 방지)
            detail = e.detail["message"] if isinstance(e.detail, dict) else e.detail
            errors.append(f"Item {i+1}: {detail}")
            skipped += 1
            continue
        if is_new:
            created += 1
        else:
            skipped += 1

    details = {"errors": errors} if errors else None
    logger.info(f"Bulk import finished: created={created}, skipped={skipped}, errors={len(errors)}")
    return BulkResult(created=created, skipped=skipped, total=created + skipped, details=details)
