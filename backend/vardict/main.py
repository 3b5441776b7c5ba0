import os
import time
import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
import json

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from .database import engine, async_session_factory, SessionDep
from . import db_models  # noqa: F401
from .config import settings
from .dictionary.router import router as dictionary_router, translate_router
from .validation.router import router as validation_router
from .suggestions.router import router as suggestions_router
from .activity.router import router as activity_router
from .dictionary import service as dictionary_service
from .activity import service as activity_service

# 로깅 설정 (Docker 환경 최적화)
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # stdout으로 명시적 출력
    ]
)

# 특정 모듈 로그 레벨 설정
logging.getLogger("vardict.suggestions.service").setLevel(log_level)
logging.getLogger("vardict.validation.service").setLevel(log_level)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
logger.info(f"Application starting with log level: {settings.LOG_LEVEL}")


async def seed_dictionary_from_file(file_path: Path, session_factory=async_session_factory) -> int:
    from .dictionary.seed import items_from_json

    async with session_factory() as session:
        # 테이블이 비어 있을 때만 시드
        if await dictionary_service.count_mappings(session) > 0:
            logger.info("Dictionary table is not empty; skipping seed on startup.")
            return 0
        payload = json.loads(file_path.read_text(encoding="utf-8"))
        result = await dictionary_service.bulk_import(session, items_from_json(payload, source="seed"), mode="skip")
        logger.info(
            f"Seeded dictionary from {file_path}: created={result.created}, skipped={result.skipped}, total={result.total}"
        )
        return result.created


@asynccontextmanager
async def lifespan(app: FastAPI):
    seed_file = settings.DICTIONARY_SEED_FILE
    if seed_file:
        file_path = Path(seed_file)
        if not file_path.exists():
            logger.warning(f"DICTIONARY_SEED_FILE not found: {file_path}")
        else:
            try:
                await seed_dictionary_from_file(file_path)
            except Exception as e:
                logger.exception(f"Failed to seed dictionary from {file_path}: {e}")

    yield
    await engine.dispose()

os.environ["TZ"] = "Asia/Seoul"
if hasattr(time, "tzset"):
    time.tzset()

app = FastAPI(title="vardict", lifespan=lifespan)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(translate_router)
app.include_router(dictionary_router)
app.include_router(validation_router)
app.include_router(suggestions_router)
app.include_router(activity_router)


# 헬스 체크 (DB 연결 + 기본 통계)
@app.get("/health", tags=["health"])
async def health(db: SessionDep):
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        start = time.perf_counter()
        await db.execute(text("SELECT 1"))
        db_response_ms = int((time.perf_counter() - start) * 1000)

        mapping_count = await dictionary_service.count_mappings(db)
        activity_count = await activity_service.count_activities(db)
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "status": "unhealthy",
                "timestamp": timestamp,
                "database": {"connected": False, "error": str(e)},
            },
        )

    return {
        "status": "healthy",
        "timestamp": timestamp,
        "database": {
            "connected": True,
            "response_time": f"{db_response_ms}ms",
            "stats": {
                "variable_mappings": mapping_count,
                "user_activities": activity_count,
            },
        },
        "environment": {
            "environment": settings.ENVIRONMENT,
            "has_database": bool(settings.DATABASE_URL),
            "has_rag": "RAG_WEBHOOK_URL" in settings.model_fields_set,  # 기본값이 아닌 실제 설정 여부
        },
    }
