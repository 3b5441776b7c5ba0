from typing import Annotated, AsyncGenerator

from fastapi import Depends

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

Base = declarative_base()


def _connect_args(url: str) -> dict:
    # asyncpg만 ssl 인자를 받음 (aiosqlite는 거부)
    if url.startswith("postgresql+asyncpg"):
        return {"ssl": settings.POSTGRES_SSLMODE == "require"}
    return {}


engine = create_async_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,               # 연결 사전 체크
    pool_recycle=1800,                # 30분마다 재연결해 RDS 타임아웃 방지
    connect_args=_connect_args(settings.DATABASE_URL),
)

async_session_factory = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as sess:  # async with으로 자동 commit/rollback 처리
        yield sess

# Annotated 별칭: 다른 모듈에서 `db: SessionDep` 만 적으면 세션이 주입됩니다.
SessionDep = Annotated[AsyncSession, Depends(get_db)]
