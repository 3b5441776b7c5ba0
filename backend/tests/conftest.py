import os
import sys
from pathlib import Path
import httpx
import pytest

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

# 테스트용 환경 변수 세팅 (vardict 모듈 임포트 전에 적용)
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CORS_ORIGINS", "*")
os.environ.setdefault("RAG_WEBHOOK_URL", "http://rag.test/webhook/invoke")

# sys.path에 backend 추가하여 'vardict' 패키지 검색 가능하게 함
backend_path = Path(__file__).resolve().parents[1]
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from vardict.main import app
from vardict.database import Base
from vardict.database import get_db as real_get_db
from vardict.suggestions.cache import SuggestionCache
from vardict.suggestions.client import RagWebhookClient
from vardict.suggestions.service import SuggestionService, get_suggestion_service


@pytest.fixture()
async def test_engine():
    # 메모리 SQLite로 빠른 테스트 (테스트마다 새 DB, 단일 커넥션 공유)
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db(test_engine):
    async_session = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture(autouse=True)
async def override_db(db):
    async def _get_db():
        yield db
    app.dependency_overrides[real_get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class WebhookStub:
    """httpx.MockTransport 핸들러. 응답을 순서대로 돌려주고 요청을 기록한다."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        # 같은 Response 객체를 재사용하지 않도록 복제
        return httpx.Response(response.status_code, content=response.content, headers=response.headers)

    @property
    def calls(self) -> int:
        return len(self.requests)


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_suggestion_service(stub: WebhookStub, *, max_retries: int = 3, ttl: float = 3600,
                            api_key: str | None = None, clock=None, min_confidence: float = 0.0):
    sleeper = SleepRecorder()
    client = RagWebhookClient(
        "http://rag.test/webhook/invoke",
        api_key=api_key,
        timeout=1.0,
        transport=httpx.MockTransport(stub),
    )
    cache = SuggestionCache(ttl, clock=clock) if clock else SuggestionCache(ttl)
    service = SuggestionService(client, cache, max_retries=max_retries, min_confidence=min_confidence, sleep=sleeper)
    return service, sleeper


@pytest.fixture()
def webhook_stub():
    return WebhookStub(httpx.Response(200, json={"output": "orderMargin"}))


@pytest.fixture()
def suggestion_service(webhook_stub):
    service, _ = make_suggestion_service(webhook_stub)
    app.dependency_overrides[get_suggestion_service] = lambda: service
    return service
