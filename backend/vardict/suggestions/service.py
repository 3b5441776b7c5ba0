import time
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

import httpx

from ..config import settings
from .cache import SuggestionCache
from .client import RagWebhookClient
from .fallback import generate_fallback_suggestions
from .parser import parse_webhook_response
from .schemas import RAGSuggestion, SuggestionMetadata, SuggestionResponse

logger = logging.getLogger(__name__)

RAG_VERSION = "1.0"
FALLBACK_VERSION = "fallback"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class SuggestionService:
    """
    RAG 변수명 제안 파이프라인.

    캐시 확인 → 웹훅 호출 (최대 ``max_retries`` 회, 지수 백오프) → 실패 시 규칙 기반 폴백.
    웹훅 성공 응답만 캐시합니다.
    """

    def __init__(
        self,
        client: RagWebhookClient,
        cache: SuggestionCache[SuggestionResponse],
        *,
        max_retries: int = 3,
        min_confidence: float = 0.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.cache = cache
        self.max_retries = max_retries
        self.min_confidence = min_confidence
        self._sleep = sleep

    def _filter(self, suggestions: List[RAGSuggestion]) -> List[RAGSuggestion]:
        return [s for s in suggestions if s.confidence >= self.min_confidence]

    async def suggest(self, query: str, context: Optional[str] = None, language: str = "ko") -> SuggestionResponse:
        cache_key = self.cache.key(query, context, language)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Returning cached RAG suggestions: {cache_key}")
            return cached

        logger.info(f"Calling RAG webhook: {query}")
        start = time.perf_counter()
        last_error: Optional[Exception] = None

        attempt = 0
        while attempt < self.max_retries:
            try:
                data = await self.client.fetch(query)
                suggestions = self._filter(parse_webhook_response(data, query))
                if not suggestions:
                    logger.warning(f"No RAG suggestions above min_confidence={self.min_confidence} for '{query}'")
                    break
                response = SuggestionResponse(
                    suggestions=suggestions,
                    metadata=SuggestionMetadata(rag_version=RAG_VERSION, response_time=_elapsed_ms(start)),
                )
                self.cache.set(cache_key, response)
                return response
            except (httpx.HTTPError, ValueError, TypeError) as e:
                last_error = e
                attempt += 1
                if attempt < self.max_retries:
                    delay = 2 ** attempt
                    logger.warning(f"RAG webhook attempt {attempt}/{self.max_retries} failed: {e}; retrying in {delay}s")
                    await self._sleep(delay)

        if last_error is not None:
            logger.error(f"RAG webhook failed after {self.max_retries} attempts: {last_error}")
        return SuggestionResponse(
            suggestions=generate_fallback_suggestions(query),
            metadata=SuggestionMetadata(rag_version=FALLBACK_VERSION, response_time=_elapsed_ms(start)),
        )

    async def top_english(self, query: str) -> Optional[str]:
        """가장 앞선 제안의 영어 이름 (없으면 None)"""
        response = await self.suggest(query)
        if response.suggestions:
            return response.suggestions[0].english
        return None


_service: Optional[SuggestionService] = None


def build_suggestion_service() -> SuggestionService:
    client = RagWebhookClient(
        settings.RAG_WEBHOOK_URL,
        api_key=settings.RAG_API_KEY,
        timeout=settings.RAG_TIMEOUT,
    )
    return SuggestionService(
        client,
        SuggestionCache(settings.RAG_CACHE_TTL),
        max_retries=settings.RAG_MAX_RETRIES,
        min_confidence=settings.RAG_MIN_CONFIDENCE,
    )


def get_suggestion_service() -> SuggestionService:
    """프로세스 전역 인스턴스 (캐시를 요청 간 공유하기 위함)"""
    global _service
    if _service is None:
        _service = build_suggestion_service()
    return _service
