import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class RagWebhookClient:
    """n8n RAG 웹훅 호출 (단일 시도; 재시도는 SuggestionService 담당)"""

    def __init__(
        self,
        webhook_url: str,
        *,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def fetch(self, query: str) -> Any:
        """
        웹훅에 질의를 보내고 응답 본문을 반환합니다.

        Returns:
            JSON 본문 (dict/list/str) 또는 JSON이 아니면 텍스트

        Raises:
            httpx.TimeoutException: 타임아웃
            httpx.HTTPStatusError: 2xx 이외 응답
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json={"chatInput": query},  # n8n webhook 형식
                    headers=self._headers(),
                )
                response.raise_for_status()
                try:
                    return response.json()
                except ValueError:
                    return response.text
        except httpx.TimeoutException:
            logger.error(f"RAG webhook timeout after {self.timeout} seconds")
            raise
        except httpx.HTTPStatusError as e:
            logger.error(f"RAG webhook HTTP error: {e.response.status_code} - {e.response.text[:200]}")
            raise
