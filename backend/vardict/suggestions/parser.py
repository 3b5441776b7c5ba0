import logging
from typing import Any, List

from .fallback import generate_fallback_suggestions
from .schemas import RAGSuggestion

logger = logging.getLogger(__name__)

DEFAULT_REASONING = "RAG 파이프라인 제안"
_VALID_TYPES = {"variable", "function", "class"}


def _clamp(value: float) -> float:
    return round(min(1.0, max(0.0, float(value))), 2)


def _ranked_confidence(index: int) -> float:
    # 순서대로 신뢰도 감소
    return _clamp(0.9 - index * 0.1)


def _confidence(value: Any, default: float) -> float:
    # 숫자로 읽을 수 없는 값(객체, 배열 등)은 기본값 사용
    if value is None or isinstance(value, bool):
        return _clamp(default)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return _clamp(default)
    if number != number:  # NaN
        return _clamp(default)
    return _clamp(number)


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _make(english: Any, confidence: Any, reasoning: Any = None,
          type_: Any = None, category: Any = None, *, default_confidence: float = 0.85) -> RAGSuggestion:
    return RAGSuggestion(
        english=str(english).strip(),
        confidence=_confidence(confidence, default_confidence),
        reasoning=_text(reasoning) or DEFAULT_REASONING,
        type=type_ if isinstance(type_, str) and type_ in _VALID_TYPES else "variable",
        category=_text(category) or "일반",
    )


def parse_webhook_response(data: Any, original_query: str) -> List[RAGSuggestion]:
    """
    n8n 웹훅 응답을 RAGSuggestion 목록으로 정규화합니다.

    지원 형식:
    1. ``{"output": "..."}`` (n8n AI Agent 기본 형식)
    2. 문자열 단일 제안
    3. 배열: 문자열 또는 ``name``/``variable``/``english`` 키를 가진 객체
    4. 단일 객체: ``suggestion``/``variable``/``english``/``result`` 키. 쉼표 구분 문자열은 분리

    파싱 결과가 비면 규칙 기반 폴백을 반환합니다.
    """
    suggestions: List[RAGSuggestion] = []

    if isinstance(data, dict) and data.get("output"):
        suggestions.append(_make(data["output"], 0.85, "AI 추천 변수명", "variable", "금융"))
    elif isinstance(data, str):
        if data.strip():
            suggestions.append(_make(data, 0.8))
    elif isinstance(data, list):
        for index, item in enumerate(data):
            if isinstance(item, str):
                if item.strip():
                    suggestions.append(_make(item, _ranked_confidence(index)))
            elif isinstance(item, dict):
                name = item.get("name") or item.get("variable") or item.get("english")
                if name:
                    suggestions.append(_make(
                        name,
                        item.get("confidence") or _ranked_confidence(index),
                        item.get("reason") or item.get("reasoning"),
                        item.get("type"),
                        item.get("category"),
                        default_confidence=_ranked_confidence(index),
                    ))
    elif isinstance(data, dict):
        suggestion = data.get("suggestion") or data.get("variable") or data.get("english") or data.get("result")
        if isinstance(suggestion, str) and "," in suggestion:
            for index, part in enumerate(p for p in suggestion.split(",") if p.strip()):
                suggestions.append(_make(part, _ranked_confidence(index)))
        elif suggestion:
            suggestions.append(_make(
                suggestion,
                data.get("confidence") or 0.85,
                data.get("reasoning"),
                data.get("type"),
                data.get("category"),
            ))

    if not suggestions:
        logger.warning(f"Could not parse webhook response, using fallback. raw={str(data)[:200]}")
        return generate_fallback_suggestions(original_query)
    return suggestions
