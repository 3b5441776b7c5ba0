import json

import httpx
import pytest
from sqlalchemy import select

from vardict.suggestions.cache import SuggestionCache
from vardict.suggestions.fallback import generate_fallback_suggestions, to_camel_case
from vardict.suggestions.models import RAGSuggestionLog
from vardict.suggestions.parser import parse_webhook_response

from conftest import WebhookStub, make_suggestion_service


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


# --- fallback ---------------------------------------------------------------

def test_fallback_financial_term_wins_and_stops():
    suggestions = generate_fallback_suggestions("주문증거금 조회")
    assert [s.english for s in suggestions] == ["orderMargin", "orderDeposit", "orderCollateral"]
    assert [s.confidence for s in suggestions] == pytest.approx([0.7, 0.6, 0.5])
    assert all(s.category == "금융" for s in suggestions)


def test_fallback_longer_financial_term_checked_first():
    assert generate_fallback_suggestions("증거금")[0].english == "margin"
    # '미체결'은 '체결'을 포함하므로 앞선 '체결' 항목이 먼저 잡힌다
    assert generate_fallback_suggestions("미체결")[0].english == "execution"


def test_fallback_general_rules_collect_every_match():
    suggestions = generate_fallback_suggestions("사용자 목록")
    assert [(s.english, s.type) for s in suggestions[:2]] == [("user", "variable"), ("list", "variable")]
    assert all(s.confidence == 0.5 for s in suggestions[:2])


def test_fallback_function_type_rules():
    suggestions = generate_fallback_suggestions("삭제")
    assert [(s.english, s.type) for s in suggestions] == [("delete", "function")]


def test_fallback_camel_case_appended_when_different():
    suggestions = generate_fallback_suggestions("order total amount")
    assert suggestions[-1].english == "orderTotalAmount"
    assert suggestions[-1].confidence == 0.3


def test_fallback_no_camel_case_when_identical():
    assert generate_fallback_suggestions("balance") == []


def test_to_camel_case():
    assert to_camel_case("USER list Item") == "userListItem"
    assert to_camel_case("   ") == ""


# --- parser -----------------------------------------------------------------

def test_parse_n8n_output_field():
    [s] = parse_webhook_response({"output": "  orderMargin \n"}, "주문증거금")
    assert s.english == "orderMargin"
    assert s.confidence == 0.85
    assert s.reasoning == "AI 추천 변수명"
    assert s.category == "금융"


def test_parse_plain_string():
    [s] = parse_webhook_response("userName", "사용자명")
    assert (s.english, s.confidence) == ("userName", 0.8)


def test_parse_list_of_strings_and_objects():
    data = ["orderAmount", {"name": "orderTotal", "reason": "합계"}, {"english": "amt", "confidence": 0.4, "type": "class"}, 42]
    suggestions = parse_webhook_response(data, "주문금액")
    assert [s.english for s in suggestions] == ["orderAmount", "orderTotal", "amt"]
    assert [s.confidence for s in suggestions] == pytest.approx([0.9, 0.8, 0.4])
    assert suggestions[1].reasoning == "합계"
    assert suggestions[2].type == "class"


def test_parse_comma_separated_suggestion():
    suggestions = parse_webhook_response({"suggestion": "balance, holdings ,position"}, "잔고")
    assert [s.english for s in suggestions] == ["balance", "holdings", "position"]
    assert [s.confidence for s in suggestions] == pytest.approx([0.9, 0.8, 0.7])


def test_parse_single_object_keeps_own_fields():
    [s] = parse_webhook_response({"result": "fee", "confidence": 0.95, "type": "unknown", "category": "금융"}, "수수료")
    assert (s.english, s.confidence, s.type, s.category) == ("fee", 0.95, "variable", "금융")


@pytest.mark.parametrize("payload", [
    [{"english": "orderMargin", "type": ["variable"]}],
    [{"english": "orderMargin", "confidence": {"v": 1}}],
    [{"english": "orderMargin", "confidence": "high", "reasoning": 3, "category": ["금융"]}],
])
def test_parse_tolerates_wrongly_typed_fields(payload):
    [s] = parse_webhook_response(payload, "주문증거금")
    assert s.english == "orderMargin"
    assert s.type == "variable"
    assert s.confidence == pytest.approx(0.9)
    assert s.category == "일반"


def test_parse_ignores_nan_confidence():
    [s] = parse_webhook_response({"result": "fee", "confidence": "nan"}, "수수료")
    assert s.confidence == 0.85


def test_parse_unrecognised_shape_falls_back():
    suggestions = parse_webhook_response({"unexpected": True}, "잔고")
    assert [s.english for s in suggestions] == ["balance", "position", "holdings"]


# --- cache ------------------------------------------------------------------

def test_cache_key_format():
    assert SuggestionCache.key("주문", None, "ko") == "주문--ko"
    assert SuggestionCache.key("주문", "trading", "en") == "주문-trading-en"


def test_cache_expires_after_ttl():
    clock = FakeClock()
    cache = SuggestionCache(10, clock=clock)
    value = object()
    cache.set("k", value)

    clock.now += 9
    assert cache.get("k") is value
    clock.now += 1
    assert cache.get("k") is None
    assert len(cache) == 0


# --- service ----------------------------------------------------------------

async def test_service_returns_webhook_suggestions_and_sends_chat_input():
    stub = WebhookStub(httpx.Response(200, json={"output": "orderMargin"}))
    service, sleeper = make_suggestion_service(stub, api_key="secret")

    response = await service.suggest("주문증거금")

    assert response.metadata.rag_version == "1.0"
    assert [s.english for s in response.suggestions] == ["orderMargin"]
    request = stub.requests[0]
    assert json.loads(request.content) == {"chatInput": "주문증거금"}
    assert request.headers["Authorization"] == "Bearer secret"
    assert sleeper.delays == []


async def test_service_no_auth_header_without_api_key():
    stub = WebhookStub(httpx.Response(200, json="userId"))
    service, _ = make_suggestion_service(stub)
    await service.suggest("사용자ID")
    assert "Authorization" not in stub.requests[0].headers


async def test_service_second_call_within_ttl_hits_cache():
    stub = WebhookStub(httpx.Response(200, json={"output": "orderMargin"}))
    service, _ = make_suggestion_service(stub)

    first = await service.suggest("주문증거금", "trading", "ko")
    second = await service.suggest("주문증거금", "trading", "ko")

    assert second is first
    assert stub.calls == 1


async def test_service_cache_key_includes_context_and_language():
    stub = WebhookStub(httpx.Response(200, json={"output": "orderMargin"}))
    service, _ = make_suggestion_service(stub)

    await service.suggest("주문증거금", None, "ko")
    await service.suggest("주문증거금", "trading", "ko")
    await service.suggest("주문증거금", None, "en")

    assert stub.calls == 3


async def test_service_calls_webhook_again_after_ttl():
    clock = FakeClock()
    stub = WebhookStub(httpx.Response(200, json={"output": "orderMargin"}))
    service, _ = make_suggestion_service(stub, ttl=60, clock=clock)

    first = await service.suggest("주문증거금")
    clock.now += 61
    second = await service.suggest("주문증거금")

    assert second is not first
    assert stub.calls == 2


async def test_service_retries_with_exponential_backoff_then_falls_back():
    stub = WebhookStub(httpx.Response(500, text="boom"))
    service, sleeper = make_suggestion_service(stub, max_retries=3)

    response = await service.suggest("잔고 조회")

    assert stub.calls == 3
    assert sleeper.delays == [2, 4]
    assert response.metadata.rag_version == "fallback"
    assert [s.english for s in response.suggestions] == ["balance", "position", "holdings"]


async def test_service_fallback_is_not_cached():
    stub = WebhookStub(httpx.Response(503))
    service, _ = make_suggestion_service(stub, max_retries=1)

    await service.suggest("주문")
    await service.suggest("주문")

    assert stub.calls == 2
    assert len(service.cache) == 0


async def test_service_recovers_after_transient_failure():
    stub = WebhookStub(
        httpx.ConnectError("connection refused"),
        httpx.Response(200, json=["balance", "holdings"]),
    )
    service, sleeper = make_suggestion_service(stub, max_retries=3)

    response = await service.suggest("잔고")

    assert stub.calls == 2
    assert sleeper.delays == [2]
    assert response.metadata.rag_version == "1.0"
    assert [s.english for s in response.suggestions] == ["balance", "holdings"]


async def test_service_timeout_counts_as_failure():
    stub = WebhookStub(httpx.ReadTimeout("too slow"))
    service, sleeper = make_suggestion_service(stub, max_retries=2)

    response = await service.suggest("사용자")

    assert stub.calls == 2
    assert sleeper.delays == [2]
    assert response.metadata.rag_version == "fallback"
    assert response.suggestions[0].english == "user"


async def test_service_min_confidence_filters_low_suggestions():
    stub = WebhookStub(httpx.Response(200, json=[{"english": "a", "confidence": 0.2}, {"english": "balance", "confidence": 0.9}]))
    service, _ = make_suggestion_service(stub, min_confidence=0.5)

    response = await service.suggest("잔고")
    assert [s.english for s in response.suggestions] == ["balance"]


async def test_top_english_returns_first_suggestion():
    stub = WebhookStub(httpx.Response(200, json=["orderAmount", "amount"]))
    service, _ = make_suggestion_service(stub)
    assert await service.top_english("주문금액") == "orderAmount"


# --- endpoint ---------------------------------------------------------------

async def test_suggest_endpoint_logs_call(client, db, suggestion_service, webhook_stub):
    res = await client.post("/rag/suggest", json={"query": "주문증거금", "context": "선물"})
    assert res.status_code == 200
    body = res.json()
    assert body["metadata"]["rag_version"] == "1.0"
    assert body["suggestions"][0]["english"] == "orderMargin"

    logs = (await db.execute(select(RAGSuggestionLog))).scalars().all()
    assert len(logs) == 1
    assert logs[0].query == "주문증거금"
    assert logs[0].context == "선물"
    assert logs[0].top_suggestion == "orderMargin"
    assert logs[0].suggestion_count == 1


async def test_suggest_endpoint_requires_query(client, suggestion_service):
    res = await client.post("/rag/suggest", json={"query": "  "})
    assert res.status_code == 400


async def test_suggest_endpoint_rejects_unknown_language(client, suggestion_service):
    res = await client.post("/rag/suggest", json={"query": "주문", "language": "jp"})
    assert res.status_code == 422


async def test_suggest_endpoint_survives_wrongly_typed_webhook_fields(client, suggestion_service, webhook_stub):
    webhook_stub.responses = [httpx.Response(200, json=[{"english": "orderMargin", "type": ["variable"], "confidence": {"v": 1}}])]

    res = await client.post("/rag/suggest", json={"query": "주문증거금"})
    assert res.status_code == 200
    body = res.json()
    assert body["metadata"]["rag_version"] == "1.0"
    assert body["suggestions"][0]["english"] == "orderMargin"


async def test_suggest_endpoint_logs_long_webhook_answer(client, db, suggestion_service, webhook_stub):
    answer = "orderMargin " + "설명" * 200
    webhook_stub.responses = [httpx.Response(200, json={"output": answer})]

    res = await client.post("/rag/suggest", json={"query": "주문증거금"})
    assert res.status_code == 200

    [log] = (await db.execute(select(RAGSuggestionLog))).scalars().all()
    assert log.top_suggestion == answer.strip()
    assert RAGSuggestionLog.__table__.c.top_suggestion.type.length is None


async def test_suggest_endpoint_rejects_overlong_query(client, suggestion_service):
    res = await client.post("/rag/suggest", json={"query": "가" * 256})
    assert res.status_code == 422
