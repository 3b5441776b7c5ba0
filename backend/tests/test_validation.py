import pytest

from vardict.validation import rules
from vardict.validation.service import extract_identifiers, suggest_english_names, validate_code


def _rules_for(result, variable):
    return [i.rule for i in result.issues if i.variable == variable]


def test_extracts_declarations_in_line_then_pattern_order():
    code = "function load() { const total = 1; }\nclass OrderBook {}\nlet total = 2;"
    found = extract_identifiers(code)

    # 같은 줄에서는 const/let/var 패턴이 function 패턴보다 먼저 적용된다
    assert [i.name for i in found] == ["total", "load", "OrderBook"]
    assert (found[0].line, found[0].column) == (1, 25)
    assert (found[1].line, found[1].column) == (1, 10)
    assert (found[2].line, found[2].column) == (2, 7)


def test_ignores_non_declaration_identifiers():
    code = "total = 3;\nfoo(bar);\nexport default x;"
    assert extract_identifiers(code) == []


def test_korean_identifier_is_extracted():
    found = extract_identifiers("const 주문금액 = 1000;")
    assert [i.name for i in found] == ["주문금액"]


@pytest.mark.parametrize("name,expected", [
    ("userName", True),
    ("OrderBook", True),
    ("MAX_SIZE", True),
    ("MAXSIZE", False),
    ("_private", False),
    ("$el", False),
    ("사용자", False),
])
def test_naming_convention(name, expected):
    assert rules.follows_naming_convention(name) is expected


def test_substitute_keyword_uses_first_table_entry_and_first_occurrence():
    # '사용자'가 '이름'보다 테이블 앞에 있음
    assert rules.substitute_keyword("사용자이름") == "user이름"
    assert rules.substitute_keyword("주문주문") == "order주문"
    assert rules.substitute_keyword("날씨") is None
    assert rules.placeholder_name("날씨") == "variable2"


async def test_korean_variable_gets_all_matching_rules_and_suggestion():
    result = await validate_code("const 사용자명 = '';")

    assert _rules_for(result, "사용자명") == ["no-korean", "camelCase"]
    assert result.suggestions == {"사용자명": "user명"}
    assert result.summary.total == 2
    assert result.summary.errors == 1
    assert result.summary.warnings == 1


async def test_unknown_korean_variable_falls_back_to_placeholder():
    result = await validate_code("let 날씨정보 = null;")
    assert result.suggestions == {"날씨정보": "variable4"}


async def test_rules_evaluated_in_declared_order():
    result = await validate_code("var x;\nconst jumunData = 1;\nlet 123;")

    assert _rules_for(result, "x") == ["min-length", "meaningful-name"]
    assert _rules_for(result, "jumunData") == ["korean-romanization"]
    severities = {i.rule: i.severity for i in result.issues}
    assert severities["meaningful-name"] == "info"
    assert severities["korean-romanization"] == "error"


async def test_duplicates_reported_once():
    result = await validate_code("const tmp = 1;\nconst tmp = 2;\nfunction tmp() {}")
    tmp_issues = [i for i in result.issues if i.variable == "tmp"]
    assert len(tmp_issues) == 1
    assert tmp_issues[0].line == 1


async def test_long_name_warns():
    name = "a" + "b" * 40
    result = await validate_code(f"const {name} = 1;")
    assert _rules_for(result, name) == ["max-length"]


async def test_clean_code_has_no_issues():
    result = await validate_code("const orderAmount = 1;\nclass OrderService {}\nconst MAX_RETRY = 3;")
    assert result.issues == []
    assert result.summary.total == 0


async def test_rag_suggester_used_only_when_keyword_table_misses():
    asked = []

    async def fake_rag(variable):
        asked.append(variable)
        return "weatherInfo"

    suggestions = await suggest_english_names(["날씨정보", "주문"], rag_suggester=fake_rag)
    assert suggestions == {"날씨정보": "weatherInfo", "주문": "order"}
    assert asked == ["날씨정보"]


async def test_empty_rag_answer_falls_back_to_placeholder():
    async def empty_rag(variable):
        return None

    suggestions = await suggest_english_names(["날씨"], rag_suggester=empty_rag)
    assert suggestions == {"날씨": "variable2"}


async def test_validate_endpoint(client):
    res = await client.post("/validate", json={"code": "const 잔고 = 0;\nfunction i() {}"})
    assert res.status_code == 200
    body = res.json()
    assert body["suggestions"] == {"잔고": "balance"}
    assert body["summary"] == {"total": 4, "errors": 1, "warnings": 2, "info": 1}
    first = body["issues"][0]
    assert first == {
        "line": 1,
        "column": 7,
        "variable": "잔고",
        "issue": "한글 변수명은 사용할 수 없습니다",
        "rule": "no-korean",
        "severity": "error",
        "suggestion": "영어 변수명을 사용하세요",
    }


async def test_validate_endpoint_requires_code(client):
    res = await client.post("/validate", json={"code": ""})
    assert res.status_code == 400
    res = await client.post("/validate", json={})
    assert res.status_code == 400


async def test_validate_endpoint_with_rag(client, suggestion_service, webhook_stub):
    res = await client.post("/validate", json={"code": "const 날씨 = 1;", "use_rag": True})
    assert res.status_code == 200
    assert res.json()["suggestions"] == {"날씨": "orderMargin"}
    assert webhook_stub.calls == 1
