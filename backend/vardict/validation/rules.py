"""
식별자 검증 규칙
================
코드에서 추출한 변수/함수/클래스 이름에 적용되는 고정 규칙 목록입니다.

각 규칙의 ``test`` 는 식별자가 규칙을 *통과하면* True 를 반환합니다.
규칙 순서는 응답의 issue 순서를 결정하므로 바꾸지 마세요.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional

Severity = Literal["error", "warning", "info"]

HANGUL_RE = re.compile(r"[가-힣]")

# JS 예약어 (검사 대상 언어가 JS/TS)
RESERVED_WORDS = frozenset({
    "class", "function", "return", "const", "let", "var", "if", "else", "for", "while",
    "do", "switch", "case", "break", "continue", "try", "catch", "finally", "throw",
    "new", "this", "super", "extends", "import", "export", "default", "async", "await",
})

MEANINGLESS_NAMES = frozenset({
    "a", "b", "c", "d", "e", "x", "y", "z", "i", "j", "k", "temp", "tmp", "data", "info",
})

# 한글 발음을 그대로 로마자로 옮긴 흔한 금융 용어
ROMANIZATIONS = ("jumun", "jango", "gyeoljae", "maemae", "jeunggeogeum", "yesugeum")


@dataclass(frozen=True)
class ValidationRule:
    """검증 규칙"""
    name: str
    test: Callable[[str], bool]
    message: str
    severity: Severity
    suggestion: Optional[str] = None


def has_no_korean(identifier: str) -> bool:
    return HANGUL_RE.search(identifier) is None


def follows_naming_convention(identifier: str) -> bool:
    # 상수는 UPPER_CASE 허용
    if identifier == identifier.upper() and "_" in identifier:
        return True
    # 클래스/컴포넌트는 PascalCase 허용
    if re.match(r"[A-Z]", identifier) and re.search(r"[a-z]", identifier):
        return True
    # 일반 변수는 camelCase
    return re.match(r"[a-z]", identifier) is not None


def is_not_reserved(identifier: str) -> bool:
    return identifier not in RESERVED_WORDS


def is_meaningful(identifier: str) -> bool:
    return identifier.lower() not in MEANINGLESS_NAMES


def is_not_numbers_only(identifier: str) -> bool:
    return re.fullmatch(r"\d+", identifier) is None


def is_not_romanized(identifier: str) -> bool:
    lowered = identifier.lower()
    return not any(r in lowered for r in ROMANIZATIONS)


VALIDATION_RULES: List[ValidationRule] = [
    ValidationRule(
        name="no-korean",
        test=has_no_korean,
        message="한글 변수명은 사용할 수 없습니다",
        severity="error",
        suggestion="영어 변수명을 사용하세요",
    ),
    ValidationRule(
        name="min-length",
        test=lambda identifier: len(identifier) >= 2,
        message="변수명이 너무 짧습니다",
        severity="warning",
        suggestion="의미를 명확히 표현하는 변수명을 사용하세요",
    ),
    ValidationRule(
        name="max-length",
        test=lambda identifier: len(identifier) <= 40,
        message="변수명이 너무 깁니다",
        severity="warning",
        suggestion="간결하면서도 의미있는 변수명을 사용하세요",
    ),
    ValidationRule(
        name="camelCase",
        test=follows_naming_convention,
        message="변수명 규칙을 위반했습니다",
        severity="warning",
        suggestion="camelCase, PascalCase, 또는 UPPER_CASE를 사용하세요",
    ),
    ValidationRule(
        name="no-reserved",
        test=is_not_reserved,
        message="예약어는 변수명으로 사용할 수 없습니다",
        severity="error",
    ),
    ValidationRule(
        name="meaningful-name",
        test=is_meaningful,
        message="의미 없는 변수명입니다",
        severity="info",
        suggestion="변수의 용도를 명확히 나타내는 이름을 사용하세요",
    ),
    ValidationRule(
        name="no-numbers-only",
        test=is_not_numbers_only,
        message="숫자로만 이루어진 변수명은 사용할 수 없습니다",
        severity="error",
    ),
    ValidationRule(
        name="korean-romanization",
        test=is_not_romanized,
        message="한글 발음을 로마자로 표기한 변수명입니다",
        severity="error",
        suggestion="적절한 영어 단어를 사용하세요",
    ),
]

# no-korean 위반 식별자의 영어 치환용 기본 매핑 (삽입 순서 = 우선순위)
COMMON_KEYWORD_MAPPINGS = {
    "사용자": "user",
    "이름": "name",
    "주문": "order",
    "거래": "transaction",
    "잔고": "balance",
    "계좌": "account",
    "증거금": "margin",
    "매수": "buy",
    "매도": "sell",
    "가격": "price",
    "수량": "quantity",
    "금액": "amount",
    "수수료": "fee",
    "예수금": "deposit",
    "주식": "stock",
    "종목": "symbol",
}


def substitute_keyword(identifier: str) -> Optional[str]:
    """매핑 테이블에서 처음 일치하는 키워드 하나만 영어로 치환. 일치가 없으면 None."""
    for korean, english in COMMON_KEYWORD_MAPPINGS.items():
        if korean in identifier:
            return identifier.replace(korean, english, 1)
    return None


def placeholder_name(identifier: str) -> str:
    return f"variable{len(identifier)}"
