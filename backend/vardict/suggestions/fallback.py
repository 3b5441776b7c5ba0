"""
규칙 기반 폴백 제안
===================
RAG 웹훅을 쓸 수 없을 때 사용하는 정적 매핑입니다.

우선순위:
1. 금융 용어 테이블 (처음 포함된 용어의 후보 목록만 반환)
2. 일반 정규식 규칙 (일치하는 모든 규칙)
3. 공백 기준 camelCase 변환
"""

import re
from typing import List

from .schemas import RAGSuggestion

# 삽입 순서대로 검사 (긴 용어가 먼저)
FINANCIAL_TERMS = {
    "주문증거금": ["orderMargin", "orderDeposit", "orderCollateral"],
    "증거금": ["margin", "deposit", "collateral"],
    "주문": ["order", "orderRequest", "trade"],
    "잔고": ["balance", "position", "holdings"],
    "체결": ["execution", "filled", "completed"],
    "미체결": ["pending", "unfilled", "openOrder"],
}

GENERAL_RULES = [
    (re.compile(r"사용자|유저"), "user", "variable"),
    (re.compile(r"이름|명"), "name", "variable"),
    (re.compile(r"번호|넘버"), "number", "variable"),
    (re.compile(r"날짜|일자"), "date", "variable"),
    (re.compile(r"시간|타임"), "time", "variable"),
    (re.compile(r"목록|리스트"), "list", "variable"),
    (re.compile(r"조회|검색"), "search", "function"),
    (re.compile(r"저장|등록"), "save", "function"),
    (re.compile(r"삭제|제거"), "delete", "function"),
    (re.compile(r"수정|변경"), "update", "function"),
]


def to_camel_case(text: str) -> str:
    words = text.split()
    return "".join(
        word.lower() if index == 0 else word[:1].upper() + word[1:].lower()
        for index, word in enumerate(words)
    )


def generate_fallback_suggestions(query: str) -> List[RAGSuggestion]:
    for term, candidates in FINANCIAL_TERMS.items():
        if term in query:
            return [
                RAGSuggestion(
                    english=english,
                    confidence=round(0.7 - index * 0.1, 2),
                    reasoning="금융 도메인 규칙 기반 제안",
                    type="variable",
                    category="금융",
                )
                for index, english in enumerate(candidates)
            ]

    suggestions: List[RAGSuggestion] = [
        RAGSuggestion(
            english=english,
            confidence=0.5,
            reasoning="규칙 기반 폴백 제안",
            type=suggestion_type,
            category="일반",
        )
        for pattern, english, suggestion_type in GENERAL_RULES
        if pattern.search(query)
    ]

    camel = to_camel_case(query)
    if camel and camel != query:
        suggestions.append(
            RAGSuggestion(
                english=camel,
                confidence=0.3,
                reasoning="카멜케이스 변환",
                type="variable",
                category="일반",
            )
        )
    return suggestions
