import re
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from .rules import VALIDATION_RULES, ValidationRule, placeholder_name, substitute_keyword
from .schemas import ValidationIssue, ValidationResult, ValidationSummary

logger = logging.getLogger(__name__)

_IDENTIFIER = r"([a-zA-Z_$가-힣][a-zA-Z0-9_$가-힣]*)"

# 선언 패턴 순서가 곧 검사 순서
IDENTIFIER_PATTERNS = [
    re.compile(r"(?:const|let|var)\s+" + _IDENTIFIER),
    re.compile(r"function\s+" + _IDENTIFIER),
    re.compile(r"class\s+" + _IDENTIFIER),
]

RagSuggester = Callable[[str], Awaitable[Optional[str]]]


@dataclass
class ExtractedIdentifier:
    name: str
    line: int    # 1-based
    column: int  # 1-based


def extract_identifiers(code: str) -> List[ExtractedIdentifier]:
    """줄 단위로 선언 패턴을 적용해 식별자를 추출. 같은 이름은 처음 위치만 남긴다."""
    found: List[ExtractedIdentifier] = []
    seen = set()
    for line_index, line in enumerate(code.split("\n")):
        for pattern in IDENTIFIER_PATTERNS:
            for match in pattern.finditer(line):
                name = match.group(1)
                if name in seen:
                    continue
                seen.add(name)
                found.append(ExtractedIdentifier(name=name, line=line_index + 1, column=match.start(1) + 1))
    return found


def check_identifier(identifier: ExtractedIdentifier, rules: List[ValidationRule] = VALIDATION_RULES) -> List[ValidationIssue]:
    return [
        ValidationIssue(
            line=identifier.line,
            column=identifier.column,
            variable=identifier.name,
            issue=rule.message,
            rule=rule.name,
            severity=rule.severity,
            suggestion=rule.suggestion,
        )
        for rule in rules
        if not rule.test(identifier.name)
    ]


def summarize(issues: List[ValidationIssue]) -> ValidationSummary:
    return ValidationSummary(
        total=len(issues),
        errors=sum(1 for i in issues if i.severity == "error"),
        warnings=sum(1 for i in issues if i.severity == "warning"),
        info=sum(1 for i in issues if i.severity == "info"),
    )


async def suggest_english_names(
    variables: List[str],
    *,
    rag_suggester: Optional[RagSuggester] = None,
) -> Dict[str, str]:
    """
    한글 변수명마다 영어 대체 이름을 만든다.

    1. 기본 키워드 매핑에서 처음 일치하는 키워드를 치환
    2. (옵션) RAG 제안의 첫 번째 후보
    3. ``variable{길이}`` 자리표시자
    """
    suggestions: Dict[str, str] = {}
    for variable in variables:
        substituted = substitute_keyword(variable)
        if substituted is not None:
            suggestions[variable] = substituted
            continue

        if rag_suggester is not None:
            suggested = await rag_suggester(variable)
            if suggested:
                suggestions[variable] = suggested
                continue

        suggestions[variable] = placeholder_name(variable)
    return suggestions


async def validate_code(code: str, *, rag_suggester: Optional[RagSuggester] = None) -> ValidationResult:
    identifiers = extract_identifiers(code)
    issues: List[ValidationIssue] = []
    for identifier in identifiers:
        issues.extend(check_identifier(identifier))

    korean_variables = [i.variable for i in issues if i.rule == "no-korean"]
    suggestions = await suggest_english_names(korean_variables, rag_suggester=rag_suggester)

    logger.info(
        f"Validated {len(identifiers)} identifiers: {len(issues)} issues, {len(korean_variables)} korean names"
    )
    return ValidationResult(issues=issues, suggestions=suggestions, summary=summarize(issues))
