from typing import Dict, List, Literal, Optional

from pydantic import Field

from ..models import CustomModel


class ValidationRequest(CustomModel):
    code: Optional[str] = Field(None, description="검증할 소스 코드")
    use_rag: bool = Field(False, description="기본 매핑에 없는 한글 변수명에 RAG 제안 사용")


class ValidationIssue(CustomModel):
    line: int = Field(..., description="1부터 시작하는 줄 번호")
    column: int = Field(..., description="1부터 시작하는 열 번호")
    variable: str
    issue: str
    rule: str
    severity: Literal["error", "warning", "info"]
    suggestion: Optional[str] = None


class ValidationSummary(CustomModel):
    total: int
    errors: int
    warnings: int
    info: int


class ValidationResult(CustomModel):
    issues: List[ValidationIssue]
    suggestions: Dict[str, str] = Field(default_factory=dict, description="한글 변수명 → 영어 제안")
    summary: ValidationSummary
