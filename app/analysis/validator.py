# app/analysis/validator.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from app.models.analysis_history import AnalysisKind

# 분석 종류별 최소 계약. 그 아래의 중첩 구조는 검사하지 않습니다.
REQUIRED_FIELDS: Dict[AnalysisKind, Tuple[str, ...]] = {
    AnalysisKind.SINGLE: ("overallScore", "summary"),
    AnalysisKind.COMPARE: ("overallChange", "summary"),
}


@dataclass
class ValidationOutcome:
    valid: bool
    document: Dict[str, Any]
    missing: List[str] = field(default_factory=list)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def validate_shape(kind: AnalysisKind, document: Dict[str, Any]) -> ValidationOutcome:
    """필수 최상위 키가 모두 존재하는지만 확인합니다."""
    missing = [key for key in REQUIRED_FIELDS[kind] if not _is_present(document.get(key))]
    return ValidationOutcome(valid=not missing, document=document, missing=missing)
