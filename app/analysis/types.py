# app/analysis/types.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from app.models.analysis_history import AnalysisKind
from app.utils.datetime_utils import DateTimeUtils


@dataclass(frozen=True)
class AnalysisRequest:
    """
    분석 요청 1건. 생성 후 변경되지 않습니다.

    photo_ids는 단일 분석이면 (photo_id,), 비교 분석이면 (before_id, after_id) 순서쌍입니다.
    """
    user_id: int
    kind: AnalysisKind
    photo_ids: Tuple[int, ...]

    def __post_init__(self):
        expected = 1 if self.kind == AnalysisKind.SINGLE else 2
        if len(self.photo_ids) != expected:
            raise ValueError(f"'{self.kind.value}' 분석에는 사진 ID가 {expected}개 필요합니다: {self.photo_ids}")

    @classmethod
    def single(cls, user_id: int, photo_id: int) -> "AnalysisRequest":
        return cls(user_id=user_id, kind=AnalysisKind.SINGLE, photo_ids=(photo_id,))

    @classmethod
    def compare(cls, user_id: int, before_photo_id: int, after_photo_id: int) -> "AnalysisRequest":
        return cls(user_id=user_id, kind=AnalysisKind.COMPARE, photo_ids=(before_photo_id, after_photo_id))


@dataclass
class RawModelResponse:
    """외부 모델의 원본 응답 텍스트와 호출 메타데이터. 저장하지 않습니다."""
    text: str
    model: str
    prompt_id: str
    temperature: float = 0.0
    created_at: datetime = field(default_factory=DateTimeUtils.now)


class EnvelopeStatus(Enum):
    OK = "ok"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass
class ResultEnvelope:
    """
    분석 요청 1건당 정확히 1개 생성되는 최종 결과.

    - ok: 검증을 통과한 구조화 결과
    - degraded: 대체(fallback) 결과 사용
    - failed: 사용할 결과 없음. result는 None이며 호출자는 오류를 받아야 합니다.
    """
    status: EnvelopeStatus
    result: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None

    @property
    def is_failed(self) -> bool:
        return self.status == EnvelopeStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "result": self.result, "reason": self.reason}
