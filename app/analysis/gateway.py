# app/analysis/gateway.py
import logging
from typing import Dict, List, Optional

from app.analysis.extractor import extract_document
from app.analysis.fallback import synthesize_fallback
from app.analysis.types import AnalysisRequest, EnvelopeStatus, ResultEnvelope
from app.analysis.validator import validate_shape
from app.core.exceptions import ExtractionFailed, UpstreamRejected, UpstreamUnavailable
from app.models.analysis_history import AnalysisKind

# 분석 종류별 기본 프롬프트
DEFAULT_PROMPT_IDS: Dict[AnalysisKind, str] = {
    AnalysisKind.SINGLE: 'body_analysis/v1',
    AnalysisKind.COMPARE: 'body_compare/v1',
}

# ResultEnvelope.reason 값
REASON_UPSTREAM_UNAVAILABLE = 'upstream_unavailable'
REASON_UPSTREAM_REJECTED = 'upstream_rejected'
REASON_EXTRACTION_FAILED = 'extraction_failed'
REASON_MISSING_FIELDS = 'missing_fields'


class ResultNormalizingGateway:
    """
    외부 모델 호출 -> JSON 추출 -> 형태 검증 -> 대체 결과 합성을 하나로 묶은 파이프라인.

    요청 1건의 상태 전이:
        Calling -> 호출 실패           -> failed
                -> 파싱 실패(1회 보정 후) -> degraded
                -> 파싱 성공 -> 검증 실패 -> degraded
                             -> 검증 성공 -> ok

    failed는 외부 호출 실패에서만 발생합니다. 응답은 왔지만 형태가 이상한 경우는
    서비스 장애와 구분되도록 항상 degraded로 처리합니다.
    """

    def __init__(self, upstream, prompt_ids: Optional[Dict[AnalysisKind, str]] = None):
        """
        :param upstream: analyze_images(images, prompt_id, **variables)를 제공하는 Upstream Client
        :param prompt_ids: 분석 종류별 prompt_id 재정의
        """
        self.upstream = upstream
        self.prompt_ids = dict(DEFAULT_PROMPT_IDS)
        if prompt_ids:
            self.prompt_ids.update(prompt_ids)

    def run(self, request: AnalysisRequest, images: List[bytes], **prompt_variables) -> ResultEnvelope:
        """분석 요청 1건을 처리하고 정확히 하나의 ResultEnvelope를 반환합니다."""
        kind = request.kind
        label = f"{kind.value} {list(request.photo_ids)} (user: {request.user_id})"

        try:
            raw = self.upstream.analyze_images(images, self.prompt_ids[kind], **prompt_variables)
        except UpstreamUnavailable as e:
            logging.error(f"분석 실패 - 외부 모델 응답 없음: {label}: {e}")
            return ResultEnvelope(status=EnvelopeStatus.FAILED, reason=REASON_UPSTREAM_UNAVAILABLE)
        except UpstreamRejected as e:
            logging.error(f"분석 실패 - 외부 모델 요청 거부: {label}: {e}")
            return ResultEnvelope(status=EnvelopeStatus.FAILED, reason=REASON_UPSTREAM_REJECTED)

        try:
            document = extract_document(raw.text)
        except ExtractionFailed as e:
            logging.warning(f"분석 결과 대체(degraded) - JSON 추출 실패: {label}: {e}")
            return self._degraded(kind, REASON_EXTRACTION_FAILED)

        outcome = validate_shape(kind, document)
        if not outcome.valid:
            reason = f"{REASON_MISSING_FIELDS}:{','.join(outcome.missing)}"
            logging.warning(f"분석 결과 대체(degraded) - 필수 필드 누락: {label}: {outcome.missing}")
            return self._degraded(kind, reason)

        logging.info(f"분석 완료: {label} (model: {raw.model}, prompt: {raw.prompt_id})")
        return ResultEnvelope(status=EnvelopeStatus.OK, result=outcome.document)

    @staticmethod
    def _degraded(kind: AnalysisKind, reason: str) -> ResultEnvelope:
        return ResultEnvelope(
            status=EnvelopeStatus.DEGRADED,
            result=synthesize_fallback(kind, reason),
            reason=reason
        )
