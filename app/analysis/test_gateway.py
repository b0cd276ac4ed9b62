# app/analysis/test_gateway.py
import pytest

from app.analysis.gateway import (
    ResultNormalizingGateway,
    REASON_EXTRACTION_FAILED,
    REASON_UPSTREAM_REJECTED,
    REASON_UPSTREAM_UNAVAILABLE,
)
from app.analysis.types import AnalysisRequest, EnvelopeStatus
from app.core.exceptions import UpstreamRejected, UpstreamUnavailable
from app.models.analysis_history import AnalysisKind


@pytest.fixture
def gateway(vision):
    return ResultNormalizingGateway(vision)


def test_valid_json_is_ok_and_unchanged(gateway, vision):
    vision.queue('{"overallScore": 70, "summary": "요약", "extra": [1, 2]}')
    envelope = gateway.run(AnalysisRequest.single(7, 42), [b"img"])

    assert envelope.status == EnvelopeStatus.OK
    assert envelope.result == {"overallScore": 70, "summary": "요약", "extra": [1, 2]}
    assert envelope.reason is None


def test_wrapped_json_is_ok_after_repair(gateway, vision):
    vision.queue('결과입니다.\n```json\n{"overallScore": 61, "summary": "요약"}\n```')
    envelope = gateway.run(AnalysisRequest.single(7, 42), [b"img"])

    assert envelope.status == EnvelopeStatus.OK
    assert envelope.result["overallScore"] == 61


def test_prose_degrades_instead_of_failing(gateway, vision):
    vision.queue("이 사진은 분석하기 어렵습니다.")
    envelope = gateway.run(AnalysisRequest.single(7, 42), [b"img"])

    assert envelope.status == EnvelopeStatus.DEGRADED
    assert envelope.result["degraded"] is True
    assert envelope.result["summary"]
    assert envelope.reason == REASON_EXTRACTION_FAILED


def test_missing_fields_degrade(gateway, vision):
    vision.queue('{"overallChange": 3}')
    envelope = gateway.run(AnalysisRequest.compare(7, 42, 43), [b"a", b"b"])

    assert envelope.status == EnvelopeStatus.DEGRADED
    assert envelope.reason == "missing_fields:summary"
    assert envelope.result["overallChange"] == 0


def test_upstream_unavailable_fails(gateway, vision):
    vision.queue(UpstreamUnavailable("timeout"))
    envelope = gateway.run(AnalysisRequest.single(7, 42), [b"img"])

    assert envelope.status == EnvelopeStatus.FAILED
    assert envelope.result is None
    assert envelope.reason == REASON_UPSTREAM_UNAVAILABLE


def test_upstream_rejected_fails(gateway, vision):
    vision.queue(UpstreamRejected("quota"))
    envelope = gateway.run(AnalysisRequest.single(7, 42), [b"img"])

    assert envelope.is_failed
    assert envelope.reason == REASON_UPSTREAM_REJECTED


def test_prompt_is_selected_by_kind(gateway, vision):
    vision.queue('{"overallChange": 10, "summary": "개선"}')
    gateway.run(AnalysisRequest.compare(7, 42, 43), [b"a", b"b"], profile="키 170cm")

    call = vision.calls[0]
    assert call["prompt_id"] == "body_compare/v1"
    assert call["images"] == [b"a", b"b"]
    assert call["variables"] == {"profile": "키 170cm"}


def test_prompt_ids_can_be_overridden(vision):
    gateway = ResultNormalizingGateway(vision, prompt_ids={AnalysisKind.SINGLE: "body_analysis/v2"})
    gateway.run(AnalysisRequest.single(7, 42), [b"img"])
    assert vision.calls[0]["prompt_id"] == "body_analysis/v2"


def test_request_requires_matching_photo_count():
    with pytest.raises(ValueError):
        AnalysisRequest(user_id=7, kind=AnalysisKind.COMPARE, photo_ids=(42,))
