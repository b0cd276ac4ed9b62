# app/analysis/fallback.py
from typing import Any, Dict, Optional

from app.models.analysis_history import AnalysisKind

FALLBACK_SUMMARY = {
    AnalysisKind.SINGLE: "AI 분석 결과를 신뢰할 수 있는 형태로 받지 못해 자동 분석을 완료하지 못했습니다. 잠시 후 다시 분석해주세요.",
    AnalysisKind.COMPARE: "AI 비교 결과를 신뢰할 수 있는 형태로 받지 못해 자동 비교 분석을 완료하지 못했습니다. 잠시 후 다시 비교해주세요.",
}

# 중립 기본값: 단일 분석은 중간 점수, 비교 분석은 '변화 없음'
NEUTRAL_DEFAULTS = {
    AnalysisKind.SINGLE: {"overallScore": 50},
    AnalysisKind.COMPARE: {"overallChange": 0},
}


def synthesize_fallback(kind: AnalysisKind, reason: Optional[str] = None) -> Dict[str, Any]:
    """
    검증 계약을 만족하는 최소한의 대체 결과를 만듭니다.

    구체적인 수치나 관찰 내용은 만들어내지 않으며, degraded 플래그로 대체 결과임을 표시합니다.
    """
    result = dict(NEUTRAL_DEFAULTS[kind])
    result["summary"] = FALLBACK_SUMMARY[kind]
    result["degraded"] = True
    result["degradedReason"] = reason
    return result
