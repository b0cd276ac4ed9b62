# app/analysis/test_validator_fallback.py
from app.analysis.fallback import synthesize_fallback
from app.analysis.validator import REQUIRED_FIELDS, validate_shape
from app.models.analysis_history import AnalysisKind


def test_single_requires_score_and_summary():
    outcome = validate_shape(AnalysisKind.SINGLE, {"overallScore": 70, "summary": "요약"})
    assert outcome.valid
    assert outcome.missing == []


def test_missing_fields_are_reported():
    outcome = validate_shape(AnalysisKind.SINGLE, {"bodyType": "표준형"})
    assert not outcome.valid
    assert outcome.missing == ["overallScore", "summary"]


def test_blank_summary_counts_as_missing():
    outcome = validate_shape(AnalysisKind.SINGLE, {"overallScore": 0, "summary": "  "})
    assert outcome.missing == ["summary"]


def test_compare_requires_change_indicator():
    assert validate_shape(AnalysisKind.COMPARE, {"overallChange": -5, "summary": "약간 악화"}).valid
    assert validate_shape(AnalysisKind.COMPARE, {"overallScore": 70, "summary": "x"}).missing == ["overallChange"]


def test_nested_structure_is_not_checked():
    document = {"overallScore": 55, "summary": "요약", "details": "문자열이어도 통과"}
    assert validate_shape(AnalysisKind.SINGLE, document).valid


def test_fallback_satisfies_contract_for_each_kind():
    for kind in AnalysisKind:
        result = synthesize_fallback(kind, "extraction_failed")
        assert validate_shape(kind, result).valid
        assert result["degraded"] is True
        assert result["degradedReason"] == "extraction_failed"
        assert set(result) == set(REQUIRED_FIELDS[kind]) | {"degraded", "degradedReason"}


def test_fallback_uses_neutral_defaults():
    assert synthesize_fallback(AnalysisKind.SINGLE)["overallScore"] == 50
    assert synthesize_fallback(AnalysisKind.COMPARE)["overallChange"] == 0
