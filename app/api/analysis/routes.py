# app/api/analysis/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from app.analysis.gateway import REASON_UPSTREAM_UNAVAILABLE
from app.core.exceptions import ImageFetchFailed, NotFound, ResultPersistError
from app.core.security import current_user_id
from .schemas import (
    AnalyzeRequestSchema,
    CompareRequestSchema,
    HistoryQuerySchema,
    HistoryEntrySchema,
    HistoryEntryDetailSchema
)

analysis_bp = Blueprint('analysis_bp', __name__)


def _error(error_code: str, message: str, status_code: int):
    return jsonify({"success": False, "error_code": error_code, "error": message}), status_code


def _envelope_response(envelope):
    """ResultEnvelope를 HTTP 응답으로 변환합니다. failed만 오류 응답입니다."""
    if envelope.is_failed:
        if envelope.reason == REASON_UPSTREAM_UNAVAILABLE:
            return _error("UPSTREAM_UNAVAILABLE", "AI 분석 서비스에 연결할 수 없습니다. 잠시 후 다시 시도해주세요.", 503)
        return _error("UPSTREAM_REJECTED", "AI 분석 서비스가 요청을 처리하지 못했습니다.", 502)

    return jsonify({
        "success": True,
        "status": envelope.status.value,
        "analysis": envelope.result
    }), 200


def _run_analysis(action, *args):
    """분석 실행 공통 예외 처리."""
    try:
        envelope = action(current_user_id(), *args)
        return _envelope_response(envelope)
    except NotFound as e:
        return _error("PHOTO_NOT_FOUND", str(e), 404)
    except ImageFetchFailed as e:
        return _error("IMAGE_FETCH_FAILED", str(e), 502)
    except ResultPersistError as e:
        logging.error(f"분석 결과 저장 실패: {e}", exc_info=True)
        return _error("RESULT_SAVE_FAILED", "분석 결과를 저장하지 못했습니다. 다시 시도해주세요.", 500)


@analysis_bp.route('/analyze', methods=['POST'])
@jwt_required()
def analyze_photo():
    """사진 한 장의 체형을 분석합니다."""
    analysis_service = current_app.services['analysis']
    try:
        data = AnalyzeRequestSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    return _run_analysis(analysis_service.analyze_photo, data['photo_id'])


@analysis_bp.route('/compare', methods=['POST'])
@jwt_required()
def compare_photos():
    """두 사진(이전/이후)의 체형 변화를 비교 분석합니다."""
    analysis_service = current_app.services['analysis']
    try:
        data = CompareRequestSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    return _run_analysis(analysis_service.compare_photos, data['photo_id_1'], data['photo_id_2'])


@analysis_bp.route('/history', methods=['GET'])
@jwt_required()
def get_history():
    """분석 히스토리를 최신순으로 조회합니다."""
    analysis_service = current_app.services['analysis']
    try:
        query = HistoryQuerySchema().load(request.args)
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    entries, total = analysis_service.get_history(current_user_id(), query['limit'], query['offset'])
    return jsonify({
        "success": True,
        "history": HistoryEntrySchema(many=True).dump(entries),
        "total": total,
        "limit": query['limit'],
        "offset": query['offset']
    }), 200


@analysis_bp.route('/history/<int:entry_id>', methods=['GET'])
@jwt_required()
def get_history_entry(entry_id: int):
    """분석 히스토리 한 건을 결과 전체와 함께 조회합니다."""
    analysis_service = current_app.services['analysis']
    try:
        entry = analysis_service.get_history_entry(current_user_id(), entry_id)
        return jsonify({"success": True, "entry": HistoryEntryDetailSchema().dump(entry)}), 200
    except NotFound as e:
        return _error("HISTORY_NOT_FOUND", str(e), 404)


@analysis_bp.route('/result/<int:photo_id>', methods=['GET'])
@jwt_required()
def get_photo_result(photo_id: int):
    """사진에 마지막으로 저장된 분석 결과를 조회합니다."""
    analysis_service = current_app.services['analysis']
    try:
        result = analysis_service.get_photo_result(current_user_id(), photo_id)
        return jsonify({"success": True, **result}), 200
    except NotFound as e:
        return _error("RESULT_NOT_FOUND", str(e), 404)


@analysis_bp.route('/compare-result/<int:photo_id_1>/<int:photo_id_2>', methods=['GET'])
@jwt_required()
def get_comparison_result(photo_id_1: int, photo_id_2: int):
    """사진 쌍에 마지막으로 저장된 비교 결과를 조회합니다."""
    analysis_service = current_app.services['analysis']
    try:
        result = analysis_service.get_comparison_result(current_user_id(), photo_id_1, photo_id_2)
        return jsonify({"success": True, **result}), 200
    except NotFound as e:
        return _error("RESULT_NOT_FOUND", str(e), 404)
