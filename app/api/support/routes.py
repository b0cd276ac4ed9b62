# app/api/support/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from app.api.photos.routes import is_allowed_image
from .schemas import SupportInquirySchema

support_bp = Blueprint('support_bp', __name__)


@support_bp.route('/inquiry', methods=['POST'])
@jwt_required(optional=True)
def submit_inquiry():
    """문의를 접수합니다. 로그인 상태라면 사용자 ID를 함께 기록합니다."""
    support_service = current_app.services['support']
    identity = get_jwt_identity()
    user_id = int(identity) if identity is not None else None

    try:
        data = SupportInquirySchema().load(request.form)
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    files = [f for f in request.files.getlist('photos') if f and f.filename]
    if any(not is_allowed_image(f.filename, f.mimetype) for f in files):
        return jsonify({"success": False, "error_code": "INVALID_FILE_TYPE",
                        "error": "이미지 파일만 첨부할 수 있습니다 (jpeg, jpg, png, webp)"}), 400
    attachments = [(f.read(), f.filename, f.mimetype) for f in files]

    try:
        support_service.submit_inquiry(user_id, data, attachments)
    except ValueError as e:
        return jsonify({"success": False, "error_code": "TOO_MANY_ATTACHMENTS", "error": str(e)}), 400
    except Exception as e:
        logging.error(f"문의 접수 중 오류 발생: {e}", exc_info=True)
        return jsonify({"success": False, "error": {"message": "문의 접수에 실패했습니다. 다시 시도해주세요."}}), 500

    return jsonify({
        "success": True,
        "message": "문의가 접수되었습니다. 빠른 시일 내에 답변 드리겠습니다."
    }), 201
