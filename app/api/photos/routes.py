# app/api/photos/routes.py

import logging
from flask import request, jsonify, Blueprint, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from app.core.exceptions import NotFound
from app.core.security import current_user_id
from .schemas import PhotoUploadFormSchema, PhotoResponseSchema

photos_bp = Blueprint('photos_bp', __name__)


def is_allowed_image(filename: str, mimetype: str) -> bool:
    """허용된 확장자(jpeg, jpg, png, webp)와 이미지 MIME 타입인지 확인합니다."""
    if not filename or '.' not in filename:
        return False
    extension = filename.rsplit('.', 1)[1].lower()
    allowed = current_app.config['ALLOWED_IMAGE_EXTENSIONS']
    return extension in allowed and (mimetype or '').startswith('image/')


@photos_bp.route('/upload', methods=['POST'])
@jwt_required()
def upload_photo():
    """체형 사진을 업로드합니다. multipart 필드: photo(파일), body_part, taken_at(선택)"""
    user_id = current_user_id()
    photo_service = current_app.services['photos']

    file = request.files.get('photo')
    if not file or not file.filename:
        return jsonify({"success": False, "error_code": "FILE_REQUIRED", "error": "사진을 선택해주세요."}), 400
    if not is_allowed_image(file.filename, file.mimetype):
        return jsonify({"success": False, "error_code": "INVALID_FILE_TYPE",
                        "error": "이미지 파일만 업로드 가능합니다 (jpeg, jpg, png, webp)"}), 400

    try:
        form = PhotoUploadFormSchema().load(request.form)
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    try:
        photo = photo_service.upload_photo(
            user_id, file.read(), file.filename, file.mimetype,
            body_part=form['body_part'], taken_at=form['taken_at']
        )
    except Exception as e:
        logging.error(f"사진 업로드 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "UPLOAD_FAILED", "error": "사진 업로드에 실패했습니다."}), 500

    return jsonify({
        "success": True,
        "photo": PhotoResponseSchema().dump(photo),
        "message": "사진이 업로드되었습니다!"
    }), 201


@photos_bp.route('/my-photos', methods=['GET'])
@jwt_required()
def list_my_photos():
    """내 사진 목록을 조회합니다."""
    photo_service = current_app.services['photos']
    photos = photo_service.list_photos(current_user_id())
    return jsonify({"success": True, "photos": PhotoResponseSchema(many=True).dump(photos)}), 200


@photos_bp.route('/<int:photo_id>', methods=['DELETE'])
@jwt_required()
def delete_photo(photo_id: int):
    """사진을 스토리지와 DB에서 삭제합니다. 분석 히스토리는 그대로 남습니다."""
    photo_service = current_app.services['photos']
    try:
        photo_service.delete_photo(current_user_id(), photo_id)
        return jsonify({"success": True, "message": "사진이 삭제되었습니다."}), 200
    except NotFound as e:
        return jsonify({"success": False, "error_code": "PHOTO_NOT_FOUND", "error": str(e)}), 404
