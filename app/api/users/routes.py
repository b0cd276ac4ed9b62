# app/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from app.api.users.schemas import UserProfileResponseSchema, UserProfileUpdateSchema
from app.core.exceptions import NotFound
from app.core.security import current_user_id

users_bp = Blueprint('users_bp', __name__)


@users_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_profile():
    """로그인한 사용자의 프로필과 신체 정보를 조회합니다."""
    user_service = current_app.services['users']
    try:
        user = user_service.get_profile(current_user_id())
        return jsonify({"success": True, "user": UserProfileResponseSchema().dump(user)}), 200
    except NotFound as e:
        return jsonify({"success": False, "error_code": "USER_NOT_FOUND", "error": str(e)}), 404


@users_bp.route('/me', methods=['PATCH'])
@jwt_required()
def update_my_profile():
    """신체 정보(키, 몸무게, 나이, 성별)와 이름을 부분 수정합니다."""
    user_service = current_app.services['users']
    user_id = current_user_id()
    try:
        update_data = UserProfileUpdateSchema().load(request.get_json(silent=True) or {})
        user = user_service.update_profile(user_id, update_data)
        return jsonify({"success": True, "user": UserProfileResponseSchema().dump(user)}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"success": False, "error_code": "EMPTY_UPDATE", "error": str(e)}), 400
    except NotFound as e:
        return jsonify({"success": False, "error_code": "USER_NOT_FOUND", "error": str(e)}), 404


@users_bp.route('/me', methods=['DELETE'])
@jwt_required()
def delete_my_account():
    """
    현재 로그인된 사용자 본인의 계정을 영구적으로 삭제합니다.
    """
    user_service = current_app.services['users']
    user_id = current_user_id()
    try:
        user_service.delete_account(user_id)
        return Response(status=204)
    except NotFound as e:
        return jsonify({"success": False, "error_code": "USER_NOT_FOUND", "error": str(e)}), 404
    except Exception as e:
        logging.error(f"회원 탈퇴 처리 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "ACCOUNT_DELETION_FAILED", "error": "회원 탈퇴 처리 중 서버 오류가 발생했습니다."}), 500
