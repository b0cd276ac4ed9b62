# app/api/auth/routes.py

import logging
import jwt
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from marshmallow import ValidationError

from app.api.auth.schemas import RegisterSchema, LoginSchema, VerifyTokenSchema, AuthUserSchema
from app.core.exceptions import DuplicateEmailError, InvalidCredentialsError
from app.core.security import issue_access_token

auth_bp = Blueprint('auth_bp', __name__)


def _auth_error(message: str, status_code: int):
    return jsonify({"success": False, "error": {"message": message}}), status_code


@auth_bp.route('/register', methods=['POST'])
def register():
    """이메일 회원가입 후 바로 사용할 수 있는 Access Token을 발급합니다."""
    auth_service = current_app.services['auth']
    try:
        data = RegisterSchema().load(request.get_json(silent=True) or {})
        user = auth_service.register_user(data['email'], data['password'], data['name'])
        return jsonify({
            "success": True,
            "data": {
                "user": AuthUserSchema().dump(user),
                "token": issue_access_token(user.id)
            }
        }), 201
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except DuplicateEmailError as e:
        return _auth_error(str(e), 400)


@auth_bp.route('/login', methods=['POST'])
def login():
    """이메일/비밀번호로 로그인합니다."""
    auth_service = current_app.services['auth']
    try:
        data = LoginSchema().load(request.get_json(silent=True) or {})
        user = auth_service.authenticate(data['email'], data['password'])
        return jsonify({
            "success": True,
            "data": {
                "user": AuthUserSchema().dump(user),
                "token": issue_access_token(user.id)
            }
        }), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except InvalidCredentialsError as e:
        return _auth_error(str(e), 401)


@auth_bp.route('/verify', methods=['POST'])
def verify():
    """전달받은 토큰이 유효하고 사용자가 존재하는지 확인합니다."""
    auth_service = current_app.services['auth']
    try:
        data = VerifyTokenSchema().load(request.get_json(silent=True) or {})
        decoded = decode_token(data['token'])
        user = auth_service.get_user(int(decoded['sub']))
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except (jwt.PyJWTError, JWTExtendedException, KeyError, ValueError) as e:
        logging.info(f"토큰 검증 실패: {type(e).__name__}")
        return _auth_error("유효하지 않은 토큰입니다.", 401)

    if not user:
        return _auth_error("사용자를 찾을 수 없습니다.", 401)

    return jsonify({
        "success": True,
        "data": {"user": AuthUserSchema().dump(user), "valid": True}
    }), 200
