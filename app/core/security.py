# app/core/security.py
from flask_jwt_extended import create_access_token, get_jwt_identity
from werkzeug.security import check_password_hash, generate_password_hash

MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def issue_access_token(user_id: int) -> str:
    """JWT의 sub 클레임은 문자열이어야 하므로 사용자 ID를 문자열로 넣습니다."""
    return create_access_token(identity=str(user_id))


def current_user_id() -> int:
    """@jwt_required()가 적용된 요청에서 로그인 사용자 ID를 정수로 반환합니다."""
    return int(get_jwt_identity())
