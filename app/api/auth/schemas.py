#app/api/auth/schemas.py
from marshmallow import Schema, fields, validate

from app.core.security import MIN_PASSWORD_LENGTH


class RegisterSchema(Schema):
    """회원가입 요청의 유효성을 검사하는 스키마"""
    email = fields.Email(required=True, error_messages={"required": "이메일은 필수입니다."})
    password = fields.Str(
        required=True, load_only=True,
        validate=validate.Length(min=MIN_PASSWORD_LENGTH, error=f"비밀번호는 최소 {MIN_PASSWORD_LENGTH}자 이상이어야 합니다."),
        error_messages={"required": "비밀번호는 필수입니다."}
    )
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100),
                      error_messages={"required": "이름은 필수입니다."})


class LoginSchema(Schema):
    """로그인 요청의 유효성을 검사하는 스키마"""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)


class VerifyTokenSchema(Schema):
    """토큰 검증 요청 스키마"""
    token = fields.Str(required=True)


class AuthUserSchema(Schema):
    """인증 응답에 포함되는 사용자 정보"""
    id = fields.Int(dump_only=True)
    email = fields.Str(dump_only=True)
    name = fields.Str(dump_only=True)
    createdAt = fields.DateTime(attribute='created_at', dump_only=True)
