# app/api/users/schemas.py
from marshmallow import Schema, fields, validate

from app.models.user import UserGender


class UserProfileResponseSchema(Schema):
    """
    GET /api/users/me
    로그인한 사용자 본인의 계정 및 신체 정보 응답 스키마.
    """
    id = fields.Int(dump_only=True)
    email = fields.Str(dump_only=True)
    name = fields.Str(dump_only=True)
    height_cm = fields.Float(allow_none=True, dump_only=True)
    weight_kg = fields.Float(allow_none=True, dump_only=True)
    age = fields.Int(allow_none=True, dump_only=True)
    gender = fields.Str(allow_none=True, dump_only=True)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)


class UserProfileUpdateSchema(Schema):
    """PATCH /api/users/me 신체 정보 수정 스키마 (부분 업데이트용)."""
    name = fields.Str(validate=validate.Length(min=1, max=100))
    height_cm = fields.Float(allow_none=True, validate=validate.Range(min=50, max=250))
    weight_kg = fields.Float(allow_none=True, validate=validate.Range(min=20, max=300))
    age = fields.Int(allow_none=True, validate=validate.Range(min=1, max=120))
    gender = fields.Str(allow_none=True, validate=validate.OneOf([e.value for e in UserGender]))
