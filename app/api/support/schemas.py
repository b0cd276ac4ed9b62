# app/api/support/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

INQUIRY_CATEGORIES = ['general', 'account', 'analysis', 'bug', 'other']


class SupportInquirySchema(Schema):
    """POST /api/support/inquiry 폼 필드 스키마 (첨부 사진 제외)."""
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True)
    category = fields.Str(load_default='general', validate=validate.OneOf(INQUIRY_CATEGORIES))
    subject = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    message = fields.Str(required=True, validate=validate.Length(min=1))
