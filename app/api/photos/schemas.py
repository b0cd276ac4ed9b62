# app/api/photos/schemas.py
from datetime import timezone

from marshmallow import Schema, fields, validate, EXCLUDE

from app.models.photo import BodyPart


class PhotoUploadFormSchema(Schema):
    """POST /api/photos/upload 의 multipart 폼 필드 스키마 (파일 제외)."""
    class Meta:
        unknown = EXCLUDE

    body_part = fields.Str(load_default=BodyPart.FULL.value,
                           validate=validate.OneOf([e.value for e in BodyPart]))
    # 촬영 시각을 지정하지 않으면 업로드 시각을 사용합니다.
    taken_at = fields.AwareDateTime(load_default=None, default_timezone=timezone.utc)


class PhotoResponseSchema(Schema):
    """사진 정보 응답 스키마."""
    id = fields.Int(dump_only=True)
    photo_url = fields.Str(dump_only=True)
    body_part = fields.Str(dump_only=True)
    taken_at = fields.DateTime(dump_only=True)
    created_at = fields.DateTime(dump_only=True)
    analyzed = fields.Method('get_analyzed', dump_only=True)

    def get_analyzed(self, photo):
        return photo.analysis_data is not None
