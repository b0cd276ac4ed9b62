# app/api/analysis/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE

from app.utils.datetime_utils import DateTimeUtils


class AnalyzeRequestSchema(Schema):
    """POST /api/analysis/analyze 요청 스키마."""
    photo_id = fields.Int(
        required=True, data_key='photoId', validate=validate.Range(min=1),
        error_messages={"required": "분석할 사진 ID(photoId)는 필수입니다."}
    )


class CompareRequestSchema(Schema):
    """POST /api/analysis/compare 요청 스키마. photoId1이 이전, photoId2가 이후 사진입니다."""
    photo_id_1 = fields.Int(required=True, data_key='photoId1', validate=validate.Range(min=1))
    photo_id_2 = fields.Int(required=True, data_key='photoId2', validate=validate.Range(min=1))

    @validates_schema
    def validate_distinct_photos(self, data, **kwargs):
        if data.get('photo_id_1') == data.get('photo_id_2'):
            raise ValidationError("서로 다른 두 사진을 선택해주세요.", field_name='photoId2')


class HistoryQuerySchema(Schema):
    """GET /api/analysis/history 쿼리 파라미터 스키마."""
    class Meta:
        unknown = EXCLUDE

    limit = fields.Int(load_default=10, validate=validate.Range(min=1, max=50))
    offset = fields.Int(load_default=0, validate=validate.Range(min=0))


class HistoryEntrySchema(Schema):
    """히스토리 목록 항목(요약) 응답 스키마."""
    id = fields.Int(dump_only=True)
    kind = fields.Str(dump_only=True)
    photoIds = fields.Method('get_photo_ids', dump_only=True)
    degraded = fields.Bool(dump_only=True)
    summary = fields.Method('get_summary', dump_only=True)
    createdAt = fields.Method('get_created_at', dump_only=True)

    def get_photo_ids(self, entry):
        if entry.compare_photo_id is None:
            return [entry.photo_id]
        return [entry.photo_id, entry.compare_photo_id]

    def get_summary(self, entry):
        return (entry.result or {}).get('summary')

    def get_created_at(self, entry):
        return DateTimeUtils.to_iso_string(entry.created_at)


class HistoryEntryDetailSchema(HistoryEntrySchema):
    """히스토리 단건 조회 응답 스키마 (저장된 결과 전체 포함)."""
    result = fields.Dict(dump_only=True)
