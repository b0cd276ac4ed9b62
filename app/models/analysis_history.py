# app/models/analysis_history.py
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from app.core.database import Base, JSONType
from app.utils.datetime_utils import DateTimeUtils


class AnalysisKind(Enum):
    SINGLE = "single"
    COMPARE = "compare"


class AnalysisHistory(Base):
    """
    'analysis_history' 테이블의 구조를 정의하는 모델.

    완료된 분석 1건마다 1행이 추가되며 이후 수정되지 않습니다.
    사진 ID는 외래키가 아닌 기록값이므로, 사진을 삭제해도 히스토리는 그대로 남습니다.
    사용자 삭제 시에만 함께 삭제됩니다.
    """
    __tablename__ = 'analysis_history'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    kind = Column(String(20), nullable=False)  # 'single' | 'compare'
    photo_id = Column(Integer, nullable=False)
    compare_photo_id = Column(Integer, nullable=True)
    result = Column(JSONType, nullable=False)
    degraded = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=DateTimeUtils.now)
