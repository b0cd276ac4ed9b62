# app/models/photo_comparison.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint

from app.core.database import Base, JSONType
from app.utils.datetime_utils import DateTimeUtils


class PhotoComparison(Base):
    """
    'photo_comparisons' 테이블.
    (이전 사진, 이후 사진) 순서쌍에 대한 마지막 비교 분석 결과를 담습니다.
    같은 순서쌍을 다시 비교하면 기존 행을 덮어씁니다.
    """
    __tablename__ = 'photo_comparisons'
    __table_args__ = (
        UniqueConstraint('user_id', 'before_photo_id', 'after_photo_id', name='uq_comparison_pair'),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    before_photo_id = Column(Integer, nullable=False)
    after_photo_id = Column(Integer, nullable=False)
    analysis_data = Column(JSONType, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=DateTimeUtils.now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=DateTimeUtils.now, onupdate=DateTimeUtils.now)
