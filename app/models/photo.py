# app/models/photo.py
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base, JSONType
from app.utils.datetime_utils import DateTimeUtils


class BodyPart(Enum):
    FULL = "full"
    UPPER = "upper"
    LOWER = "lower"


class Photo(Base):
    """
    'photos' 테이블.
    업로드된 체형 사진 한 장과, 해당 사진에 대한 마지막 AI 분석 결과(analysis_data)를 담습니다.
    """
    __tablename__ = 'photos'
    __table_args__ = (
        Index('idx_user_taken', 'user_id', 'taken_at'),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    photo_url = Column(Text, nullable=False)
    # 스토리지 객체 경로. 삭제 시 핸들로 사용합니다.
    storage_path = Column(Text, nullable=False)
    body_part = Column(String(20), nullable=False, default=BodyPart.FULL.value)
    taken_at = Column(DateTime(timezone=True), nullable=False, default=DateTimeUtils.now)
    created_at = Column(DateTime(timezone=True), nullable=False, default=DateTimeUtils.now)

    analysis_data = Column(JSONType, nullable=True)
    analyzed_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship('User', back_populates='photos')
