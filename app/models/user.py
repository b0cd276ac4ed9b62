# app/models/user.py
from enum import Enum

from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.utils.datetime_utils import DateTimeUtils


class UserGender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class User(Base):
    """
    'users' 테이블.
    계정 정보와 체형 분석에 참고하는 신체 정보(키, 몸무게, 나이, 성별)를 함께 관리합니다.
    사용자를 삭제하면 사진, 비교 결과, 분석 히스토리가 함께 삭제됩니다.
    """
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)

    height_cm = Column(Numeric(5, 1), nullable=True)
    weight_kg = Column(Numeric(5, 1), nullable=True)
    age = Column(Integer, nullable=True)
    gender = Column(String(10), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=DateTimeUtils.now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=DateTimeUtils.now, onupdate=DateTimeUtils.now)
    last_login = Column(DateTime(timezone=True), nullable=True)

    photos = relationship('Photo', back_populates='user', cascade='all, delete-orphan')
    comparisons = relationship('PhotoComparison', cascade='all, delete-orphan')
    history = relationship('AnalysisHistory', cascade='all, delete-orphan')
