# app/models/support_inquiry.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from app.core.database import Base, JSONType
from app.utils.datetime_utils import DateTimeUtils


class SupportInquiry(Base):
    """'support_inquiries' 테이블. 비로그인 사용자의 문의도 받으므로 user_id는 비어 있을 수 있습니다."""
    __tablename__ = 'support_inquiries'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False, default='general')
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    photo_urls = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=DateTimeUtils.now)
