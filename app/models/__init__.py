# app/models/__init__.py
from app.models.user import User, UserGender
from app.models.photo import Photo, BodyPart
from app.models.photo_comparison import PhotoComparison
from app.models.analysis_history import AnalysisHistory, AnalysisKind
from app.models.support_inquiry import SupportInquiry

__all__ = [
    'User', 'UserGender',
    'Photo', 'BodyPart',
    'PhotoComparison',
    'AnalysisHistory', 'AnalysisKind',
    'SupportInquiry',
]
