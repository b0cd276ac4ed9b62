# app/core/config.py

import os
from datetime import timedelta

basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명 키. 토큰의 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv('JWT_ACCESS_TOKEN_DAYS', 7)))

    # 관계형 DB 연결 문자열 (운영: PostgreSQL)
    DATABASE_URL = os.getenv('DATABASE_URL', 'postgresql://nunbody_user@localhost:5432/nunbody')

    # 외부 AI 모델 (OpenAI Vision)
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o')
    OPENAI_MAX_TOKENS = int(os.getenv('OPENAI_MAX_TOKENS', 1500))
    UPSTREAM_TIMEOUT_SECONDS = float(os.getenv('UPSTREAM_TIMEOUT_SECONDS', 30))
    IMAGE_FETCH_TIMEOUT_SECONDS = float(os.getenv('IMAGE_FETCH_TIMEOUT_SECONDS', 15))

    # 프롬프트 템플릿(YAML)이 위치한 디렉터리
    PROMPTS_DIR = os.getenv('PROMPTS_DIR', os.path.join(basedir, 'prompts'))

    # Firebase Storage (사진 원본 저장소)
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # 업로드 제한: 10MB, 이미지 확장자만 허용
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS = {'jpeg', 'jpg', 'png', 'webp'}


class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True


class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다. 인메모리 SQLite를 사용합니다."""
    TESTING = True
    DEBUG = False
    DATABASE_URL = 'sqlite://'
    JWT_SECRET_KEY = 'nunbody-testing-secret-key-0123456789'


class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False


# FLASK_ENV 값에 따라 create_app에서 적절한 설정을 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
