# app/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
import firebase_admin
from firebase_admin import credentials

# - 설정 / 저장소
from app.core.config import config_by_name
from app.core.database import Database

# - API 블루프린트
from app.api.auth.routes import auth_bp
from app.api.photos.routes import photos_bp
from app.api.analysis.routes import analysis_bp
from app.api.users.routes import users_bp
from app.api.support.routes import support_bp

# - 서비스 모듈
from app.services.storage_service import StorageService
from app.services.openai_service import OpenAIService
from app.api.auth.services import AuthService
from app.api.photos.services import PhotoService
from app.api.analysis.services import AnalysisService
from app.api.users.services import UserService
from app.api.support.services import SupportService


def _init_firebase(app: Flask):
    if firebase_admin._apps:
        return
    cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
    cred = credentials.Certificate(cred_path)
    firebase_admin.initialize_app(cred, {
        'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
    })


def create_app(config_name=None, services=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'testing' | 'production' (기본: FLASK_ENV)
    :param services: 미리 생성한 외부 연동 객체 ('database', 'storage', 'vision').
                     전달된 항목은 새로 만들지 않고 그대로 사용합니다. (테스트용 주입)
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')
    provided = dict(services or {})

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.debug and not app.testing:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    # =====================================================================================
    # 4. 확장 기능 초기화
    # =====================================================================================
    JWTManager(app)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 저장소/외부 연동 서비스 먼저 생성
    database = provided.get('database')
    if database is None:
        database = Database(app.config['DATABASE_URL'])
        database.create_all()
    app.services['database'] = database

    storage_instance = provided.get('storage')
    if storage_instance is None:
        try:
            _init_firebase(app)
            storage_instance = StorageService()
            storage_instance.init_app(app)
            logging.info("Storage service initialized successfully")
        except Exception as e:
            logging.error(f"Failed to initialize storage service: {e}")
            raise
    app.services['storage'] = storage_instance

    vision_instance = provided.get('vision')
    if vision_instance is None:
        try:
            vision_instance = OpenAIService()
            vision_instance.init_app(app)
            logging.info("OpenAI service initialized successfully")
        except Exception as e:
            logging.error(f"Failed to initialize OpenAI service: {e}")
            raise
    app.services['vision'] = vision_instance

    # 5-2. 저장소와 외부 연동 서비스를 주입받는 도메인 서비스 생성
    app.services['auth'] = AuthService(database)
    app.services['photos'] = PhotoService(database, storage_instance)
    app.services['analysis'] = AnalysisService(database, storage_instance, vision_instance)
    app.services['users'] = UserService(database, storage_instance)
    app.services['support'] = SupportService(database, storage_instance)

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(photos_bp, url_prefix='/api/photos')
    app.register_blueprint(analysis_bp, url_prefix='/api/analysis')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(support_bp, url_prefix='/api/support')

    @app.route('/')
    def health_check():
        return jsonify({"message": "Nunbody API is running!"})

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(err):
        response = {"success": False, "error_code": "FILE_TOO_LARGE", "error": "파일 크기는 10MB 이하여야 합니다."}
        return jsonify(response), 413

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 404/405 등 HTTP 예외는 원래 상태 코드를 유지합니다.
        if isinstance(err, HTTPException):
            return jsonify({"success": False, "error_code": err.name.upper().replace(' ', '_'), "error": err.description}), err.code
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"success": False, "error_code": "INTERNAL_SERVER_ERROR", "error": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 앱 반환
    # =====================================================================================
    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
