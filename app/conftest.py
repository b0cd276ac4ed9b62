# app/conftest.py
"""
테스트 공용 픽스처

- 인메모리 SQLite를 사용하는 실제 Database
- 네트워크 없이 동작하는 가짜 스토리지 / 가짜 AI 모델
"""

import pytest

from app import create_app
from app.analysis.types import RawModelResponse
from app.core.database import Database
from app.core.exceptions import ImageFetchFailed
from app.core.security import hash_password, issue_access_token
from app.models.photo import Photo
from app.models.user import User

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body"


class FakeStorage:
    """StorageService와 같은 인터페이스를 가진 메모리 저장소."""

    def __init__(self):
        self.files = {}
        self.fetched = []
        self.deleted = []
        self.fail_fetch = False
        # 이미지 다운로드 직후 실행할 콜백 (분석 도중의 변경을 흉내낼 때 사용)
        self.on_fetch = None

    def upload_image(self, user_id, image_bytes, filename, content_type, upload_type="body_photo"):
        path = f"{upload_type}/{user_id}/{len(self.files) + 1}-{filename}"
        self.files[path] = image_bytes
        return {"url": f"https://storage.example.com/{path}", "file_path": path}

    def delete_file(self, file_path):
        self.deleted.append(file_path)
        return self.files.pop(file_path, None) is not None

    def fetch_image(self, url):
        self.fetched.append(url)
        if self.fail_fetch:
            raise ImageFetchFailed("분석할 이미지를 불러오지 못했습니다.")
        if self.on_fetch:
            self.on_fetch(url)
        return JPEG_BYTES


class FakeVision:
    """
    OpenAIService 대역. queue()로 넣은 응답(문자열 또는 예외)을 순서대로 돌려줍니다.
    비어 있으면 유효한 단일 분석 JSON을 돌려줍니다.
    """

    DEFAULT_TEXT = '{"overallScore": 70, "summary": "균형 잡힌 체형입니다."}'

    def __init__(self):
        self.responses = []
        self.calls = []

    def queue(self, *items):
        self.responses.extend(items)

    def analyze_images(self, images, prompt_id, **variables):
        self.calls.append({"images": images, "prompt_id": prompt_id, "variables": variables})
        item = self.responses.pop(0) if self.responses else self.DEFAULT_TEXT
        if isinstance(item, Exception):
            raise item
        return RawModelResponse(text=item, model="fake-vision", prompt_id=prompt_id)


@pytest.fixture
def database():
    db = Database('sqlite://')
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def vision():
    return FakeVision()


@pytest.fixture
def app(database, storage, vision):
    return create_app('testing', services={'database': database, 'storage': storage, 'vision': vision})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(database):
    def _make_user(user_id=None, email=None, password="password123", name="테스터", **profile):
        with database.session_scope() as session:
            user = User(
                id=user_id,
                email=email or f"user{user_id or ''}-{len(session.query(User).all())}@example.com",
                password_hash=hash_password(password),
                name=name,
                **profile
            )
            session.add(user)
            session.flush()
            return user.id
    return _make_user


@pytest.fixture
def make_photo(database):
    def _make_photo(user_id, photo_id=None, analysis_data=None, body_part="full"):
        with database.session_scope() as session:
            photo = Photo(
                id=photo_id,
                user_id=user_id,
                photo_url=f"https://storage.example.com/body_photo/{user_id}/{photo_id or 'new'}.jpg",
                storage_path=f"body_photo/{user_id}/{photo_id or 'new'}.jpg",
                body_part=body_part,
                analysis_data=analysis_data
            )
            session.add(photo)
            session.flush()
            return photo.id
    return _make_photo


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user_id):
        with app.app_context():
            token = issue_access_token(user_id)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
