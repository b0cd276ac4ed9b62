# app/api/photos/services.py
import logging
from typing import List, Optional
from datetime import datetime

from sqlalchemy import delete, select

from app.core.database import Database
from app.core.exceptions import NotFound
from app.models.photo import Photo
from app.services.storage_service import StorageService


class PhotoService:
    """체형 사진 업로드, 목록 조회, 삭제를 담당합니다. 모든 조회/삭제는 소유자 조건을 포함합니다."""

    def __init__(self, database: Database, storage_service: StorageService):
        self.database = database
        self.storage_service = storage_service

    def upload_photo(self, user_id: int, image_bytes: bytes, filename: str, content_type: str,
                     body_part: str, taken_at: Optional[datetime] = None) -> Photo:
        uploaded = self.storage_service.upload_image(user_id, image_bytes, filename, content_type)
        try:
            with self.database.session_scope() as session:
                photo = Photo(
                    user_id=user_id,
                    photo_url=uploaded['url'],
                    storage_path=uploaded['file_path'],
                    body_part=body_part
                )
                if taken_at:
                    photo.taken_at = taken_at
                session.add(photo)
                session.flush()
        except Exception:
            # DB 저장에 실패하면 고아 파일이 남지 않도록 업로드한 파일을 지웁니다.
            logging.error(f"사진 레코드 저장 실패, 업로드 파일 정리 (user_id: {user_id}, path: {uploaded['file_path']})")
            self._delete_file_quietly(uploaded['file_path'])
            raise

        logging.info(f"사진 업로드 완료 (user_id: {user_id}, photo_id: {photo.id})")
        return photo

    def list_photos(self, user_id: int) -> List[Photo]:
        """촬영 시각 최신순으로 사진 목록을 반환합니다."""
        with self.database.session_scope() as session:
            return list(session.execute(
                select(Photo).where(Photo.user_id == user_id).order_by(Photo.taken_at.desc(), Photo.id.desc())
            ).scalars().all())

    def delete_photo(self, user_id: int, photo_id: int):
        with self.database.session_scope() as session:
            photo = session.execute(
                select(Photo).where(Photo.id == photo_id, Photo.user_id == user_id)
            ).scalar_one_or_none()
        if not photo:
            raise NotFound("사진을 찾을 수 없습니다.")

        self.storage_service.delete_file(photo.storage_path)

        with self.database.session_scope() as session:
            session.execute(delete(Photo).where(Photo.id == photo_id, Photo.user_id == user_id))
        logging.info(f"사진 삭제 완료 (user_id: {user_id}, photo_id: {photo_id})")

    def _delete_file_quietly(self, file_path: str):
        try:
            self.storage_service.delete_file(file_path)
        except Exception as e:
            logging.warning(f"스토리지 파일 정리 실패 ({file_path}): {e}")
