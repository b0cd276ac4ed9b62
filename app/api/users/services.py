# app/api/users/services.py
import logging
from typing import Dict, Any

from app.core.database import Database
from app.core.exceptions import NotFound
from app.models.user import User
from app.services.storage_service import StorageService


class UserService:
    """사용자 프로필(신체 정보) 조회/수정과 회원 탈퇴를 담당합니다."""

    def __init__(self, database: Database, storage_service: StorageService):
        self.database = database
        self.storage_service = storage_service

    def get_profile(self, user_id: int) -> User:
        with self.database.session_scope() as session:
            user = session.get(User, user_id)
        if not user:
            raise NotFound("사용자를 찾을 수 없습니다.")
        return user

    def update_profile(self, user_id: int, update_data: Dict[str, Any]) -> User:
        """전달된 필드만 부분 업데이트합니다."""
        if not update_data:
            raise ValueError("수정할 데이터가 제공되지 않았습니다.")

        with self.database.session_scope() as session:
            user = session.get(User, user_id)
            if not user:
                raise NotFound("사용자를 찾을 수 없습니다.")
            for key, value in update_data.items():
                setattr(user, key, value)

        logging.info(f"User profile updated for {user_id} with fields: {list(update_data.keys())}")
        return user

    def delete_account(self, user_id: int):
        """
        계정을 삭제합니다. 사진, 비교 결과, 분석 히스토리는 함께 삭제됩니다.
        스토리지 파일 삭제는 최선 노력으로 처리합니다.
        """
        with self.database.session_scope() as session:
            user = session.get(User, user_id)
            if not user:
                raise NotFound("사용자를 찾을 수 없습니다.")
            storage_paths = [photo.storage_path for photo in user.photos]
            session.delete(user)

        for path in storage_paths:
            try:
                self.storage_service.delete_file(path)
            except Exception as e:
                logging.warning(f"회원 탈퇴 중 스토리지 파일 삭제 실패 (user_id: {user_id}, path: {path}): {e}")

        logging.info(f"회원 탈퇴 처리 완료 (user_id: {user_id}, 삭제된 사진: {len(storage_paths)}장)")
