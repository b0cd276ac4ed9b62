# app/api/support/services.py
import logging
from typing import List, Optional, Tuple, Dict, Any

from app.core.database import Database
from app.models.support_inquiry import SupportInquiry
from app.services.storage_service import StorageService

MAX_ATTACHMENTS = 5


class SupportService:
    """고객 문의 접수를 담당합니다."""

    def __init__(self, database: Database, storage_service: StorageService):
        self.database = database
        self.storage_service = storage_service

    def submit_inquiry(self, user_id: Optional[int], data: Dict[str, Any],
                       attachments: List[Tuple[bytes, str, str]]) -> SupportInquiry:
        """
        문의를 저장합니다.

        :param user_id: 로그인 사용자 ID (비로그인이면 None)
        :param data: SupportInquirySchema로 검증된 폼 데이터
        :param attachments: (바이트, 파일명, MIME 타입) 목록, 최대 5개
        """
        if len(attachments) > MAX_ATTACHMENTS:
            raise ValueError(f"첨부 사진은 최대 {MAX_ATTACHMENTS}장까지 가능합니다.")

        owner = user_id if user_id is not None else 'anonymous'
        uploaded = []
        try:
            for image_bytes, filename, content_type in attachments:
                uploaded.append(self.storage_service.upload_image(
                    owner, image_bytes, filename, content_type, upload_type="support"
                ))
            photo_urls = [item['url'] for item in uploaded]

            with self.database.session_scope() as session:
                inquiry = SupportInquiry(user_id=user_id, photo_urls=photo_urls or None, **data)
                session.add(inquiry)
                session.flush()
        except Exception:
            # 문의 저장에 실패하면 이미 올린 첨부 파일을 지웁니다.
            logging.error(f"문의 저장 실패, 첨부 파일 {len(uploaded)}개 정리")
            for item in uploaded:
                self._delete_file_quietly(item['file_path'])
            raise

        logging.info(f"문의 접수 완료 (inquiry_id: {inquiry.id}, 첨부: {len(photo_urls)}장)")
        return inquiry

    def _delete_file_quietly(self, file_path: str):
        try:
            self.storage_service.delete_file(file_path)
        except Exception as e:
            logging.warning(f"스토리지 파일 정리 실패 ({file_path}): {e}")
