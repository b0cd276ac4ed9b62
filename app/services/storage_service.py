# app/services/storage_service.py
import uuid
import logging
from flask import Flask
from firebase_admin import storage
import requests

from app.core.exceptions import ImageFetchFailed

# 업로드 용도별 저장 폴더
PATH_MAP = {
    "body_photo": "body_photos/{user_id}",
    "support": "support/{user_id}",
}


class StorageService:
    """
    Firebase Storage 관련 로직을 담당하는 범용 서비스 클래스입니다.
    이미지 업로드(공개 URL + 삭제 핸들 발급), 삭제, 분석용 이미지 다운로드를 제공합니다.
    """

    def __init__(self):
        """
        클래스 인스턴스 생성 시 버킷을 None으로 초기화합니다.
        실제 버킷 객체는 init_app 메서드를 통해 주입됩니다.
        """
        self.bucket = None
        self.fetch_timeout = 15

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 Storage 버킷을 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")

        self.bucket = storage.bucket(bucket_name)
        self.fetch_timeout = app.config.get('IMAGE_FETCH_TIMEOUT_SECONDS', self.fetch_timeout)
        logging.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    def upload_image(self, user_id, image_bytes: bytes, filename: str, content_type: str,
                     upload_type: str = "body_photo") -> dict:
        """
        이미지를 업로드하고 공개 URL과 삭제에 사용할 파일 경로를 반환합니다.

        :param user_id: 업로드한 사용자 ID (폴더 구분용, 비로그인 문의는 'anonymous')
        :param image_bytes: 이미지 원본 바이트
        :param filename: 원본 파일명 (확장자 파악에 사용)
        :param content_type: MIME 타입 (예: "image/jpeg")
        :param upload_type: 업로드 목적 ("body_photo", "support")
        :return: {"url": 공개 URL, "file_path": 버킷 내 경로}
        """
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        folder_template = PATH_MAP.get(upload_type)
        if not folder_template:
            raise ValueError(f"'{upload_type}'은(는) 유효한 업로드 타입이 아닙니다.")

        extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else 'jpg'
        destination_blob_name = f"{folder_template.format(user_id=user_id)}/{uuid.uuid4()}.{extension}"

        blob = self.bucket.blob(destination_blob_name)
        blob.upload_from_string(image_bytes, content_type=content_type)
        blob.make_public()
        logging.info(f"StorageService: 업로드 완료 ({destination_blob_name})")

        return {
            "url": blob.public_url,
            "file_path": destination_blob_name
        }

    def delete_file(self, file_path: str) -> bool:
        """
        파일을 삭제합니다. 이미 없는 파일이면 False를 반환합니다.

        :param file_path: upload_image가 반환한 file_path
        """
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        blob = self.bucket.blob(file_path)
        if not blob.exists():
            logging.warning(f"StorageService: 삭제할 파일이 이미 없습니다 ({file_path})")
            return False

        blob.delete()
        logging.info(f"StorageService: 삭제 완료 ({file_path})")
        return True

    def fetch_image(self, url: str) -> bytes:
        """
        분석을 위해 공개 URL에서 이미지를 내려받습니다.

        :raises ImageFetchFailed: 네트워크 오류, 타임아웃, 비정상 응답
        """
        try:
            response = requests.get(url, timeout=self.fetch_timeout)
            response.raise_for_status()
            return response.content
        except requests.RequestException as e:
            logging.error(f"이미지 다운로드 실패 ({url}): {e}")
            raise ImageFetchFailed("분석할 이미지를 불러오지 못했습니다.") from e
