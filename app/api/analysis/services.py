# app/api/analysis/services.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Tuple

from sqlalchemy import func, select

from app.analysis.gateway import ResultNormalizingGateway
from app.analysis.result_store import ResultStore
from app.analysis.types import AnalysisRequest, ResultEnvelope
from app.core.database import Database
from app.core.exceptions import NotFound
from app.models.analysis_history import AnalysisHistory
from app.models.photo import Photo
from app.models.photo_comparison import PhotoComparison
from app.models.user import User
from app.services.storage_service import StorageService
from app.utils.datetime_utils import DateTimeUtils


class AnalysisService:
    """
    체형 분석 도메인 서비스.

    소유권 확인 -> 이미지 다운로드 -> 게이트웨이(모델 호출/정규화) -> 결과 저장 순서로 처리합니다.
    소유권 확인은 항상 외부 모델 호출보다 먼저 수행됩니다.
    """

    def __init__(self, database: Database, storage_service: StorageService, vision_service,
                 gateway: ResultNormalizingGateway = None, result_store: ResultStore = None):
        self.database = database
        self.storage_service = storage_service
        self.gateway = gateway or ResultNormalizingGateway(vision_service)
        self.result_store = result_store or ResultStore(database)
        logging.info("AnalysisService initialized with dependencies.")

    # --- 분석 실행 ---
    def analyze_photo(self, user_id: int, photo_id: int) -> ResultEnvelope:
        """단일 사진을 분석하고 결과를 사진 레코드와 히스토리에 저장합니다."""
        photos = self._get_owned_photos(user_id, [photo_id])
        request = AnalysisRequest.single(user_id, photo_id)
        return self._run(request, photos)

    def compare_photos(self, user_id: int, before_photo_id: int, after_photo_id: int) -> ResultEnvelope:
        """(이전, 이후) 사진 쌍을 비교 분석하고 결과를 비교 레코드와 히스토리에 저장합니다."""
        photos = self._get_owned_photos(user_id, [before_photo_id, after_photo_id])
        request = AnalysisRequest.compare(user_id, before_photo_id, after_photo_id)
        return self._run(request, photos)

    def _run(self, request: AnalysisRequest, photos: List[Photo]) -> ResultEnvelope:
        images = self._fetch_images(photos)
        envelope = self.gateway.run(request, images, profile=self._profile_text(request.user_id))
        self.result_store.persist(request, envelope)
        return envelope

    def _get_owned_photos(self, user_id: int, photo_ids: List[int]) -> List[Photo]:
        """요청 순서대로 사진을 반환합니다. 하나라도 없거나 남의 사진이면 NotFound."""
        with self.database.session_scope() as session:
            rows = session.execute(
                select(Photo).where(Photo.id.in_(photo_ids), Photo.user_id == user_id)
            ).scalars().all()

        by_id = {photo.id: photo for photo in rows}
        missing = [photo_id for photo_id in photo_ids if photo_id not in by_id]
        if missing:
            logging.info(f"분석 대상 사진 없음 또는 권한 없음 (user: {user_id}, photo_ids: {missing})")
            raise NotFound("사진을 찾을 수 없습니다.")
        return [by_id[photo_id] for photo_id in photo_ids]

    def _fetch_images(self, photos: List[Photo]) -> List[bytes]:
        """이미지를 내려받습니다. 두 장이면 동시에 받습니다."""
        urls = [photo.photo_url for photo in photos]
        if len(urls) == 1:
            return [self.storage_service.fetch_image(urls[0])]
        with ThreadPoolExecutor(max_workers=len(urls)) as executor:
            return list(executor.map(self.storage_service.fetch_image, urls))

    def _profile_text(self, user_id: int) -> str:
        """프롬프트에 참고용으로 넣을 신체 정보 문자열."""
        with self.database.session_scope() as session:
            user = session.get(User, user_id)

        if not user:
            return "정보 없음"
        parts = []
        if user.height_cm is not None:
            parts.append(f"키 {user.height_cm}cm")
        if user.weight_kg is not None:
            parts.append(f"몸무게 {user.weight_kg}kg")
        if user.age is not None:
            parts.append(f"나이 {user.age}세")
        if user.gender:
            parts.append(f"성별 {user.gender}")
        return ", ".join(parts) if parts else "정보 없음"

    # --- 결과 조회 ---
    def get_photo_result(self, user_id: int, photo_id: int) -> Dict[str, Any]:
        """사진에 마지막으로 저장된 분석 결과를 반환합니다."""
        with self.database.session_scope() as session:
            photo = session.execute(
                select(Photo).where(Photo.id == photo_id, Photo.user_id == user_id)
            ).scalar_one_or_none()

        if not photo or photo.analysis_data is None:
            raise NotFound("분석 결과를 찾을 수 없습니다.")
        return {
            "photoId": photo.id,
            "analysis": photo.analysis_data,
            "analyzedAt": DateTimeUtils.to_iso_string(photo.analyzed_at)
        }

    def get_comparison_result(self, user_id: int, before_photo_id: int, after_photo_id: int) -> Dict[str, Any]:
        """사진 쌍에 마지막으로 저장된 비교 결과를 반환합니다."""
        with self.database.session_scope() as session:
            comparison = session.execute(
                select(PhotoComparison).where(
                    PhotoComparison.user_id == user_id,
                    PhotoComparison.before_photo_id == before_photo_id,
                    PhotoComparison.after_photo_id == after_photo_id
                )
            ).scalar_one_or_none()

        if not comparison:
            raise NotFound("비교 결과를 찾을 수 없습니다.")
        return {
            "photoIds": [comparison.before_photo_id, comparison.after_photo_id],
            "analysis": comparison.analysis_data,
            "analyzedAt": DateTimeUtils.to_iso_string(comparison.updated_at)
        }

    def get_history(self, user_id: int, limit: int, offset: int) -> Tuple[List[AnalysisHistory], int]:
        """최신순 히스토리 페이지와 전체 건수를 반환합니다."""
        with self.database.session_scope() as session:
            entries = session.execute(
                select(AnalysisHistory)
                .where(AnalysisHistory.user_id == user_id)
                .order_by(AnalysisHistory.created_at.desc(), AnalysisHistory.id.desc())
                .limit(limit)
                .offset(offset)
            ).scalars().all()
            total = session.execute(
                select(func.count()).select_from(AnalysisHistory).where(AnalysisHistory.user_id == user_id)
            ).scalar_one()
        return list(entries), total

    def get_history_entry(self, user_id: int, entry_id: int) -> AnalysisHistory:
        with self.database.session_scope() as session:
            entry = session.execute(
                select(AnalysisHistory).where(AnalysisHistory.id == entry_id, AnalysisHistory.user_id == user_id)
            ).scalar_one_or_none()
        if not entry:
            raise NotFound("분석 히스토리를 찾을 수 없습니다.")
        return entry
