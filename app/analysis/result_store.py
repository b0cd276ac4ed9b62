# app/analysis/result_store.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.analysis.types import AnalysisRequest, EnvelopeStatus, ResultEnvelope
from app.core.database import Database
from app.core.exceptions import ResultPersistError
from app.models.analysis_history import AnalysisHistory, AnalysisKind
from app.models.photo import Photo
from app.models.photo_comparison import PhotoComparison
from app.utils.datetime_utils import DateTimeUtils


class ResultStore:
    """
    정규화된 분석 결과를 저장하는 어댑터.

    - 대상 레코드(사진 또는 비교 쌍)에 대한 저장은 필수이며, 실패하면 ResultPersistError를 던집니다.
    - 히스토리 추가는 최선 노력(best-effort)이며, 실패해도 로그만 남기고 요청은 성공으로 처리합니다.
    모든 쓰기는 요청자(user_id) 소유 조건을 포함합니다.
    """

    def __init__(self, database: Database):
        self.database = database

    def persist(self, request: AnalysisRequest, envelope: ResultEnvelope, track_history: bool = True) -> Optional[int]:
        """
        failed가 아닌 결과를 저장하고, 생성된 히스토리 ID(없으면 None)를 반환합니다.
        """
        if envelope.is_failed:
            return None
        if envelope.status == EnvelopeStatus.DEGRADED and not envelope.result.get('degraded'):
            raise ValueError("degraded 결과는 대체 결과 표시(degraded=True)를 포함해야 합니다.")

        self._save_subject(request, envelope.result)

        if not track_history:
            return None
        return self._append_history(request, envelope)

    def _save_subject(self, request: AnalysisRequest, result: Dict[str, Any]):
        # 같은 비교 쌍을 동시에 처음 저장하면 한쪽은 unique 제약에 걸립니다. 그 경우 갱신으로 한 번 더 시도합니다.
        attempts = 2 if request.kind == AnalysisKind.COMPARE else 1
        for attempt in range(1, attempts + 1):
            try:
                with self.database.session_scope() as session:
                    if request.kind == AnalysisKind.SINGLE:
                        self._save_photo_result(session, request, result)
                    else:
                        self._save_comparison_result(session, request, result)
                return
            except ResultPersistError:
                raise
            except IntegrityError as e:
                if attempt < attempts:
                    logging.info(f"비교 결과 동시 저장 충돌, 갱신으로 재시도합니다 ({list(request.photo_ids)})")
                    continue
                logging.error(f"분석 결과 저장 실패 ({request.kind.value} {list(request.photo_ids)}): {e}", exc_info=True)
                raise ResultPersistError("분석 결과를 저장하지 못했습니다.") from e
            except SQLAlchemyError as e:
                logging.error(f"분석 결과 저장 실패 ({request.kind.value} {list(request.photo_ids)}): {e}", exc_info=True)
                raise ResultPersistError("분석 결과를 저장하지 못했습니다.") from e

    @staticmethod
    def _save_photo_result(session, request: AnalysisRequest, result: Dict[str, Any]):
        photo_id = request.photo_ids[0]
        statement = (
            update(Photo)
            .where(Photo.id == photo_id, Photo.user_id == request.user_id)
            .values(analysis_data=result, analyzed_at=DateTimeUtils.now())
        )
        if session.execute(statement).rowcount == 0:
            # 분석 도중 사진이 삭제된 경우
            raise ResultPersistError(f"결과를 저장할 사진을 찾을 수 없습니다 (photo_id: {photo_id}).")

    @staticmethod
    def _find_comparison(session, request: AnalysisRequest) -> Optional[PhotoComparison]:
        before_id, after_id = request.photo_ids
        return session.execute(
            select(PhotoComparison).where(
                PhotoComparison.user_id == request.user_id,
                PhotoComparison.before_photo_id == before_id,
                PhotoComparison.after_photo_id == after_id
            )
        ).scalar_one_or_none()

    def _save_comparison_result(self, session, request: AnalysisRequest, result: Dict[str, Any]):
        before_id, after_id = request.photo_ids
        owned = session.execute(
            select(func.count()).select_from(Photo).where(
                Photo.id.in_(request.photo_ids), Photo.user_id == request.user_id
            )
        ).scalar_one()
        if owned != len(request.photo_ids):
            # 분석 도중 사진이 삭제된 경우
            raise ResultPersistError(f"결과를 저장할 사진을 찾을 수 없습니다 (photo_ids: {[before_id, after_id]}).")

        comparison = self._find_comparison(session, request)
        if comparison:
            comparison.analysis_data = result
            comparison.updated_at = DateTimeUtils.now()
        else:
            session.add(PhotoComparison(
                user_id=request.user_id,
                before_photo_id=before_id,
                after_photo_id=after_id,
                analysis_data=result
            ))
            session.flush()

    def _append_history(self, request: AnalysisRequest, envelope: ResultEnvelope) -> Optional[int]:
        photo_ids = request.photo_ids
        try:
            with self.database.session_scope() as session:
                entry = AnalysisHistory(
                    user_id=request.user_id,
                    kind=request.kind.value,
                    photo_id=photo_ids[0],
                    compare_photo_id=photo_ids[1] if len(photo_ids) > 1 else None,
                    result=envelope.result,
                    degraded=envelope.status == EnvelopeStatus.DEGRADED
                )
                session.add(entry)
                session.flush()
                return entry.id
        except Exception as e:
            logging.warning(f"분석 히스토리 저장 실패 (user: {request.user_id}, {request.kind.value} {list(photo_ids)}): {e}", exc_info=True)
            return None
