# app/analysis/test_result_store.py
import pytest

from app.analysis.fallback import synthesize_fallback
from app.analysis.result_store import ResultStore
from app.analysis.types import AnalysisRequest, EnvelopeStatus, ResultEnvelope
from app.core.exceptions import ResultPersistError
from app.models.analysis_history import AnalysisHistory
from app.models.photo import Photo
from app.models.photo_comparison import PhotoComparison

RESULT = {"overallScore": 70, "summary": "요약"}


@pytest.fixture
def store(database):
    return ResultStore(database)


def _ok(result=None):
    return ResultEnvelope(status=EnvelopeStatus.OK, result=result or dict(RESULT))


def test_single_result_is_saved_on_photo_with_history(store, database, make_user, make_photo):
    make_user(user_id=7)
    make_photo(7, photo_id=42)

    history_id = store.persist(AnalysisRequest.single(7, 42), _ok())

    with database.session_scope() as session:
        photo = session.get(Photo, 42)
        entry = session.get(AnalysisHistory, history_id)
        assert photo.analysis_data == RESULT
        assert photo.analyzed_at is not None
        assert entry.kind == "single"
        assert entry.photo_id == 42
        assert entry.compare_photo_id is None
        assert entry.degraded is False


def test_write_requires_ownership(store, database, make_user, make_photo):
    make_user(user_id=7)
    make_user(user_id=8)
    make_photo(8, photo_id=42)

    with pytest.raises(ResultPersistError):
        store.persist(AnalysisRequest.single(7, 42), _ok())

    with database.session_scope() as session:
        assert session.get(Photo, 42).analysis_data is None
        assert session.query(AnalysisHistory).count() == 0


def test_failed_envelope_is_not_stored(store, database, make_user, make_photo):
    make_user(user_id=7)
    make_photo(7, photo_id=42)

    failed = ResultEnvelope(status=EnvelopeStatus.FAILED, reason="upstream_unavailable")
    assert store.persist(AnalysisRequest.single(7, 42), failed) is None

    with database.session_scope() as session:
        assert session.get(Photo, 42).analysis_data is None
        assert session.query(AnalysisHistory).count() == 0


def test_degraded_result_must_be_labelled(store, make_user, make_photo):
    make_user(user_id=7)
    make_photo(7, photo_id=42)

    unlabelled = ResultEnvelope(status=EnvelopeStatus.DEGRADED, result=dict(RESULT))
    with pytest.raises(ValueError):
        store.persist(AnalysisRequest.single(7, 42), unlabelled)


def test_degraded_result_is_stored_and_flagged(store, database, make_user, make_photo):
    make_user(user_id=7)
    make_photo(7, photo_id=42)
    fallback = synthesize_fallback(AnalysisRequest.single(7, 42).kind, "extraction_failed")

    history_id = store.persist(
        AnalysisRequest.single(7, 42),
        ResultEnvelope(status=EnvelopeStatus.DEGRADED, result=fallback, reason="extraction_failed")
    )

    with database.session_scope() as session:
        assert session.get(Photo, 42).analysis_data["degraded"] is True
        assert session.get(AnalysisHistory, history_id).degraded is True


def test_comparison_is_upserted(store, database, make_user, make_photo):
    make_user(user_id=7)
    make_photo(7, photo_id=42)
    make_photo(7, photo_id=43)
    request = AnalysisRequest.compare(7, 42, 43)

    store.persist(request, _ok({"overallChange": 5, "summary": "첫 비교"}))
    store.persist(request, _ok({"overallChange": 9, "summary": "두 번째 비교"}))

    with database.session_scope() as session:
        comparisons = session.query(PhotoComparison).all()
        assert len(comparisons) == 1
        assert comparisons[0].analysis_data["overallChange"] == 9
        entries = session.query(AnalysisHistory).order_by(AnalysisHistory.id).all()
        assert [e.compare_photo_id for e in entries] == [43, 43]


def test_history_failure_does_not_fail_request(store, database, make_user, make_photo):
    make_user(user_id=7)
    make_photo(7, photo_id=42)
    AnalysisHistory.__table__.drop(database.engine)

    assert store.persist(AnalysisRequest.single(7, 42), _ok()) is None

    with database.session_scope() as session:
        assert session.get(Photo, 42).analysis_data == RESULT


def test_history_tracking_is_optional(store, database, make_user, make_photo):
    make_user(user_id=7)
    make_photo(7, photo_id=42)

    assert store.persist(AnalysisRequest.single(7, 42), _ok(), track_history=False) is None
    with database.session_scope() as session:
        assert session.query(AnalysisHistory).count() == 0


def test_comparison_write_requires_ownership_of_both_photos(store, database, make_user, make_photo):
    make_user(user_id=7)
    make_user(user_id=8)
    make_photo(7, photo_id=42)
    make_photo(8, photo_id=43)

    with pytest.raises(ResultPersistError):
        store.persist(AnalysisRequest.compare(7, 42, 43), _ok({"overallChange": 5, "summary": "비교"}))

    with database.session_scope() as session:
        assert session.query(PhotoComparison).count() == 0
        assert session.query(AnalysisHistory).count() == 0


def test_comparison_of_deleted_photos_is_not_stored(store, database, make_user):
    make_user(user_id=7)

    with pytest.raises(ResultPersistError):
        store.persist(AnalysisRequest.compare(7, 42, 43), _ok({"overallChange": 5, "summary": "비교"}))

    with database.session_scope() as session:
        assert session.query(PhotoComparison).count() == 0


def test_concurrent_first_comparison_falls_back_to_update(store, database, make_user, make_photo, monkeypatch):
    make_user(user_id=7)
    make_photo(7, photo_id=42)
    make_photo(7, photo_id=43)
    request = AnalysisRequest.compare(7, 42, 43)
    store.persist(request, _ok({"overallChange": 5, "summary": "먼저 저장된 비교"}))

    # 다른 요청이 아직 저장하지 않은 것처럼 첫 조회만 비어 있게 만듭니다.
    find_comparison = ResultStore._find_comparison
    calls = []

    def stale_find(session, req):
        calls.append(req)
        return None if len(calls) == 1 else find_comparison(session, req)

    monkeypatch.setattr(store, "_find_comparison", stale_find)

    store.persist(request, _ok({"overallChange": 9, "summary": "나중 비교"}))

    assert len(calls) == 2
    with database.session_scope() as session:
        comparisons = session.query(PhotoComparison).all()
        assert len(comparisons) == 1
        assert comparisons[0].analysis_data["overallChange"] == 9
