# app/api/support/test_support_routes.py
import io

from app.models.support_inquiry import SupportInquiry

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body"

FORM = {
    "name": "홍길동",
    "email": "hong@example.com",
    "category": "analysis",
    "subject": "분석 결과 문의",
    "message": "점수가 예상과 다릅니다.",
}


def test_anonymous_inquiry(client, database):
    response = client.post('/api/support/inquiry', data=FORM, content_type="multipart/form-data")

    assert response.status_code == 201
    with database.session_scope() as session:
        inquiry = session.query(SupportInquiry).one()
        assert inquiry.user_id is None
        assert inquiry.category == "analysis"
        assert inquiry.photo_urls is None


def test_logged_in_inquiry_with_attachments(client, database, make_user, auth_headers, storage):
    user_id = make_user()
    data = {**FORM, "photos": [(io.BytesIO(JPEG_BYTES), "a.jpg", "image/jpeg"),
                               (io.BytesIO(JPEG_BYTES), "b.png", "image/png")]}

    response = client.post('/api/support/inquiry', data=data, headers=auth_headers(user_id),
                           content_type="multipart/form-data")

    assert response.status_code == 201
    assert all(path.startswith("support/") for path in storage.files)
    with database.session_scope() as session:
        inquiry = session.query(SupportInquiry).one()
        assert inquiry.user_id == user_id
        assert len(inquiry.photo_urls) == 2


def test_too_many_attachments(client, storage):
    data = {**FORM, "photos": [(io.BytesIO(JPEG_BYTES), f"{i}.jpg", "image/jpeg") for i in range(6)]}

    response = client.post('/api/support/inquiry', data=data, content_type="multipart/form-data")

    assert response.status_code == 400
    assert storage.files == {}


def test_inquiry_requires_fields(client):
    response = client.post('/api/support/inquiry', data={"name": "홍길동"}, content_type="multipart/form-data")

    assert response.status_code == 400
    assert {"email", "subject", "message"} <= set(response.get_json()["details"])


def test_failed_save_removes_uploaded_attachments(client, database, storage):
    SupportInquiry.__table__.drop(database.engine)
    data = {**FORM, "photos": [(io.BytesIO(JPEG_BYTES), "a.jpg", "image/jpeg"),
                               (io.BytesIO(JPEG_BYTES), "b.jpg", "image/jpeg")]}

    response = client.post('/api/support/inquiry', data=data, content_type="multipart/form-data")

    assert response.status_code == 500
    assert len(storage.deleted) == 2
    assert storage.files == {}
