import pytest

from conftest import ADMIN_PASSWORD
from schoolsite.models.content import SiteContent
from schoolsite.models.gallery import GalleryItem
from schoolsite.models.inquiry import AdmissionInquiry
from schoolsite.services import admin_auth, storage

DATA_URL = "/api/admin-data"


def _data(client, action, token, data=None):
    return client.post(DATA_URL, json={"action": action, "sessionToken": token, "data": data})


@pytest.fixture
def inquiry(db):
    inquiry = AdmissionInquiry(
        id="x",
        student_name="Asha Rao",
        parent_name="Ravi Rao",
        email="ravi@example.com",
        phone="9876543210",
        class_applying="Class 3",
    )
    db.add(inquiry)
    db.commit()
    return inquiry


def _fresh(session_factory, model, **filters):
    db = session_factory()
    try:
        return db.query(model).filter_by(**filters).first()
    finally:
        db.close()


def test_missing_token(client):
    response = client.post(DATA_URL, json={"action": "get-inquiries"})

    assert response.status_code == 401
    assert response.json() == {"error": "Authentication required"}


def test_unknown_token(client, initialized_admin):
    response = _data(client, "get-inquiries", "forged-token")

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired session"}


def test_gate_runs_before_action_lookup(client):
    response = _data(client, "no-such-action", "forged-token")

    assert response.status_code == 401


def test_gate_runs_before_data_validation(client, initialized_admin):
    response = client.post(DATA_URL, json={"action": "get-inquiries", "data": "x"})

    assert response.status_code == 401
    assert response.json() == {"error": "Authentication required"}

    response = client.post(DATA_URL, json={"action": ["get-inquiries"], "sessionToken": "forged-token", "data": 7})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired session"}


def test_non_string_token_is_an_invalid_session(client, initialized_admin):
    response = client.post(DATA_URL, json={"action": "get-inquiries", "sessionToken": 12345})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired session"}


def test_malformed_data_with_valid_session(client, session_token):
    response = _data(client, "delete-inquiry", session_token, "x")

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid data"}

    response = client.post(DATA_URL, json={"action": 42, "sessionToken": session_token})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid action"}


def test_unknown_action_with_valid_session(client, session_token):
    response = _data(client, "drop-table", session_token)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid action"}


def test_update_inquiry_status(client, session_factory, session_token, initialized_admin, inquiry):
    bad = _data(client, "update-inquiry-status", session_token, {"id": "x", "status": "banana"})
    assert bad.status_code == 400
    assert bad.json() == {"error": "Invalid status"}

    good = _data(client, "update-inquiry-status", session_token, {"id": "x", "status": "approved"})
    assert good.status_code == 200
    assert good.json() == {"success": True}

    stored = _fresh(session_factory, AdmissionInquiry, id="x")
    assert stored.status == "approved"
    assert stored.reviewed_by == initialized_admin.id
    assert stored.reviewed_at is not None


def test_update_inquiry_status_requires_fields(client, session_token):
    response = _data(client, "update-inquiry-status", session_token, {"id": "x"})

    assert response.status_code == 400
    assert response.json() == {"error": "Inquiry ID and status are required"}


def test_logged_out_token_is_rejected(client, db, session_token, inquiry):
    admin_auth.logout(db, session_token)

    response = _data(client, "update-inquiry-status", session_token, {"id": "x", "status": "approved"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired session"}


def test_get_and_delete_inquiries(client, session_factory, session_token, inquiry):
    listing = _data(client, "get-inquiries", session_token)
    assert listing.status_code == 200
    body = listing.json()
    assert body["success"] is True
    assert [row["id"] for row in body["data"]] == ["x"]
    assert body["data"][0]["status"] == "pending"

    assert _data(client, "delete-inquiry", session_token, {}).status_code == 400
    assert _data(client, "delete-inquiry", session_token, {"id": "x"}).json() == {"success": True}
    assert _fresh(session_factory, AdmissionInquiry, id="x") is None


def test_dashboard_stats(client, db, session_token, inquiry):
    db.add(GalleryItem(title="Sports day", image_url="https://cdn.example.org/a.jpg"))
    db.commit()

    response = _data(client, "get-dashboard-stats", session_token)

    assert response.json()["data"] == {
        "total_inquiries": 1,
        "pending_inquiries": 1,
        "approved_inquiries": 0,
        "rejected_inquiries": 0,
        "gallery_items": 1,
    }


def test_gallery_crud(client, session_factory, session_token, initialized_admin):
    missing = _data(client, "create-gallery-item", session_token, {"title": "No image"})
    assert missing.status_code == 400
    assert missing.json() == {"error": "Title and image URL are required"}

    created = _data(
        client,
        "create-gallery-item",
        session_token,
        {"title": "Annual day", "image_url": "https://cdn.example.org/b.jpg", "category": ""},
    )
    assert created.status_code == 200
    item_id = created.json()["id"]

    item = _fresh(session_factory, GalleryItem, id=item_id)
    assert item.is_active is True
    assert item.display_order == 0
    assert item.media_type == "image"
    assert item.category is None
    assert item.created_by == initialized_admin.id

    updated = _data(
        client,
        "update-gallery-item",
        session_token,
        {"id": item_id, "is_active": False, "display_order": 3, "created_by": "someone-else"},
    )
    assert updated.json() == {"success": True}
    item = _fresh(session_factory, GalleryItem, id=item_id)
    assert item.is_active is False
    assert item.display_order == 3
    assert item.title == "Annual day"
    assert item.created_by == initialized_admin.id

    assert _data(client, "update-gallery-item", session_token, {"title": "x"}).status_code == 400
    assert _data(client, "delete-gallery-item", session_token, {"id": item_id}).json() == {"success": True}
    assert _fresh(session_factory, GalleryItem, id=item_id) is None


def test_gallery_payload_with_wrong_types(client, session_token):
    response = _data(
        client,
        "create-gallery-item",
        session_token,
        {"title": "t", "image_url": "u", "display_order": "first"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid data"}


def test_update_site_content_changes_only_given_fields(client, db, session_factory, session_token, initialized_admin):
    db.add(SiteContent(section_key="hero", title="Old title", subtitle="Keep me"))
    db.commit()

    assert _data(client, "update-site-content", session_token, {"title": "x"}).json() == {
        "error": "Section key is required",
    }

    response = _data(
        client,
        "update-site-content",
        session_token,
        {"section_key": "hero", "title": "New title", "extra_data": {"stats": [{"value": "25+"}]}},
    )
    assert response.json() == {"success": True}

    section = _fresh(session_factory, SiteContent, section_key="hero")
    assert section.title == "New title"
    assert section.subtitle == "Keep me"
    assert section.extra_data == {"stats": [{"value": "25+"}]}
    assert section.updated_by == initialized_admin.id


def test_get_upload_url(client, session_token):
    response = _data(client, "get-upload-url", session_token, {"fileName": "Photo.JPG", "contentType": "image/jpeg"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["path"].endswith(".jpg")
    assert body["publicUrl"].endswith(f"/object/public/gallery-images/{body['path']}")
    assert body["token"] in body["signedUrl"]
    assert storage.verify_upload_token(body["token"], body["path"])["sub"] == body["path"]


def test_get_upload_url_validation(client, session_token):
    assert _data(client, "get-upload-url", session_token, {}).json() == {"error": "File name is required"}

    not_image = _data(client, "get-upload-url", session_token, {"fileName": "a.pdf", "contentType": "application/pdf"})
    assert not_image.status_code == 400
    assert not_image.json() == {"error": "Only image uploads are allowed"}


def test_expired_session_is_rejected(client, db, initialized_admin):
    from datetime import timedelta

    from schoolsite.database import utcnow
    from schoolsite.services import sessions

    _, token = sessions.create_session(db, initialized_admin.id, now=utcnow() - timedelta(hours=25))
    db.commit()

    response = _data(client, "get-inquiries", token)
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired session"}


def test_login_token_works_end_to_end(client, initialized_admin):
    login = client.post("/api/admin-auth", json={"action": "login", "username": "admin", "password": ADMIN_PASSWORD})
    token = login.json()["sessionToken"]

    assert _data(client, "get-inquiries", token).json() == {"success": True, "data": []}
