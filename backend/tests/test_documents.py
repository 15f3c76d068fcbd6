from app.models.content_version import ContentVersion
from tests.conftest import auth_headers


def test_create_document_without_content_has_no_versions(client, seed_users):
    resp = client.post("/api/documents", json={"title": "빈 문서"}, headers=auth_headers(client, "editor001"))
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["current_version_id"] is None
    assert body["last_version_number"] == 0


def test_create_document_with_content_creates_v1(client, seed_users):
    headers = auth_headers(client, "editor001")
    resp = client.post(
        "/api/documents",
        json={"title": "보도자료", "content": {"headline": "Launch", "body": ["Today we ship."]}},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    doc = resp.json()
    assert doc["last_version_number"] == 1

    versions = client.get(f"/api/documents/{doc['document_id']}/versions", headers=headers).json()
    assert len(versions) == 1
    assert versions[0]["change_type"] == "create"
    assert versions[0]["version_id"] == doc["current_version_id"]
    assert versions[0]["word_count"] == 4


def test_invalid_document_payloads(client, seed_users):
    headers = auth_headers(client, "editor001")
    assert client.post("/api/documents", json={"title": ""}, headers=headers).status_code == 422
    bad_body = client.post("/api/documents", json={"title": "x", "content": {"body": "not a list"}}, headers=headers)
    assert bad_body.status_code == 422


def test_viewer_can_read_but_not_create(client, seed_users, document):
    viewer = auth_headers(client, "viewer001")
    assert client.post("/api/documents", json={"title": "x"}, headers=viewer).status_code == 403
    listed = client.get("/api/documents", headers=viewer)
    assert [d["document_id"] for d in listed.json()] == [document.document_id]


def test_delete_requires_creator_or_admin(client, db, seed_users, document):
    headers = auth_headers(client, "editor001")
    client.post(f"/api/documents/{document.document_id}/versions", json={"content": {"lead": "x"}}, headers=headers)

    denied = client.delete(f"/api/documents/{document.document_id}", headers=auth_headers(client, "editor002"))
    assert denied.status_code == 403

    removed = client.delete(f"/api/documents/{document.document_id}", headers=auth_headers(client, "admin001"))
    assert removed.status_code == 200
    assert client.get(f"/api/documents/{document.document_id}", headers=headers).status_code == 404
    assert db.query(ContentVersion).filter(ContentVersion.document_id == document.document_id).count() == 0
