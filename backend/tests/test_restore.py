"""과거 버전 복원이 이력을 보존하며 새 버전을 만드는지 검증하는 테스트입니다."""

import pytest

from app.errors import NotFoundError
from app.models.document import Document
from app.services import restore_service, version_service
from tests.conftest import auth_headers


@pytest.fixture
def history(db, seed_users, document):
    user_id = seed_users["editor"].user_id
    return [
        version_service.create_version(
            db,
            document_id=document.document_id,
            content={"headline": f"Headline {i}", "body": [f"Body {i}"]},
            created_by=user_id,
            quality_score=60 + i,
        )
        for i in range(1, 6)
    ]


def test_restore_appends_copy_of_target(db, seed_users, document, history):
    target = history[1]
    restored = restore_service.restore_version(
        db,
        document_id=document.document_id,
        version_id=target.version_id,
        user_id=seed_users["editor2"].user_id,
    )
    assert restored.version_number == 6
    assert restored.change_type == "restore"
    assert restored.restored_from_version_id == target.version_id
    assert restored.created_by == seed_users["editor2"].user_id
    assert restored.quality_score == target.quality_score
    assert version_service.parse_content(restored) == version_service.parse_content(target)
    assert restored.is_milestone is False

    db.expire_all()
    doc = db.query(Document).filter(Document.document_id == document.document_id).first()
    assert doc.current_version_id == restored.version_id


def test_restore_leaves_existing_history_untouched(db, seed_users, document, history):
    before = [
        (
            v.version_id,
            v.version_number,
            version_service.parse_content(v),
            v.created_at,
            v.created_by,
            v.word_count,
            v.quality_score,
        )
        for v in version_service.list_versions(db, document_id=document.document_id)
    ]
    restore_service.restore_version(
        db, document_id=document.document_id, version_id=history[0].version_id, user_id=seed_users["editor"].user_id
    )
    db.expire_all()
    after = [
        (
            v.version_id,
            v.version_number,
            version_service.parse_content(v),
            v.created_at,
            v.created_by,
            v.word_count,
            v.quality_score,
        )
        for v in version_service.list_versions(db, document_id=document.document_id)
    ]
    assert after[1:] == before
    assert after[0][1] == 6


def test_restoring_current_version_creates_duplicate(db, seed_users, document, history):
    current = history[-1]
    restored = restore_service.restore_version(
        db, document_id=document.document_id, version_id=current.version_id, user_id=seed_users["editor"].user_id
    )
    assert restored.version_number == 6
    assert version_service.parse_content(restored) == version_service.parse_content(current)


def test_restore_version_of_other_document_fails(db, seed_users, document, history):
    other = Document(title="다른 문서", created_by=seed_users["editor"].user_id)
    db.add(other)
    db.commit()
    db.refresh(other)

    with pytest.raises(NotFoundError):
        restore_service.restore_version(
            db, document_id=other.document_id, version_id=history[0].version_id, user_id=seed_users["editor"].user_id
        )
    assert version_service.list_versions(db, document_id=other.document_id) == []


def test_restore_api_respects_lock(client, seed_users, document):
    holder = auth_headers(client, "editor001")
    other = auth_headers(client, "editor002")
    url = f"/api/documents/{document.document_id}"
    v1 = client.post(f"{url}/versions", json={"content": {"lead": "first"}}, headers=holder).json()
    client.post(f"{url}/versions", json={"content": {"lead": "second"}}, headers=holder)

    assert client.post(f"{url}/lock", headers=holder).status_code == 200
    blocked = client.post(f"{url}/restore/{v1['version_id']}", headers=other)
    assert blocked.status_code == 409

    restored = client.post(f"{url}/restore/{v1['version_id']}", headers=holder)
    assert restored.status_code == 200, restored.text
    body = restored.json()
    assert body["version_number"] == 3
    assert body["change_type"] == "restore"
    assert body["restored_from_version_id"] == v1["version_id"]
    assert body["content"] == {"lead": "first"}

    missing = client.post(f"{url}/restore/99999", headers=holder)
    assert missing.status_code == 404
