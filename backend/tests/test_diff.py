"""평문 투영 기반 버전 비교(diff)와 변경 통계를 검증하는 테스트입니다."""

import pytest

from app.errors import ValidationError
from app.services import diff_service, version_service
from tests.conftest import auth_headers


def _rebuild(script, keep):
    return "".join(seg["text"] for seg in script if seg["kind"] in keep)


def test_identical_content_is_single_unchanged_segment():
    content = {"headline": "Launch", "body": ["First paragraph."]}
    script = diff_service.diff(content, content)
    assert [seg["kind"] for seg in script] == ["unchanged"]
    assert diff_service.stats(script) == {"additions": 0, "deletions": 0, "total_changes": 0}


def test_appended_word_is_reported_as_addition():
    script = diff_service.diff({"html": "Hello"}, {"html": "Hello world"})
    assert script == [
        {"kind": "unchanged", "text": "Hello"},
        {"kind": "added", "text": " world"},
    ]
    assert diff_service.stats(script) == {"additions": 6, "deletions": 0, "total_changes": 6}


def test_script_reconstructs_both_sides():
    old = {"headline": "Q3 results", "body": ["Revenue grew 10% year over year.", "Outlook is stable."]}
    new = {"headline": "Q3 results beat forecast", "body": ["Revenue grew 12% year over year.", "Outlook improved."]}
    old_text = "\n\n".join(["Q3 results", "Revenue grew 10% year over year.", "Outlook is stable."])
    new_text = "\n\n".join(["Q3 results beat forecast", "Revenue grew 12% year over year.", "Outlook improved."])

    for granularity in diff_service.GRANULARITIES:
        script = diff_service.diff(old, new, granularity)
        assert _rebuild(script, {"unchanged", "removed"}) == old_text
        assert _rebuild(script, {"unchanged", "added"}) == new_text


def test_adjacent_segments_never_share_kind():
    script = diff_service.diff_text("a b c d e", "a x c y e")
    kinds = [seg["kind"] for seg in script]
    assert all(a != b for a, b in zip(kinds, kinds[1:]))
    assert all(seg["text"] for seg in script)


def test_empty_old_side_is_all_added():
    script = diff_service.diff({}, {"lead": "Brand new"})
    assert script == [{"kind": "added", "text": "Brand new"}]


def test_both_sides_empty_gives_empty_script():
    assert diff_service.diff({}, {}) == []


def test_character_granularity_splits_inside_words():
    script = diff_service.diff_text("colour", "color", "character")
    assert {"kind": "removed", "text": "u"} in script
    assert diff_service.stats(script)["deletions"] == 1


def test_word_granularity_keeps_whole_tokens():
    script = diff_service.diff_text("colour scheme", "color scheme", "word")
    assert {"kind": "removed", "text": "colour"} in script
    assert {"kind": "added", "text": "color"} in script


def test_unknown_granularity_is_rejected():
    with pytest.raises(ValidationError):
        diff_service.diff_text("a", "b", "sentence")


def test_diff_is_deterministic():
    old = {"body": ["The quick brown fox jumps over the lazy dog."] * 3}
    new = {"body": ["The quick red fox leaps over the lazy cat."] * 3}
    assert diff_service.diff(old, new) == diff_service.diff(old, new)


def test_compare_versions_uses_stored_snapshots(db, seed_users, document):
    user_id = seed_users["editor"].user_id
    v1 = version_service.create_version(db, document_id=document.document_id, content={"html": "Hello"}, created_by=user_id)
    v2 = version_service.create_version(
        db, document_id=document.document_id, content={"html": "Hello world"}, created_by=user_id
    )
    result = diff_service.compare_versions(
        db, document_id=document.document_id, from_version_id=v1.version_id, to_version_id=v2.version_id
    )
    assert result["granularity"] == "word"
    assert result["from_version"]["version_number"] == 1
    assert result["to_version"]["version_number"] == 2
    assert result["stats"]["additions"] == 6


def test_compare_endpoint(client, seed_users, document):
    headers = auth_headers(client, "editor001")
    url = f"/api/documents/{document.document_id}/versions"
    v1 = client.post(url, json={"content": {"plain_text": "Hello"}}, headers=headers).json()
    v2 = client.post(url, json={"content": {"plain_text": "Hello world"}}, headers=headers).json()

    resp = client.get(
        f"/api/documents/{document.document_id}/compare",
        params={"from_version_id": v1["version_id"], "to_version_id": v2["version_id"]},
        headers=auth_headers(client, "viewer001"),
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["segments"] == [
        {"kind": "unchanged", "text": "Hello"},
        {"kind": "added", "text": " world"},
    ]
    assert body["stats"]["total_changes"] == 6

    bad = client.get(
        f"/api/documents/{document.document_id}/compare",
        params={"from_version_id": v1["version_id"], "to_version_id": v2["version_id"], "granularity": "line"},
        headers=headers,
    )
    assert bad.status_code == 422


def test_compare_rejects_version_of_other_document(client, seed_users, document):
    headers = auth_headers(client, "editor001")
    other = client.post("/api/documents", json={"title": "다른 문서", "content": {"lead": "x"}}, headers=headers).json()
    mine = client.post(
        f"/api/documents/{document.document_id}/versions", json={"content": {"lead": "y"}}, headers=headers
    ).json()

    resp = client.get(
        f"/api/documents/{document.document_id}/compare",
        params={"from_version_id": mine["version_id"], "to_version_id": other["current_version_id"]},
        headers=headers,
    )
    assert resp.status_code == 404
