"""두 버전 스냅샷의 평문 투영 사이 편집 스크립트(diff)를 계산하는 서비스입니다."""

import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from diff_match_patch import diff_match_patch
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import ValidationError
from app.services import version_service
from app.utils.content_text import to_plain_text

GRANULARITIES = ("word", "character")

UNCHANGED = "unchanged"
ADDED = "added"
REMOVED = "removed"
_KIND_BY_OP = {
    diff_match_patch.DIFF_EQUAL: UNCHANGED,
    diff_match_patch.DIFF_INSERT: ADDED,
    diff_match_patch.DIFF_DELETE: REMOVED,
}

# 단어, 공백 덩어리, 그 외 문자 하나씩을 토큰으로 본다.
_WORD_TOKEN_RE = re.compile(r"\w+|\s+|[^\w\s]")
_MAX_CODEPOINT = 0x10FFFF


def _matcher() -> diff_match_patch:
    dmp = diff_match_patch()
    # 시간 제한이 있으면 입력이 같아도 결과가 달라질 수 있다.
    dmp.Diff_Timeout = 0
    return dmp


def tokenize(text: str) -> List[str]:
    return _WORD_TOKEN_RE.findall(text or "")


def _encode_tokens(old_tokens: Sequence[str], new_tokens: Sequence[str]) -> Tuple[str, str, List[str]]:
    # 토큰마다 문자 하나를 배정해 문자 단위 Myers 알고리즘을 단어 단위로 돌린다.
    token_to_char: Dict[str, str] = {}
    char_to_token: List[str] = [""]

    def encode(tokens: Sequence[str]) -> str:
        chars = []
        for token in tokens:
            if token not in token_to_char:
                if len(char_to_token) > _MAX_CODEPOINT:
                    raise ValidationError("비교할 텍스트가 너무 큽니다.")
                token_to_char[token] = chr(len(char_to_token))
                char_to_token.append(token)
            chars.append(token_to_char[token])
        return "".join(chars)

    return encode(old_tokens), encode(new_tokens), char_to_token


def diff_text(old_text: str, new_text: str, granularity: str = "word") -> List[Dict[str, str]]:
    if granularity not in GRANULARITIES:
        raise ValidationError(f"지원하지 않는 비교 단위입니다: {granularity}")
    old_text = old_text or ""
    new_text = new_text or ""
    dmp = _matcher()

    if granularity == "character":
        diffs = dmp.diff_main(old_text, new_text, False)
    else:
        old_chars, new_chars, char_to_token = _encode_tokens(tokenize(old_text), tokenize(new_text))
        diffs = [
            (op, "".join(char_to_token[ord(c)] for c in chars))
            for op, chars in dmp.diff_main(old_chars, new_chars, False)
        ]

    script: List[Dict[str, str]] = []
    for op, text in diffs:
        if not text:
            continue
        kind = _KIND_BY_OP[op]
        if script and script[-1]["kind"] == kind:
            script[-1]["text"] += text
        else:
            script.append({"kind": kind, "text": text})
    return script


def diff(
    old_content: Dict[str, Any],
    new_content: Dict[str, Any],
    granularity: str = "word",
) -> List[Dict[str, str]]:
    return diff_text(to_plain_text(old_content), to_plain_text(new_content), granularity)


def stats(script: Sequence[Dict[str, str]]) -> Dict[str, int]:
    additions = sum(len(seg["text"]) for seg in script if seg["kind"] == ADDED)
    deletions = sum(len(seg["text"]) for seg in script if seg["kind"] == REMOVED)
    return {"additions": additions, "deletions": deletions, "total_changes": additions + deletions}


def compare_versions(
    db: Session,
    *,
    document_id: int,
    from_version_id: int,
    to_version_id: int,
    granularity: Optional[str] = None,
) -> Dict[str, Any]:
    granularity = granularity or settings.DIFF_DEFAULT_GRANULARITY
    old = version_service.get_version(db, version_id=from_version_id, document_id=document_id)
    new = version_service.get_version(db, version_id=to_version_id, document_id=document_id)
    script = diff(version_service.parse_content(old), version_service.parse_content(new), granularity)
    return {
        "granularity": granularity,
        "from_version": version_service.to_response(old),
        "to_version": version_service.to_response(new),
        "segments": script,
        "stats": stats(script),
    }
