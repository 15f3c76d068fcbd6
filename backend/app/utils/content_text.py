"""구조화 콘텐츠 스냅샷을 비교/집계용 평문으로 투영하는 유틸리티."""

import html
import re
from typing import Any, Dict, List

_TAG_RE = re.compile(r"<[^>]*>")
_CJK_RE = re.compile(r"[\u3040-\u309f\u30a0-\u30ff\u4e00-\u9faf]")

# 투영 순서. 순서가 바뀌면 과거 버전 간 diff 결과도 달라진다.
PROJECTION_FIELDS = (
    "headline",
    "subheadline",
    "dateline",
    "lead",
    "body",
    "quotes",
    "boilerplate",
    "isi",
    "contact",
    "title",
    "introduction",
    "sections",
    "conclusion",
    "cta",
    "plain_text",
    "html",
)
PART_SEPARATOR = "\n\n"


def strip_html(value: str) -> str:
    without_tag = _TAG_RE.sub("", value or "")
    return html.unescape(without_tag.replace("&nbsp;", " ")).replace("\xa0", " ")


def _quote_text(quote: Any) -> str:
    if isinstance(quote, dict):
        text = str(quote.get("text") or "")
        attribution = str(quote.get("attribution") or "")
    else:
        text, attribution = str(quote or ""), ""
    if not text:
        return ""
    return f'"{text}" — {attribution}' if attribution else f'"{text}"'


def _field_parts(field: str, value: Any) -> List[str]:
    if value is None:
        return []
    if field == "body":
        return [str(p) for p in value] if isinstance(value, list) else [str(value)]
    if field == "quotes":
        return [_quote_text(q) for q in value] if isinstance(value, list) else []
    if field == "sections":
        parts = []
        for section in value if isinstance(value, list) else []:
            if isinstance(section, dict):
                parts.append(str(section.get("heading") or ""))
                parts.append(str(section.get("content") or ""))
        return parts
    if field == "html":
        return [strip_html(str(value))]
    return [str(value)]


def to_plain_text(content: Dict[str, Any]) -> str:
    """스냅샷을 고정된 필드 순서로 이어 붙인 평문으로 변환한다."""
    if not content:
        return ""
    parts: List[str] = []
    for field in PROJECTION_FIELDS:
        parts.extend(p for p in _field_parts(field, content.get(field)) if p)
    return PART_SEPARATOR.join(parts)


def count_words(text: str) -> int:
    # 일본어/한자는 2글자를 1단어로, 나머지는 공백 기준 단어 수로 센다.
    cjk_chars = _CJK_RE.findall(text or "")
    rest = _CJK_RE.sub("", text or "")
    return len(cjk_chars) // 2 + len(rest.split())
