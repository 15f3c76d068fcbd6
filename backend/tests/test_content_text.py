from app.utils.content_text import count_words, strip_html, to_plain_text


def test_projection_follows_fixed_field_order():
    content = {
        "html": "<p>Tail</p>",
        "body": ["First.", "Second."],
        "headline": "Head",
        "quotes": [{"text": "Great day", "attribution": "CEO"}, {"text": "Unattributed"}],
        "lead": "Lead",
        "sections": [{"heading": "Why", "content": "Because"}],
        "unknown_block": "ignored",
    }
    assert to_plain_text(content) == "\n\n".join(
        [
            "Head",
            "Lead",
            "First.",
            "Second.",
            '"Great day" — CEO',
            '"Unattributed"',
            "Why",
            "Because",
            "Tail",
        ]
    )


def test_empty_fields_are_skipped():
    assert to_plain_text({"headline": "", "lead": None, "body": [], "cta": "Buy"}) == "Buy"
    assert to_plain_text({}) == ""


def test_strip_html_removes_tags_and_entities():
    assert strip_html("<h1>R&amp;D</h1>&nbsp;<b>update</b>") == "R&D update"


def test_count_words_mixed_scripts():
    assert count_words("Hello brave new world") == 4
    # 한자/가나는 두 글자를 한 단어로 센다.
    assert count_words("日本語の文章") == 3
    assert count_words("Tokyo 東京") == 2
    assert count_words("") == 0
