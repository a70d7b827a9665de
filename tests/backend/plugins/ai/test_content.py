import pytest

from plugins.ai.generation.content import (
    build_prompt,
    clean_content,
    sanitize_textarea,
    strip_tags,
)

HTML_SAMPLES = [
    "<p>Hello <b>World</b></p>",
    "  <div class='x'>Caf&eacute; &amp; cr&egrave;me</div>\n",
    "<script>alert('x')</script><p>Body</p><style>p { color: red; }</style>",
    "&lt;b&gt;escaped markup&lt;/b&gt; stays text-free",
    "&amp;lt;i&amp;gt;double encoded&amp;lt;/i&amp;gt;",
    "1 < 2 and 3 > 2",
    "<!-- comment --><p>after comment</p>",
    "&nbsp;padded&nbsp;",
    "",
    "plain text",
]


def test_clean_content_strips_tags_and_trims():
    assert clean_content("<p>Hello <b>World</b></p>") == "Hello World"


def test_clean_content_decodes_entities():
    assert clean_content("<p>Caf&eacute; &amp; cr&egrave;me &quot;fra&icirc;che&quot;</p>") == (
        'Café & crème "fraîche"'
    )


def test_clean_content_drops_script_and_style_bodies():
    html = "<script>var a = 1;</script><p>Body</p><STYLE>p {}</STYLE>"
    assert clean_content(html) == "Body"


def test_clean_content_keeps_bare_angle_brackets():
    assert clean_content("1 < 2 and 3 > 2") == "1 < 2 and 3 > 2"


def test_clean_content_removes_entity_encoded_markup():
    assert clean_content("&lt;em&gt;Hi&lt;/em&gt;") == "Hi"


@pytest.mark.parametrize("sample", HTML_SAMPLES)
def test_clean_content_is_idempotent(sample):
    once = clean_content(sample)
    assert clean_content(once) == once


@pytest.mark.parametrize(
    "template, content",
    [("Summarize:", "Hello World"), ("", ""), ("  spaced ", " text "), ("Use {braces}", "x")],
)
def test_build_prompt_joins_with_single_space(template, content):
    template_before, content_before = template, content

    assert build_prompt(template, content) == template + " " + content
    assert (template, content) == (template_before, content_before)


def test_strip_tags_leaves_entities_alone():
    assert strip_tags("<b>a &amp; b</b>") == "a &amp; b"


def test_sanitize_textarea_keeps_line_breaks():
    assert sanitize_textarea("  <b>First</b>\n\nSecond line  ") == "First\n\nSecond line"
