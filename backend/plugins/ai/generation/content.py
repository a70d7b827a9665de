"""Pure text helpers used before content is sent to a provider."""

import html
import re

_SCRIPT_STYLE_RE = re.compile(
    r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
# A tag opens with a letter, '/', '!' or '?', so "a < b" is left alone.
_TAG_RE = re.compile(r"<[A-Za-z/!?][^>]*>")


def strip_tags(text: str) -> str:
    """Removes markup tags, dropping script and style bodies entirely."""
    return _TAG_RE.sub("", _SCRIPT_STYLE_RE.sub("", text))


def clean_content(content: str) -> str:
    """
    Turns post markup into plain text: strip tags, decode entities, trim.

    Repeated until nothing changes, so entity-encoded markup such as
    ``&lt;b&gt;`` is removed as well and ``clean_content`` is idempotent.
    Every pass that changes the text shortens it, so the loop terminates.
    """
    previous = None
    cleaned = content
    while cleaned != previous:
        previous = cleaned
        cleaned = html.unescape(strip_tags(cleaned)).strip()
    return cleaned


def build_prompt(prompt_template: str, content: str) -> str:
    return f"{prompt_template} {content}"


def sanitize_textarea(text: str) -> str:
    """Cleans manually entered excerpt/summary text, keeping its line breaks."""
    return strip_tags(text).strip()
