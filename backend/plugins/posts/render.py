"""HTML for the excerpt/summary box shown above post content."""

import re
from html import escape

from plugins.core.settings.models import DisplayStyle, SummariesSettings

_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")

DEFAULT_TAB_EXCERPT_TITLE = SummariesSettings.model_fields["tab_excerpt_title"].default
DEFAULT_TAB_SUMMARY_TITLE = SummariesSettings.model_fields["tab_summary_title"].default


def autop(text: str) -> str:
    """Escapes `text` and wraps it in paragraphs: blank lines split, single newlines become <br />."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    paragraphs = []
    for block in _PARAGRAPH_BREAK_RE.split(normalized):
        block = block.strip()
        if block:
            body = "<br />\n".join(escape(line) for line in block.split("\n"))
            paragraphs.append(f"<p>{body}</p>")
    return "\n".join(paragraphs)


def render_summary_html(
    settings: SummariesSettings, excerpt: str | None, summary: str | None
) -> str:
    """
    Builds the summary box for the configured style, or "" when there is
    nothing to show.

    The tab style adds a tab bar; when both texts are shown the excerpt tab is
    active and the summary panel starts hidden.
    """
    show_excerpt = settings.show_excerpt and bool(excerpt)
    show_summary = settings.show_summary and bool(summary)
    if not show_excerpt and not show_summary:
        return ""

    style = settings.style.value
    excerpt_title, summary_title = settings.titles_for(settings.style)
    has_tabs = settings.style is DisplayStyle.TAB
    summary_hidden = False

    lines = [f'<div class="asc-ais-{style}-wrapper">']

    if has_tabs:
        lines.append('\t<div class="asc-ais-tab-bar">')
        if show_excerpt:
            lines.append(
                '\t\t<div class="asc-ais-tab-item asc-ais-tab-item-active" data-tab="excerpt">'
                f"{escape(excerpt_title or DEFAULT_TAB_EXCERPT_TITLE)}</div>"
            )
        if show_summary:
            summary_hidden = show_excerpt
            css = "asc-ais-tab-item" if show_excerpt else "asc-ais-tab-item asc-ais-tab-item-active"
            lines.append(
                f'\t\t<div class="{css}" data-tab="summary">'
                f"{escape(summary_title or DEFAULT_TAB_SUMMARY_TITLE)}</div>"
            )
        lines.append("\t</div>")

    lines.append(f'\t<div class="asc-ais-{style}">')

    if show_excerpt:
        lines.append(f'\t\t<div class="asc-ais-{style}-excerpt-wrapper">')
        if excerpt_title and not has_tabs:
            lines.append(
                f'\t\t\t<div class="asc-ais-{style}-excerpt-title">{escape(excerpt_title)}</div>'
            )
        lines.append(f'\t\t\t<div class="asc-ais-{style}-excerpt">{autop(excerpt)}</div>')
        lines.append("\t\t</div>")

    if show_summary:
        hidden = ' style="display: none;"' if summary_hidden else ""
        lines.append(f'\t\t<div class="asc-ais-{style}-summary-wrapper"{hidden}>')
        if summary_title and not has_tabs:
            lines.append(
                f'\t\t\t<div class="asc-ais-{style}-summary-title">{escape(summary_title)}</div>'
            )
        lines.append(f'\t\t\t<div class="asc-ais-{style}-summary">{autop(summary)}</div>')
        lines.append("\t\t</div>")

    lines.append("\t</div>")
    lines.append("</div>")
    return "\n".join(lines)


def prepend_summary(
    settings: SummariesSettings,
    post_type: str,
    content: str,
    excerpt: str | None,
    summary: str | None,
) -> str:
    """Post content with the summary box in front, for post types that have it enabled."""
    if post_type not in settings.post_types:
        return content
    box = render_summary_html(settings, excerpt, summary)
    if not box:
        return content
    return f"{box}\n\n{content}"
