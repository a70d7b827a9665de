from enum import Enum
from typing import Any, List

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from plugins.ai.models.registry import MANUAL_MODEL_ID, get_model
from utils.providers import Provider

DEFAULT_EXCERPT_WORD_LENGTH = 55
DEFAULT_SUMMARY_WORD_LENGTH = 200
DEFAULT_PROSE_STYLE = "Write the summary in the style of the article."

DEFAULT_EXCERPT_PROMPT_TEMPLATE = (
    "Write a short excerpt of no more than {word_length} words that invites "
    "readers into the following article. {prose_style} Reply with the excerpt "
    "only. Article:"
)
DEFAULT_SUMMARY_PROMPT_TEMPLATE = (
    "Summarize the following article in no more than {word_length} words. "
    "{prose_style} Reply with the summary only. Article:"
)


class DisplayStyle(str, Enum):
    BLOCK = "block"
    WRITER = "writer"
    CARD = "card"
    TAB = "tab"


def render_prompt(template: str, word_length: int, prose_style: str) -> str:
    """Fills the {word_length} and {prose_style} placeholders; other braces are kept."""
    return (
        template.replace("{word_length}", str(word_length))
        .replace("{prose_style}", prose_style)
        .strip()
    )


class SummariesSettings(BaseModel):
    """
    The user-editable settings snapshot.

    Invalid values are not rejected; they fall back to their defaults the same
    way the settings form does, so a stored document always loads.
    """

    # Generation
    ai_model: str = Field(default=MANUAL_MODEL_ID, description="Registry id of the selected model")
    huggingface_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    google_api_key: str = ""
    sync_ai_excerpt_to_post_excerpt: bool = True
    excerpt_word_length: int = DEFAULT_EXCERPT_WORD_LENGTH
    summary_word_length: int = DEFAULT_SUMMARY_WORD_LENGTH
    prose_style: str = DEFAULT_PROSE_STYLE
    excerpt_prompt_template: str = DEFAULT_EXCERPT_PROMPT_TEMPLATE
    summary_prompt_template: str = DEFAULT_SUMMARY_PROMPT_TEMPLATE

    # Display
    post_types: List[str] = Field(default_factory=lambda: ["post"])
    show_excerpt: bool = True
    show_summary: bool = True
    style: DisplayStyle = DisplayStyle.BLOCK
    block_excerpt_title: str = ""
    block_summary_title: str = "Summary"
    writer_excerpt_title: str = ""
    writer_summary_title: str = ""
    card_excerpt_title: str = ""
    card_summary_title: str = "Summary"
    tab_excerpt_title: str = "Excerpt"
    tab_summary_title: str = "Summary"

    @field_validator("ai_model", mode="before")
    @classmethod
    def _registered_model(cls, value: Any) -> str:
        if isinstance(value, str) and get_model(value) is not None:
            return value
        return MANUAL_MODEL_ID

    @field_validator("excerpt_word_length", "summary_word_length", mode="before")
    @classmethod
    def _positive_length(cls, value: Any, info: ValidationInfo) -> int:
        default = cls.model_fields[info.field_name].default
        try:
            length = abs(int(value))
        except (TypeError, ValueError):
            return default
        return length if length >= 1 else default

    @field_validator("style", mode="before")
    @classmethod
    def _known_style(cls, value: Any) -> DisplayStyle:
        try:
            return DisplayStyle(value)
        except ValueError:
            return DisplayStyle.BLOCK

    @field_validator(
        "huggingface_api_key", "openai_api_key", "anthropic_api_key", "google_api_key"
    )
    @classmethod
    def _strip_key(cls, value: str) -> str:
        return value.strip()

    @field_validator("post_types")
    @classmethod
    def _unique_post_types(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(v.strip() for v in value if v.strip()))

    def credentials(self) -> dict[Provider, str]:
        return {
            Provider.HUGGINGFACE: self.huggingface_api_key,
            Provider.OPENAI: self.openai_api_key,
            Provider.ANTHROPIC: self.anthropic_api_key,
            Provider.GOOGLE: self.google_api_key,
        }

    @property
    def excerpt_prompt(self) -> str:
        return render_prompt(
            self.excerpt_prompt_template, self.excerpt_word_length, self.prose_style
        )

    @property
    def summary_prompt(self) -> str:
        return render_prompt(
            self.summary_prompt_template, self.summary_word_length, self.prose_style
        )

    def titles_for(self, style: DisplayStyle) -> tuple[str, str]:
        """(excerpt title, summary title) configured for `style`."""
        return (
            getattr(self, f"{style.value}_excerpt_title"),
            getattr(self, f"{style.value}_summary_title"),
        )


API_KEY_FIELDS = (
    "huggingface_api_key",
    "openai_api_key",
    "anthropic_api_key",
    "google_api_key",
)


class SettingsUpdate(BaseModel):
    """Partial update; only the fields present in the request are changed."""

    ai_model: str | None = None
    huggingface_api_key: str | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    google_api_key: str | None = None
    sync_ai_excerpt_to_post_excerpt: bool | None = None
    excerpt_word_length: int | str | None = None
    summary_word_length: int | str | None = None
    prose_style: str | None = None
    excerpt_prompt_template: str | None = None
    summary_prompt_template: str | None = None
    post_types: List[str] | None = None
    show_excerpt: bool | None = None
    show_summary: bool | None = None
    style: str | None = None
    block_excerpt_title: str | None = None
    block_summary_title: str | None = None
    writer_excerpt_title: str | None = None
    writer_summary_title: str | None = None
    card_excerpt_title: str | None = None
    card_summary_title: str | None = None
    tab_excerpt_title: str | None = None
    tab_summary_title: str | None = None


class SettingsResponse(BaseModel):
    """Settings as shown to clients: API keys masked, plus derived values."""

    settings: SummariesSettings
    configured_providers: List[Provider]
    model_label: str
    excerpt_prompt: str
    summary_prompt: str
