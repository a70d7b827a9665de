from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as redis

from plugins.core.settings.models import (
    DEFAULT_EXCERPT_WORD_LENGTH,
    DEFAULT_SUMMARY_WORD_LENGTH,
    DisplayStyle,
    SettingsUpdate,
    SummariesSettings,
    render_prompt,
)
from plugins.core.settings.service import SettingsService, mask_api_key
from utils.providers import Provider


@pytest.fixture
def mock_repo():
    repo = MagicMock()
    repo.load = AsyncMock(return_value=None)
    repo.save = AsyncMock()
    return repo


@pytest.fixture
def mock_redis():
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock()
    client.delete = AsyncMock()
    return client


@pytest.fixture
def service(mock_repo, mock_redis):
    return SettingsService(repository=mock_repo, redis_client=mock_redis)


class TestSummariesSettings:
    def test_defaults(self):
        current = SummariesSettings()

        assert current.ai_model == "none"
        assert current.excerpt_word_length == DEFAULT_EXCERPT_WORD_LENGTH
        assert current.summary_word_length == DEFAULT_SUMMARY_WORD_LENGTH
        assert current.style is DisplayStyle.BLOCK
        assert current.post_types == ["post"]

    def test_invalid_values_fall_back(self):
        current = SummariesSettings(
            ai_model="gpt-unknown",
            excerpt_word_length="abc",
            summary_word_length=0,
            style="carousel",
        )

        assert current.ai_model == "none"
        assert current.excerpt_word_length == DEFAULT_EXCERPT_WORD_LENGTH
        assert current.summary_word_length == DEFAULT_SUMMARY_WORD_LENGTH
        assert current.style is DisplayStyle.BLOCK

    def test_negative_word_length_uses_absolute_value(self):
        assert SummariesSettings(excerpt_word_length=-30).excerpt_word_length == 30

    def test_keys_are_stripped_and_post_types_deduplicated(self):
        current = SummariesSettings(openai_api_key="  sk-1 \n", post_types=["post", " page", "post", ""])

        assert current.openai_api_key == "sk-1"
        assert current.post_types == ["post", "page"]

    def test_prompts_fill_placeholders(self):
        current = SummariesSettings(
            excerpt_prompt_template="In {word_length} words. {prose_style} {other}",
            excerpt_word_length=40,
            prose_style="Be brief.",
        )

        assert current.excerpt_prompt == "In 40 words. Be brief. {other}"
        assert str(DEFAULT_SUMMARY_WORD_LENGTH) in current.summary_prompt

    def test_render_prompt_strips(self):
        assert render_prompt("  {word_length} ", 3, "") == "3"

    def test_credentials_map_every_provider(self):
        creds = SummariesSettings(google_api_key="g-key").credentials()

        assert set(creds) == {
            Provider.HUGGINGFACE,
            Provider.OPENAI,
            Provider.ANTHROPIC,
            Provider.GOOGLE,
        }
        assert creds[Provider.GOOGLE] == "g-key"

    def test_titles_for_style(self):
        current = SummariesSettings(card_excerpt_title="Short", card_summary_title="Long")
        assert current.titles_for(DisplayStyle.CARD) == ("Short", "Long")


def test_mask_api_key():
    assert mask_api_key("") == ""
    assert mask_api_key("abcd") == "****"
    assert mask_api_key("sk-abcdefghijk") == "sk-*******hijk"


@pytest.mark.asyncio
async def test_get_settings_cache_hit(service, mock_repo, mock_redis):
    cached = SummariesSettings(ai_model="openai-gpt-5-mini")
    mock_redis.get.return_value = cached.model_dump_json()

    result = await service.get_settings()

    assert result == cached
    mock_repo.load.assert_not_awaited()
    mock_redis.set.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_settings_cache_miss_loads_and_caches(service, mock_repo, mock_redis):
    mock_repo.load.return_value = {"ai_model": "google-gemini-2.5-flash", "show_summary": False}

    result = await service.get_settings()

    assert result.ai_model == "google-gemini-2.5-flash"
    assert result.show_summary is False
    mock_repo.load.assert_awaited_once()
    mock_redis.set.assert_awaited_once()
    args, kwargs = mock_redis.set.call_args
    assert args[0] == SettingsService.CACHE_KEY
    assert kwargs["ex"] == SettingsService.CACHE_TTL_SECONDS


@pytest.mark.asyncio
async def test_get_settings_empty_store_returns_defaults(service):
    assert await service.get_settings() == SummariesSettings()


@pytest.mark.asyncio
async def test_get_settings_survives_redis_errors(service, mock_repo, mock_redis):
    mock_redis.get.side_effect = redis.ConnectionError("down")
    mock_redis.set.side_effect = redis.ConnectionError("down")
    mock_repo.load.return_value = {"ai_model": "openai-gpt-5-nano"}

    result = await service.get_settings()

    assert result.ai_model == "openai-gpt-5-nano"


@pytest.mark.asyncio
async def test_get_settings_discards_corrupt_cache(service, mock_repo, mock_redis):
    mock_redis.get.return_value = "{not json"

    result = await service.get_settings()

    assert result == SummariesSettings()
    mock_repo.load.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_settings_merges_saves_and_invalidates(service, mock_repo, mock_redis):
    mock_repo.load.return_value = {"openai_api_key": "sk-existing", "show_excerpt": False}

    result = await service.update_settings(
        SettingsUpdate(ai_model="openai-gpt-5-mini", excerpt_word_length=-20, style="tab")
    )

    assert result.ai_model == "openai-gpt-5-mini"
    assert result.excerpt_word_length == 20
    assert result.style is DisplayStyle.TAB
    assert result.show_excerpt is False
    assert result.openai_api_key == "sk-existing"

    saved = mock_repo.save.call_args.args[0]
    assert saved["style"] == "tab"
    assert saved["openai_api_key"] == "sk-existing"
    mock_redis.delete.assert_awaited_once_with(SettingsService.CACHE_KEY)


@pytest.mark.asyncio
async def test_update_settings_ignores_echoed_masked_key(service, mock_repo):
    mock_repo.load.return_value = {"openai_api_key": "sk-abcdefghijk"}

    result = await service.update_settings(
        SettingsUpdate(openai_api_key=mask_api_key("sk-abcdefghijk"), anthropic_api_key=" ak-new ")
    )

    assert result.openai_api_key == "sk-abcdefghijk"
    assert result.anthropic_api_key == "ak-new"


@pytest.mark.asyncio
async def test_update_settings_invalid_model_falls_back(service):
    result = await service.update_settings(SettingsUpdate(ai_model="made-up"))
    assert result.ai_model == "none"


@pytest.mark.asyncio
async def test_update_settings_tolerates_redis_delete_failure(service, mock_repo, mock_redis):
    mock_redis.delete.side_effect = redis.ConnectionError("down")

    result = await service.update_settings(SettingsUpdate(show_summary=False))

    assert result.show_summary is False
    mock_repo.save.assert_awaited_once()


def test_to_response_masks_keys():
    current = SummariesSettings(
        openai_api_key="sk-abcdefghijk", ai_model="openai-gpt-5-mini", excerpt_word_length=10
    )

    response = SettingsService.to_response(current)

    assert response.settings.openai_api_key == "sk-*******hijk"
    assert response.settings.google_api_key == ""
    assert response.configured_providers == [Provider.OPENAI]
    assert response.model_label == "ChatGPT 5 Mini (gpt-5-mini)"
    assert "10 words" in response.excerpt_prompt
    assert current.openai_api_key == "sk-abcdefghijk"
