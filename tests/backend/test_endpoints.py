import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from main import app
from plugins.ai.generation.service import GenerationService, get_generation_service
from plugins.core.settings.models import SummariesSettings
from plugins.core.settings.service import SettingsService, get_settings_service
from plugins.posts.models import PostDB
from plugins.posts.service import PostSummariesService, get_post_summaries_service
from utils.providers import Provider, build_adapters


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def settings_store():
    """A SettingsService over in-memory doubles of MongoDB and Redis."""
    repo = MagicMock()
    repo.load = AsyncMock(return_value={"ai_model": "openai-gpt-5-mini", "openai_api_key": "sk-abcdefghijk"})
    repo.save = AsyncMock()
    redis_client = MagicMock()
    redis_client.get = AsyncMock(return_value=None)
    redis_client.set = AsyncMock()
    redis_client.delete = AsyncMock()
    service = SettingsService(repo, redis_client)
    app.dependency_overrides[get_settings_service] = lambda: service
    return repo


def use_generation(transport, credentials=None):
    service = GenerationService(
        credentials=credentials if credentials is not None else {Provider.OPENAI: "sk-test"},
        adapters=build_adapters(transport=transport),
    )
    app.dependency_overrides[get_generation_service] = lambda: service


class TestSecurity:
    def test_missing_api_key_is_rejected(self, test_client):
        response = test_client.get("/ai/models")

        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid or missing API key"}

    def test_wrong_api_key_is_rejected(self, test_client):
        response = test_client.get("/ai/models", headers={"X-API-Key": "nope"})
        assert response.status_code == 401

    def test_health_needs_no_key(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert "X-Correlation-ID" in response.headers


class TestModels:
    def test_list_models(self, test_client, api_headers):
        response = test_client.get("/ai/models", headers=api_headers)

        assert response.status_code == 200
        models = response.json()
        assert models[0] == {
            "id": "none",
            "label": "None (Manual)",
            "provider": "none",
            "model_name": "",
        }

    def test_labels(self, test_client, api_headers):
        response = test_client.get("/ai/models/labels", headers=api_headers)

        assert response.status_code == 200
        assert response.json()["labels"]["openai-gpt-5-mini"] == "ChatGPT 5 Mini (gpt-5-mini)"

    def test_get_single_model(self, test_client, api_headers):
        response = test_client.get("/ai/models/google-gemini-2.5-flash", headers=api_headers)

        assert response.status_code == 200
        assert response.json()["provider"] == "google"

    def test_unknown_model_is_404(self, test_client, api_headers):
        response = test_client.get("/ai/models/nope", headers=api_headers)
        assert response.status_code == 404

    def test_plugins_are_listed(self, test_client, api_headers):
        response = test_client.get("/plugins", headers=api_headers)

        names = {plugin["name"] for plugin in response.json()["plugins"]}
        assert {"ai/models", "ai/generation", "core/settings", "posts"} <= names


class TestGeneration:
    def test_generate_success(self, test_client, api_headers, json_transport):
        transport = json_transport({"choices": [{"message": {"content": "A greeting."}}]})
        use_generation(transport)

        response = test_client.post(
            "/ai/generation",
            headers=api_headers,
            json={
                "model_id": "openai-gpt-5-mini",
                "raw_content": "<p>Hello <b>World</b></p>",
                "prompt_template": "Summarize:",
            },
        )

        assert response.status_code == 200
        assert response.json() == {"text": "A greeting.", "model_id": "openai-gpt-5-mini"}
        sent = json.loads(transport.requests[0].content)
        assert sent["messages"][0]["content"] == "Summarize: Hello World"

    def test_unknown_model_is_400(self, test_client, api_headers, json_transport):
        transport = json_transport({})
        use_generation(transport)

        response = test_client.post(
            "/ai/generation",
            headers=api_headers,
            json={"model_id": "nope", "raw_content": "x", "prompt_template": "y"},
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Unknown AI model.", "kind": "UnknownModel"}
        assert transport.requests == []

    def test_transport_error_is_504(self, test_client, api_headers):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        use_generation(httpx.MockTransport(refuse))

        response = test_client.post(
            "/ai/generation",
            headers=api_headers,
            json={"model_id": "openai-gpt-5-mini", "raw_content": "x", "prompt_template": "y"},
        )

        assert response.status_code == 504
        assert response.json() == {"detail": "Connection refused", "kind": "TransportError"}

    def test_provider_error_is_502(self, test_client, api_headers, json_transport):
        use_generation(json_transport({"error": {"message": "Bad key"}}, status_code=401))

        response = test_client.post(
            "/ai/generation",
            headers=api_headers,
            json={"model_id": "openai-gpt-5-mini", "raw_content": "x", "prompt_template": "y"},
        )

        assert response.status_code == 502
        assert response.json()["kind"] == "ProviderError"

    def test_validation_error(self, test_client, api_headers, settings_store):
        response = test_client.post("/ai/generation", headers=api_headers, json={})
        assert response.status_code == 422


class TestSettings:
    def test_get_settings_masks_keys(self, test_client, api_headers, settings_store):
        response = test_client.get("/core/settings", headers=api_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["settings"]["openai_api_key"] == "sk-*******hijk"
        assert body["configured_providers"] == ["openai"]
        assert body["model_label"] == "ChatGPT 5 Mini (gpt-5-mini)"

    def test_update_settings(self, test_client, api_headers, settings_store):
        response = test_client.put(
            "/core/settings",
            headers=api_headers,
            json={"style": "tab", "summary_word_length": "abc", "openai_api_key": "sk-*******hijk"},
        )

        assert response.status_code == 200
        saved = settings_store.save.call_args.args[0]
        assert saved["style"] == "tab"
        assert saved["summary_word_length"] == 200
        assert saved["openai_api_key"] == "sk-abcdefghijk"

    def test_defaults(self, test_client, api_headers):
        response = test_client.get("/core/settings/defaults", headers=api_headers)

        assert response.status_code == 200
        assert response.json()["ai_model"] == "none"


class TestPosts:
    @pytest.fixture
    def post_repo(self, settings_store, json_transport):
        repo = MagicMock()
        repo.get_post = AsyncMock(
            return_value=PostDB(post_id=5, content="<p>Hello World</p>", ai_excerpt="Old")
        )
        repo.update_summaries = AsyncMock(return_value=True)
        repo.set_post_excerpt = AsyncMock()

        transport = json_transport({"choices": [{"message": {"content": "Generated."}}]})
        generation = GenerationService(
            credentials={Provider.OPENAI: "sk-test"},
            adapters=build_adapters(transport=transport),
        )

        async def service_override():
            settings_service = app.dependency_overrides[get_settings_service]()
            return PostSummariesService(repo, settings_service, generation)

        app.dependency_overrides[get_post_summaries_service] = service_override
        return repo

    def test_get_summaries(self, test_client, api_headers, post_repo):
        response = test_client.get("/posts/5/summaries", headers=api_headers)

        assert response.status_code == 200
        assert response.json()["ai_excerpt"] == "Old"
        assert response.json()["is_manual"] is False

    def test_missing_post_is_404(self, test_client, api_headers, post_repo):
        post_repo.get_post.return_value = None

        response = test_client.get("/posts/5/summaries", headers=api_headers)

        assert response.status_code == 404
        assert response.json() == {"detail": "Post 5 not found"}

    def test_invalid_post_id_is_422(self, test_client, api_headers, post_repo):
        response = test_client.get("/posts/0/summaries", headers=api_headers)
        assert response.status_code == 422

    def test_save_summaries(self, test_client, api_headers, post_repo):
        response = test_client.put(
            "/posts/5/summaries", headers=api_headers, json={"ai_excerpt": "<b>New</b>"}
        )

        assert response.status_code == 200
        post_repo.update_summaries.assert_awaited_once_with(5, "New", None)
        post_repo.set_post_excerpt.assert_awaited_once_with(5, "New")

    def test_generate(self, test_client, api_headers, post_repo):
        response = test_client.post("/posts/5/generate", headers=api_headers)

        assert response.status_code == 200
        assert response.json() == {
            "post_id": 5,
            "model_id": "openai-gpt-5-mini",
            "ai_excerpt": "Generated.",
            "ai_summary": "Generated.",
            "excerpt_synced": True,
        }
        post_repo.update_summaries.assert_awaited_once_with(5, "Generated.", "Generated.")

    def test_summary_html(self, test_client, api_headers, post_repo):
        response = test_client.get("/posts/5/summary-html", headers=api_headers)

        assert response.status_code == 200
        assert '<div class="asc-ais-block-excerpt"><p>Old</p></div>' in response.json()["html"]

    def test_render(self, test_client, api_headers, post_repo):
        response = test_client.get("/posts/5/render", headers=api_headers)

        assert response.status_code == 200
        assert response.json()["html"].endswith("<p>Hello World</p>")
