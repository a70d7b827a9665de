"""Built-in model catalog. Adding or removing a model is a code change."""

from types import MappingProxyType
from typing import List, Mapping, Optional

from utils.providers import Provider

from .models import ModelEntry

MANUAL_MODEL_ID = "none"

_CATALOG: tuple[ModelEntry, ...] = (
    ModelEntry(id=MANUAL_MODEL_ID, label="None (Manual)", provider=Provider.NONE),
    # OpenAI
    ModelEntry(
        id="openai-gpt-5-mini",
        label="ChatGPT 5 Mini (gpt-5-mini)",
        provider=Provider.OPENAI,
        model_name="gpt-5-mini",
    ),
    ModelEntry(
        id="openai-gpt-5-nano",
        label="ChatGPT 5 Nano (gpt-5-nano)",
        provider=Provider.OPENAI,
        model_name="gpt-5-nano",
    ),
    ModelEntry(
        id="openai-gpt-4o-mini",
        label="ChatGPT 4o Mini (gpt-4o-mini)",
        provider=Provider.OPENAI,
        model_name="gpt-4o-mini",
    ),
    # Anthropic
    ModelEntry(
        id="anthropic-claude-sonnet-4-5",
        label="Claude Sonnet 4.5 (claude-sonnet-4-5)",
        provider=Provider.ANTHROPIC,
        model_name="claude-sonnet-4-5",
    ),
    ModelEntry(
        id="anthropic-claude-haiku-4-5",
        label="Claude Haiku 4.5 (claude-haiku-4-5)",
        provider=Provider.ANTHROPIC,
        model_name="claude-haiku-4-5",
    ),
    # Google
    ModelEntry(
        id="google-gemini-2.5-flash",
        label="Gemini 2.5 Flash (gemini-2.5-flash)",
        provider=Provider.GOOGLE,
        model_name="gemini-2.5-flash",
    ),
    ModelEntry(
        id="google-gemini-2.5-pro",
        label="Gemini 2.5 Pro (gemini-2.5-pro)",
        provider=Provider.GOOGLE,
        model_name="gemini-2.5-pro",
    ),
    # Hugging Face
    ModelEntry(
        id="huggingface-mistral-7b-instruct",
        label="Mistral 7B Instruct (Hugging Face)",
        provider=Provider.HUGGINGFACE,
        model_name="mistralai/Mistral-7B-Instruct-v0.3",
    ),
    ModelEntry(
        id="huggingface-llama-3.1-8b-instruct",
        label="Llama 3.1 8B Instruct (Hugging Face)",
        provider=Provider.HUGGINGFACE,
        model_name="meta-llama/Llama-3.1-8B-Instruct",
    ),
)

# Registry: model id -> ModelEntry, in catalog order
MODELS: Mapping[str, ModelEntry] = MappingProxyType({m.id: m for m in _CATALOG})

if len(MODELS) != len(_CATALOG):
    raise RuntimeError("Duplicate model id in the model catalog.")


def list_models() -> List[ModelEntry]:
    """Return all models in catalog order."""
    return list(MODELS.values())


def get_model(model_id: str) -> Optional[ModelEntry]:
    """Return a model by exact id, or None if it is not registered."""
    return MODELS.get(model_id)


def labels_only() -> dict[str, str]:
    """Return the id -> label view used to populate model selectors."""
    return {model_id: entry.label for model_id, entry in MODELS.items()}


def label_for(model_id: str) -> str:
    """Label for `model_id`, falling back to the manual entry's label."""
    entry = MODELS.get(model_id) or MODELS[MANUAL_MODEL_ID]
    return entry.label
