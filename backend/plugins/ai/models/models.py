from pydantic import BaseModel, ConfigDict, Field, model_validator

from utils.providers import Provider


class ModelEntry(BaseModel):
    """A selectable model: registry key, display label and provider-side identifier."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Registry key, e.g. 'openai-gpt-5-mini'")
    label: str = Field(..., description="Human-readable name shown in selectors")
    provider: Provider
    model_name: str = Field(
        default="", description="Identifier the provider API expects"
    )

    @model_validator(mode="after")
    def _model_name_required(self) -> "ModelEntry":
        if self.provider is not Provider.NONE and not self.model_name:
            raise ValueError(f"Model '{self.id}' needs a provider model name.")
        return self

    @property
    def is_manual(self) -> bool:
        return self.provider is Provider.NONE


class ModelLabelsResponse(BaseModel):
    labels: dict[str, str]
