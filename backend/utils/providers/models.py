from enum import Enum
from typing import Mapping

from pydantic import BaseModel, ConfigDict, model_validator


class Provider(str, Enum):
    """External LLM vendors a model can be served by."""

    NONE = "none"
    HUGGINGFACE = "huggingface"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"


class ErrorKind(str, Enum):
    UNKNOWN_MODEL = "UnknownModel"
    MISSING_CREDENTIAL = "MissingCredential"
    TRANSPORT_ERROR = "TransportError"
    PROVIDER_ERROR = "ProviderError"
    EMPTY_GENERATION = "EmptyGeneration"


class GenerationError(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str


class GenerationResult(BaseModel):
    """Outcome of one generation call: either text or an error, never both."""

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    error: GenerationError | None = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "GenerationResult":
        if (self.text is None) == (self.error is None):
            raise ValueError("A generation result holds exactly one of text or error.")
        if self.text is not None and not self.text:
            raise ValueError("Generated text must not be empty.")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> "GenerationResult":
        return cls(text=text)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "GenerationResult":
        return cls(error=GenerationError(kind=kind, message=message))


# Provider -> API key, as read from the settings store.
ProviderCredentials = Mapping[Provider, str]
