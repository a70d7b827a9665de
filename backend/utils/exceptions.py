class ServiceError(Exception):
    """Base exception for all service-layer errors."""

    def __init__(self, detail: str, status_code: int = 500):
        self.detail = detail
        self.status_code = status_code
        super().__init__(self.detail)


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(detail, status_code=404)


class LLMError(ServiceError):
    """Raised for errors related to Large Language Model interactions."""

    def __init__(self, detail: str = "LLM interaction failed", status_code: int = 502):
        super().__init__(detail, status_code=status_code)


class GenerationFailedError(LLMError):
    """
    Raised at the HTTP boundary when a generation call returned an error value.

    `kind` is the generation error kind (e.g. "ProviderError"), `target` names
    what was being generated ("excerpt", "summary") when known.
    """

    STATUS_BY_KIND = {
        "UnknownModel": 400,
        "MissingCredential": 400,
        "TransportError": 504,
        "ProviderError": 502,
        "EmptyGeneration": 502,
    }

    def __init__(self, kind: str, message: str, target: str | None = None):
        self.kind = kind
        self.target = target
        detail = f"{target.capitalize()} generation failed: {message}" if target else message
        super().__init__(detail, status_code=self.STATUS_BY_KIND.get(kind, 502))
