from pydantic import BaseModel, Field

from utils.providers import ErrorKind


class GenerationRequest(BaseModel):
    """One generation call: which model, what content, which instruction."""

    model_id: str = Field(..., description="Registry id of the model to use")
    raw_content: str = Field(..., description="Post body; markup is stripped before use")
    prompt_template: str = Field(
        ..., description="Instruction text placed before the cleaned content"
    )


class GenerationResponse(BaseModel):
    text: str
    model_id: str


class GenerationErrorResponse(BaseModel):
    detail: str
    kind: ErrorKind | None = None
