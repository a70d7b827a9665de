from dataclasses import dataclass

from pydantic import BaseModel, Field


class PostDB(BaseModel):
    """Schema of a post document in MongoDB, including its AI metadata."""

    post_id: int
    post_type: str = "post"
    title: str = ""
    content: str = ""
    excerpt: str = Field(default="", description="The post's native excerpt")
    ai_excerpt: str | None = None
    ai_summary: str | None = None


class PostSummaries(BaseModel):
    post_id: int
    ai_excerpt: str | None
    ai_summary: str | None
    model_id: str
    model_label: str
    is_manual: bool = Field(
        description="True when no model is selected and texts are entered by hand."
    )


class SaveSummariesRequest(BaseModel):
    """Manual save. A field left out (or null) deletes the stored value."""

    ai_excerpt: str | None = None
    ai_summary: str | None = None


class GenerateSummariesResponse(BaseModel):
    post_id: int
    model_id: str
    ai_excerpt: str
    ai_summary: str
    excerpt_synced: bool


class RenderedContentResponse(BaseModel):
    post_id: int
    html: str


@dataclass
class SaveContext:
    """
    State carried through one save. `updating_excerpt` is set while the AI
    excerpt is being copied into the post's native excerpt, so a save
    triggered from inside that copy does not copy again.
    """

    updating_excerpt: bool = False
