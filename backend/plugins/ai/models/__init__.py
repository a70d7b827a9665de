"""Static catalog of the AI models that can generate excerpts and summaries."""

PLUGIN_METADATA = {
    "name": "ai/models",
    "version": "1.0.0",
    "description": "Lists the selectable AI models and their providers.",
    "author": "asc",
}
