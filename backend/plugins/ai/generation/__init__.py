"""Text generation against the configured AI providers."""

PLUGIN_METADATA = {
    "name": "ai/generation",
    "version": "1.0.0",
    "description": "Generates plain text from post content with a selected model.",
    "author": "asc",
}
