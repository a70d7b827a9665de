"""Persistent, cached store for the user-editable summaries settings."""

PLUGIN_METADATA = {
    "name": "core/settings",
    "version": "1.0.0",
    "description": "Reads and updates model selection, API keys, prompts and display options.",
    "author": "asc",
}
