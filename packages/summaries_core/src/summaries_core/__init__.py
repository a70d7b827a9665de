"""Shared infrastructure for the AI summaries service: logging and tracing."""
