"""AI excerpts and summaries attached to posts, and their rendering into post content."""

PLUGIN_METADATA = {
    "name": "posts",
    "version": "1.0.0",
    "description": "Generates, stores and renders AI excerpts and summaries for posts.",
    "author": "asc",
}
