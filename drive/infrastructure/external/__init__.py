"""External adapters (filesystem storage)."""
