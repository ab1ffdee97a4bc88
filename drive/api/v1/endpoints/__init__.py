"""API v1 endpoint modules (thin routes)."""
