"""Token metadata and the end-to-end estimation service."""
