"""End-to-end workflows composing ingest and persistence."""
