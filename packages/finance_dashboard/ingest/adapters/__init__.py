"""Source-specific row adapters."""
