"""Ingestion of external transaction exports."""
