"""Core services: deduplication, conservative merge, pipeline orchestration."""
