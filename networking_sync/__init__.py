"""Onboarding form -> networking dashboard synchronization."""

__version__ = "1.0.0"
