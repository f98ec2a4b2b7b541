"""Logging setup and the shared event feed."""
