"""FastAPI presentation adapter over a running game session."""
