"""REST API for the booking calendar (FastAPI)."""
