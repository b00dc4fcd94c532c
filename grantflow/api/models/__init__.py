"""API request/response models (pydantic)."""
