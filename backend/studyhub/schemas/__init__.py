"""Pydantic request/response schemas (the JSON contract of the API)."""
