"""API Schemas — Pydantic models for the public message responses."""
