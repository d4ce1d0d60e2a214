"""Pydantic models for source configuration and the import routes."""
