"""Configuration — pydantic-settings models."""
