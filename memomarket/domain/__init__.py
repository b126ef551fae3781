"""Pydantic models, errors and pure helpers for rule packs."""
