"""Pydantic value objects: dataset entries and lookup results."""
