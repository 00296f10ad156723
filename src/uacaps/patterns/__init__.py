"""Wildcard pattern compilation and indexing."""
