"""Capability resolution, the lookup engine and the process-wide engine."""
