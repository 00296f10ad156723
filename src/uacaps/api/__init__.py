"""HTTP adapter over the lookup engine."""
