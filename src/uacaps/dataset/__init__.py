"""Dataset file loading."""
