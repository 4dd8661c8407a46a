"""Application layer: use cases orchestrating resolution and hand-off."""
