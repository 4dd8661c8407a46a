"""Infrastructure adapters for the host system."""
