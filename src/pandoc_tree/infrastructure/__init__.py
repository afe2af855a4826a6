"""Infrastructure adapters for the local filesystem."""
