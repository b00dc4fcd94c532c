"""Infrastructure adapters backed by external systems."""
