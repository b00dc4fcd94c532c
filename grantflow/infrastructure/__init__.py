"""Infrastructure adapters: in-memory stubs, persistence and observability."""
