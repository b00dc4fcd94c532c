"""HTTP API for the giving engine."""
