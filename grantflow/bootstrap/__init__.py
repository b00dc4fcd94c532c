"""Bootstrap wiring: logging, database and service construction."""
