"""Application layer: ports, DTOs and services orchestrating the domain."""
