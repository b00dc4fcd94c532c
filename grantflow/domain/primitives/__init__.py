"""Value primitives shared across the domain layer."""

from grantflow.domain.primitives.money import (
    ZERO,
    is_valid_amount,
    round_cents,
    round_dollars,
    to_amount,
)

__all__: list[str] = [
    "ZERO",
    "is_valid_amount",
    "round_cents",
    "round_dollars",
    "to_amount",
]
