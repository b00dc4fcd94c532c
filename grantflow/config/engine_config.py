"""Giving engine configuration.

Environment variables override every default so the engine can be tuned
per deployment without code changes.

Environment Variables (Budget rules):
- GRANTFLOW_DISCRETIONARY_CAP_CEILING: Ceiling on any member's discretionary cap (default: 5000000)
- GRANTFLOW_RATIO_TOLERANCE: Allowed drift of joint + discretionary ratio from 1 (default: 0.001)
- GRANTFLOW_DEFAULT_JOINT_RATIO: Joint ratio when a budget request omits it (default: 0.75)
- GRANTFLOW_DEFAULT_DISCRETIONARY_RATIO: Discretionary ratio when omitted (default: 0.25)
- GRANTFLOW_MIN_BUDGET_YEAR / GRANTFLOW_MAX_BUDGET_YEAR: Accepted budget years (default: 1900 / 3000)

Environment Variables (Runtime):
- GRANTFLOW_PERSISTENCE: ``memory`` or ``database`` (default: memory)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_decimal_env(key: str, default: Decimal) -> Decimal:
    """Get decimal environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed Decimal value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation:
        return default
    return parsed if parsed.is_finite() else default


PERSISTENCE_MODES: frozenset[str] = frozenset({"memory", "database"})


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for budget rules and runtime wiring.

    Attributes:
        discretionary_cap_ceiling: Upper bound on any member's discretionary
            cap, regardless of pool size. Default: 5,000,000.
        ratio_tolerance: How far joint + discretionary ratios may drift from
            1 at write time. Default: 0.001.
        default_joint_ratio: Joint ratio used when a budget write omits it.
        default_discretionary_ratio: Discretionary ratio used when omitted.
        min_budget_year: Lowest accepted budget year.
        max_budget_year: Highest accepted budget year.
        persistence: ``memory`` for in-process stores, ``database`` for
            the SQLAlchemy adapters.
    """

    discretionary_cap_ceiling: Decimal = Decimal("5000000")
    ratio_tolerance: Decimal = Decimal("0.001")
    default_joint_ratio: Decimal = Decimal("0.75")
    default_discretionary_ratio: Decimal = Decimal("0.25")
    min_budget_year: int = 1900
    max_budget_year: int = 3000
    persistence: str = "memory"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.discretionary_cap_ceiling < 0:
            raise ValueError(
                "discretionary_cap_ceiling must be non-negative, "
                f"got {self.discretionary_cap_ceiling}"
            )
        if not Decimal("0") <= self.ratio_tolerance < Decimal("1"):
            raise ValueError(
                f"ratio_tolerance must be in [0, 1), got {self.ratio_tolerance}"
            )
        for name in ("default_joint_ratio", "default_discretionary_ratio"):
            value: Decimal = getattr(self, name)
            if not Decimal("0") <= value <= Decimal("1"):
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        ratio_sum = self.default_joint_ratio + self.default_discretionary_ratio
        if abs(ratio_sum - 1) > self.ratio_tolerance:
            raise ValueError(
                f"default ratios must total 1, got {ratio_sum}"
            )
        if self.min_budget_year > self.max_budget_year:
            raise ValueError(
                f"min_budget_year ({self.min_budget_year}) must not exceed "
                f"max_budget_year ({self.max_budget_year})"
            )
        if self.persistence not in PERSISTENCE_MODES:
            raise ValueError(
                f"persistence must be one of {sorted(PERSISTENCE_MODES)}, "
                f"got {self.persistence!r}"
            )

    @property
    def uses_database(self) -> bool:
        return self.persistence == "database"

    @classmethod
    def from_environment(cls) -> "EngineConfig":
        """Create config from environment variables with defaults.

        Returns:
            EngineConfig with values from environment or defaults.
        """
        return cls(
            discretionary_cap_ceiling=_get_decimal_env(
                "GRANTFLOW_DISCRETIONARY_CAP_CEILING", Decimal("5000000")
            ),
            ratio_tolerance=_get_decimal_env(
                "GRANTFLOW_RATIO_TOLERANCE", Decimal("0.001")
            ),
            default_joint_ratio=_get_decimal_env(
                "GRANTFLOW_DEFAULT_JOINT_RATIO", Decimal("0.75")
            ),
            default_discretionary_ratio=_get_decimal_env(
                "GRANTFLOW_DEFAULT_DISCRETIONARY_RATIO", Decimal("0.25")
            ),
            min_budget_year=_get_int_env("GRANTFLOW_MIN_BUDGET_YEAR", 1900),
            max_budget_year=_get_int_env("GRANTFLOW_MAX_BUDGET_YEAR", 3000),
            persistence=os.environ.get("GRANTFLOW_PERSISTENCE", "memory").strip().lower(),
        )


# Default config (no environment overrides)
DEFAULT_ENGINE_CONFIG = EngineConfig()
