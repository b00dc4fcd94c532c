"""Configuration module for Grantflow.

Available Configurations:
- EngineConfig: Budget rules and persistence selection
"""

from grantflow.config.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig

__all__ = [
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
]
