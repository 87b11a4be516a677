"""Engine configuration management."""

from form_engine.config.engine import (
    CONFIG_ENV_VAR,
    EngineConfig,
    load_engine_config,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "EngineConfig",
    "load_engine_config",
]
