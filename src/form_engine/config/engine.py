"""Engine configuration schema and loader.

Configuration is optional: every setting has a default, and a deployment can
override them from a YAML file. The file path is given explicitly or through
the FORM_ENGINE_CONFIG environment variable.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FORM_ENGINE_CONFIG"

DEFAULT_SUBMISSION_ERROR = "Failed to save. Please try again."


class EngineConfig(BaseModel):
    """Form engine settings.

    Attributes:
        schema_cache_size: Compiled schemas kept by a SchemaCache.
        strict_lint: Raise ConfigurationError on descriptor lint findings
            instead of logging them.
        lint_on_build: Lint descriptor lists when an orchestrator is created.
        submission_error_message: Top-level message reported when the submit
            collaborator fails.
    """

    schema_cache_size: int = Field(
        default=32,
        description="Maximum number of compiled schemas kept in a SchemaCache",
        ge=1,
    )
    strict_lint: bool = Field(
        default=False,
        description="Raise on descriptor lint findings instead of logging warnings",
    )
    lint_on_build: bool = Field(
        default=True,
        description="Lint descriptor lists when an orchestrator is created",
    )
    submission_error_message: str = Field(
        default=DEFAULT_SUBMISSION_ERROR,
        description="Top-level message for a failed submission",
    )

    @field_validator("submission_error_message")
    @classmethod
    def validate_submission_error_message(cls, v: str) -> str:
        """Reject a blank message; the caller shows it as-is."""
        if not v.strip():
            raise ValueError("submission_error_message must not be blank")
        return v


def load_engine_config(config_path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """Load engine configuration from a YAML file.

    Args:
        config_path: Optional explicit path to the YAML file.
            If not provided, uses $FORM_ENGINE_CONFIG when set.

    Returns:
        EngineConfig; defaults when no file is configured, the file does not
        exist or the file is empty.

    Raises:
        ValueError: If the file exists but contains invalid configuration.
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return EngineConfig()
        config_path = env_path

    config_path = Path(config_path)
    if not config_path.exists():
        logger.debug(f"No engine config found at {config_path}")
        return EngineConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in engine config {config_path}: {e}")

    if data is None:
        logger.warning(f"Empty engine config at {config_path}")
        return EngineConfig()

    try:
        config = EngineConfig.model_validate(data)
    except Exception as e:
        raise ValueError(f"Failed to load engine config from {config_path}: {e}")

    logger.debug(f"Loaded engine config from {config_path}")
    return config
