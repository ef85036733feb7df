# -*- coding: utf-8 -*-
"""Location: ./helmvm/config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Helm Version Manager Configuration.
This module defines configuration settings using Pydantic.
It loads configuration from environment variables with sensible defaults.

Environment variables:
- APP_NAME: Application name (default: "helm-version-manager")
- LOG_LEVEL: Logging level (default: "INFO")
- NAMESPACE: Namespace holding the registry-mapping config map (default: "default")
- REGISTRY_CONFIGMAP_NAME: Config map holding registry mappings
  (default: "helm-version-manager-registry-mappings")
- REGISTRY_CONFIGMAP_KEY: Data key of the mappings blob (default: "mappings")
- VALUES_MAX_BYTES: Largest edited values text accepted for saving (default: 1MB)
- VALUES_QUOTE_AMBIGUOUS: Quote strings that look like literals when encoding (default: False)
- WARN_ON_AMBIGUOUS_VALUES: Log a warning for strings that look like literals (default: True)

Examples:
    >>> from helmvm.config import Settings
    >>> s = Settings()
    >>> s.app_name
    'helm-version-manager'
    >>> s.registry_configmap_key
    'mappings'
    >>> Settings(log_level="debug").log_level
    'DEBUG'
    >>> try:
    ...     Settings(log_level="verbose")
    ... except ValueError:
    ...     print("error")
    error
"""

# Standard
from functools import lru_cache
import logging
import sys
from typing import Any

# Third-Party
import orjson
from pydantic import AliasChoices, Field, field_validator, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

# Only configure basic logging if no handlers exist yet
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Helm Version Manager configuration settings.

    Examples:
        >>> from helmvm.config import Settings
        >>> s = Settings(registry_namespace="platform")
        >>> s.registry_namespace
        'platform'
        >>> s.values_max_bytes
        1048576
        >>> s.warn_on_ambiguous_values
        True
    """

    app_name: str = "helm-version-manager"
    log_level: str = Field(default="INFO", description="Logging level")

    # Registry mappings live in a single config map as one JSON blob
    registry_namespace: str = Field(
        default="default",
        validation_alias=AliasChoices("registry_namespace", "namespace"),
        description="Namespace of the config map holding registry mappings",
    )
    registry_configmap_name: str = Field(default="helm-version-manager-registry-mappings", description="Config map holding registry mappings")
    registry_configmap_key: str = Field(default="mappings", description="Config map data key of the mappings blob")

    # Values editor
    values_max_bytes: PositiveInt = Field(default=1024 * 1024, description="Largest edited values text accepted for saving")
    values_quote_ambiguous: bool = Field(default=False, description="Quote strings that would decode as null, booleans or numbers")
    warn_on_ambiguous_values: bool = Field(default=True, description="Log a warning when values hold strings that look like literals")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore", populate_by_name=True)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level value.

        Args:
            v (str): The log level string provided via configuration or environment.

        Returns:
            str: The validated and normalized (uppercase) log level.

        Raises:
            ValueError: If the provided value is not one of
                {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}.
        """
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_up = str(v).upper()
        if v_up not in allowed:
            raise ValueError(f"Invalid log_level: {v}")
        return v_up

    def log_summary(self) -> None:
        """Log a summary of the application settings at INFO level."""
        summary = self.model_dump()
        logger.info(f"Application settings summary: {summary}")


@lru_cache()
def get_settings(**kwargs: Any) -> Settings:
    """Get cached settings instance.

    Args:
        **kwargs: Keyword arguments to pass to the Settings setup.

    Returns:
        Settings: A cached instance of the Settings class.

    Examples:
        >>> settings = get_settings()
        >>> isinstance(settings, Settings)
        True
        >>> settings is get_settings()
        True
    """
    cfg = Settings(**kwargs)
    logging.getLogger("helmvm").setLevel(cfg.log_level)
    return cfg


def generate_settings_schema() -> dict[str, Any]:
    """
    Return the JSON Schema describing the Settings model.

    Returns:
        dict: A dictionary representing the JSON Schema of the Settings model.
    """
    return Settings.model_json_schema(mode="validation")


# Lazy "instance" of settings
class LazySettingsWrapper:
    """Lazily initialize settings singleton on getattr"""

    def __getattr__(self, key: str) -> Any:
        """Get the real settings object and forward to it

        Args:
            key: The key to fetch from settings

        Returns:
            Any: The value of the attribute on the settings
        """
        return getattr(get_settings(), key)


settings = LazySettingsWrapper()


if __name__ == "__main__":
    if "--schema" in sys.argv:
        schema = generate_settings_schema()
        print(orjson.dumps(schema, option=orjson.OPT_INDENT_2).decode())
        sys.exit(0)
    settings.log_summary()
