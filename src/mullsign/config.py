"""Configuration for mullsign."""

import json
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SignerConfig(BaseModel):
    """Runtime configuration."""

    # Tailscale CLI
    tailscale_binary: str = Field(default_factory=lambda: os.getenv("MULLSIGN_TAILSCALE", "tailscale"))
    tailscale_socket: Optional[str] = Field(default_factory=lambda: os.getenv("MULLSIGN_TAILSCALE_SOCKET"))

    # Logging
    log_level: str = Field(
        default_factory=lambda: os.getenv("MULLSIGN_LOG_LEVEL", "WARNING"),
        validate_default=True
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level


def load_config(path: Path) -> SignerConfig:
    """
    Load configuration from file

    Args:
        path: Path to configuration file (JSON or YAML)

    Returns:
        SignerConfig with unset keys taken from the environment
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        if path.suffix in ('.yaml', '.yml'):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    return SignerConfig.model_validate(data or {})
