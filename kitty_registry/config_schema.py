"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from kitty_registry.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# REGISTRY MODEL
# =============================================================================

class RegistryConfig(StrictModel):
    """Kitty id allocation settings."""

    id_bits: Literal[8, 16, 32, 64, 128] = Field(
        default=32,
        description="Width of the unsigned kitty id type; the max id is 2**id_bits - 1"
    )

    @property
    def max_kitty_id(self) -> int:
        return (1 << self.id_bits) - 1


# =============================================================================
# RANDOMNESS MODEL
# =============================================================================

class RandomnessConfig(StrictModel):
    """Seed material for dna derivation."""

    global_seed: str = Field(
        default="00" * 32,
        description="Hex-encoded global seed mixed into every per-block seed"
    )

    @field_validator("global_seed")
    @classmethod
    def _check_hex(cls, value: str) -> str:
        try:
            bytes.fromhex(value)
        except ValueError as e:
            raise ValueError(f"global_seed must be hex: {e}") from e
        return value

    @property
    def global_seed_bytes(self) -> bytes:
        return bytes.fromhex(self.global_seed)


# =============================================================================
# BREEDING MODEL
# =============================================================================

class BreedingConfig(StrictModel):
    """Breeding rule switches.

    legacy_parent_b_index defaults to the corrected per-position rule;
    require_parent_ownership defaults to the historical open breeding.
    """

    legacy_parent_b_index: bool = Field(
        default=False,
        description="Read the second parent's dna at byte 2 for every child byte (replay compatibility)"
    )
    require_parent_ownership: bool = Field(
        default=False,
        description="Reject breeding unless the caller owns both parents"
    )


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    output_file: str | None = Field(
        default="events.jsonl",
        description="JSONL file for registry events (null: no file log)"
    )
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for the kitty_registry logger hierarchy"
    )
    default_recent: int = Field(
        default=50,
        gt=0,
        description="Default number of recent events to return"
    )


# =============================================================================
# ROOT CONFIG MODEL
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model for the entire application.

    All fields have sensible defaults, so an empty config file is valid.
    """

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    randomness: RandomnessConfig = Field(default_factory=RandomnessConfig)
    breeding: BreedingConfig = Field(default_factory=BreedingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# LOADING FUNCTIONS
# =============================================================================

def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Args:
        config_dict: Configuration as a dictionary.

    Returns:
        Validated AppConfig instance.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    "StrictModel",
    "RegistryConfig",
    "RandomnessConfig",
    "BreedingConfig",
    "LoggingConfig",
    "AppConfig",
    "load_validated_config",
    "validate_config_dict",
]
