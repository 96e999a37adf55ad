"""
Runtime configuration for spector.

Configuration is environment-driven and read once at startup by the CLI
and the HTTP service. Library callers construct ``SpectorConfig`` directly.
"""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, Field, field_validator


_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SpectorConfig(BaseModel):
    """
    Runtime configuration for the validation engine and its surfaces.

    Configuration must not introduce non-deterministic behavior into
    validation reports.
    """

    # ------------------------------------------------------------------
    # Validation policy
    # ------------------------------------------------------------------

    STRICT_PREDICATE_TYPE: bool = Field(
        False,
        description=(
            "Require a statement's predicateType URI to match the URI "
            "registered for the nested document type being validated. "
            "When false, only the schema shape is checked."
        ),
    )

    # ------------------------------------------------------------------
    # Safety and resource limits
    # ------------------------------------------------------------------

    MAX_DOCUMENT_SIZE_MB: int = Field(
        10,
        description="Maximum accepted document size in megabytes",
    )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    LOG_LEVEL: str = Field(
        "WARNING",
        description="Root log level for the CLI and HTTP service",
    )

    # ------------------------------------------------------------------
    # Validators (Pydantic v2)
    # ------------------------------------------------------------------

    @field_validator("MAX_DOCUMENT_SIZE_MB")
    @classmethod
    def validate_max_document_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("MAX_DOCUMENT_SIZE_MB must be positive.")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"Unsupported LOG_LEVEL '{v}'. "
                f"Allowed values: {sorted(_LOG_LEVELS)}"
            )
        return level

    @property
    def max_document_bytes(self) -> int:
        return self.MAX_DOCUMENT_SIZE_MB * 1024 * 1024

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "SpectorConfig":
        """
        Load configuration from ``SPECTOR_``-prefixed environment variables.
        """

        def env_bool(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if raw is None:
                return default
            return raw.lower() in {"1", "true", "yes", "on"}

        return cls(
            STRICT_PREDICATE_TYPE=env_bool(
                "SPECTOR_STRICT_PREDICATE_TYPE", False
            ),
            MAX_DOCUMENT_SIZE_MB=int(
                os.getenv("SPECTOR_MAX_DOCUMENT_SIZE_MB", "10")
            ),
            LOG_LEVEL=os.getenv("SPECTOR_LOG_LEVEL", "WARNING"),
        )

    model_config = {
        "frozen": True,
    }


def configure_logging(config: SpectorConfig) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
