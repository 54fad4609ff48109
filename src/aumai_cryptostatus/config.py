"""Settings loaded from environment variables.

Uses pydantic-settings so every field can be overridden with a
``CRYPTOSTATUS_`` prefixed env var.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from aumai_cryptostatus.autocrypt import AUTOCRYPT_HEADER
from aumai_cryptostatus.models import CryptoMode


class CryptoStatusSettings(BaseSettings):
    """Runtime settings for the CLI and embedding applications."""

    model_config = {"env_prefix": "CRYPTOSTATUS_"}

    autocrypt_header: str = Field(
        default=AUTOCRYPT_HEADER,
        description="Name of the header carrying key announcements",
    )
    default_mode: CryptoMode = Field(
        default=CryptoMode.opportunistic,
        description="Crypto mode used when the sender has not picked one",
    )
    log_level: str = Field(default="INFO", description="Root log level name")
    log_json: bool = Field(
        default=True,
        description="Emit JSON log lines instead of console output",
    )


__all__ = ["CryptoStatusSettings"]
