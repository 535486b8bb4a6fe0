"""
Application configuration via Pydantic Settings.
All values can be overridden by environment variables or a .env file.
"""
from __future__ import annotations

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# RSA signing algorithms accepted by ACM PCA IssueCertificate
_RSA_SIGNING_ALGORITHMS = {"SHA256WITHRSA", "SHA384WITHRSA", "SHA512WITHRSA"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── HTTP server ────────────────────────────────────────────────────────
    HTTP_HOST: str = "0.0.0.0"
    HTTP_PORT: int = 8080

    # ── Key / CSR ──────────────────────────────────────────────────────────
    KEY_SIZE: int = 2048
    CSR_COMMON_NAME: str = "codecornersoftwares.co.za"
    CSR_ORGANIZATION: str = "Code Corner"
    CSR_ORGANIZATIONAL_UNIT: str = "Development"
    CSR_COUNTRY: str = "ZA"
    CSR_PROVINCE: str = "Cape Town"
    CSR_LOCALITY: str = "South Africa"

    # ── AWS Private CA ─────────────────────────────────────────────────────
    # Placeholders: a real deployment must replace both.
    AWS_REGION: str = "your-region"
    CA_ARN: str = "arn:aws:acm-pca:region:account-id:certificate-authority/CA-ID"
    SIGNING_ALGORITHM: str = "SHA512WITHRSA"
    VALIDITY_DAYS: int = 365

    # ── Timeouts / retries ─────────────────────────────────────────────────
    AWS_CONNECT_TIMEOUT: float = 10.0
    AWS_READ_TIMEOUT: float = 30.0
    AWS_MAX_ATTEMPTS: int = 1      # 1 = single attempt, no retries

    # ── Session store ──────────────────────────────────────────────────────
    SESSION_TTL_SECONDS: int = 3600

    # ── Logging ────────────────────────────────────────────────────────────
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("KEY_SIZE")
    @classmethod
    def validate_key_size(cls, v: int) -> int:
        if v < 2048 or v % 256:
            raise ValueError("KEY_SIZE must be at least 2048 and a multiple of 256")
        return v

    @field_validator("CSR_COUNTRY")
    @classmethod
    def validate_country(cls, v: str) -> str:
        """Country must be an ISO 3166 alpha-2 code."""
        if len(v) != 2 or not v.isalpha():
            raise ValueError("CSR_COUNTRY must be a two-letter country code")
        return v.upper()

    @field_validator("SIGNING_ALGORITHM")
    @classmethod
    def validate_signing_algorithm(cls, v: str) -> str:
        v = v.upper()
        if v not in _RSA_SIGNING_ALGORITHMS:
            raise ValueError(
                f"SIGNING_ALGORITHM must be one of {sorted(_RSA_SIGNING_ALGORITHMS)}"
            )
        return v

    @field_validator("VALIDITY_DAYS", "SESSION_TTL_SECONDS", "AWS_MAX_ATTEMPTS")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v


# Module-level singleton, imported everywhere.
settings = Settings()
