"""
Tests for config.Settings defaults and validators.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from config import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_defaults_match_reference_deployment(monkeypatch):
    for var in ("AWS_REGION", "CA_ARN", "KEY_SIZE", "VALIDITY_DAYS", "SIGNING_ALGORITHM", "HTTP_PORT"):
        monkeypatch.delenv(var, raising=False)

    s = _settings()

    assert s.HTTP_PORT == 8080
    assert s.KEY_SIZE == 2048
    assert s.AWS_REGION == "your-region"
    assert s.CA_ARN == "arn:aws:acm-pca:region:account-id:certificate-authority/CA-ID"
    assert s.SIGNING_ALGORITHM == "SHA512WITHRSA"
    assert s.VALIDITY_DAYS == 365
    assert s.AWS_MAX_ATTEMPTS == 1


def test_env_override(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("validity_days", "30")

    s = _settings()

    assert s.AWS_REGION == "eu-west-1"
    assert s.VALIDITY_DAYS == 30


@pytest.mark.parametrize("size", [1024, 2050])
def test_key_size_rejected(size):
    with pytest.raises(ValidationError, match="KEY_SIZE"):
        _settings(KEY_SIZE=size)


def test_country_normalised_and_validated():
    assert _settings(CSR_COUNTRY="za").CSR_COUNTRY == "ZA"
    with pytest.raises(ValidationError):
        _settings(CSR_COUNTRY="ZAF")


def test_signing_algorithm_validated():
    assert _settings(SIGNING_ALGORITHM="sha256withrsa").SIGNING_ALGORITHM == "SHA256WITHRSA"
    with pytest.raises(ValidationError, match="SIGNING_ALGORITHM"):
        _settings(SIGNING_ALGORITHM="SHA256WITHECDSA")


def test_validity_must_be_positive():
    with pytest.raises(ValidationError):
        _settings(VALIDITY_DAYS=0)
