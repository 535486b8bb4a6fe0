"""
Certificate authority back ends.

Provides:
  IssuanceRequest
      Everything the CA needs to sign one CSR.

  CertificateAuthority (ABC)
      Interface that every issuing back end must satisfy.

  AcmPcaAuthority — AWS Private CA (ACM PCA) via `boto3`

  make_authority() -> CertificateAuthority
      Factory that reads settings and returns the configured authority.

ACM PCA issuance is asynchronous on the AWS side: IssueCertificate returns
the certificate ARN immediately and the certificate itself becomes
retrievable a few seconds later.  This module returns the ARN and does not
wait for the certificate.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


# ─── Errors ───────────────────────────────────────────────────────────────────


class AuthorityError(Exception):
    """Base class for certificate authority failures."""


class AuthorityConfigError(AuthorityError):
    """Raised when the CA client cannot be configured (region, credentials chain)."""


class IssuanceError(AuthorityError):
    """Raised when the CA rejects or fails an IssueCertificate call."""


# ─── Request ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class IssuanceRequest:
    ca_arn: str
    csr_pem: bytes
    signing_algorithm: str = "SHA512WITHRSA"
    validity_days: int = 365


# ─── Authority ABC ────────────────────────────────────────────────────────────


class CertificateAuthority(ABC):
    """Abstract base for certificate issuance."""

    @abstractmethod
    def issue(self, request: IssuanceRequest) -> str:
        """Submit *request* and return the issued certificate identifier.

        Raises AuthorityConfigError if the client cannot be built and
        IssuanceError if the call itself fails.
        """


# ─── ACM PCA ──────────────────────────────────────────────────────────────────


class AcmPcaAuthority(CertificateAuthority):
    """Issuer backed by AWS Private CA (boto3 ``acm-pca`` client).

    Credentials come from the default boto3 chain (environment, shared
    config, instance role); only the region is pinned.
    """

    def __init__(
        self,
        region: str,
        connect_timeout: float = 10.0,
        read_timeout: float = 30.0,
        max_attempts: int = 1,
    ) -> None:
        self._region = region
        self._client_config = Config(
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={"total_max_attempts": max_attempts, "mode": "standard"},
        )

    def _get_client(self):
        try:
            session = boto3.session.Session()
            return session.client(
                "acm-pca", region_name=self._region, config=self._client_config
            )
        except (BotoCoreError, ValueError) as exc:
            raise AuthorityConfigError(str(exc)) from exc

    def issue(self, request: IssuanceRequest) -> str:
        client = self._get_client()

        logger.info(
            "Submitting CSR to %s (%s, %d days)",
            request.ca_arn,
            request.signing_algorithm,
            request.validity_days,
        )
        try:
            response = client.issue_certificate(
                CertificateAuthorityArn=request.ca_arn,
                Csr=request.csr_pem,
                SigningAlgorithm=request.signing_algorithm,
                Validity={"Type": "DAYS", "Value": request.validity_days},
            )
        except (ClientError, BotoCoreError) as exc:
            raise IssuanceError(str(exc)) from exc

        certificate_arn = response.get("CertificateArn", "")
        logger.info("ACM PCA accepted CSR, certificate %s", certificate_arn)
        return certificate_arn


# ─── Factory ──────────────────────────────────────────────────────────────────


def make_authority() -> CertificateAuthority:
    """Instantiate the configured certificate authority.

    Reads settings at call time so tests can patch ``config.settings``.
    """
    from config import settings  # late import to avoid circular dependency

    return AcmPcaAuthority(
        region=settings.AWS_REGION,
        connect_timeout=settings.AWS_CONNECT_TIMEOUT,
        read_timeout=settings.AWS_READ_TIMEOUT,
        max_attempts=settings.AWS_MAX_ATTEMPTS,
    )
