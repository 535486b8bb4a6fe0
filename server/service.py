"""
Request handling for the two CSR endpoints, independent of the HTTP layer.

  generate_csr()       new RSA key + CSR, stored as the current pair
  issue_certificate()  submit the current CSR to the certificate authority

Each operation returns a ServiceResponse; the HTTP layer only copies it onto
the wire.  Error bodies carry the underlying error text verbatim.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from pki.authority import (
    AuthorityConfigError,
    CertificateAuthority,
    IssuanceError,
    IssuanceRequest,
)
from pki.crypto import (
    CsrSubject,
    create_csr,
    csr_der_to_pem,
    generate_rsa_key,
    public_key_fingerprint,
)
from storage.sessions import CsrNotFound, CsrStore

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-CSR-Session"
NO_CSR_MESSAGE = "No CSR available. Please call /generate-csr first."


@dataclass
class ServiceResponse:
    status: int
    body: bytes
    headers: dict = field(default_factory=dict)

    @classmethod
    def text(cls, status: int, message: str, **headers: str) -> "ServiceResponse":
        return cls(status=status, body=message.encode(), headers=dict(headers))


class CsrService:
    def __init__(
        self,
        store: CsrStore,
        authority: CertificateAuthority,
        subject: CsrSubject,
        ca_arn: str,
        key_size: int = 2048,
        signing_algorithm: str = "SHA512WITHRSA",
        validity_days: int = 365,
    ) -> None:
        self.store = store
        self.authority = authority
        self.subject = subject
        self.ca_arn = ca_arn
        self.key_size = key_size
        self.signing_algorithm = signing_algorithm
        self.validity_days = validity_days

    @classmethod
    def from_settings(cls, authority: Optional[CertificateAuthority] = None) -> "CsrService":
        """Build a service from ``config.settings``; *authority* overrides the CA back end."""
        from config import settings
        from pki.authority import make_authority

        return cls(
            store=CsrStore(ttl_seconds=settings.SESSION_TTL_SECONDS),
            authority=authority or make_authority(),
            subject=CsrSubject.from_settings(settings),
            ca_arn=settings.CA_ARN,
            key_size=settings.KEY_SIZE,
            signing_algorithm=settings.SIGNING_ALGORITHM,
            validity_days=settings.VALIDITY_DAYS,
        )

    def generate_csr(self) -> ServiceResponse:
        """Generate a fresh key pair and CSR, replacing the current pair."""
        logger.info("Generating RSA-%d key and CSR for %s", self.key_size, self.subject.common_name)
        try:
            private_key = generate_rsa_key(key_size=self.key_size)
        except Exception as exc:
            logger.error("Private key generation failed: %s", exc)
            return ServiceResponse.text(500, f"Failed to generate private key: {exc}")

        try:
            csr_pem = csr_der_to_pem(create_csr(private_key, self.subject))
        except Exception as exc:
            logger.error("CSR generation failed: %s", exc)
            return ServiceResponse.text(500, f"Failed to generate CSR: {exc}")

        entry = self.store.put(private_key, csr_pem)
        logger.info(
            "CSR ready: session %s, public key %s",
            entry.session_id,
            public_key_fingerprint(private_key.public_key())[:16],
        )
        return ServiceResponse(
            status=200,
            body=csr_pem,
            headers={SESSION_HEADER: entry.session_id},
        )

    def issue_certificate(self, session_id: Optional[str] = None) -> ServiceResponse:
        """Submit the current CSR (or the one for *session_id*) for issuance."""
        try:
            entry = self.store.get(session_id)
        except CsrNotFound as exc:
            logger.warning("Issue requested without a CSR: %s", exc)
            return ServiceResponse.text(400, NO_CSR_MESSAGE)

        request = IssuanceRequest(
            ca_arn=self.ca_arn,
            csr_pem=entry.csr_pem,
            signing_algorithm=self.signing_algorithm,
            validity_days=self.validity_days,
        )
        try:
            certificate_arn = self.authority.issue(request)
        except AuthorityConfigError as exc:
            logger.error("AWS configuration failed: %s", exc)
            return ServiceResponse.text(500, f"Failed to load AWS config: {exc}")
        except IssuanceError as exc:
            logger.error("Certificate issuance failed for session %s: %s", entry.session_id, exc)
            return ServiceResponse.text(500, f"Error issuing certificate: {exc}")

        return ServiceResponse.text(
            200,
            f"Certificate issued: {certificate_arn}",
            **{SESSION_HEADER: entry.session_id},
        )
