"""
Shared pytest fixtures.

FakeAuthority
-------------
Stands in for AWS Private CA: records every IssuanceRequest it receives and
returns a predictable ARN, or raises the error it was primed with.  No AWS
credentials or network access are needed by any test that uses it.
"""
from __future__ import annotations

import threading

import pytest

from pki.authority import CertificateAuthority, IssuanceRequest
from pki.crypto import CsrSubject, generate_rsa_key
from server.service import CsrService
from storage.sessions import CsrStore

TEST_CA_ARN = "arn:aws:acm-pca:eu-west-1:123456789012:certificate-authority/test-ca"


class FakeAuthority(CertificateAuthority):
    def __init__(self, error: Exception | None = None) -> None:
        self.requests: list[IssuanceRequest] = []
        self.error = error
        self._lock = threading.Lock()

    def issue(self, request: IssuanceRequest) -> str:
        with self._lock:
            self.requests.append(request)
            n = len(self.requests)
        if self.error is not None:
            raise self.error
        return f"{TEST_CA_ARN}/certificate/{n:032x}"


@pytest.fixture(scope="session")
def rsa_key():
    return generate_rsa_key(key_size=2048)


@pytest.fixture()
def subject() -> CsrSubject:
    return CsrSubject(
        common_name="codecornersoftwares.co.za",
        organization="Code Corner",
        organizational_unit="Development",
        country="ZA",
        province="Cape Town",
        locality="South Africa",
    )


@pytest.fixture()
def authority() -> FakeAuthority:
    return FakeAuthority()


@pytest.fixture()
def service(authority, subject) -> CsrService:
    return CsrService(
        store=CsrStore(),
        authority=authority,
        subject=subject,
        ca_arn=TEST_CA_ARN,
    )
