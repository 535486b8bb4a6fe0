"""
Private-key generation and CSR creation.

Boundary: this module owns everything cryptographic.  Talking to the
certificate authority lives in pki/authority.py.
"""
from __future__ import annotations

from dataclasses import dataclass

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID


@dataclass(frozen=True)
class CsrSubject:
    """Fixed identity bound into every CSR."""

    common_name: str
    organization: str
    organizational_unit: str
    country: str
    province: str
    locality: str

    @classmethod
    def from_settings(cls, settings) -> "CsrSubject":
        return cls(
            common_name=settings.CSR_COMMON_NAME,
            organization=settings.CSR_ORGANIZATION,
            organizational_unit=settings.CSR_ORGANIZATIONAL_UNIT,
            country=settings.CSR_COUNTRY,
            province=settings.CSR_PROVINCE,
            locality=settings.CSR_LOCALITY,
        )

    def to_name(self) -> x509.Name:
        return x509.Name(
            [
                x509.NameAttribute(NameOID.COUNTRY_NAME, self.country),
                x509.NameAttribute(NameOID.STATE_OR_PROVINCE_NAME, self.province),
                x509.NameAttribute(NameOID.LOCALITY_NAME, self.locality),
                x509.NameAttribute(NameOID.ORGANIZATION_NAME, self.organization),
                x509.NameAttribute(NameOID.ORGANIZATIONAL_UNIT_NAME, self.organizational_unit),
                x509.NameAttribute(NameOID.COMMON_NAME, self.common_name),
            ]
        )


def generate_rsa_key(key_size: int = 2048) -> rsa.RSAPrivateKey:
    """Generate an RSA private key from the OS CSPRNG."""
    return rsa.generate_private_key(public_exponent=65537, key_size=key_size)


def create_csr(private_key: rsa.RSAPrivateKey, subject: CsrSubject) -> bytes:
    """Create a DER-encoded CSR for *subject*, signed with SHA-256."""
    csr = (
        x509.CertificateSigningRequestBuilder()
        .subject_name(subject.to_name())
        .sign(private_key, hashes.SHA256())
    )
    return csr.public_bytes(serialization.Encoding.DER)


def csr_der_to_pem(csr_der: bytes) -> bytes:
    """Wrap DER CSR bytes in a ``CERTIFICATE REQUEST`` PEM block."""
    csr = x509.load_der_x509_csr(csr_der)
    return csr.public_bytes(serialization.Encoding.PEM)


def public_key_fingerprint(key: rsa.RSAPublicKey) -> str:
    """
    Return the hex SHA-256 of the DER SubjectPublicKeyInfo.

    Used in logs to tell key pairs apart without exposing key material.
    """
    der = key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    digest = hashes.Hash(hashes.SHA256())
    digest.update(der)
    return digest.finalize().hex()
