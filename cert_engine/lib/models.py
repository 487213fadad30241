"""Result models for certificate issuance."""

from dataclasses import dataclass
from datetime import datetime

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from .cert_utils import create_chain_bundle, verify_signature
from .extension_policy import Role
from .types import CertificatePrivateKey, CertificatePublicKey


@dataclass(frozen=True)
class SignedCertificate:
    """Immutable result of a successful build.

    Wraps the signed cryptography certificate together with the role it was
    issued for. Every certificate produced by the engine is X.509 v3.
    """

    certificate: x509.Certificate
    role: Role

    @property
    def version(self) -> x509.Version:
        return self.certificate.version

    @property
    def serial_number(self) -> int:
        return self.certificate.serial_number

    @property
    def subject(self) -> x509.Name:
        return self.certificate.subject

    @property
    def issuer(self) -> x509.Name:
        return self.certificate.issuer

    @property
    def not_valid_before(self) -> datetime:
        return self.certificate.not_valid_before_utc

    @property
    def not_valid_after(self) -> datetime:
        return self.certificate.not_valid_after_utc

    @property
    def public_key(self) -> CertificatePublicKey:
        return self.certificate.public_key()  # type: ignore[return-value]

    @property
    def extensions(self) -> x509.Extensions:
        return self.certificate.extensions

    @property
    def signature(self) -> bytes:
        return self.certificate.signature

    @property
    def is_self_signed(self) -> bool:
        """True if issuer equals subject and the certificate's own key signed it."""
        return self.issuer == self.subject and self.verify(self.public_key)

    def verify(self, public_key: CertificatePublicKey) -> bool:
        """Return True if the signature verifies against public_key."""
        return verify_signature(self.certificate, public_key)

    def to_pem(self) -> bytes:
        return self.certificate.public_bytes(serialization.Encoding.PEM)

    def to_der(self) -> bytes:
        return self.certificate.public_bytes(serialization.Encoding.DER)


@dataclass
class IssuedChain:
    """Root, intermediate and leaf certificates issued together, with their keys."""

    root: SignedCertificate
    root_key: CertificatePrivateKey
    intermediate: SignedCertificate
    intermediate_key: CertificatePrivateKey
    leaf: SignedCertificate
    leaf_key: CertificatePrivateKey

    def bundle(self) -> bytes:
        """Return leaf, intermediate and root as one PEM chain bundle."""
        return create_chain_bundle(
            self.leaf.to_pem(), self.intermediate.to_pem(), self.root.to_pem()
        )
