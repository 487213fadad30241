"""Certificate utility functions for key generation, serialization, and verification."""

from collections.abc import Sequence

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, padding, rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .types import PRIVATE_KEY_TYPES, CertificatePrivateKey, CertificatePublicKey


def generate_private_key(key_size: int = 2048, public_exponent: int = 65537) -> RSAPrivateKey:
    """Generate RSA private key with specified size and exponent."""
    return rsa.generate_private_key(
        public_exponent=public_exponent,
        key_size=key_size,
    )


def serialize_private_key(key: CertificatePrivateKey) -> bytes:
    """Serialize private key to PEM format (PKCS8, no encryption)."""
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def deserialize_private_key(pem_data: bytes) -> CertificatePrivateKey:
    """Deserialize private key from PEM bytes."""
    key = serialization.load_pem_private_key(pem_data, password=None)
    if not isinstance(key, PRIVATE_KEY_TYPES):
        raise ValueError(f"unsupported private key type: {type(key).__name__}")
    return key


def public_key_bytes(key: CertificatePublicKey) -> bytes:
    """Return the DER SubjectPublicKeyInfo encoding of a public key."""
    return key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def public_keys_match(first: CertificatePublicKey, second: CertificatePublicKey) -> bool:
    """Return True if both public keys have the same encoding."""
    return public_key_bytes(first) == public_key_bytes(second)


def create_chain_bundle(*cert_pems: bytes) -> bytes:
    """Join PEM certificates with newline separators, leaf first."""
    return b"\n".join(cert_pems)


def verify_signature(cert: x509.Certificate, public_key: CertificatePublicKey) -> bool:
    """Verify a certificate signature against a bare public key.

    Args:
        cert: Certificate whose signature is checked
        public_key: Key expected to have produced the signature

    Returns:
        True if the signature is valid for public_key, False otherwise
    """
    try:
        if isinstance(public_key, rsa.RSAPublicKey):
            public_key.verify(
                cert.signature,
                cert.tbs_certificate_bytes,
                padding.PKCS1v15(),
                cert.signature_hash_algorithm,
            )
        elif isinstance(public_key, ec.EllipticCurvePublicKey):
            public_key.verify(
                cert.signature,
                cert.tbs_certificate_bytes,
                ec.ECDSA(cert.signature_hash_algorithm),
            )
        elif isinstance(public_key, (ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)):
            public_key.verify(cert.signature, cert.tbs_certificate_bytes)
        else:
            return False
    except (InvalidSignature, UnsupportedAlgorithm, TypeError, ValueError):
        return False
    return True


def _is_ca(cert: x509.Certificate) -> bool:
    try:
        constraints = cert.extensions.get_extension_for_class(x509.BasicConstraints)
    except x509.ExtensionNotFound:
        return False
    return constraints.value.ca


def _directly_issued_by(cert: x509.Certificate, issuer: x509.Certificate) -> bool:
    if not _is_ca(issuer):
        return False
    try:
        cert.verify_directly_issued_by(issuer)
    except (InvalidSignature, UnsupportedAlgorithm, TypeError, ValueError):
        return False
    return True


def validate_certificate_chain(
    cert: x509.Certificate,
    trusted_roots: Sequence[x509.Certificate],
    intermediates: Sequence[x509.Certificate] = (),
) -> bool:
    """Check that cert chains to one of trusted_roots.

    Walks issuer links through intermediates until a trusted certificate
    signs the current one. Every issuer on the path must be a CA. A
    certificate that is itself trusted validates. Only names, CA flags and
    signatures are checked, not validity windows.

    Args:
        cert: Certificate to validate
        trusted_roots: Trust anchors
        intermediates: Untrusted certificates available for path building

    Returns:
        True if a path to a trust anchor exists, False otherwise
    """
    if cert in trusted_roots:
        return True

    seen: set[bytes] = set()
    current = cert
    while True:
        if any(_directly_issued_by(current, root) for root in trusted_roots):
            return True

        fingerprint = current.fingerprint(hashes.SHA256())
        if fingerprint in seen:
            return False
        seen.add(fingerprint)

        parent = next((c for c in intermediates if _directly_issued_by(current, c)), None)
        if parent is None:
            return False
        current = parent
