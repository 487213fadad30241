"""Reusable helpers that issue certificates with sane random defaults."""

from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .cert_utils import generate_private_key
from .certificate_builder import CertificateBuilder
from .certificate_request import CertificateRequest
from .config import PKIConfig
from .models import IssuedChain, SignedCertificate
from .random_source import RandomSource, RandomValues
from .serial import SerialNumberGenerator


def random_validity(
    random_source: RandomSource,
    config: PKIConfig,
    start: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Pick a validity window starting now with a random duration.

    Returns:
        Tuple of (start_time, expire_time)
    """
    start_time = start if start is not None else datetime.now(timezone.utc)
    duration = random_source.number(config.duration_range)
    return start_time, start_time + timedelta(seconds=duration)


def _request(
    subject: str | x509.Name,
    key: RSAPrivateKey,
    signing_key: RSAPrivateKey,
    config: PKIConfig,
    random_source: RandomSource,
    signing_certificate: x509.Certificate | None = None,
    want_signature_ability: bool = False,
) -> CertificateRequest:
    start_time, expire_time = random_validity(random_source, config)
    return CertificateRequest(
        subject=subject,
        public_key=key.public_key(),
        start_time=start_time,
        expire_time=expire_time,
        signing_key=signing_key,
        signing_certificate=signing_certificate,
        want_signature_ability=want_signature_ability,
        digest=config.hash_algorithm(),
    )


def generate_certificate(
    subject: str | x509.Name | None = None,
    config: PKIConfig | None = None,
    random_source: RandomSource | None = None,
) -> tuple[SignedCertificate, RSAPrivateKey]:
    """Generate a fresh key and a self-signed CA certificate for it.

    Args:
        subject: Certificate subject; defaults to config.default_subject
        config: Key size, exponent, duration range and digest
        random_source: Source for the validity duration and serial

    Returns:
        Tuple of (certificate, private_key)
    """
    config = config if config is not None else PKIConfig()
    random_source = random_source if random_source is not None else RandomValues()

    key = generate_private_key(config.key_size, config.public_exponent)
    request = _request(
        subject if subject is not None else config.default_subject,
        key,
        key,
        config,
        random_source,
        want_signature_ability=True,
    )
    certificate = CertificateBuilder(request, SerialNumberGenerator(random_source)).issue()
    return certificate, key


def create_intermediate_ca(
    root_cert: x509.Certificate,
    root_key: RSAPrivateKey,
    subject: str | x509.Name,
    config: PKIConfig | None = None,
    random_source: RandomSource | None = None,
) -> tuple[RSAPrivateKey, SignedCertificate]:
    """Generate new intermediate CA key and certificate signed by root.

    Args:
        root_cert: Root CA certificate (issuer)
        root_key: Root CA private key for signing
        subject: Subject of the intermediate CA
        config: Key size, exponent, duration range and digest
        random_source: Source for the validity duration and serial

    Returns:
        Tuple of (intermediate_key, intermediate_cert)
    """
    config = config if config is not None else PKIConfig()
    random_source = random_source if random_source is not None else RandomValues()

    intermediate_key = generate_private_key(config.key_size, config.public_exponent)
    request = _request(subject, intermediate_key, root_key, config, random_source)
    intermediate_cert = CertificateBuilder(
        request, SerialNumberGenerator(random_source)
    ).create_intermediate(signing_certificate=root_cert)

    return intermediate_key, intermediate_cert


def create_chain(
    root_subject: str = "CN=ca.example.com",
    intermediate_subject: str = "CN=intermediate.ca.example.com",
    leaf_subject: str = "CN=server.example.com",
    config: PKIConfig | None = None,
    random_source: RandomSource | None = None,
) -> IssuedChain:
    """Issue a root, an intermediate signed by it, and a leaf signed by that.

    Returns:
        IssuedChain holding all three certificates and their keys
    """
    config = config if config is not None else PKIConfig()
    random_source = random_source if random_source is not None else RandomValues()

    root, root_key = generate_certificate(root_subject, config, random_source)
    intermediate_key, intermediate = create_intermediate_ca(
        root.certificate, root_key, intermediate_subject, config, random_source
    )

    leaf_key = generate_private_key(config.key_size, config.public_exponent)
    request = _request(
        leaf_subject,
        leaf_key,
        intermediate_key,
        config,
        random_source,
        signing_certificate=intermediate.certificate,
    )
    leaf = CertificateBuilder(request, SerialNumberGenerator(random_source)).create()

    return IssuedChain(
        root=root,
        root_key=root_key,
        intermediate=intermediate,
        intermediate_key=intermediate_key,
        leaf=leaf,
        leaf_key=leaf_key,
    )
