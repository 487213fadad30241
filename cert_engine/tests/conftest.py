"""Test fixtures for cert_engine tests."""

from datetime import UTC, datetime, timedelta

import pytest
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from cert_engine.lib.cert_utils import generate_private_key
from cert_engine.lib.certificate_builder import CertificateBuilder
from cert_engine.lib.certificate_request import CertificateRequest
from cert_engine.lib.config import PKIConfig
from cert_engine.lib.models import SignedCertificate
from cert_engine.lib.random_source import RandomValues
from cert_engine.lib.serial import SerialNumberGenerator

# 1024-bit keys keep the suite fast. Do not use keys this small in production.
KEY_BITS = 1024


@pytest.fixture
def random_source() -> RandomValues:
    """Return seeded random source so failures reproduce."""
    return RandomValues(seed=1234)


@pytest.fixture
def serial_generator(random_source: RandomValues) -> SerialNumberGenerator:
    """Return serial generator backed by the seeded random source."""
    return SerialNumberGenerator(random_source)


@pytest.fixture
def pki_config() -> PKIConfig:
    """Return generation config with small keys for tests."""
    return PKIConfig(key_size=KEY_BITS)


@pytest.fixture
def start_time() -> datetime:
    """Return fixed validity start, truncated to whole seconds."""
    return datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def expire_time(start_time: datetime) -> datetime:
    """Return validity end one day after start_time."""
    return start_time + timedelta(seconds=86400)


@pytest.fixture
def key() -> RSAPrivateKey:
    """Generate RSA private key for the certificate under test."""
    return generate_private_key(key_size=KEY_BITS)


@pytest.fixture
def ca_key() -> RSAPrivateKey:
    """Generate RSA private key for Root CA."""
    return generate_private_key(key_size=KEY_BITS)


@pytest.fixture
def intermediate_key() -> RSAPrivateKey:
    """Generate RSA private key for Intermediate CA."""
    return generate_private_key(key_size=KEY_BITS)


@pytest.fixture
def ca_request(
    ca_key: RSAPrivateKey, start_time: datetime, expire_time: datetime
) -> CertificateRequest:
    """Return request for a self-signed CA with subject CN=ca.example.com."""
    return CertificateRequest(
        subject="CN=ca.example.com",
        public_key=ca_key.public_key(),
        start_time=start_time,
        expire_time=expire_time,
        signing_key=ca_key,
        want_signature_ability=True,
    )


@pytest.fixture
def ca_cert(
    ca_request: CertificateRequest, serial_generator: SerialNumberGenerator
) -> SignedCertificate:
    """Generate self-signed Root CA certificate."""
    return CertificateBuilder(ca_request, serial_generator).create_root()


@pytest.fixture
def intermediate_cert(
    ca_cert: SignedCertificate,
    ca_key: RSAPrivateKey,
    intermediate_key: RSAPrivateKey,
    start_time: datetime,
    expire_time: datetime,
    serial_generator: SerialNumberGenerator,
) -> SignedCertificate:
    """Generate Intermediate CA certificate signed by Root CA."""
    request = CertificateRequest(
        subject="CN=intermediate.ca.example.com",
        public_key=intermediate_key.public_key(),
        start_time=start_time,
        expire_time=expire_time,
        signing_key=ca_key,
        signing_certificate=ca_cert.certificate,
        want_signature_ability=True,
    )
    return CertificateBuilder(request, serial_generator).create_intermediate()


@pytest.fixture
def server_request(
    key: RSAPrivateKey, start_time: datetime, expire_time: datetime
) -> CertificateRequest:
    """Return unsigned request for CN=server.example.com (no signer set)."""
    return CertificateRequest(
        subject="CN=server.example.com",
        public_key=key.public_key(),
        start_time=start_time,
        expire_time=expire_time,
    )


@pytest.fixture
def server_cert(
    server_request: CertificateRequest,
    ca_cert: SignedCertificate,
    ca_key: RSAPrivateKey,
    serial_generator: SerialNumberGenerator,
) -> SignedCertificate:
    """Generate leaf certificate signed directly by Root CA."""
    return CertificateBuilder(server_request, serial_generator).create(
        signing_certificate=ca_cert.certificate, signing_key=ca_key
    )


@pytest.fixture
def chained_server_cert(
    server_request: CertificateRequest,
    intermediate_cert: SignedCertificate,
    intermediate_key: RSAPrivateKey,
    serial_generator: SerialNumberGenerator,
) -> SignedCertificate:
    """Generate leaf certificate signed by Intermediate CA."""
    return CertificateBuilder(server_request, serial_generator).create(
        signing_certificate=intermediate_cert.certificate, signing_key=intermediate_key
    )
