"""Mutable description of a certificate before it is signed."""

from datetime import datetime, timezone

from cryptography import x509
from cryptography.hazmat.primitives import hashes

from .errors import InvalidPublicKey, InvalidTime
from .names import validate_name, validate_names
from .serial import coerce_serial
from .types import PUBLIC_KEY_TYPES, CertificatePrivateKey, CertificatePublicKey


def _as_utc(value: object, field: str) -> datetime:
    if not isinstance(value, datetime):
        raise InvalidTime(f"{field} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CertificateRequest:
    """Fields of a certificate to be issued by CertificateBuilder.

    Subject, alternate names, public key and times are validated when
    assigned. Completeness and time ordering are checked at build time, so
    fields may be set in any order. The request references its keys and
    issuer certificate; building never modifies them or the request.
    """

    def __init__(
        self,
        subject: str | x509.Name | None = None,
        public_key: CertificatePublicKey | None = None,
        start_time: datetime | None = None,
        expire_time: datetime | None = None,
        signing_key: CertificatePrivateKey | None = None,
        signing_certificate: x509.Certificate | None = None,
        want_signature_ability: bool = False,
        digest: hashes.HashAlgorithm | None = None,
        serial: int | str | None = None,
    ) -> None:
        self._subject: x509.Name | None = None
        self._subject_alternates: tuple[x509.Name, ...] = ()
        self._public_key: CertificatePublicKey | None = None
        self._start_time: datetime | None = None
        self._expire_time: datetime | None = None
        self._serial: int | None = None

        if subject is not None:
            self.subject = subject
        if public_key is not None:
            self.public_key = public_key
        if start_time is not None:
            self.start_time = start_time
        if expire_time is not None:
            self.expire_time = expire_time
        if serial is not None:
            self.serial = serial

        self.signing_key = signing_key
        self.signing_certificate = signing_certificate
        self.want_signature_ability = want_signature_ability
        self.digest = digest if digest is not None else hashes.SHA256()

    @property
    def subject(self) -> x509.Name | None:
        return self._subject

    @subject.setter
    def subject(self, value: str | x509.Name) -> None:
        self._subject = validate_name(value)

    @property
    def subject_alternates(self) -> tuple[x509.Name, ...]:
        return self._subject_alternates

    @subject_alternates.setter
    def subject_alternates(self, values: list[str | x509.Name]) -> None:
        self._subject_alternates = validate_names(values)

    @property
    def public_key(self) -> CertificatePublicKey | None:
        return self._public_key

    @public_key.setter
    def public_key(self, value: CertificatePublicKey) -> None:
        if not isinstance(value, PUBLIC_KEY_TYPES):
            raise InvalidPublicKey(
                f"expected an RSA, EC, Ed25519 or Ed448 public key, got {type(value).__name__}"
            )
        self._public_key = value

    @property
    def start_time(self) -> datetime | None:
        """Start of the validity window (notBefore), in UTC."""
        return self._start_time

    @start_time.setter
    def start_time(self, value: datetime) -> None:
        self._start_time = _as_utc(value, "start_time")

    @property
    def expire_time(self) -> datetime | None:
        """End of the validity window (notAfter), in UTC."""
        return self._expire_time

    @expire_time.setter
    def expire_time(self, value: datetime) -> None:
        self._expire_time = _as_utc(value, "expire_time")

    @property
    def serial(self) -> int | None:
        return self._serial

    @serial.setter
    def serial(self, value: int | str | None) -> None:
        self._serial = None if value is None else coerce_serial(value)

    @property
    def self_signed(self) -> bool:
        return self.signing_certificate is None

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are still unset."""
        required = {
            "subject": self._subject,
            "public_key": self._public_key,
            "start_time": self._start_time,
            "expire_time": self._expire_time,
            "signing_key": self.signing_key,
        }
        return [name for name, value in required.items() if value is None]
