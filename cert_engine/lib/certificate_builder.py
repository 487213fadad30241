"""Certificate builder for X.509 certificate construction."""

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes

from .cert_utils import public_keys_match
from .certificate_request import CertificateRequest
from .errors import CertificateError, IncompleteRequest, InvalidTime, SigningFailure
from .extension_policy import IssuerContext, Role, extensions_for, to_x509_extension
from .logging_config import LOGGER
from .models import SignedCertificate
from .serial import SerialNumberGenerator, coerce_serial
from .types import DIGESTLESS_KEY_TYPES, PRIVATE_KEY_TYPES, CertificatePrivateKey


class CertificateBuilder:
    """Issues root, intermediate and leaf certificates from a CertificateRequest.

    Each ``create_*`` method fixes the role and how the issuer is resolved,
    then funnels into ``build``. Arguments left as None fall back to the
    request's own fields; the request itself is never modified.
    """

    def __init__(
        self,
        request: CertificateRequest,
        serial_generator: SerialNumberGenerator | None = None,
    ) -> None:
        """Initialize builder for a request.

        Args:
            request: Description of the certificate to issue
            serial_generator: Source of serials when none is supplied
        """
        self.request = request
        self.serial_generator = (
            serial_generator if serial_generator is not None else SerialNumberGenerator()
        )

    def create_root(
        self,
        signing_key: CertificatePrivateKey | None = None,
        digest: hashes.HashAlgorithm | None = None,
        serial: int | str | None = None,
    ) -> SignedCertificate:
        """Build a self-signed Root CA certificate.

        The role is Root regardless of the request's want_signature_ability
        flag, and any signing_certificate on the request is ignored.
        """
        return self.build(Role.ROOT, None, signing_key, digest, serial)

    def create_intermediate(
        self,
        signing_certificate: x509.Certificate | None = None,
        signing_key: CertificatePrivateKey | None = None,
        digest: hashes.HashAlgorithm | None = None,
        serial: int | str | None = None,
    ) -> SignedCertificate:
        """Build an Intermediate CA certificate signed by signing_certificate."""
        return self.build(
            Role.INTERMEDIATE,
            self._issuer_certificate(signing_certificate),
            signing_key,
            digest,
            serial,
        )

    def create(
        self,
        signing_certificate: x509.Certificate | None = None,
        signing_key: CertificatePrivateKey | None = None,
        digest: hashes.HashAlgorithm | None = None,
        serial: int | str | None = None,
    ) -> SignedCertificate:
        """Build a leaf (peer) certificate signed by signing_certificate.

        Raises:
            IncompleteRequest: If neither the argument nor the request
                provides a signing certificate, listed with any other
                missing fields
        """
        return self.build(
            Role.LEAF,
            self._issuer_certificate(signing_certificate),
            signing_key,
            digest,
            serial,
            issuer_required=True,
        )

    def create_self_signed(
        self,
        signing_key: CertificatePrivateKey | None = None,
        digest: hashes.HashAlgorithm | None = None,
        serial: int | str | None = None,
    ) -> SignedCertificate:
        """Build a self-signed leaf certificate.

        Without a serial argument or request serial, every call draws a
        fresh one.
        """
        return self.build(Role.LEAF, None, signing_key, digest, serial)

    def issue(self) -> SignedCertificate:
        """Build whatever the request describes.

        want_signature_ability selects a CA role, signing_certificate
        selects a chained certificate over a self-signed one.
        """
        if self.request.want_signature_ability:
            if self.request.self_signed:
                return self.create_root()
            return self.create_intermediate()
        if self.request.self_signed:
            return self.create_self_signed()
        return self.create()

    def build(
        self,
        role: Role,
        signing_certificate: x509.Certificate | None = None,
        signing_key: CertificatePrivateKey | None = None,
        digest: hashes.HashAlgorithm | None = None,
        serial: int | str | None = None,
        *,
        issuer_required: bool = False,
    ) -> SignedCertificate:
        """Validate the request, attach the role's extensions and sign.

        A missing signing_certificate means self-signed: the issuer is the
        request's own subject.

        Args:
            role: Role whose extension policy is applied
            signing_certificate: Issuer certificate, None for self-signed
            signing_key: Private key that signs; defaults to the request's
            digest: Signature digest; defaults to the request's (SHA-256)
            serial: Serial override; defaults to the request's, then a fresh one
            issuer_required: Treat a missing signing_certificate as incomplete
                instead of self-signed; always the case for Intermediate

        Returns:
            Signed certificate

        Raises:
            IncompleteRequest: If required fields are unset
            InvalidTime: If expire_time precedes start_time
            InvalidSerial: If the serial override is out of range
            SigningFailure: If the key is unusable, mismatched, or rejected
        """
        request = self.request
        signing_key = signing_key if signing_key is not None else request.signing_key
        digest = digest if digest is not None else request.digest

        if role is Role.ROOT and signing_certificate is not None:
            raise CertificateError("root certificates are self-signed")

        missing = [field for field in request.missing_fields() if field != "signing_key"]
        if signing_key is None:
            missing.append("signing_key")
        if (role is Role.INTERMEDIATE or issuer_required) and signing_certificate is None:
            missing.append("signing_certificate")
        if missing:
            raise IncompleteRequest(missing)

        if request.expire_time < request.start_time:
            raise InvalidTime(
                f"expire_time {request.expire_time.isoformat()} precedes "
                f"start_time {request.start_time.isoformat()}"
            )

        serial_number = self._resolve_serial(serial)
        self._check_signing_key(signing_key, signing_certificate)

        if signing_certificate is not None:
            issuer_name = signing_certificate.subject
            issuer = IssuerContext(
                public_key=signing_certificate.public_key(),
                name=signing_certificate.issuer,
                serial_number=signing_certificate.serial_number,
                subject_key_identifier=_subject_key_identifier(signing_certificate),
            )
        else:
            issuer_name = request.subject
            issuer = IssuerContext(
                public_key=request.public_key,
                name=request.subject,
                serial_number=serial_number,
            )

        LOGGER.debug(
            "Building %s certificate for %s issued by %s",
            role.value,
            request.subject.rfc4514_string(),
            issuer_name.rfc4514_string(),
        )

        try:
            builder = (
                x509.CertificateBuilder()
                .subject_name(request.subject)
                .issuer_name(issuer_name)
                .public_key(request.public_key)
                .not_valid_before(request.start_time)
                .not_valid_after(request.expire_time)
            )
        except ValueError as err:
            raise InvalidTime(str(err)) from err

        for spec in extensions_for(role):
            builder = builder.add_extension(
                to_x509_extension(spec, request.public_key, issuer),
                critical=spec.critical,
            )

        if request.subject_alternates:
            builder = builder.add_extension(
                x509.SubjectAlternativeName(
                    [x509.DirectoryName(name) for name in request.subject_alternates]
                ),
                critical=False,
            )

        builder = builder.serial_number(serial_number)

        algorithm = None if isinstance(signing_key, DIGESTLESS_KEY_TYPES) else digest
        try:
            certificate = builder.sign(signing_key, algorithm)
        except (TypeError, ValueError, UnsupportedAlgorithm) as err:
            raise SigningFailure(f"backend rejected signing operation: {err}") from err

        LOGGER.info(
            "Issued %s certificate %s (serial %s)",
            role.value,
            certificate.subject.rfc4514_string(),
            serial_number,
        )
        return SignedCertificate(certificate=certificate, role=role)

    def _issuer_certificate(
        self, signing_certificate: x509.Certificate | None
    ) -> x509.Certificate | None:
        if signing_certificate is not None:
            return signing_certificate
        return self.request.signing_certificate

    def _resolve_serial(self, serial: int | str | None) -> int:
        if serial is not None:
            return coerce_serial(serial)
        if self.request.serial is not None:
            return self.request.serial
        return int(self.serial_generator.generate())

    def _check_signing_key(
        self,
        signing_key: object,
        signing_certificate: x509.Certificate | None,
    ) -> None:
        if not isinstance(signing_key, PRIVATE_KEY_TYPES):
            raise SigningFailure(
                f"signing key must be an RSA, EC, Ed25519 or Ed448 private key, "
                f"got {type(signing_key).__name__}"
            )

        if signing_certificate is not None:
            expected, owner = signing_certificate.public_key(), "signing certificate"
        else:
            expected, owner = self.request.public_key, "certificate subject"

        if not public_keys_match(signing_key.public_key(), expected):
            raise SigningFailure(f"signing key does not match the {owner}'s public key")


def _subject_key_identifier(cert: x509.Certificate) -> x509.SubjectKeyIdentifier | None:
    try:
        return cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier).value
    except x509.ExtensionNotFound:
        return None
