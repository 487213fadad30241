"""Exceptions raised while describing or issuing a certificate."""


class CertificateError(ValueError):
    """Base class for certificate request and issuance failures."""


class InvalidSubject(CertificateError):
    """Subject or alternate name text is not a valid distinguished name."""

    def __init__(self, text: object, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"invalid subject {text!r}: {reason}")


class InvalidPublicKey(CertificateError):
    """Value assigned as a public key is not a supported public key."""


class InvalidTime(CertificateError):
    """Timestamp is not a datetime, or the validity window is inverted."""


class InvalidSerial(CertificateError):
    """Caller-supplied serial is not a positive integer of at most 20 octets."""


class IncompleteRequest(CertificateError):
    """Build attempted before every required request field was set."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"certificate request is missing: {', '.join(missing)}")


class SigningFailure(CertificateError):
    """Signing key is unusable, mismatched, or rejected by the backend."""
