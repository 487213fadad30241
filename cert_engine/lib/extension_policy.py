"""Extension policy: which X.509v3 extensions a certificate of each role carries.

The policy table is backend-neutral. Each role maps to an ordered tuple of
``ExtensionSpec`` entries whose values use the familiar OpenSSL tokens
(``CA:TRUE``, ``keyCertSign``, ``keyid:always`` ...). ``to_x509_extension``
turns an entry into a ``cryptography`` extension at build time.
"""

import enum
from dataclasses import dataclass

from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID

from .types import CertificatePublicKey


class Role(enum.Enum):
    """Role a certificate plays in a chain."""

    ROOT = "root"
    INTERMEDIATE = "intermediate"
    LEAF = "leaf"

    @property
    def is_ca(self) -> bool:
        return self is not Role.LEAF


class ExtensionKind(enum.Enum):
    """Extensions the policy knows how to emit."""

    BASIC_CONSTRAINTS = "basicConstraints"
    KEY_USAGE = "keyUsage"
    EXTENDED_KEY_USAGE = "extendedKeyUsage"
    SUBJECT_KEY_IDENTIFIER = "subjectKeyIdentifier"
    AUTHORITY_KEY_IDENTIFIER = "authorityKeyIdentifier"


@dataclass(frozen=True)
class ExtensionSpec:
    """One policy entry: extension kind, value tokens and criticality."""

    kind: ExtensionKind
    value: tuple[str, ...]
    critical: bool

    def __str__(self) -> str:
        text = f"{self.kind.value}={','.join(self.value)}"
        return f"{text} (critical)" if self.critical else text


_CA_EXTENSIONS = (
    ExtensionSpec(ExtensionKind.BASIC_CONSTRAINTS, ("CA:TRUE",), critical=True),
    ExtensionSpec(
        ExtensionKind.KEY_USAGE,
        ("keyCertSign", "cRLSign", "digitalSignature"),
        critical=True,
    ),
    ExtensionSpec(ExtensionKind.SUBJECT_KEY_IDENTIFIER, ("hash",), critical=False),
    ExtensionSpec(
        ExtensionKind.AUTHORITY_KEY_IDENTIFIER, ("keyid:always", "issuer"), critical=False
    ),
)

_LEAF_EXTENSIONS = (
    ExtensionSpec(ExtensionKind.BASIC_CONSTRAINTS, ("CA:FALSE",), critical=True),
    ExtensionSpec(
        ExtensionKind.KEY_USAGE, ("digitalSignature", "keyEncipherment"), critical=True
    ),
    ExtensionSpec(ExtensionKind.EXTENDED_KEY_USAGE, ("serverAuth",), critical=False),
    ExtensionSpec(ExtensionKind.SUBJECT_KEY_IDENTIFIER, ("hash",), critical=False),
    ExtensionSpec(
        ExtensionKind.AUTHORITY_KEY_IDENTIFIER, ("keyid", "issuer:always"), critical=False
    ),
)

POLICY: dict[Role, tuple[ExtensionSpec, ...]] = {
    Role.ROOT: _CA_EXTENSIONS,
    Role.INTERMEDIATE: _CA_EXTENSIONS,
    Role.LEAF: _LEAF_EXTENSIONS,
}

# keyUsage token -> x509.KeyUsage keyword
_KEY_USAGE_FLAGS = {
    "digitalSignature": "digital_signature",
    "nonRepudiation": "content_commitment",
    "keyEncipherment": "key_encipherment",
    "dataEncipherment": "data_encipherment",
    "keyAgreement": "key_agreement",
    "keyCertSign": "key_cert_sign",
    "cRLSign": "crl_sign",
    "encipherOnly": "encipher_only",
    "decipherOnly": "decipher_only",
}

_EXTENDED_KEY_USAGES = {
    "serverAuth": ExtendedKeyUsageOID.SERVER_AUTH,
    "clientAuth": ExtendedKeyUsageOID.CLIENT_AUTH,
    "codeSigning": ExtendedKeyUsageOID.CODE_SIGNING,
    "emailProtection": ExtendedKeyUsageOID.EMAIL_PROTECTION,
    "timeStamping": ExtendedKeyUsageOID.TIME_STAMPING,
    "OCSPSigning": ExtendedKeyUsageOID.OCSP_SIGNING,
}


def extensions_for(role: Role) -> tuple[ExtensionSpec, ...]:
    """Return the ordered extension policy for a role."""
    return POLICY[role]


@dataclass(frozen=True)
class IssuerContext:
    """What the translation step needs to know about the issuer.

    ``name`` and ``serial_number`` identify the issuer certificate by its
    own issuer and serial, as ``authorityKeyIdentifier`` ``issuer`` tokens
    require. For a self-signed certificate they are the certificate's own
    subject and serial.
    """

    public_key: CertificatePublicKey
    name: x509.Name
    serial_number: int
    subject_key_identifier: x509.SubjectKeyIdentifier | None = None


def _basic_constraints(value: tuple[str, ...]) -> x509.BasicConstraints:
    flags = dict(token.split(":", 1) for token in value)
    path_length = int(flags["pathlen"]) if "pathlen" in flags else None
    return x509.BasicConstraints(ca=flags.get("CA") == "TRUE", path_length=path_length)


def _key_usage(value: tuple[str, ...]) -> x509.KeyUsage:
    flags = dict.fromkeys(_KEY_USAGE_FLAGS.values(), False)
    for token in value:
        flags[_KEY_USAGE_FLAGS[token]] = True
    return x509.KeyUsage(**flags)


def _authority_key_identifier(
    value: tuple[str, ...], issuer: IssuerContext
) -> x509.AuthorityKeyIdentifier:
    if issuer.subject_key_identifier is not None:
        keyid = issuer.subject_key_identifier.digest
    else:
        keyid = x509.SubjectKeyIdentifier.from_public_key(issuer.public_key).digest

    # a key identifier can always be derived, so plain "issuer" adds nothing;
    # only "issuer:always" forces the issuer name and serial in
    if "issuer:always" in value:
        return x509.AuthorityKeyIdentifier(
            key_identifier=keyid,
            authority_cert_issuer=[x509.DirectoryName(issuer.name)],
            authority_cert_serial_number=issuer.serial_number,
        )
    return x509.AuthorityKeyIdentifier(
        key_identifier=keyid,
        authority_cert_issuer=None,
        authority_cert_serial_number=None,
    )


def to_x509_extension(
    spec: ExtensionSpec,
    subject_public_key: CertificatePublicKey,
    issuer: IssuerContext,
) -> x509.ExtensionType:
    """Translate a policy entry into a cryptography extension value.

    Args:
        spec: Policy entry to translate
        subject_public_key: Public key of the certificate being built
        issuer: Issuer details for authorityKeyIdentifier

    Returns:
        Extension value ready for x509.CertificateBuilder.add_extension()

    Raises:
        ValueError: If the entry carries a token the translation does not know
    """
    try:
        if spec.kind is ExtensionKind.BASIC_CONSTRAINTS:
            return _basic_constraints(spec.value)
        if spec.kind is ExtensionKind.KEY_USAGE:
            return _key_usage(spec.value)
        if spec.kind is ExtensionKind.EXTENDED_KEY_USAGE:
            return x509.ExtendedKeyUsage([_EXTENDED_KEY_USAGES[token] for token in spec.value])
        if spec.kind is ExtensionKind.SUBJECT_KEY_IDENTIFIER:
            return x509.SubjectKeyIdentifier.from_public_key(subject_public_key)
        if spec.kind is ExtensionKind.AUTHORITY_KEY_IDENTIFIER:
            return _authority_key_identifier(spec.value, issuer)
    except KeyError as err:
        raise ValueError(f"unknown token {err.args[0]!r} in {spec}") from err
    raise ValueError(f"unsupported extension kind: {spec.kind}")
