"""Distinguished name parsing and validation."""

from cryptography import x509

from .errors import InvalidSubject


def validate_name(value: str | x509.Name) -> x509.Name:
    """Parse RFC 4514 text (``CN=...,OU=...,O=...``) into an x509.Name.

    Already structured names pass through when non-empty.

    Args:
        value: Distinguished name text or x509.Name

    Returns:
        Parsed, non-empty x509.Name

    Raises:
        InvalidSubject: If the text is empty, malformed, names an unknown
            attribute type, or fails to decode
    """
    if isinstance(value, x509.Name):
        if len(value) == 0:
            raise InvalidSubject(value, "distinguished name has no attributes")
        return value

    if not isinstance(value, str):
        raise InvalidSubject(value, f"expected text, got {type(value).__name__}")
    if not value.strip():
        raise InvalidSubject(value, "distinguished name is empty")

    try:
        name = x509.Name.from_rfc4514_string(value)
    except ValueError as err:
        # the parser raises a bare ValueError for unknown attribute types
        raise InvalidSubject(value, str(err) or "malformed or unknown attribute") from err

    if len(name) == 0:
        raise InvalidSubject(value, "distinguished name has no attributes")
    return name


def validate_names(values: list[str | x509.Name] | tuple[str | x509.Name, ...]) -> tuple[x509.Name, ...]:
    """Validate each entry of an ordered sequence of names."""
    if isinstance(values, (str, x509.Name)):
        raise InvalidSubject(values, "expected a sequence of names")
    return tuple(validate_name(value) for value in values)


def common_name(name: x509.Name) -> str | None:
    """Return the first CN attribute of a name, if any."""
    attributes = name.get_attributes_for_oid(x509.NameOID.COMMON_NAME)
    if not attributes:
        return None
    value = attributes[0].value
    return value if isinstance(value, str) else value.decode("utf-8")
