"""Random certificate serial numbers."""

from .errors import InvalidSerial
from .random_source import RandomSource, RandomValues

# RFC 5280 4.1.2.2: certificate users MUST handle serials up to 20 octets
MAX_SERIAL_OCTETS = 20
MAX_EXTRA_DIGITS = 19


class SerialNumberGenerator:
    """Generates decimal serial numbers that always fit in 20 octets.

    The first digit is drawn from 1-9 so the value is never zero-leading,
    then 0-19 further digits from 0-9. Twenty decimal digits stay below
    2**67, well inside the limit.
    """

    def __init__(self, random_source: RandomSource | None = None) -> None:
        self.random_source = random_source if random_source is not None else RandomValues()

    def generate(self) -> str:
        """Return a new serial as a decimal digit string."""
        rng = self.random_source
        extra = rng.integer((0, MAX_EXTRA_DIGITS))
        digits = [str(rng.integer((1, 9)))]
        digits.extend(str(rng.integer((0, 9))) for _ in range(extra))
        return "".join(digits)


def serial_octets(serial: int) -> int:
    """Return the DER content length of a positive INTEGER serial."""
    # DER prepends a zero octet when the high bit is set
    return serial.bit_length() // 8 + 1


def coerce_serial(value: int | str) -> int:
    """Validate a caller-supplied serial and return it as an integer.

    Args:
        value: Serial as an int or a decimal digit string

    Returns:
        The serial as a positive integer

    Raises:
        InvalidSerial: If the value is not a positive integer of at most 20 octets
    """
    if isinstance(value, bool):
        raise InvalidSerial(f"serial must be an integer, got {value!r}")
    if isinstance(value, str):
        if not (value.isascii() and value.isdigit()):
            raise InvalidSerial(f"serial must be a decimal digit string, got {value!r}")
        value = int(value)
    elif not isinstance(value, int):
        raise InvalidSerial(f"serial must be an integer, got {type(value).__name__}")

    if value <= 0:
        raise InvalidSerial(f"serial must be positive, got {value}")
    if serial_octets(value) > MAX_SERIAL_OCTETS:
        raise InvalidSerial(f"serial {value} needs more than {MAX_SERIAL_OCTETS} octets")
    return value
