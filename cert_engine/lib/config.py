"""Certificate generation defaults."""

from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes

DIGESTS: dict[str, type[hashes.HashAlgorithm]] = {
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


@dataclass
class PKIConfig:
    """Defaults used when generating a certificate with random values."""

    default_subject: str = "CN=localhost"
    key_size: int = 1024
    public_exponent: int = 65537
    min_duration_seconds: int = 1
    max_duration_seconds: int = 86400
    digest: str = "sha256"

    @property
    def duration_range(self) -> tuple[int, int]:
        """Inclusive (min, max) validity duration in seconds."""
        return self.min_duration_seconds, self.max_duration_seconds

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Resolve the configured digest name to a hash instance.

        Raises:
            ValueError: If the digest name is not supported
        """
        try:
            return DIGESTS[self.digest.lower()]()
        except KeyError:
            raise ValueError(
                f"unsupported digest {self.digest!r}, expected one of {sorted(DIGESTS)}"
            ) from None
