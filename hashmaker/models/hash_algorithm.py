"""
HashAlgorithm enum for the digests the external hashing engine supports.

The identifier values are the wire form passed to the engine; the label is the
form printed in the confirmation document (e.g. "SHA-256").
"""

from enum import Enum


class HashAlgorithm(Enum):
    """Digest algorithms accepted by the hashing engine."""
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"

    @property
    def label(self) -> str:
        """Display name used in rendered documents (MD5, SHA-1, SHA-256, ...)."""
        return self.value.upper().replace("SHA", "SHA-")

    @classmethod
    def from_value(cls, value: str) -> "HashAlgorithm":
        """Look up an algorithm by identifier, case-insensitively.

        Raises:
            ValueError: If the identifier is not a supported algorithm.
        """
        normalized = value.strip().lower()
        for algorithm in cls:
            if algorithm.value == normalized:
                return algorithm
        choices = ", ".join(a.value for a in cls)
        raise ValueError(f"Unsupported hash algorithm '{value}' (expected one of: {choices})")
