"""Short code generation utilities."""

import hashlib
import uuid
from typing import Callable, Optional

from . import encoder


# Number of leading digest bytes interpreted as the code integer (64 bits)
DIGEST_PREFIX_BYTES = 8


def _uuid_nonce() -> str:
    return uuid.uuid4().hex


class ShortCodeGenerator:
    """Generate fixed-length short codes from a SHA-256 digest.

    The first attempt for a given input is deterministic. Every later attempt
    mixes a fresh nonce into the digest, so a collision never produces the
    same candidate twice.
    """

    def __init__(
        self,
        default_length: int = 7,
        nonce_factory: Optional[Callable[[], str]] = None,
    ):
        """Initialize short code generator.

        Args:
            default_length: Length of every generated code
            nonce_factory: Callable returning a fresh unique token per call
        """
        if default_length < 1:
            raise ValueError("default_length must be at least 1")
        self.default_length = default_length
        self.nonce_factory = nonce_factory or _uuid_nonce

    def generate(self, value: str, attempt: int = 0) -> str:
        """Generate a candidate code for value.

        Args:
            value: The input to derive the code from (normally the URL)
            attempt: Zero-based attempt number; attempts > 0 use a fresh nonce

        Returns:
            Code of exactly ``default_length`` base62 symbols
        """
        if attempt < 0:
            raise ValueError(f"attempt must be non-negative, got {attempt}")

        nonce = self.nonce_factory() if attempt > 0 else ""
        digest = hashlib.sha256((value + nonce).encode("utf-8")).digest()

        # Unsigned big-endian integer from the digest prefix
        hash_int = int.from_bytes(digest[:DIGEST_PREFIX_BYTES], "big")

        return self.fit_length(encoder.encode(hash_int))

    def fit_length(self, code: str) -> str:
        """Truncate or right-pad code to the configured length."""
        length = self.default_length
        if len(code) > length:
            return code[:length]
        return code.ljust(length, encoder.ALPHABET[0])

    def is_valid_code(self, code: str) -> bool:
        """Check if code has the generated format (length and alphabet)."""
        return len(code) == self.default_length and encoder.is_valid_format(code)
