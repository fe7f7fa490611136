"""Base62 encoding utilities for short codes."""

import string

# Digits, then uppercase, then lowercase. The order is part of the code format.
ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
BASE = len(ALPHABET)

_INDEX = {char: position for position, char in enumerate(ALPHABET)}


class InvalidEncodingError(ValueError):
    """Raised when a string cannot be decoded with the base62 alphabet."""


def encode(num: int) -> str:
    """Convert a non-negative integer to its minimal base62 string.

    Args:
        num: Integer to convert

    Returns:
        Base62 string (``"0"`` for zero, no leading zero symbols otherwise)

    Raises:
        ValueError: If num is negative
    """
    if num < 0:
        raise ValueError(f"Cannot encode negative integer: {num}")

    if num == 0:
        return ALPHABET[0]

    result = []
    while num > 0:
        num, remainder = divmod(num, BASE)
        result.append(ALPHABET[remainder])

    return ''.join(reversed(result))


def decode(code: str) -> int:
    """Convert a base62 string back to an integer.

    Args:
        code: Base62 string

    Returns:
        Integer value

    Raises:
        InvalidEncodingError: If code is empty or has a symbol outside the alphabet
    """
    if not code:
        raise InvalidEncodingError("Cannot decode an empty string")

    result = 0
    for char in code:
        try:
            result = result * BASE + _INDEX[char]
        except KeyError:
            raise InvalidEncodingError(f"Invalid base62 symbol {char!r} in {code!r}") from None

    return result


def is_valid_format(code: str) -> bool:
    """Check that every symbol of code belongs to the alphabet."""
    return bool(code) and all(c in _INDEX for c in code)
