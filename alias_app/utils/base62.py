"""
Base62 codec for aliases.

Base62 uses: 0-9 (10) + a-z (26) + A-Z (26) = 62 characters.
The alphabet order is part of the stored alias format: changing it makes
previously issued deterministic aliases unreachable.
"""

import random

from alias_app.exceptions import InvalidCharacterError

ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
BASE = len(ALPHABET)

_INDEX = {char: index for index, char in enumerate(ALPHABET)}


def encode(number: int) -> str:
    """
    Convert a non-negative integer to a Base62 string.

    Most significant symbol first, encode(0) == "0".
    """
    if number < 0:
        raise ValueError(f"Cannot Base62-encode negative number {number}")

    if number == 0:
        return ALPHABET[0]

    result = ""
    while number > 0:
        result = ALPHABET[number % BASE] + result
        number //= BASE

    return result


def decode(value: str) -> int:
    """
    Convert a Base62 string back to an integer.

    Raises:
        InvalidCharacterError: If a symbol is outside the alphabet
    """
    number = 0
    for char in value:
        index = _INDEX.get(char)
        if index is None:
            raise InvalidCharacterError(f"Invalid Base62 character: {char!r}")
        number = number * BASE + index
    return number


def random_string(length: int) -> str:
    """Random Base62 string. Not cryptographically secure."""
    return "".join(random.choice(ALPHABET) for _ in range(length))
