"""
Alias generation strategies.
Uses Strategy Pattern to allow different generation algorithms.

Strategies never touch the database themselves: the caller passes an
`is_taken(candidate)` callable that answers "is this alias held by a
different (owner, URL) pair?".
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable

from alias_app.exceptions import ConflictError
from alias_app.utils import base62
from alias_app.utils.hashing import namespaced_hash

logger = logging.getLogger(__name__)

IsTaken = Callable[[str], bool]

# Number of hash-derived suffixes tried before falling back to randomness
DETERMINISTIC_SUFFIX_ATTEMPTS = 6
SUFFIX_LENGTH = 2
SUFFIX_SPACE = base62.BASE ** SUFFIX_LENGTH  # 3844
HASH_PREFIX_DIGITS = 10
SUFFIX_WINDOW_DIGITS = 4


class AliasStrategy(ABC):
    """Abstract base class for alias generation strategies"""

    length: int

    @abstractmethod
    def generate(self, normalized_url: str, owner_id: str, is_taken: IsTaken) -> str:
        """
        Generate an alias that is free for this (owner, URL) pair.

        Args:
            normalized_url: Canonical target URL
            owner_id: Owner identifier or anonymous sentinel
            is_taken: Existence check against the alias store

        Returns:
            Alias string from the Base62 alphabet

        Raises:
            ConflictError: If no free alias was found within the attempt cap
        """
        pass


class RandomAliasStrategy(AliasStrategy):
    """
    Random generation strategy.
    Generates random string and checks the store for uniqueness.

    Pros: Simple, unpredictable
    Cons: Not reproducible, one lookup per attempt
    """

    def __init__(self, length: int = 6, max_retries: int = 5):
        self.length = length
        self.max_retries = max_retries

    def generate(self, normalized_url: str, owner_id: str, is_taken: IsTaken) -> str:
        for _ in range(self.max_retries):
            alias = base62.random_string(self.length)
            if not is_taken(alias):
                return alias

        raise ConflictError(
            f"Could not generate unique alias after {self.max_retries} attempts"
        )


class DeterministicAliasStrategy(AliasStrategy):
    """
    Namespaced-hash strategy.

    Every (owner, URL) pair gets a short, reproducible alias without a
    database round-trip in the common case. Collisions are resolved with
    suffixes derived from the same hash, then with random suffixes.

    Pros: Same input -> same alias, idempotent re-shortening
    Cons: Short aliases collide more often under heavy load
    """

    def __init__(self, length: int = 6, max_random_attempts: int = 100):
        if length < SUFFIX_LENGTH:
            raise ValueError(f"Alias length must be at least {SUFFIX_LENGTH}, got {length}")
        self.length = length
        self.max_random_attempts = max_random_attempts

    def candidate(self, normalized_url: str, owner_id: str) -> str:
        """
        First-choice alias for a pair.

        Process:
        1. Namespaced hash of URL and owner (decimal digits)
        2. Base62-encode the first 10 digits
        3. Truncate or right-pad with "0" to the configured length
        """
        digits = namespaced_hash(normalized_url, owner_id)
        encoded = base62.encode(int(digits[:HASH_PREFIX_DIGITS]))
        return encoded[:self.length].ljust(self.length, base62.ALPHABET[0])

    @staticmethod
    def hash_suffix(digits: str, attempt: int) -> str:
        """
        Deterministic 2-symbol suffix for collision attempt 1..6.

        The digit string is rotated left by `attempt` positions and its first
        4 digits, taken mod 62**2, are Base62-encoded.
        """
        offset = attempt % len(digits)
        rotated = digits[offset:] + digits[:offset]
        value = int(rotated[:SUFFIX_WINDOW_DIGITS]) % SUFFIX_SPACE
        return base62.encode(value).rjust(SUFFIX_LENGTH, base62.ALPHABET[0])

    def generate(self, normalized_url: str, owner_id: str, is_taken: IsTaken) -> str:
        alias = self.candidate(normalized_url, owner_id)
        if not is_taken(alias):
            return alias

        stem = alias[:-SUFFIX_LENGTH]
        digits = namespaced_hash(normalized_url, owner_id)

        for attempt in range(1, DETERMINISTIC_SUFFIX_ATTEMPTS + 1):
            candidate = stem + self.hash_suffix(digits, attempt)
            if not is_taken(candidate):
                logger.debug(f"Alias '{alias}' taken, using hash suffix attempt {attempt}")
                return candidate

        logger.info(f"All hash suffixes for '{alias}' taken, falling back to random suffixes")
        for _ in range(self.max_random_attempts):
            candidate = stem + base62.random_string(SUFFIX_LENGTH)
            if not is_taken(candidate):
                return candidate

        raise ConflictError(
            f"Could not find a free alias for '{alias}' after "
            f"{DETERMINISTIC_SUFFIX_ATTEMPTS + self.max_random_attempts} collisions"
        )
