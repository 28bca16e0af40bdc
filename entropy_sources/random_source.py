"""
General-purpose randomness sources.

A random source is what a builder is constructed from: it backs the basic
entropy source provider and doubles as the auxiliary source whose bytes are
mixed into explicit reseeds. Includes an abstract interface, sources built on
`os.urandom` and the `secrets` module, and a mock source for testing.
"""
import secrets
import os
from abc import ABC, abstractmethod
from typing import List

from sp800_random.errors import EntropyUnavailable


class RandomSourceInterface(ABC):
    """
    Abstract Base Class for general-purpose randomness sources.
    Defines the interface for acquiring random bytes.
    """
    @abstractmethod
    def get_random_bytes(self, num_bytes: int) -> bytes:
        """
        Generates and returns a specified number of random bytes.

        Args:
            num_bytes: The number of random bytes to generate.

        Returns:
            A bytes object containing the random data.

        Raises:
            ValueError: If num_bytes is negative.
            EntropyUnavailable: If there's an issue fetching bytes from the source.
        """
        pass

    def set_seed(self, seed: bytes) -> None:
        """
        Supplements the source with caller-provided seed material.
        OS-backed sources cannot be seeded, so the default ignores it.
        """
        pass


def _check_num_bytes(num_bytes: int) -> None:
    if not isinstance(num_bytes, int):
        raise TypeError("Number of bytes must be an integer.")
    if num_bytes < 0:
        raise ValueError("Number of bytes must be non-negative.")


class OsUrandomRandomSource(RandomSourceInterface):
    """
    A random source that uses Python's `os.urandom`.
    `os.urandom` is suitable for cryptographic use.
    """
    def get_random_bytes(self, num_bytes: int) -> bytes:
        _check_num_bytes(num_bytes)
        try:
            return os.urandom(num_bytes)
        except OSError as e:
            raise EntropyUnavailable(f"Error generating random bytes from os.urandom: {e}") from e


class SecretsRandomSource(RandomSourceInterface):
    """
    A random source that uses Python's `secrets` module
    for cryptographically strong random number generation.
    """
    def get_random_bytes(self, num_bytes: int) -> bytes:
        _check_num_bytes(num_bytes)
        try:
            return secrets.token_bytes(num_bytes)
        except OSError as e:
            raise EntropyUnavailable(f"Error generating random bytes using 'secrets' module: {e}") from e


class MockRandomSource(RandomSourceInterface):
    """
    A mock random source for testing purposes.
    Returns predictable, non-random byte sequences based on a seed byte.
    Each call continues the sequence where the previous one stopped, so two
    calls never return the same bytes when `increment` is True.
    """
    def __init__(self, seed_byte: int = 0xAA, increment: bool = True):
        """
        Initializes the MockRandomSource.

        Args:
            seed_byte: The starting byte value (0-255).
            increment: If True, subsequent bytes increment from seed_byte.
                       If False, all bytes will be seed_byte.
        """
        if not (0 <= seed_byte <= 255):
            raise ValueError("seed_byte must be between 0 and 255.")
        self.seed_byte = seed_byte
        self.increment = increment
        self.calls = 0
        self.seeds_received: List[bytes] = []
        self._position = 0

    def get_random_bytes(self, num_bytes: int) -> bytes:
        _check_num_bytes(num_bytes)
        self.calls += 1

        if self.increment:
            out = bytes([(self.seed_byte + self._position + i) % 256 for i in range(num_bytes)])
            self._position += num_bytes
            return out
        else:
            return bytes([self.seed_byte] * num_bytes)

    def set_seed(self, seed: bytes) -> None:
        self.seeds_received.append(bytes(seed))
