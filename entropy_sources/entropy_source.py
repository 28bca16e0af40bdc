"""
Entropy source interfaces used to seed and reseed DRBG mechanisms.

An EntropySourceProvider hands out one EntropySource per generator; the
source then supplies `entropy_size()` bits on every `get_entropy()` call.
"""
import logging
from abc import ABC, abstractmethod

from sp800_random.errors import EntropyUnavailable
from .random_source import RandomSourceInterface

logger = logging.getLogger(__name__)


class EntropySource(ABC):
    """A source of raw entropy bound to a single generator."""

    @abstractmethod
    def is_prediction_resistant(self) -> bool:
        """True if every call to get_entropy() returns fresh, independent entropy."""
        pass

    @abstractmethod
    def get_entropy(self) -> bytes:
        """
        Returns a block of entropy of (entropy_size() + 7) // 8 bytes.

        Raises:
            EntropyUnavailable: If the underlying source cannot deliver.
        """
        pass

    @abstractmethod
    def entropy_size(self) -> int:
        """Number of bits of entropy each get_entropy() call delivers."""
        pass


class EntropySourceProvider(ABC):
    """
    Factory for EntropySource objects. A provider may be shared between many
    builders, so get() must be safe to call from several threads; every call
    returns an independent EntropySource.
    """

    @abstractmethod
    def get(self, bits_required: int) -> EntropySource:
        pass


class _RandomSourceEntropySource(EntropySource):
    def __init__(self, random_source: RandomSourceInterface, bits_required: int, prediction_resistant: bool):
        self._random_source = random_source
        self._bits_required = bits_required
        self._prediction_resistant = prediction_resistant

    def is_prediction_resistant(self) -> bool:
        return self._prediction_resistant

    def get_entropy(self) -> bytes:
        num_bytes = (self._bits_required + 7) // 8
        entropy = self._random_source.get_random_bytes(num_bytes)
        if entropy is None or len(entropy) < num_bytes:
            raise EntropyUnavailable(
                f"Random source returned {0 if entropy is None else len(entropy)} bytes, {num_bytes} required.")
        return entropy

    def entropy_size(self) -> int:
        return self._bits_required


class BasicEntropySourceProvider(EntropySourceProvider):
    """
    An EntropySourceProvider where entropy is drawn directly from a
    general-purpose random source.
    """
    def __init__(self, random_source: RandomSourceInterface, prediction_resistant: bool):
        """
        Args:
            random_source: The source entropy is drawn from.
            prediction_resistant: Whether the random source is trusted to give
                                  fresh entropy on each call.
        """
        if not isinstance(random_source, RandomSourceInterface):
            raise TypeError("random_source must be an instance of RandomSourceInterface.")
        self._random_source = random_source
        self._prediction_resistant = prediction_resistant

    def get(self, bits_required: int) -> EntropySource:
        if not isinstance(bits_required, int):
            raise TypeError("bits_required must be an integer.")
        if bits_required <= 0:
            raise ValueError("bits_required must be a positive integer.")
        logger.debug("[BasicEntropySourceProvider] New entropy source of %d bits from %s",
                     bits_required, self._random_source.__class__.__name__)
        return _RandomSourceEntropySource(self._random_source, bits_required, self._prediction_resistant)


def generate_seed(entropy_source: EntropySource, num_bytes: int) -> bytes:
    """
    Generates a seed of num_bytes by drawing repeatedly from entropy_source.

    Args:
        entropy_source: The source to draw from.
        num_bytes: Length of the seed required.

    Returns:
        num_bytes of raw entropy.
    """
    if not isinstance(num_bytes, int):
        raise TypeError("Number of bytes must be an integer.")
    if num_bytes < 0:
        raise ValueError("Number of bytes must be non-negative.")

    seed = bytearray()
    while len(seed) < num_bytes:
        block = entropy_source.get_entropy()
        if not block:
            raise EntropyUnavailable("Entropy source returned no data while generating a seed.")
        seed.extend(block)
    return bytes(seed[:num_bytes])
