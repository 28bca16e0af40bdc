"""
Common base for the SP 800-90A DRBG mechanisms.

Handles what all four mechanisms share: the security strength checks made at
instantiation, entropy acquisition, request length limits, the reseed counter
and prediction resistance. Subclasses provide the instantiate, reseed and
generate algorithms.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from entropy_sources.entropy_source import EntropySource
from sp800_random.errors import ConfigurationError, EntropyUnavailable

logger = logging.getLogger(__name__)


class SP80090DRBG(ABC):
    """
    Interface and shared behaviour of an SP 800-90A DRBG.

    generate() returns None when the reseed interval is exhausted; the caller
    is expected to reseed() and try again.
    """
    RESEED_MAX = 1 << (48 - 1)
    MAX_BITS_REQUEST = 1 << (19 - 1)
    MAX_ADDITIONAL_BYTES = 1 << (35 - 3)
    MAX_PERSONALIZATION_BYTES = 1 << (35 - 3)

    def __init__(self, entropy_source: EntropySource, security_strength: int, max_security_strength: int):
        if not isinstance(entropy_source, EntropySource):
            raise TypeError("entropy_source must be an instance of EntropySource.")
        if not isinstance(security_strength, int) or security_strength <= 0:
            raise ConfigurationError("Security strength must be a positive integer.")
        if security_strength > max_security_strength:
            raise ConfigurationError(
                f"Requested security strength {security_strength} is not supported by the "
                f"underlying primitive (maximum {max_security_strength}).")
        if entropy_source.entropy_size() < security_strength:
            raise ConfigurationError("Not enough entropy for security strength required.")

        self._entropy_source = entropy_source
        self.security_strength = security_strength
        self.reseed_interval = self.RESEED_MAX
        self._reseed_counter = 0

    @property
    @abstractmethod
    def block_size(self) -> int:
        """Size of one output block of the mechanism, in bits."""
        pass

    @property
    def reseed_counter(self) -> int:
        return self._reseed_counter

    def _instantiate(self, nonce: Optional[bytes], personalization_string: Optional[bytes]) -> None:
        personalization_string = personalization_string or b""
        if len(personalization_string) > self.MAX_PERSONALIZATION_BYTES:
            raise ConfigurationError("Personalization string too large.")
        entropy = self._get_entropy()
        self._instantiate_algorithm(entropy, nonce or b"", personalization_string)
        logger.debug("[%s] Instantiated at security strength %d.", self.__class__.__name__, self.security_strength)

    def _get_entropy(self) -> bytes:
        entropy = self._entropy_source.get_entropy()
        if entropy is None or len(entropy) < (self.security_strength + 7) // 8:
            raise EntropyUnavailable("Insufficient entropy provided by entropy source.")
        return entropy

    def _check_additional_input(self, additional_input: Optional[bytes]) -> bytes:
        additional_input = additional_input or b""
        if len(additional_input) > self.MAX_ADDITIONAL_BYTES:
            raise ValueError("Additional input too large.")
        return additional_input

    def generate(self, num_bytes: int, additional_input: Optional[bytes] = None,
                 prediction_resistant: bool = False) -> Optional[bytes]:
        """
        Generates num_bytes of output.

        Args:
            num_bytes: Number of bytes requested.
            additional_input: Optional additional input mixed into this request.
            prediction_resistant: Reseed from the entropy source before generating.

        Returns:
            The generated bytes, or None if a reseed is required first.
        """
        if not isinstance(num_bytes, int):
            raise TypeError("Number of bytes must be an integer.")
        if num_bytes < 0:
            raise ValueError("Number of bytes must be non-negative.")
        if num_bytes * 8 > self.MAX_BITS_REQUEST:
            raise ValueError(f"Number of bits per request limited to {self.MAX_BITS_REQUEST}.")
        additional_input = self._check_additional_input(additional_input)

        if prediction_resistant:
            self.reseed(additional_input)
            additional_input = b""

        if self._reseed_counter > self.reseed_interval:
            return None

        return self._generate_algorithm(num_bytes, additional_input)

    def reseed(self, additional_input: Optional[bytes] = None) -> None:
        """Reseeds the mechanism with fresh entropy and optional additional input."""
        additional_input = self._check_additional_input(additional_input)
        entropy = self._get_entropy()
        self._reseed_algorithm(entropy, additional_input)
        logger.debug("[%s] Reseeded.", self.__class__.__name__)

    @abstractmethod
    def _instantiate_algorithm(self, entropy: bytes, nonce: bytes, personalization_string: bytes) -> None:
        pass

    @abstractmethod
    def _reseed_algorithm(self, entropy: bytes, additional_input: bytes) -> None:
        pass

    @abstractmethod
    def _generate_algorithm(self, num_bytes: int, additional_input: bytes) -> bytes:
        pass
