# sp800_random/secure_random.py
"""
The random number generator handed back by SP800SecureRandomBuilder.

Wraps one SP 800-90A mechanism together with its entropy source and enforces
the reseed policy: prediction resistant generators reseed before every
request, the others only when asked to or when the mechanism's reseed
interval runs out.
"""
import logging
from typing import Optional

from drbg_mechanisms.base_drbg import SP80090DRBG
from entropy_sources.entropy_source import EntropySource, generate_seed
from entropy_sources.random_source import RandomSourceInterface

from .errors import MechanismFault

logger = logging.getLogger(__name__)


class SP800SecureRandom:
    """
    A random bit generator backed by an SP 800-90A DRBG.

    Not safe for concurrent use: mechanism state changes on every call, so
    callers sharing an instance between threads must serialize access.
    """
    def __init__(self,
                 random_source: Optional[RandomSourceInterface],
                 entropy_source: EntropySource,
                 drbg: SP80090DRBG,
                 prediction_resistant: bool,
                 algorithm: str = "SP800-DRBG"):
        """
        Args:
            random_source: Optional general-purpose source, borrowed from the builder.
                           Only used for set_seed() and to supplement explicit reseeds.
            entropy_source: The entropy source the DRBG was instantiated from.
            drbg: The instantiated mechanism, owned by this generator.
            prediction_resistant: Reseed before every request if True.
            algorithm: Name of the mechanism, e.g. 'HASH-DRBG-SHA256'.
        """
        self._random_source = random_source
        self._entropy_source = entropy_source
        self._drbg = drbg
        self._prediction_resistant = bool(prediction_resistant)
        self._algorithm = algorithm
        self._faulted = False

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def prediction_resistant(self) -> bool:
        return self._prediction_resistant

    def _check_usable(self) -> None:
        if self._faulted:
            raise MechanismFault(f"{self._algorithm} generator has failed and can no longer be used.")

    def _generate_chunk(self, num_bytes: int, additional_input: Optional[bytes]) -> bytes:
        try:
            output = self._drbg.generate(num_bytes, additional_input, self._prediction_resistant)
            if output is None:
                logger.debug("[SP800SecureRandom] %s reseed interval exhausted, reseeding.", self._algorithm)
                self._drbg.reseed(None)
                output = self._drbg.generate(num_bytes, additional_input, self._prediction_resistant)
                if output is None:
                    raise MechanismFault(f"{self._algorithm} still requires a reseed immediately after reseeding.")
        except MechanismFault:
            self._faulted = True
            raise
        return output

    def generate_bytes(self, count: int, additional_input: Optional[bytes] = None) -> bytes:
        """
        Returns count random bytes.

        Requests larger than the mechanism's per-request limit are served in
        several generate calls; additional_input only goes into the first.

        Raises:
            EntropyUnavailable: If a required reseed cannot get entropy.
            MechanismFault: If the mechanism fails or keeps asking for a reseed. The
                            generator cannot be used after that.
        """
        if not isinstance(count, int):
            raise TypeError("Number of bytes must be an integer.")
        if count < 0:
            raise ValueError("Number of bytes must be non-negative.")
        self._check_usable()
        if count == 0:
            return b""

        max_chunk = self._drbg.MAX_BITS_REQUEST // 8
        output = bytearray()
        while len(output) < count:
            output += self._generate_chunk(min(max_chunk, count - len(output)), additional_input)
            additional_input = None
        return bytes(output)

    def next_bytes(self, buffer: bytearray) -> None:
        """Fills buffer in place with random bytes."""
        buffer[:] = self.generate_bytes(len(buffer))

    def reseed(self, additional_input: Optional[bytes] = None) -> None:
        """
        Reseeds the underlying DRBG with fresh entropy, the caller's
        additional input and, when the builder had one, bytes from the
        general-purpose random source.
        """
        self._check_usable()
        additional_input = bytes(additional_input or b"")
        if self._random_source is not None:
            additional_input += self._random_source.get_random_bytes((self._drbg.security_strength + 7) // 8)
        try:
            self._drbg.reseed(additional_input)
        except MechanismFault:
            self._faulted = True
            raise

    def generate_seed(self, num_bytes: int) -> bytes:
        """Returns num_bytes of raw entropy from the bound entropy source."""
        return generate_seed(self._entropy_source, num_bytes)

    def set_seed(self, seed: bytes) -> None:
        """
        Passes seed to the general-purpose random source if there is one.
        Ignored for generators built from an explicit entropy source provider.
        """
        if self._random_source is not None:
            self._random_source.set_seed(seed)
