# api_server/core/generator.py
"""
The DRBG instance shared by all API requests.

SP800SecureRandom is not thread-safe and FastAPI runs sync endpoints in a
thread pool, so every call goes through a lock.
"""
import logging
import os
import threading
from typing import Optional

from drbg_mechanisms.primitives import AES, SHA256, HMac
from entropy_sources.random_source import OsUrandomRandomSource
from sp800_random.builder import SP800SecureRandomBuilder
from sp800_random.config import default_prediction_resistant
from sp800_random.secure_random import SP800SecureRandom

logger = logging.getLogger(__name__)

MECHANISM_ENV_VAR = "SP800_API_MECHANISM"
DEFAULT_MECHANISM = "hash"
SUPPORTED_MECHANISMS = ("hash", "hmac", "ctr", "dual_ec")
NONCE_SIZE_BYTES = 16
PERSONALIZATION_STRING = b"sp800-drbg-api-server"


class SharedGenerator:
    """Serializes access to one SP800SecureRandom."""

    def __init__(self, generator: SP800SecureRandom, security_strength: int):
        self._generator = generator
        self._lock = threading.Lock()
        self.security_strength = security_strength

    @property
    def algorithm(self) -> str:
        return self._generator.algorithm

    @property
    def prediction_resistant(self) -> bool:
        return self._generator.prediction_resistant

    def generate_bytes(self, count: int, additional_input: Optional[bytes] = None) -> bytes:
        with self._lock:
            return self._generator.generate_bytes(count, additional_input)

    def reseed(self, additional_input: Optional[bytes] = None) -> None:
        with self._lock:
            self._generator.reseed(additional_input)


def build_server_generator(mechanism: Optional[str] = None) -> SharedGenerator:
    """
    Builds the server's generator from the environment.

    Args:
        mechanism: One of SUPPORTED_MECHANISMS; defaults to SP800_API_MECHANISM or 'hash'.
    """
    mechanism = (mechanism or os.environ.get(MECHANISM_ENV_VAR, DEFAULT_MECHANISM)).strip().lower()
    if mechanism not in SUPPORTED_MECHANISMS:
        raise ValueError(f"Unsupported mechanism '{mechanism}'. Expected one of {SUPPORTED_MECHANISMS}.")

    random_source = OsUrandomRandomSource()
    builder = SP800SecureRandomBuilder(random_source, default_prediction_resistant())
    builder.set_personalization_string(PERSONALIZATION_STRING)
    config = builder.config
    nonce = random_source.get_random_bytes(NONCE_SIZE_BYTES)
    prediction_resistant = default_prediction_resistant()

    if mechanism == "hash":
        generator = builder.build_hash(SHA256, nonce, prediction_resistant)
    elif mechanism == "hmac":
        generator = builder.build_hmac(HMac(SHA256), nonce, prediction_resistant)
    elif mechanism == "ctr":
        generator = builder.build(AES, 256, None, nonce, prediction_resistant)
    else:
        generator = builder.build_dual_ec(SHA256, nonce, prediction_resistant)

    logger.info("[api_server] Serving random bytes from %s.", generator.algorithm)
    return SharedGenerator(generator, config.security_strength)
