# sp800_random/builder.py
"""
Builder for SP800SecureRandom objects based on SP 800-90A Deterministic
Random Bit Generators (DRBG).
"""
import logging
from typing import Optional, Union

from drbg_mechanisms.primitives import BlockCipher, Digest, HMac, get_block_cipher, get_digest, get_hmac
from entropy_sources.entropy_source import BasicEntropySourceProvider, EntropySourceProvider
from entropy_sources.random_source import OsUrandomRandomSource, RandomSourceInterface

from .config import BuilderConfig, default_prediction_resistant
from .errors import ConfigurationError
from .mechanism_providers import (
    CTRDRBGProvider, DRBGProvider, DualECDRBGProvider, HashDRBGProvider, HMacDRBGProvider
)
from .secure_random import SP800SecureRandom

logger = logging.getLogger(__name__)


class SP800SecureRandomBuilder:
    """
    Collects configuration (personalization string, security strength and
    entropy bits required) and builds independent SP800SecureRandom objects
    from it. Setters return the builder so calls can be chained.

    There are three ways to construct a builder:

    - ``SP800SecureRandomBuilder()``: entropy comes from ``os.urandom``, not
      treated as prediction resistant.
    - ``SP800SecureRandomBuilder(random_source, prediction_resistant)``: entropy
      comes from random_source. Generators built this way pass set_seed() input
      on to random_source and mix its bytes into explicit reseeds.
    - ``SP800SecureRandomBuilder(entropy_source_provider=provider)``: entropy comes
      from provider; set_seed() on the resulting generators is ignored.
    """
    def __init__(self,
                 random_source: Optional[RandomSourceInterface] = None,
                 prediction_resistant: Optional[bool] = None,
                 entropy_source_provider: Optional[EntropySourceProvider] = None,
                 config: Optional[BuilderConfig] = None):
        if entropy_source_provider is not None:
            if random_source is not None:
                raise TypeError("Pass either random_source or entropy_source_provider, not both.")
            if not isinstance(entropy_source_provider, EntropySourceProvider):
                raise TypeError("entropy_source_provider must be an instance of EntropySourceProvider.")
            self._random_source = None
            self._entropy_source_provider = entropy_source_provider
        else:
            if random_source is None:
                random_source = OsUrandomRandomSource()
            if prediction_resistant is None:
                prediction_resistant = default_prediction_resistant()
            self._random_source = random_source
            self._entropy_source_provider = BasicEntropySourceProvider(random_source, prediction_resistant)

        config = config or BuilderConfig.create()
        self._personalization_string = config.personalization_string
        self._security_strength = config.security_strength
        self._entropy_bits_required = config.entropy_bits_required

    def set_personalization_string(self, personalization_string: Optional[bytes]) -> "SP800SecureRandomBuilder":
        self._personalization_string = personalization_string
        return self

    def set_security_strength(self, security_strength: int) -> "SP800SecureRandomBuilder":
        self._security_strength = security_strength
        return self

    def set_entropy_bits_required(self, entropy_bits_required: int) -> "SP800SecureRandomBuilder":
        self._entropy_bits_required = entropy_bits_required
        return self

    @property
    def config(self) -> BuilderConfig:
        """A validated snapshot of the current configuration."""
        return BuilderConfig.create(
            personalization_string=self._personalization_string,
            security_strength=self._security_strength,
            entropy_bits_required=self._entropy_bits_required,
        )

    def _build(self, provider: DRBGProvider, config: BuilderConfig, prediction_resistant: bool) -> SP800SecureRandom:
        # Everything that can be checked without entropy is checked first.
        config.check_entropy()
        provider.check_security_strength()

        entropy_source = self._entropy_source_provider.get(config.entropy_bits_required)
        if prediction_resistant and not entropy_source.is_prediction_resistant():
            logger.warning("[SP800SecureRandomBuilder] %s requested prediction resistance but the entropy "
                           "source does not claim to be prediction resistant.", provider.algorithm)

        drbg = provider.get(entropy_source)
        logger.debug("[SP800SecureRandomBuilder] Built %s (strength %d, entropy %d bits, prediction resistant=%s).",
                     provider.algorithm, config.security_strength, config.entropy_bits_required,
                     prediction_resistant)
        return SP800SecureRandom(self._random_source, entropy_source, drbg, prediction_resistant,
                                 algorithm=provider.algorithm)

    def build_hash(self, digest: Union[str, Digest], nonce: Optional[bytes],
                   prediction_resistant: bool) -> SP800SecureRandom:
        """
        Build an SP800SecureRandom based on an SP 800-90A Hash DRBG.

        Args:
            digest: digest algorithm to use in the DRBG, e.g. SHA256 or 'SHA-256'.
            nonce: nonce value to use in DRBG construction.
            prediction_resistant: whether the DRBG should reseed on each request for bytes.

        Returns:
            An SP800SecureRandom supported by a Hash DRBG.
        """
        config = self.config
        provider = HashDRBGProvider(get_digest(digest), nonce, config.personalization_string,
                                    config.security_strength)
        return self._build(provider, config, prediction_resistant)

    def build_hmac(self, mac: Union[str, Digest, HMac], nonce: Optional[bytes],
                   prediction_resistant: bool) -> SP800SecureRandom:
        """
        Build an SP800SecureRandom based on an SP 800-90A HMAC DRBG.

        Args:
            mac: HMAC algorithm to use, e.g. HMac(SHA256), SHA256 or 'HMAC-SHA256'.
            nonce: nonce value to use in DRBG construction.
            prediction_resistant: whether the DRBG should reseed on each request for bytes.

        Returns:
            An SP800SecureRandom supported by an HMAC DRBG.
        """
        config = self.config
        provider = HMacDRBGProvider(get_hmac(mac), nonce, config.personalization_string,
                                    config.security_strength)
        return self._build(provider, config, prediction_resistant)

    def build(self, cipher: Union[str, BlockCipher], key_size_bits: int, seed_length: Optional[int],
              nonce: Optional[bytes], prediction_resistant: bool) -> SP800SecureRandom:
        """
        Build an SP800SecureRandom based on an SP 800-90A CTR DRBG.

        Args:
            cipher: block cipher to use, e.g. AES.
            key_size_bits: key size of the cipher in bits.
            seed_length: seedlen in bits; must equal key size plus block size. None derives it.
            nonce: nonce value to use in DRBG construction.
            prediction_resistant: whether the DRBG should reseed on each request for bytes.

        Returns:
            An SP800SecureRandom supported by a CTR DRBG.
        """
        block_cipher = get_block_cipher(cipher)
        if seed_length is not None and seed_length != key_size_bits + block_cipher.block_size:
            raise ConfigurationError(
                f"Seed length {seed_length} does not match {block_cipher.name}-{key_size_bits} "
                f"(expected {key_size_bits + block_cipher.block_size}).")
        config = self.config
        provider = CTRDRBGProvider(block_cipher, key_size_bits, nonce, config.personalization_string,
                                   config.security_strength)
        return self._build(provider, config, prediction_resistant)

    def build_dual_ec(self, digest: Union[str, Digest], nonce: Optional[bytes],
                      prediction_resistant: bool) -> SP800SecureRandom:
        """
        Build an SP800SecureRandom based on an SP 800-90A Dual EC DRBG.

        Args:
            digest: digest algorithm to use in the DRBG.
            nonce: nonce value to use in DRBG construction.
            prediction_resistant: whether the DRBG should reseed on each request for bytes.

        Returns:
            An SP800SecureRandom supported by a Dual EC DRBG.
        """
        config = self.config
        provider = DualECDRBGProvider(get_digest(digest), nonce, config.personalization_string,
                                      config.security_strength)
        return self._build(provider, config, prediction_resistant)
