# sp800_random/mechanism_providers.py
"""
The four ways of turning an entropy source into an SP 800-90A DRBG.

This is a closed set that mirrors the mechanisms SP 800-90A defines; the
builder routes each build call to exactly one of them. Each provider is an
immutable snapshot of the mechanism parameters plus the builder configuration
taken at build time.
"""
from dataclasses import dataclass
from typing import Optional, Union

from drbg_mechanisms.base_drbg import SP80090DRBG
from drbg_mechanisms.ctr_drbg import CTRSP800DRBG
from drbg_mechanisms.dual_ec_drbg import DualECSP800DRBG
from drbg_mechanisms.hash_drbg import HashSP800DRBG
from drbg_mechanisms.hmac_drbg import HMacSP800DRBG
from drbg_mechanisms.primitives import BlockCipher, Digest, HMac
from entropy_sources.entropy_source import EntropySource

from .errors import ConfigurationError


def _check_strength(security_strength: int, max_strength: int, primitive: str) -> None:
    if security_strength > max_strength:
        raise ConfigurationError(
            f"Requested security strength {security_strength} is not supported by {primitive} "
            f"(maximum {max_strength}).")


@dataclass(frozen=True)
class HashDRBGProvider:
    digest: Digest
    nonce: Optional[bytes]
    personalization_string: Optional[bytes]
    security_strength: int

    @property
    def algorithm(self) -> str:
        return f"HASH-DRBG-{self.digest.name}"

    def check_security_strength(self) -> None:
        _check_strength(self.security_strength, self.digest.max_security_strength, self.digest.name)

    def get(self, entropy_source: EntropySource) -> SP80090DRBG:
        return HashSP800DRBG(self.digest, entropy_source, self.nonce, self.personalization_string,
                             self.security_strength)


@dataclass(frozen=True)
class HMacDRBGProvider:
    hmac: HMac
    nonce: Optional[bytes]
    personalization_string: Optional[bytes]
    security_strength: int

    @property
    def algorithm(self) -> str:
        return f"HMAC-DRBG-{self.hmac.name}"

    def check_security_strength(self) -> None:
        _check_strength(self.security_strength, self.hmac.max_security_strength, f"HMAC-{self.hmac.name}")

    def get(self, entropy_source: EntropySource) -> SP80090DRBG:
        return HMacSP800DRBG(self.hmac, entropy_source, self.nonce, self.personalization_string,
                             self.security_strength)


@dataclass(frozen=True)
class CTRDRBGProvider:
    block_cipher: BlockCipher
    key_size_bits: int
    nonce: Optional[bytes]
    personalization_string: Optional[bytes]
    security_strength: int

    @property
    def algorithm(self) -> str:
        return f"CTR-DRBG-{self.block_cipher.name}{self.key_size_bits}"

    def check_security_strength(self) -> None:
        if self.key_size_bits not in self.block_cipher.key_sizes:
            raise ConfigurationError(
                f"Key size {self.key_size_bits} is not supported by {self.block_cipher.name}.")
        _check_strength(self.security_strength, self.block_cipher.max_security_strength(self.key_size_bits),
                        f"{self.block_cipher.name}-{self.key_size_bits}")

    def get(self, entropy_source: EntropySource) -> SP80090DRBG:
        return CTRSP800DRBG(self.block_cipher, self.key_size_bits, entropy_source, self.nonce,
                            self.personalization_string, self.security_strength)


@dataclass(frozen=True)
class DualECDRBGProvider:
    digest: Digest
    nonce: Optional[bytes]
    personalization_string: Optional[bytes]
    security_strength: int

    @property
    def algorithm(self) -> str:
        return f"Dual-EC-DRBG-{self.digest.name}"

    def check_security_strength(self) -> None:
        _check_strength(self.security_strength, min(self.digest.max_security_strength, 256), self.digest.name)

    def get(self, entropy_source: EntropySource) -> SP80090DRBG:
        return DualECSP800DRBG(self.digest, entropy_source, self.nonce, self.personalization_string,
                               self.security_strength)


DRBGProvider = Union[HashDRBGProvider, HMacDRBGProvider, CTRDRBGProvider, DualECDRBGProvider]
