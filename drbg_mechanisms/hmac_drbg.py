"""
HMAC_DRBG as specified in NIST SP 800-90A, section 10.1.2.
"""
from typing import Optional, Union

from entropy_sources.entropy_source import EntropySource
from .base_drbg import SP80090DRBG
from .primitives import Digest, HMac, get_hmac


class HMacSP800DRBG(SP80090DRBG):
    """
    A DRBG built on an HMAC.
    """
    def __init__(self, hmac: Union[str, Digest, HMac], entropy_source: EntropySource,
                 nonce: Optional[bytes], personalization_string: Optional[bytes], security_strength: int):
        self._hmac = get_hmac(hmac)
        super().__init__(entropy_source, security_strength, self._hmac.max_security_strength)

        self._k = b""
        self._v = b""

        self._instantiate(nonce, personalization_string)

    @property
    def block_size(self) -> int:
        return self._hmac.mac_size * 8

    def _update(self, provided_data: bytes) -> None:
        self._k = self._hmac.mac(self._k, self._v, b"\x00", provided_data)
        self._v = self._hmac.mac(self._k, self._v)
        if provided_data:
            self._k = self._hmac.mac(self._k, self._v, b"\x01", provided_data)
            self._v = self._hmac.mac(self._k, self._v)

    def _instantiate_algorithm(self, entropy: bytes, nonce: bytes, personalization_string: bytes) -> None:
        self._k = b"\x00" * self._hmac.mac_size
        self._v = b"\x01" * self._hmac.mac_size
        self._update(entropy + nonce + personalization_string)
        self._reseed_counter = 1

    def _reseed_algorithm(self, entropy: bytes, additional_input: bytes) -> None:
        self._update(entropy + additional_input)
        self._reseed_counter = 1

    def _generate_algorithm(self, num_bytes: int, additional_input: bytes) -> bytes:
        if additional_input:
            self._update(additional_input)

        output = bytearray()
        while len(output) < num_bytes:
            self._v = self._hmac.mac(self._k, self._v)
            output += self._v

        self._update(additional_input)
        self._reseed_counter += 1

        return bytes(output[:num_bytes])
