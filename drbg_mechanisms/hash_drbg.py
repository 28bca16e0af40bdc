"""
Hash_DRBG as specified in NIST SP 800-90A, section 10.1.1.
"""
from typing import Optional, Union

from entropy_sources.entropy_source import EntropySource
from .base_drbg import SP80090DRBG
from .primitives import Digest, get_digest, hash_df


def _add(a: int, b: int, seed_length: int) -> int:
    return (a + b) % (1 << seed_length)


class HashSP800DRBG(SP80090DRBG):
    """
    A DRBG built on a hash function.
    """
    def __init__(self, digest: Union[str, Digest], entropy_source: EntropySource,
                 nonce: Optional[bytes], personalization_string: Optional[bytes], security_strength: int):
        """
        Args:
            digest: Hash function to use, e.g. SHA256 or 'SHA-256'.
            entropy_source: Source of entropy for instantiation and reseeds.
            nonce: Nonce used in instantiation.
            personalization_string: Optional personalization string.
            security_strength: Requested security strength in bits.
        """
        self._digest = get_digest(digest)
        super().__init__(entropy_source, security_strength, self._digest.max_security_strength)

        self._seed_length = self._digest.seed_length
        self._seed_bytes = self._seed_length // 8
        self._v = 0
        self._c = 0

        self._instantiate(nonce, personalization_string)

    @property
    def block_size(self) -> int:
        return self._digest.digest_size * 8

    def _v_bytes(self) -> bytes:
        return self._v.to_bytes(self._seed_bytes, 'big')

    def _instantiate_algorithm(self, entropy: bytes, nonce: bytes, personalization_string: bytes) -> None:
        seed = hash_df(self._digest, entropy + nonce + personalization_string, self._seed_length)
        self._v = int.from_bytes(seed, 'big')
        self._c = int.from_bytes(hash_df(self._digest, b"\x00" + seed, self._seed_length), 'big')
        self._reseed_counter = 1

    def _reseed_algorithm(self, entropy: bytes, additional_input: bytes) -> None:
        seed = hash_df(self._digest, b"\x01" + self._v_bytes() + entropy + additional_input, self._seed_length)
        self._v = int.from_bytes(seed, 'big')
        self._c = int.from_bytes(hash_df(self._digest, b"\x00" + seed, self._seed_length), 'big')
        self._reseed_counter = 1

    def _hashgen(self, num_bytes: int) -> bytes:
        data = self._v
        output = bytearray()
        while len(output) < num_bytes:
            output += self._digest.hash(data.to_bytes(self._seed_bytes, 'big'))
            data = _add(data, 1, self._seed_length)
        return bytes(output[:num_bytes])

    def _generate_algorithm(self, num_bytes: int, additional_input: bytes) -> bytes:
        if additional_input:
            w = self._digest.hash(b"\x02", self._v_bytes(), additional_input)
            self._v = _add(self._v, int.from_bytes(w, 'big'), self._seed_length)

        returned = self._hashgen(num_bytes)

        h = int.from_bytes(self._digest.hash(b"\x03", self._v_bytes()), 'big')
        self._v = _add(self._v, h + self._c + self._reseed_counter, self._seed_length)
        self._reseed_counter += 1

        return returned
