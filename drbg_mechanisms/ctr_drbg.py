"""
CTR_DRBG as specified in NIST SP 800-90A, section 10.2.1, always using the
block cipher derivation function (section 10.3.2).
"""
from typing import Optional, Union

from entropy_sources.entropy_source import EntropySource
from sp800_random.errors import ConfigurationError
from .base_drbg import SP80090DRBG
from .primitives import BlockCipher, get_block_cipher


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


class CTRSP800DRBG(SP80090DRBG):
    """
    A DRBG built on a block cipher running in counter mode.
    """
    def __init__(self, cipher: Union[str, BlockCipher], key_size_bits: int, entropy_source: EntropySource,
                 nonce: Optional[bytes], personalization_string: Optional[bytes], security_strength: int):
        """
        Args:
            cipher: Block cipher to use, e.g. AES.
            key_size_bits: Key size of the cipher in bits.
            entropy_source: Source of entropy for instantiation and reseeds.
            nonce: Nonce used in instantiation.
            personalization_string: Optional personalization string.
            security_strength: Requested security strength in bits.
        """
        self._cipher = get_block_cipher(cipher)
        if key_size_bits not in self._cipher.key_sizes:
            raise ConfigurationError(
                f"Key size {key_size_bits} is not supported by {self._cipher.name}.")
        super().__init__(entropy_source, security_strength, self._cipher.max_security_strength(key_size_bits))

        self._key_len = key_size_bits // 8
        self._out_len = self._cipher.block_size // 8
        self._seed_len = self._key_len + self._out_len
        self._key = b""
        self._v = b""

        self._instantiate(nonce, personalization_string)

    @property
    def block_size(self) -> int:
        return self._cipher.block_size

    @property
    def seed_length(self) -> int:
        """seedlen in bits (key length plus block length)."""
        return self._seed_len * 8

    def _increment_v(self) -> None:
        modulus = 1 << (self._out_len * 8)
        self._v = ((int.from_bytes(self._v, 'big') + 1) % modulus).to_bytes(self._out_len, 'big')

    def _update(self, provided_data: bytes) -> None:
        temp = bytearray()
        while len(temp) < self._seed_len:
            self._increment_v()
            temp += self._cipher.encrypt_block(self._key, self._v)
        temp = _xor(bytes(temp[:self._seed_len]), provided_data)
        self._key = temp[:self._key_len]
        self._v = temp[self._key_len:]

    def _bcc(self, key: bytes, data: bytes) -> bytes:
        chaining_value = b"\x00" * self._out_len
        for i in range(0, len(data), self._out_len):
            chaining_value = self._cipher.encrypt_block(key, _xor(chaining_value, data[i:i + self._out_len]))
        return chaining_value

    def _block_cipher_df(self, input_string: bytes, num_bytes: int) -> bytes:
        """Block_Cipher_df from SP 800-90A section 10.3.2."""
        s = len(input_string).to_bytes(4, 'big') + num_bytes.to_bytes(4, 'big') + input_string + b"\x80"
        if len(s) % self._out_len:
            s += b"\x00" * (self._out_len - len(s) % self._out_len)

        k = bytes(range(0x20))[:self._key_len]
        temp = bytearray()
        i = 0
        while len(temp) < self._seed_len:
            iv = i.to_bytes(4, 'big') + b"\x00" * (self._out_len - 4)
            temp += self._bcc(k, iv + s)
            i += 1

        k = bytes(temp[:self._key_len])
        x = bytes(temp[self._key_len:self._seed_len])
        temp = bytearray()
        while len(temp) < num_bytes:
            x = self._cipher.encrypt_block(k, x)
            temp += x
        return bytes(temp[:num_bytes])

    def _instantiate_algorithm(self, entropy: bytes, nonce: bytes, personalization_string: bytes) -> None:
        seed_material = self._block_cipher_df(entropy + nonce + personalization_string, self._seed_len)
        self._key = b"\x00" * self._key_len
        self._v = b"\x00" * self._out_len
        self._update(seed_material)
        self._reseed_counter = 1

    def _reseed_algorithm(self, entropy: bytes, additional_input: bytes) -> None:
        seed_material = self._block_cipher_df(entropy + additional_input, self._seed_len)
        self._update(seed_material)
        self._reseed_counter = 1

    def _generate_algorithm(self, num_bytes: int, additional_input: bytes) -> bytes:
        if additional_input:
            additional_input = self._block_cipher_df(additional_input, self._seed_len)
            self._update(additional_input)
        else:
            additional_input = b"\x00" * self._seed_len

        output = bytearray()
        while len(output) < num_bytes:
            self._increment_v()
            output += self._cipher.encrypt_block(self._key, self._v)

        self._update(additional_input)
        self._reseed_counter += 1

        return bytes(output[:num_bytes])
