"""
Primitive descriptors used by the DRBG mechanisms.

Wraps the digests, HMACs and block ciphers from the `cryptography` package
together with the SP 800-90A parameters each mechanism needs (maximum security
strength, Hash_DRBG seed length, block size).
"""
from dataclasses import dataclass
from typing import FrozenSet, Type, Union

from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes


@dataclass(frozen=True)
class Digest:
    """A hash function plus its SP 800-90A parameters."""
    name: str
    algorithm: Type[hashes.HashAlgorithm]
    max_security_strength: int
    seed_length: int  # Hash_DRBG seedlen, in bits

    @property
    def digest_size(self) -> int:
        """Output length in bytes."""
        return self.algorithm.digest_size

    def hash(self, *parts: bytes) -> bytes:
        h = hashes.Hash(self.algorithm())
        for part in parts:
            h.update(part)
        return h.finalize()


@dataclass(frozen=True)
class HMac:
    """HMAC over a Digest."""
    digest: Digest

    @property
    def name(self) -> str:
        return self.digest.name

    @property
    def mac_size(self) -> int:
        return self.digest.digest_size

    @property
    def max_security_strength(self) -> int:
        return self.digest.max_security_strength

    def mac(self, key: bytes, *parts: bytes) -> bytes:
        h = hmac.HMAC(key, self.digest.algorithm())
        for part in parts:
            h.update(part)
        return h.finalize()


@dataclass(frozen=True)
class BlockCipher:
    """A block cipher usable by CTR_DRBG."""
    name: str
    algorithm: Type[algorithms.AES]
    block_size: int  # bits
    key_sizes: FrozenSet[int]  # bits

    def max_security_strength(self, key_size_bits: int) -> int:
        if key_size_bits not in self.key_sizes:
            return 0
        return key_size_bits

    def encrypt_block(self, key: bytes, block: bytes) -> bytes:
        encryptor = Cipher(self.algorithm(key), modes.ECB()).encryptor()
        return encryptor.update(block) + encryptor.finalize()


def _normalise(name: str) -> str:
    return "".join(c for c in name.upper() if c.isalnum())


SHA1 = Digest("SHA1", hashes.SHA1, 128, 440)
SHA224 = Digest("SHA224", hashes.SHA224, 192, 440)
SHA256 = Digest("SHA256", hashes.SHA256, 256, 440)
SHA384 = Digest("SHA384", hashes.SHA384, 256, 888)
SHA512 = Digest("SHA512", hashes.SHA512, 256, 888)
SHA512_224 = Digest("SHA512(224)", hashes.SHA512_224, 192, 440)
SHA512_256 = Digest("SHA512(256)", hashes.SHA512_256, 256, 440)

AES = BlockCipher("AES", algorithms.AES, 128, frozenset({128, 192, 256}))

DIGESTS = {_normalise(d.name): d for d in (SHA1, SHA224, SHA256, SHA384, SHA512, SHA512_224, SHA512_256)}
BLOCK_CIPHERS = {AES.name: AES}


def get_digest(digest: Union[str, Digest]) -> Digest:
    """Resolves a Digest from a descriptor or a name such as 'SHA-256' or 'SHA-512/256'."""
    if isinstance(digest, Digest):
        return digest
    if not isinstance(digest, str):
        raise TypeError("digest must be a Digest or an algorithm name.")
    try:
        return DIGESTS[_normalise(digest)]
    except KeyError:
        raise ValueError(f"Unrecognized digest algorithm [{digest}]") from None


def get_hmac(mac: Union[str, Digest, HMac]) -> HMac:
    """Resolves an HMac from a descriptor, a Digest, or a name such as 'HMAC-SHA256'."""
    if isinstance(mac, HMac):
        return mac
    if isinstance(mac, str) and mac.upper().startswith("HMAC"):
        mac = mac[4:].lstrip("-_/")
    return HMac(get_digest(mac))


def get_block_cipher(cipher: Union[str, BlockCipher]) -> BlockCipher:
    if isinstance(cipher, BlockCipher):
        return cipher
    if not isinstance(cipher, str):
        raise TypeError("cipher must be a BlockCipher or an algorithm name.")
    try:
        return BLOCK_CIPHERS[cipher.upper()]
    except KeyError:
        raise ValueError(f"Unrecognized block cipher [{cipher}]") from None


def hash_df(digest: Digest, seed_material: bytes, seed_length: int) -> bytes:
    """
    Hash_df from SP 800-90A section 10.4.1.

    Returns the leftmost seed_length bits of the derived string. When
    seed_length is not a multiple of 8 the bits are right-aligned in
    (seed_length + 7) // 8 bytes.
    """
    out_len = (seed_length + 7) // 8
    blocks = (out_len + digest.digest_size - 1) // digest.digest_size
    if blocks > 255:
        raise ValueError("Hash_df cannot produce more than 255 digest blocks.")

    temp = bytearray()
    for counter in range(1, blocks + 1):
        temp += digest.hash(bytes([counter]), seed_length.to_bytes(4, 'big'), seed_material)

    value = bytes(temp[:out_len])
    shift = out_len * 8 - seed_length
    if shift:
        value = (int.from_bytes(value, 'big') >> shift).to_bytes(out_len, 'big')
    return value
