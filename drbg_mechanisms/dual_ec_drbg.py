"""
Dual_EC_DRBG as specified in NIST SP 800-90A (2007), section 10.3.1, using the
curves and fixed points P and Q from Appendix A.1.

Kept for completeness of the SP 800-90A mechanism set; prefer the Hash, HMAC
or CTR mechanisms for new deployments.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from entropy_sources.entropy_source import EntropySource
from sp800_random.errors import MechanismFault
from .base_drbg import SP80090DRBG
from .primitives import Digest, get_digest, hash_df

Point = Optional[Tuple[int, int]]  # None is the point at infinity


@dataclass(frozen=True)
class DualECCurve:
    """A NIST prime curve y^2 = x^3 - 3x + b with the Dual_EC_DRBG points."""
    name: str
    p: int
    b: int
    n: int
    px: int
    py: int
    qx: int
    qy: int
    seed_length: int  # bits
    out_length: int  # bits
    max_security_strength: int

    def contains(self, point: Point) -> bool:
        if point is None:
            return True
        x, y = point
        return (y * y - (x * x * x - 3 * x + self.b)) % self.p == 0

    def _add(self, p1: Point, p2: Point) -> Point:
        if p1 is None:
            return p2
        if p2 is None:
            return p1
        x1, y1 = p1
        x2, y2 = p2
        if x1 == x2:
            if (y1 + y2) % self.p == 0:
                return None
            lam = (3 * x1 * x1 - 3) * pow(2 * y1, -1, self.p) % self.p
        else:
            lam = (y2 - y1) * pow(x2 - x1, -1, self.p) % self.p
        x3 = (lam * lam - x1 - x2) % self.p
        return x3, (lam * (x1 - x3) - y1) % self.p

    def multiply(self, scalar: int, point: Point) -> Point:
        result = None
        addend = point
        while scalar:
            if scalar & 1:
                result = self._add(result, addend)
            addend = self._add(addend, addend)
            scalar >>= 1
        return result


P256 = DualECCurve(
    name="P-256",
    p=2**256 - 2**224 + 2**192 + 2**96 - 1,
    b=0x5ac635d8aa3a93e7b3ebbd55769886bc651d06b0cc53b0f63bce3c3e27d2604b,
    n=0xffffffff00000000ffffffffffffffffbce6faada7179e84f3b9cac2fc632551,
    px=0x6b17d1f2e12c4247f8bce6e563a440f277037d812deb33a0f4a13945d898c296,
    py=0x4fe342e2fe1a7f9b8ee7eb4a7c0f9e162bce33576b315ececbb6406837bf51f5,
    qx=0xc97445f45cdef9f0d3e05e1e585fc297235b82b5be8ff3efca67c59852018192,
    qy=0xb28ef557ba31dfcbdd21ac46e2a91e3c304f44cb87058ada2cb815151e610046,
    seed_length=256,
    out_length=240,
    max_security_strength=128,
)

P384 = DualECCurve(
    name="P-384",
    p=2**384 - 2**128 - 2**96 + 2**32 - 1,
    b=0xb3312fa7e23ee7e4988e056be3f82d19181d9c6efe8141120314088f5013875ac656398d8a2ed19d2a85c8edd3ec2aef,
    n=0xffffffffffffffffffffffffffffffffffffffffffffffffc7634d81f4372ddf581a0db248b0a77aecec196accc52973,
    px=0xaa87ca22be8b05378eb1c71ef320ad746e1d3b628ba79b9859f741e082542a385502f25dbf55296c3a545e3872760ab7,
    py=0x3617de4a96262c6f5d9e98bf9292dc29f8f41dbd289a147ce9da3113b5f0b8c00a60b1ce1d7e819d7a431d7c90ea0e5f,
    qx=0x8e722de3125bddb05580164bfe20b8b432216a62926c57502ceede31c47816edd1e89769124179d0b695106428815065,
    qy=0x023b1660dd701d0839fd45eec36f9ee7b32e13b315dc02610aa1b636e346df671f790f84c5e09b05674dbb7e45c803dd,
    seed_length=384,
    out_length=368,
    max_security_strength=192,
)

P521 = DualECCurve(
    name="P-521",
    p=2**521 - 1,
    b=0x0051953eb9618e1c9a1f929a21a0b68540eea2da725b99b315f3b8b489918ef109e156193951ec7e937b1652c0bd3bb1bf073573df883d2c34f1ef451fd46b503f00,
    n=0x01fffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffa51868783bf2f966b7fcc0148f709a5d03bb5c9b8899c47aebb6fb71e91386409,
    px=0x00c6858e06b70404e9cd9e3ecb662395b4429c648139053fb521f828af606b4d3dbaa14b5e77efe75928fe1dc127a2ffa8de3348b3c1856a429bf97e7e31c2e5bd66,
    py=0x011839296a789a3bc0045c8a5fb42c7d1bd998f54449579b446817afbd17273e662c97ee72995ef42640c550b9013fad0761353c7086a272c24088be94769fd16650,
    qx=0x1b9fa3e518d683c6b65763694ac8efbaec6fab44f2276171a42726507dd08add4c3b3f4c1ebc5b1222ddba077f722943b24c3edfa0f85fe24d0c8c01591f0be6f63,
    qy=0x1f3bdba585295d9a1110d1df1f9430ef8442c5018976ff3437ef91b81dc0b8132c8d5c39c32d0e004a3092b7d327c0e7a4d26d2c7b69b58f9066652911e457779de,
    seed_length=521,
    out_length=504,
    max_security_strength=256,
)

CURVES = (P256, P384, P521)


def curve_for_strength(security_strength: int) -> DualECCurve:
    """Smallest curve whose security strength covers the request."""
    for curve in CURVES:
        if security_strength <= curve.max_security_strength:
            return curve
    raise ValueError("Security strength cannot be greater than 256 bits.")


class DualECSP800DRBG(SP80090DRBG):
    """
    A DRBG built on point multiplication over a NIST prime curve.
    The curve is picked from the requested security strength.
    """
    RESEED_MAX = 1 << (32 - 1)

    def __init__(self, digest: Union[str, Digest], entropy_source: EntropySource,
                 nonce: Optional[bytes], personalization_string: Optional[bytes], security_strength: int):
        self._digest = get_digest(digest)
        super().__init__(entropy_source, security_strength, min(self._digest.max_security_strength, 256))

        self._curve = curve_for_strength(security_strength)
        self._p = (self._curve.px, self._curve.py)
        self._q = (self._curve.qx, self._curve.qy)
        self._seed_length = self._curve.seed_length
        self._out_bytes = self._curve.out_length // 8
        self._s = 0

        self._instantiate(nonce, personalization_string)

    @property
    def block_size(self) -> int:
        return self._curve.out_length

    @property
    def curve(self) -> DualECCurve:
        return self._curve

    def _x_of(self, scalar: int, point: Point) -> int:
        result = self._curve.multiply(scalar, point)
        if result is None:
            raise MechanismFault("Dual_EC_DRBG reached the point at infinity.")
        return result[0]

    def _seed_bytes(self) -> bytes:
        return self._s.to_bytes((self._seed_length + 7) // 8, 'big')

    def _instantiate_algorithm(self, entropy: bytes, nonce: bytes, personalization_string: bytes) -> None:
        seed = hash_df(self._digest, entropy + nonce + personalization_string, self._seed_length)
        self._s = int.from_bytes(seed, 'big')
        self._reseed_counter = 0

    def _reseed_algorithm(self, entropy: bytes, additional_input: bytes) -> None:
        seed = hash_df(self._digest, self._seed_bytes() + entropy + additional_input, self._seed_length)
        self._s = int.from_bytes(seed, 'big')
        self._reseed_counter = 0

    def generate(self, num_bytes: int, additional_input: Optional[bytes] = None,
                 prediction_resistant: bool = False) -> Optional[bytes]:
        # The reseed counter here counts output blocks rather than requests.
        blocks = (num_bytes + self._out_bytes - 1) // self._out_bytes if isinstance(num_bytes, int) else 0
        if not prediction_resistant and self._reseed_counter + blocks > self.reseed_interval:
            return None
        return super().generate(num_bytes, additional_input, prediction_resistant)

    def _generate_algorithm(self, num_bytes: int, additional_input: bytes) -> bytes:
        t = int.from_bytes(hash_df(self._digest, additional_input, self._seed_length), 'big') \
            if additional_input else 0
        out_mask = (1 << self._curve.out_length) - 1

        output = bytearray()
        while len(output) < num_bytes:
            self._s = self._x_of(self._s ^ t, self._p)
            t = 0
            r = self._x_of(self._s, self._q)
            output += (r & out_mask).to_bytes(self._out_bytes, 'big')
            self._reseed_counter += 1

        self._s = self._x_of(self._s, self._p)

        return bytes(output[:num_bytes])
