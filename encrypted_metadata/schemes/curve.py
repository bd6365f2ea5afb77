import base64
import logging

from charm.toolbox.ecgroup import ECGroup, ZR, G
from charm.toolbox.eccurve import secp256k1, prime256v1
from charm.core.math.elliptic_curve import getGenerator

"""
Thin adapter over charm's ECGroup.

All point arithmetic (scalar multiplication, decompression, on-curve checks)
is done by charm/OpenSSL. This module only converts between charm elements
and plain integers: public keys travel as (x, y) tuples and scalars as ints.

charm does not expose the base-field prime, so it is listed here per
supported curve together with the group order. Adding a curve means adding
it to FIELD_PRIMES and CURVE_ORDERS.
"""

logger = logging.getLogger(__name__)

FIELD_PRIMES = {
    secp256k1: 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
    prime256v1: 0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFF,
}

CURVE_ORDERS = {
    secp256k1: 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    prime256v1: 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
}

WORD_BYTES = 32


class Curve:
    def __init__(self, curve=secp256k1):
        if curve not in FIELD_PRIMES:
            raise ValueError(f"Unsupported curve: {curve}")
        self.group = ECGroup(curve)
        self.g = getGenerator(self.group.ec_group)
        self.p = FIELD_PRIMES[curve]
        self.n = CURVE_ORDERS[curve]

    def random_scalar(self):
        '''Uniform scalar in [1, n) from charm's (OpenSSL) generator.'''
        while True:
            k = int(self.group.random(ZR)) % self.n
            if k:
                return k

    def mul(self, point, k):
        '''Scalar multiplication k * point.'''
        try:
            return point ** (k % self.n)
        except Exception as e:
            raise ValueError(f"Point operation failed: {str(e)}")

    def base_mul(self, k):
        return self.mul(self.g, k)

    def xy(self, point):
        x, y = self.group.coordinates(point)
        return int(x), int(y)

    def _from_octets(self, octets):
        try:
            point = self.group.deserialize(b'%d:' % G + base64.b64encode(octets))
        except Exception as e:
            logger.debug("Point decompression failed: %s", e)
            return None
        if point is None or point is False:
            return None
        return point

    def lift_x(self, x, odd=False):
        '''Point with the given x-coordinate, or None if x is not on the curve.'''
        if not 0 <= x < self.p:
            return None
        prefix = b'\x03' if odd else b'\x02'
        return self._from_octets(prefix + x.to_bytes(WORD_BYTES, 'big'))

    def point(self, x, y):
        '''Point from affine coordinates, or None if (x, y) is not on the curve.'''
        if not (isinstance(x, int) and isinstance(y, int)):
            return None
        if not (0 <= x < self.p and 0 <= y < self.p):
            return None
        candidate = self.lift_x(x, odd=bool(y & 1))
        if candidate is None or self.xy(candidate) != (x, y):
            return None
        return candidate
