"""
Sources of ephemeral scalars for MetadataCipher.

A source exposes scalar(curve) -> int in [1, curve.n). The cipher never
draws randomness any other way, so tests can swap in FixedRandomSource.
"""


class GroupRandomSource:
    '''Draws scalars from charm's group RNG (OpenSSL CSPRNG).'''

    def scalar(self, curve):
        return curve.random_scalar()


class FixedRandomSource:
    '''Replays a fixed list of scalars, then refuses to continue.

    Never loops back to the start: replaying a scalar would reuse a mask.
    '''

    def __init__(self, values):
        self._values = list(values)

    def scalar(self, curve):
        if not self._values:
            raise RuntimeError("FixedRandomSource exhausted")
        k = self._values.pop(0) % curve.n
        if k == 0:
            raise ValueError("Scalar must be non-zero modulo the curve order")
        return k
