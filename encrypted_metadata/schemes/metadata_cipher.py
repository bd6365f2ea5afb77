import hashlib
import hmac
import logging
from collections import namedtuple

from charm.toolbox.eccurve import secp256k1

from encrypted_metadata.schemes.curve import Curve, WORD_BYTES
from encrypted_metadata.schemes.errors import (
    AuthenticationFailed,
    InvalidPrivateKey,
    InvalidPublicKey,
    MalformedBlob,
    MessageTooLarge,
)
from encrypted_metadata.schemes.randomness import GroupRandomSource
from encrypted_metadata.schemes.text_codec import TextCodec

"""
Hybrid encryption of short text for a recipient EC public key.

The text is packed into field elements by TextCodec, then masked with a key
stream derived from an ephemeral ECDH secret. The output is a hex string:

    0x | length | nonce | auth_key[0] | auth_key[1] | c_0 | ... | c_{length-1}

every field a 32-byte big-endian word.

- nonce is x(R) for the ephemeral point R = r*G. The recipient lifts it back
  to a point; either parity works since only x(priv * R) is used.
- auth_key[0] confirms the shared secret, auth_key[1] tags the header and all
  masked words. Both are HMAC-SHA256 outputs reduced mod p.
- c_i = chunk_i + HMAC(secret, "mask" | nonce | i) mod p.

Decrypting with the wrong private key always raises AuthenticationFailed.
"""

logger = logging.getLogger(__name__)

MAX_CHUNKS = 256
HEADER_WORDS = 4
HEX_PREFIX = '0x'

KeyPair = namedtuple('KeyPair', ['public_key', 'private_key'])
EncryptedBlob = namedtuple('EncryptedBlob', ['length', 'nonce', 'auth_key', 'ciphertext'])


def _word(value):
    return value.to_bytes(WORD_BYTES, 'big')


def blob_bytes(blob):
    '''Raw bytes of a hex blob, as handed to the storing contract.'''
    if isinstance(blob, (bytes, bytearray)):
        return bytes(blob)
    if not isinstance(blob, str):
        raise MalformedBlob(f"Blob must be a hex string or bytes, got {type(blob).__name__}")
    text = blob[2:] if blob[:2].lower() == HEX_PREFIX else blob
    if any(c.isspace() for c in text):
        raise MalformedBlob("Blob must not contain whitespace")
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise MalformedBlob("Blob is not valid hex")


def parse_blob(blob):
    '''Split a blob into its header fields and masked words.

    Only structure is checked here; field ranges are checked by the cipher.
    '''
    raw = blob_bytes(blob)
    if len(raw) < HEADER_WORDS * WORD_BYTES:
        raise MalformedBlob(f"Blob is {len(raw)} bytes, shorter than the header")
    if len(raw) % WORD_BYTES:
        raise MalformedBlob(f"Blob length {len(raw)} is not a multiple of {WORD_BYTES}")
    words = [
        int.from_bytes(raw[i:i + WORD_BYTES], 'big')
        for i in range(0, len(raw), WORD_BYTES)
    ]
    length, nonce, auth0, auth1 = words[:HEADER_WORDS]
    ciphertext = words[HEADER_WORDS:]
    if length != len(ciphertext):
        raise MalformedBlob(f"Header announces {length} chunks, blob carries {len(ciphertext)}")
    return EncryptedBlob(length, nonce, (auth0, auth1), ciphertext)


class MetadataCipher:
    def __init__(self, curve=secp256k1, codec=None, random_source=None, max_chunks=MAX_CHUNKS):
        self.curve = Curve(curve)
        self.codec = codec if codec is not None else TextCodec()
        if 1 << (8 * self.codec.chunk_bytes) > self.curve.p:
            raise ValueError(f"Chunks of {self.codec.chunk_bytes} bytes do not fit below the field modulus")
        self.random_source = random_source if random_source is not None else GroupRandomSource()
        self.max_chunks = max_chunks

    def keygen(self):
        '''Key Generation:
        - x: random private key in Z_n
        - Q: public key = xG, returned as affine (x, y)'''
        sk = self.random_source.scalar(self.curve)
        return KeyPair(self.public_key(sk), sk)

    def public_key(self, private_key):
        self._check_private_key(private_key)
        return self.curve.xy(self.curve.base_mul(private_key))

    def _check_private_key(self, private_key):
        if not isinstance(private_key, int) or not 0 < private_key < self.curve.n:
            raise InvalidPrivateKey("Private key must be an integer in [1, n)")

    def _load_public_key(self, public_key):
        try:
            x, y = public_key
        except (TypeError, ValueError):
            raise InvalidPublicKey("Public key must be an (x, y) pair")
        point = self.curve.point(x, y)
        if point is None:
            raise InvalidPublicKey("Public key is not a point on the curve")
        return point

    def _secret(self, point):
        x, _ = self.curve.xy(point)
        return _word(x)

    def _field_hash(self, secret, *parts):
        digest = hmac.new(secret, b''.join(parts), hashlib.sha256).digest()
        return int.from_bytes(digest, 'big') % self.curve.p

    def _masks(self, secret, nonce, count):
        return [self._field_hash(secret, b'mask', _word(nonce), _word(i)) for i in range(count)]

    def _auth_key(self, secret, length, nonce, ciphertext):
        confirm = self._field_hash(secret, b'auth', _word(nonce))
        tag = self._field_hash(secret, b'tag', _word(length), _word(nonce), *map(_word, ciphertext))
        return confirm, tag

    def encrypt(self, public_key, text):
        '''Encryption:
        - m_i: text packed into field elements
        - r: random ephemeral scalar in Z_n
        - R = rG, S = rQ   (nonce = x(R), secret = x(S))
        - c_i = m_i + H(secret, i) mod p
        '''
        chunks, used_length = self.codec.encode(text)
        if used_length > self.max_chunks:
            raise MessageTooLarge(used_length, self.max_chunks)
        Q = self._load_public_key(public_key)

        r = self.random_source.scalar(self.curve)
        nonce, _ = self.curve.xy(self.curve.base_mul(r))
        secret = self._secret(self.curve.mul(Q, r))

        p = self.curve.p
        masks = self._masks(secret, nonce, used_length)
        ciphertext = [(m + k) % p for m, k in zip(chunks, masks)]
        auth_key = self._auth_key(secret, used_length, nonce, ciphertext)

        words = [used_length, nonce, auth_key[0], auth_key[1]] + ciphertext
        logger.debug("Encrypted %d chunks into a %d-byte blob", used_length, len(words) * WORD_BYTES)
        return HEX_PREFIX + b''.join(map(_word, words)).hex()

    def decrypt(self, private_key, blob):
        '''Decryption:
        - S' = x * lift(nonce) = x(rG) = rQ
        - check auth_key against S'
        - m_i = c_i - H(secret, i) mod p
        '''
        self._check_private_key(private_key)
        parsed = parse_blob(blob)
        p = self.curve.p
        if not 0 < parsed.length <= self.max_chunks:
            raise MalformedBlob(f"Chunk count {parsed.length} outside [1, {self.max_chunks}]")
        if any(w >= p for w in parsed.auth_key) or any(c >= p for c in parsed.ciphertext):
            raise MalformedBlob("Blob word exceeds the field modulus")
        R = self.curve.lift_x(parsed.nonce)
        if R is None:
            raise MalformedBlob("Nonce is not the x-coordinate of a curve point")

        secret = self._secret(self.curve.mul(R, private_key))
        expected = self._auth_key(secret, parsed.length, parsed.nonce, parsed.ciphertext)
        if not hmac.compare_digest(b''.join(map(_word, expected)), b''.join(map(_word, parsed.auth_key))):
            raise AuthenticationFailed("Auth key mismatch: wrong private key or tampered blob")

        masks = self._masks(secret, parsed.nonce, parsed.length)
        chunks = [(c - k) % p for c, k in zip(parsed.ciphertext, masks)]
        logger.debug("Decrypted %d chunks", parsed.length)
        return self.codec.decode(chunks)


_default_cipher = MetadataCipher()


def encrypt(public_key, text):
    return _default_cipher.encrypt(public_key, text)


def decrypt(private_key, blob):
    return _default_cipher.decrypt(private_key, blob)
