import logging
from collections import namedtuple

from encrypted_metadata.schemes.errors import InvalidCharacter, MalformedEncoding

"""
Reversible packing of printable text into field elements.

Characters are stored one per byte, big-endian, CHUNK_BYTES bytes per chunk.
The text is followed by a single zero byte and zero-padded up to a whole
number of chunks, so the decoder needs no length: it stops at the first zero
byte. A zero byte can never be a character because the allowed range starts
above it.

With 31-byte chunks every chunk is below 2**248, which keeps it under the
base-field prime of any 256-bit curve.
"""

logger = logging.getLogger(__name__)

MIN_CHAR = 32
MAX_CHAR = 122
CHUNK_BYTES = 31

EncodedMessage = namedtuple('EncodedMessage', ['chunks', 'used_length'])


class TextCodec:
    def __init__(self, min_char=MIN_CHAR, max_char=MAX_CHAR, chunk_bytes=CHUNK_BYTES):
        if min_char < 1:
            raise ValueError("min_char must be at least 1, zero is the terminator")
        if max_char > 255 or max_char < min_char:
            raise ValueError("max_char must lie in [min_char, 255]")
        if chunk_bytes < 1:
            raise ValueError("chunk_bytes must be positive")
        self.min_char = min_char
        self.max_char = max_char
        self.chunk_bytes = chunk_bytes

    def _to_bytes(self, text):
        if isinstance(text, str):
            codes = [ord(c) for c in text]
        else:
            codes = list(bytes(text))
        for i, code in enumerate(codes):
            if not self.min_char <= code <= self.max_char:
                char = text[i] if isinstance(text, str) else bytes([code])
                raise InvalidCharacter(char, i)
        return bytes(codes)

    def encode(self, text):
        '''Pack text into chunks.

        Returns EncodedMessage(chunks, used_length); used_length is the
        number of chunks and is always at least 1.
        '''
        data = self._to_bytes(text) + b'\0'
        padding = -len(data) % self.chunk_bytes
        data += b'\0' * padding
        chunks = [
            int.from_bytes(data[i:i + self.chunk_bytes], 'big')
            for i in range(0, len(data), self.chunk_bytes)
        ]
        logger.debug("Encoded %d characters into %d chunks", len(data) - padding - 1, len(chunks))
        return EncodedMessage(chunks, len(chunks))

    def decode(self, chunks):
        '''Unpack chunks until the first zero byte.'''
        out = bytearray()
        for index, chunk in enumerate(chunks):
            chunk = int(chunk)
            if chunk < 0 or chunk.bit_length() > 8 * self.chunk_bytes:
                raise MalformedEncoding(f"Chunk {index} does not fit in {self.chunk_bytes} bytes")
            for byte in chunk.to_bytes(self.chunk_bytes, 'big'):
                if byte == 0:
                    return out.decode('latin-1')
                if not self.min_char <= byte <= self.max_char:
                    raise MalformedEncoding(f"Chunk {index} holds byte {byte} outside the allowed range")
                out.append(byte)
        return out.decode('latin-1')


_default_codec = TextCodec()


def encode(text):
    return _default_codec.encode(text)


def decode(chunks):
    return _default_codec.decode(chunks)
