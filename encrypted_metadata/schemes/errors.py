"""
Error taxonomy for the metadata codec and cipher.

Every error derives from MetadataError, which is itself a ValueError so
callers that only care about "bad input" can catch the builtin.
"""


class MetadataError(ValueError):
    pass


class InvalidCharacter(MetadataError):
    '''Plaintext contains a character outside the allowed printable range.'''

    def __init__(self, char, position):
        self.char = char
        self.position = position
        super().__init__(f"Character {char!r} at position {position} is outside the allowed range")


class MalformedEncoding(MetadataError):
    '''A chunk cannot be split back into allowed characters.'''


class MessageTooLarge(MetadataError):
    def __init__(self, used_length, max_chunks):
        self.used_length = used_length
        self.max_chunks = max_chunks
        super().__init__(f"Message needs {used_length} chunks, at most {max_chunks} are supported")


class InvalidPublicKey(MetadataError):
    pass


class InvalidPrivateKey(MetadataError):
    pass


class MalformedBlob(MetadataError):
    '''Blob fails structural parsing (bad hex, bad size, bad header).'''


class AuthenticationFailed(MetadataError):
    '''Blob parsed but the recomputed auth key does not match (wrong key or tampering).'''
