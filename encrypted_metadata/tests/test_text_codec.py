import pytest
from encrypted_metadata.schemes.text_codec import TextCodec, encode, decode, CHUNK_BYTES
from encrypted_metadata.schemes.errors import InvalidCharacter, MalformedEncoding

@pytest.fixture
def codec():
    return TextCodec()

def test_empty_string(codec):
    chunks, length = codec.encode("")
    assert length == 1
    assert len(chunks) == 1
    assert chunks[0] == 0
    assert codec.decode(chunks) == ""

def test_round_trip(codec):
    messages = [
        "Hello, World!",
        "The quick brown fox jumps over the lazy dog",
        ".,!?^&*()_+-=[]{}|\\:;<>,.?/",
        " ",
    ]
    for msg in messages:
        chunks, length = codec.encode(msg)
        assert length == len(chunks)
        assert codec.decode(chunks) == msg

def test_long_string(codec):
    msg = "a" * 100
    chunks, length = codec.encode(msg)
    assert length == 4
    assert codec.decode(chunks) == msg

def test_full_chunk_gets_terminator_chunk(codec):
    msg = "z" * CHUNK_BYTES
    chunks, length = codec.encode(msg)
    assert length == 2
    assert chunks[1] == 0
    assert codec.decode(chunks) == msg

def test_one_short_of_full_chunk(codec):
    chunks, length = codec.encode("z" * (CHUNK_BYTES - 1))
    assert length == 1

def test_big_endian_packing(codec):
    chunks, _ = codec.encode("A")
    assert chunks == [0x41 << (8 * (CHUNK_BYTES - 1))]

def test_chunks_fit_below_field(codec):
    chunks, _ = codec.encode("z" * 200)
    assert all(c < 2 ** 248 for c in chunks)

def test_deterministic(codec):
    assert codec.encode("same input") == codec.encode("same input")

def test_bytes_input(codec):
    chunks, _ = codec.encode(b"bytes in")
    assert codec.decode(chunks) == "bytes in"

@pytest.mark.parametrize("msg, bad, position", [
    ("tilde~", "~", 5),
    ("line\nbreak", "\n", 4),
    ("café", "é", 3),
    ("{brace", "{", 0),
])
def test_invalid_character(codec, msg, bad, position):
    with pytest.raises(InvalidCharacter) as exc:
        codec.encode(msg)
    assert exc.value.char == bad
    assert exc.value.position == position

def test_decode_stops_at_terminator(codec):
    chunks, _ = codec.encode("Hi")
    trailing, _ = codec.encode("ignored")
    assert codec.decode(chunks + trailing) == "Hi"

def test_decode_without_terminator(codec):
    chunks, _ = codec.encode("a" * CHUNK_BYTES)
    assert codec.decode(chunks[:1]) == "a" * CHUNK_BYTES
    assert codec.decode([]) == ""

def test_decode_oversized_chunk(codec):
    with pytest.raises(MalformedEncoding):
        codec.decode([1 << (8 * CHUNK_BYTES)])

def test_decode_negative_chunk(codec):
    with pytest.raises(MalformedEncoding):
        codec.decode([-1])

def test_decode_out_of_range_byte(codec):
    with pytest.raises(MalformedEncoding):
        codec.decode([0x7F << (8 * (CHUNK_BYTES - 1))])

def test_custom_range():
    codec = TextCodec(min_char=65, max_char=90, chunk_bytes=4)
    chunks, length = codec.encode("ABCD")
    assert length == 2
    assert codec.decode(chunks) == "ABCD"
    with pytest.raises(InvalidCharacter):
        codec.encode("abc")

def test_zero_cannot_be_a_character():
    with pytest.raises(ValueError):
        TextCodec(min_char=0)

def test_module_level_helpers():
    chunks, _ = encode("module level")
    assert decode(chunks) == "module level"
