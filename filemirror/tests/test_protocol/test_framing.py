import io

import pytest

from filemirror.protocol import (
    decode_blob,
    decode_integer,
    encode_blob,
    encode_integer,
    EndOfStream,
    FramingError,
    InputStream,
    InvalidByte,
    MissingColon,
    TruncatedFrame,
)


def stream_of(data: bytes, chunk_size: int = 4) -> InputStream:
    return InputStream(io.BytesIO(data).read, chunk_size)


@pytest.mark.parametrize(
    "value", [0, 1, -1, 9, 10, -10, 1234567890, -(2 ** 64), 10 ** 40 + 7]
)
def test_integer_roundtrip(value):
    assert decode_integer(stream_of(encode_integer(value))) == value


def test_integer_encoding():
    assert encode_integer(0) == b"0:"
    assert encode_integer(42) == b"42:"
    assert encode_integer(-1) == b"-1:"


def test_integer_leaves_rest_of_stream():
    stream = stream_of(b"12:34:rest")

    assert decode_integer(stream) == 12
    assert decode_integer(stream) == 34
    assert stream.read_exactly(4) == b"rest"


def test_empty_digits_decode_as_zero():
    assert decode_integer(stream_of(b":")) == 0
    assert decode_integer(stream_of(b"-:")) == 0


def test_invalid_byte():
    with pytest.raises(InvalidByte) as e:
        decode_integer(stream_of(b"12a:"))

    assert e.value.byte == ord("a")


def test_minus_in_digit_position():
    with pytest.raises(InvalidByte) as e:
        decode_integer(stream_of(b"1-2:"))

    assert e.value.byte == ord("-")


def test_missing_colon():
    with pytest.raises(MissingColon) as e:
        decode_integer(stream_of(b"123"))

    assert e.value.byte is None


def test_missing_colon_after_sign():
    with pytest.raises(MissingColon):
        decode_integer(stream_of(b"-"))


def test_end_of_stream():
    with pytest.raises(EndOfStream):
        decode_integer(stream_of(b""))


def test_errors_are_framing_errors():
    for data in [b"", b"x:", b"1"]:
        with pytest.raises(FramingError):
            decode_integer(stream_of(data))


@pytest.mark.parametrize(
    "data", [b"", b"a", b"hello world", bytes(range(256)), b"1:2:3:" * 100]
)
def test_blob_roundtrip(data):
    assert decode_blob(stream_of(encode_blob(data))) == data


def test_blob_encoding():
    assert encode_blob(b"abc") == b"3:abc"
    assert encode_blob(b"") == b"0:"


def test_blob_path_roundtrip():
    for path in ["a.txt", "dir/sub/file", "ünïcødé/日本語.txt", "with space"]:
        encoded = encode_blob(path.encode("utf-8"))
        assert decode_blob(stream_of(encoded)).decode("utf-8") == path


def test_truncated_blob():
    with pytest.raises(TruncatedFrame) as e:
        decode_blob(stream_of(b"10:abc"))

    assert e.value.expected == 10
    assert e.value.received == 3


def test_negative_blob_length():
    with pytest.raises(FramingError):
        decode_blob(stream_of(b"-1:"))
