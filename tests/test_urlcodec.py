import pytest

from lcukit.urlcodec import UrlCodecError, url_decode, url_encode


def test_encode_space_and_reserved():
    assert url_encode("Hello World!") == "Hello+World%21"


def test_encode_unreserved_unchanged():
    text = ".-*_AZaz09"
    assert url_encode(text) == text


def test_encode_uses_uppercase_hex():
    encoded = url_encode(bytes([0xAB, 0xCD]))
    assert encoded == encoded.upper()
    assert encoded.count("%") == 2


@pytest.mark.parametrize(
    "data",
    [b"plain", b"with space", bytes(range(256)), "ünïcødé".encode(), b"~/?&="],
)
def test_round_trip(data):
    encoded = url_encode(data)
    assert url_decode(encoded) == (data, len(encoded))


def test_encode_exact_fit():
    assert url_encode("abc", 4) == "abc"


def test_encode_plain_overflow_rejected():
    with pytest.raises(UrlCodecError):
        url_encode("abc", 3)


def test_encode_escape_overflow_rejected():
    with pytest.raises(UrlCodecError):
        url_encode("!", 3)


def test_encode_empty_rejected():
    with pytest.raises(UrlCodecError):
        url_encode("")


def test_encode_tiny_buffer_rejected():
    with pytest.raises(UrlCodecError):
        url_encode("a", 1)


def test_decode_plus_is_space():
    assert url_decode("a+b") == (b"a b", 3)


def test_decode_lowercase_hex_accepted():
    assert url_decode("%2f") == url_decode("%2F")


def test_decode_incomplete_escape_stops():
    assert url_decode("ab%2") == (b"ab", 2)


def test_decode_respects_max_size():
    assert url_decode("abcdef", 4) == (b"abc", 3)


def test_decode_invalid_hex_rejected():
    with pytest.raises(UrlCodecError):
        url_decode("%zz")


def test_decode_invalid_character_rejected():
    with pytest.raises(UrlCodecError):
        url_decode("a/b")


def test_decode_empty_rejected():
    with pytest.raises(UrlCodecError):
        url_decode(b"")