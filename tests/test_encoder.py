"""Tests for base62 encoding."""

import pytest

from shortlinks import encoder
from shortlinks.encoder import ALPHABET, InvalidEncodingError, decode, encode


class TestAlphabet:
    """Test the alphabet order."""

    def test_alphabet_order(self):
        assert len(ALPHABET) == 62
        assert ALPHABET[:10] == "0123456789"
        assert ALPHABET[10] == "A"
        assert ALPHABET[35] == "Z"
        assert ALPHABET[36] == "a"
        assert ALPHABET[-1] == "z"


class TestEncode:
    """Test integer to base62 conversion."""

    def test_zero(self):
        assert encode(0) == "0"

    def test_known_values(self):
        assert encode(9) == "9"
        assert encode(10) == "A"
        assert encode(61) == "z"
        assert encode(62) == "10"
        assert encode(62 ** 2) == "100"

    def test_no_leading_zero_symbols(self):
        for num in (1, 61, 62, 3843, 3844, 2 ** 40):
            assert not encode(num).startswith("0")

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            encode(-1)


class TestDecode:
    """Test base62 to integer conversion."""

    def test_known_values(self):
        assert decode("0") == 0
        assert decode("z") == 61
        assert decode("10") == 62
        assert decode("000z") == 61

    @pytest.mark.parametrize(
        "num",
        [0, 1, 61, 62, 123456, 2 ** 31 - 1, 2 ** 63 - 1, 2 ** 64 - 1, 2 ** 100],
    )
    def test_round_trip(self, num):
        assert decode(encode(num)) == num

    @pytest.mark.parametrize("code", ["abc-", "ab c", "é1", "a_b"])
    def test_invalid_symbol(self, code):
        with pytest.raises(InvalidEncodingError):
            decode(code)

    def test_empty_string(self):
        with pytest.raises(InvalidEncodingError):
            decode("")

    def test_invalid_encoding_is_value_error(self):
        assert issubclass(InvalidEncodingError, ValueError)


def test_is_valid_format():
    assert encoder.is_valid_format("abc123Z")
    assert not encoder.is_valid_format("")
    assert not encoder.is_valid_format("abc-123")
