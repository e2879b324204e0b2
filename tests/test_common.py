import pytest

from plugtest.common import (
    bytes_to_hex_str,
    bytes_to_uchar_str,
    hex_str_to_bytes,
    is_digit_str,
    is_ip_address,
)


@pytest.mark.parametrize(
    "text, expected",
    [("12345", True), ("", True), ("12a", False), (" 1", False), ("-3", False)],
)
def test_is_digit_str(text, expected):
    assert is_digit_str(text) is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("192.168.1.1", True),
        ("0.0.0.0", True),
        ("255.255.255.255", True),
        ("256.1.1.1", False),
        ("1.2.3", False),
        ("1.2.3.4 ", False),
        ("a.b.c.d", False),
    ],
)
def test_is_ip_address(text, expected):
    assert is_ip_address(text) is expected


def test_bytes_to_hex_str_format():
    assert bytes_to_hex_str(b"\x01\xab") == "01 ab "


def test_bytes_to_hex_str_length_invariant():
    data = bytes(range(40))
    assert len(bytes_to_hex_str(data)) == 3 * len(data)
    assert bytes_to_hex_str(b"") == ""


def test_bytes_to_uchar_str():
    assert bytes_to_uchar_str(bytes([0, 255])) == "0 255 "
    assert bytes_to_uchar_str(b"") == ""


@pytest.mark.parametrize("data", [b"", b"\x00", bytes(range(256)), b"\xde\xad\xbe\xef"])
def test_hex_round_trip(data):
    assert hex_str_to_bytes(bytes_to_hex_str(data)) == data


def test_hex_str_to_bytes_mixed_case_without_spaces():
    assert hex_str_to_bytes("AbCd") == bytes([0xAB, 0xCD])


def test_hex_str_to_bytes_drops_trailing_digit():
    assert hex_str_to_bytes("ab c") == bytes([0xAB])


@pytest.mark.parametrize("text", ["zz", "1 2", "0g"])
def test_hex_str_to_bytes_invalid(text):
    with pytest.raises(ValueError):
        hex_str_to_bytes(text)