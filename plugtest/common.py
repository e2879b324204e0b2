"""Small string and byte helpers shared by the rest of the package."""

from __future__ import annotations

import re

_IP_PATTERN = re.compile(
    r"\b(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\b"
)

_DIGITS = frozenset("0123456789")


def is_digit_str(src: str) -> bool:
    """Return True if every character of ``src`` is an ASCII digit.

    The empty string counts as a digit string.
    """
    return all(char in _DIGITS for char in src)


def is_ip_address(ip: str) -> bool:
    """Return True if ``ip`` is exactly a dotted-quad IPv4 address."""
    return _IP_PATTERN.fullmatch(ip) is not None


def bytes_to_hex_str(data: bytes) -> str:
    """Render bytes as lower-case hex pairs, each followed by a space."""
    return "".join(f"{byte:02x} " for byte in data)


def bytes_to_uchar_str(data: bytes) -> str:
    """Render bytes as unsigned decimal numbers, each followed by a space."""
    return "".join(f"{byte} " for byte in data)


def _hex_digit(char: str) -> int:
    try:
        return int(char, 16) if char in "0123456789abcdefABCDEF" else _raise(char)
    except ValueError:
        raise ValueError(f"invalid hex digit: {char!r}") from None


def _raise(char: str) -> int:
    raise ValueError(f"invalid hex digit: {char!r}")


def hex_str_to_bytes(text: str) -> bytes:
    """Parse pairs of hex digits into bytes.

    Spaces between pairs are skipped; a trailing unpaired digit is ignored.
    A pair containing a character that is not a hex digit raises ValueError.
    """
    result = bytearray()
    chars = iter(text)
    for high in chars:
        if high == " ":
            continue
        low = next(chars, None)
        if low is None:
            break
        result.append(_hex_digit(high) * 16 + _hex_digit(low))
    return bytes(result)