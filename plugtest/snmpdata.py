"""SNMP values and their BER wire encoding."""

from __future__ import annotations

import enum
import ipaddress
import logging
import re

_log = logging.getLogger(__name__)

OID_FIRST_BYTE = 0x2B
ISO_ORG_OID = b".1.3"

_DECIMAL = re.compile(rb"\s*[+-]?[0-9]+\s*")


class DataType(enum.IntEnum):
    """BER tags of the SNMP value types."""

    INVALID = -1
    INTEGER = 0x02
    STRING = 0x04
    NULL_DATA = 0x05
    OBJECT = 0x06
    SEQUENCE = 0x30
    IP_ADDR = 0x40
    COUNTER = 0x41
    GAUGE = 0x42
    TIME_TICKS = 0x43
    GET_REQUEST = 0xA0
    GET_NEXT_REQUEST = 0xA1
    GET_RESPONSE = 0xA2
    SET_REQUEST = 0xA3


_INT32_TYPES = frozenset({DataType.INTEGER, DataType.GAUGE})
_COUNTER_TYPES = frozenset({DataType.COUNTER, DataType.TIME_TICKS})
_CONSTRUCTED_TYPES = frozenset(
    {
        DataType.SEQUENCE,
        DataType.GET_REQUEST,
        DataType.GET_NEXT_REQUEST,
        DataType.GET_RESPONSE,
        DataType.SET_REQUEST,
    }
)


def _as_bytes(value: bytes | bytearray | str) -> bytes:
    if isinstance(value, str):
        return value.encode("latin-1")
    return bytes(value)


def _parse_decimal(text: bytes, low: int, high: int) -> int:
    """Parse decimal text; anything malformed or out of range gives 0."""
    if not _DECIMAL.fullmatch(text):
        return 0
    number = int(text)
    return number if low <= number <= high else 0


def decode_oid(data: bytes) -> bytes:
    """Decode the BER content of an OBJECT IDENTIFIER into dotted form.

    Returns an empty value when the content does not start with the
    ``1.3`` prefix byte or ends inside a multi-byte arc.
    """
    data = bytes(data)
    if not data or data[0] != OID_FIRST_BYTE:
        return b""
    arcs: list[int] = []
    value = 0
    pending = False
    for byte in data[1:]:
        value = value * 0x80 + (byte & 0x7F)
        if byte & 0x80:
            pending = True
            continue
        arcs.append(value)
        value = 0
        pending = False
    if pending:
        return b""
    return ISO_ORG_OID + b"".join(b"." + str(arc).encode("ascii") for arc in arcs)


def _pack_int(value: int) -> bytes:
    if value < 0x80:
        return bytes([value & 0xFF])
    digits: list[int] = []
    while value:
        digits.append(value & 0x7F)
        value >>= 7
    digits.reverse()
    return bytes(digit | 0x80 for digit in digits[:-1]) + bytes([digits[-1]])


def pack_oid(oid: bytes | str) -> bytes:
    """Encode a dotted OID starting with ``.1.3`` as BER content."""
    oid = _as_bytes(oid)
    if len(oid) <= len(ISO_ORG_OID) or not oid.startswith(ISO_ORG_OID):
        raise ValueError(f"OID must start with {ISO_ORG_OID.decode()}: {oid!r}")
    tail = oid[len(ISO_ORG_OID) + 1 :]
    parts = tail.split(b".") if tail else []
    if tail.endswith(b"."):
        parts.pop()
    return bytes([OID_FIRST_BYTE]) + b"".join(
        _pack_int(_parse_decimal(part, -(2**31), 2**31 - 1)) for part in parts
    )


def _compress_leading_zeros(data: bytes) -> bytes:
    stripped = data.lstrip(b"\x00")
    skipped = len(data) - len(stripped)
    if stripped and 0 < skipped < len(data) - 1:
        return stripped
    return data


def pack_length(length: int) -> bytes:
    """Encode a BER length field."""
    if length < 0x80:
        return bytes([length & 0xFF])
    body = _compress_leading_zeros(length.to_bytes(4, "big", signed=True))
    return bytes([0x80 + len(body)]) + body


def _pack_content(tag: int, content: bytes) -> bytes:
    return bytes([tag & 0xFF]) + pack_length(len(content)) + content


class SnmpData:
    """One SNMP value: a tag, its content or its child values, and an OID address."""

    def __init__(self, type: int = DataType.INVALID, data: bytes = b"") -> None:
        self._type = int(type)
        self._data = b""
        self._children: list[SnmpData] = []
        self.address = b""
        data = bytes(data)
        if self._type in _INT32_TYPES:
            # Some agents send a 5-byte gauge with a zero lead byte.
            self._data = data.rjust(4, b"\x00") if len(data) < 4 else data[-4:]
        elif self._type == DataType.NULL_DATA:
            pass
        elif self._type == DataType.OBJECT:
            self._data = decode_oid(data)
        elif self._type in _CONSTRUCTED_TYPES:
            self._children = parse_data(data)
        elif self._type in _COUNTER_TYPES:
            self._data = data.rjust(8, b"\x00")
        else:
            self._data = data

    @property
    def type(self) -> int:
        return self._type

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def children(self) -> list[SnmpData]:
        return list(self._children)

    def is_valid(self) -> bool:
        t = self._type
        if t in (DataType.INTEGER, DataType.GAUGE, DataType.IP_ADDR):
            return len(self._data) == 4
        if t in _COUNTER_TYPES:
            return len(self._data) == 8
        if t in (
            DataType.NULL_DATA,
            DataType.SEQUENCE,
            DataType.GET_REQUEST,
            DataType.GET_NEXT_REQUEST,
            DataType.GET_RESPONSE,
        ):
            return not self._data
        if t == DataType.SET_REQUEST:
            return bool(self._data)
        return t in (DataType.OBJECT, DataType.STRING)

    def type_description(self) -> str:
        try:
            return f"{DataType(self._type).name}_TYPE"
        except ValueError:
            return f"Unsupported Type ({self._type})"

    def long_long_value(self) -> int:
        """Return the numeric value as a signed integer."""
        if self._type in _COUNTER_TYPES:
            size = 8
        elif self._type in (DataType.IP_ADDR, DataType.GAUGE, DataType.INTEGER):
            size = 4
        else:
            raise TypeError(f"{self.type_description()} has no numeric value")
        if len(self._data) < size:
            raise ValueError(f"numeric value needs {size} bytes, got {len(self._data)}")
        return int.from_bytes(self._data[:size], "big", signed=True)

    def int_value(self) -> int:
        value = self.long_long_value() & 0xFFFFFFFF
        return value - (1 << 32) if value & 0x80000000 else value

    def uint_value(self) -> int:
        return self.long_long_value() & 0xFFFFFFFF

    def text_value(self) -> str:
        if self._type != DataType.STRING:
            raise TypeError(f"{self.type_description()} has no text value")
        return self._data.decode("latin-1")

    def add_child(self, child: SnmpData) -> None:
        self._children.append(child)

    def make_snmp_chunk(self) -> bytes:
        """Encode this value, with its children, as BER bytes."""
        t = self._type
        if t == DataType.OBJECT:
            return _pack_content(t, pack_oid(self._data))
        if t in (DataType.INTEGER, DataType.IP_ADDR):
            return _pack_content(t, _compress_leading_zeros(self._data))
        if t in (DataType.GAUGE, DataType.COUNTER, DataType.TIME_TICKS):
            chunk = _compress_leading_zeros(self._data)
            if not chunk:
                raise ValueError("numeric value has no content")
            if chunk[0] > 0x7F:
                chunk = b"\x00" + chunk
            if len(chunk) > 127:
                raise ValueError("numeric value is too long")
            return bytes([t & 0xFF, len(chunk)]) + chunk
        if t in _CONSTRUCTED_TYPES:
            return _pack_content(t, b"".join(child.make_snmp_chunk() for child in self._children))
        return _pack_content(t, self._data)

    def to_value(self) -> int | str | None:
        """Return the value as a plain Python object, or None for other types."""
        t = self._type
        if t in (DataType.INTEGER, DataType.GAUGE, DataType.COUNTER, DataType.TIME_TICKS):
            return self.int_value()
        if t == DataType.STRING:
            return self._data.decode("utf-8", errors="replace")
        if t == DataType.IP_ADDR:
            return str(ipaddress.IPv4Address(_parse_decimal(self._data, 0, 0xFFFFFFFF)))
        return None

    @classmethod
    def integer(cls, value: int) -> SnmpData:
        return cls(DataType.INTEGER, value.to_bytes(4, "big", signed=True))

    @classmethod
    def null(cls) -> SnmpData:
        return cls(DataType.NULL_DATA)

    @classmethod
    def string(cls, value: bytes | str) -> SnmpData:
        return cls(DataType.STRING, _as_bytes(value))

    @classmethod
    def sequence(cls) -> SnmpData:
        return cls(DataType.SEQUENCE)

    @classmethod
    def oid(cls, oid: bytes | str) -> SnmpData:
        """Return an OBJECT value holding the dotted ``oid``."""
        item = cls(DataType.OBJECT)
        item._data = _as_bytes(oid).strip()
        return item

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SnmpData):
            return NotImplemented
        return (
            self._type == other._type
            and self._data == other._data
            and self._children == other._children
            and self.address == other.address
        )

    def __repr__(self) -> str:
        return (
            f"SnmpData(type={self.type_description()}, data={self._data.hex()}, "
            f"children={self._children!r}, address={self.address!r})"
        )


def parse_data(data: bytes) -> list[SnmpData]:
    """Decode consecutive BER values; stops at the first malformed one."""
    result: list[SnmpData] = []
    rest = bytes(data)
    while rest:
        if len(rest) < 2:
            _log.warning("invalid packet size")
            break
        data_length = rest[1]
        size_length = 1
        if data_length > 0x80:
            size_length = 1 + data_length - 0x80
            if len(rest) <= size_length:
                _log.warning("invalid packet size")
                break
            length_data = rest[2 : 1 + size_length].rjust(4, b"\x00")[:4]
            data_length = int.from_bytes(length_data, "big", signed=True)
        packet_size = 1 + size_length + data_length
        if data_length < 0 or len(rest) < packet_size:
            _log.warning("truncated packet")
            break
        packet = SnmpData(rest[0], rest[1 + size_length : packet_size])
        rest = rest[packet_size:]
        if not packet.is_valid():
            _log.warning("error in packet parsing")
            break
        result.append(packet)
    return result