"""Half-duplex access to a serial port with buffered writes and polled reads."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Protocol

import serial
from serial.tools import list_ports

_log = logging.getLogger(__name__)

SERIAL_LEN = 2 * 1024
DEFAULT_BAUD_RATE = 9600
READ_INTERVAL = 0.12


class SerialPortError(Exception):
    """Raised when the serial port cannot be used as requested."""


class PortLike(Protocol):
    def write(self, data: bytes) -> int | None: ...

    def flush(self) -> None: ...

    def read(self, size: int) -> bytes: ...

    @property
    def in_waiting(self) -> int: ...

    def close(self) -> None: ...


def _open_serial(name: str, baud_rate: int) -> Any:
    return serial.Serial(
        port=name,
        baudrate=baud_rate,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_ONE,
        xonxoff=False,
        rtscts=False,
        timeout=0,
    )


def available_ports() -> list[str]:
    """Return the names of the serial ports present on the system."""
    return [info.device for info in list_ports.comports()]


class SerialPort:
    """A serial port whose writes are queued and sent by :meth:`poll`."""

    def __init__(self, opener: Callable[[str, int], PortLike] | None = None) -> None:
        self._opener = opener if opener is not None else _open_serial
        self._port: PortLike | None = None
        self._open = False
        self._name = ""
        self._lock = threading.RLock()
        self._pending = b""
        self._received = bytearray()
        self.read_interval = READ_INTERVAL

    def __enter__(self) -> SerialPort:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def open(self, name: str, baud_rate: int = DEFAULT_BAUD_RATE) -> None:
        """Open ``name`` at ``baud_rate``, 8 data bits, no parity, one stop bit."""
        if self._open:
            raise SerialPortError(f"serial port {self._name} is already open")
        self._name = name
        try:
            port = self._opener(name, baud_rate)
        except (serial.SerialException, OSError, ValueError) as exc:
            raise SerialPortError(f"cannot open serial port {name}: {exc}") from exc
        with self._lock:
            self._port = port
            self._open = True
            self._pending = b""
            self._received.clear()

    def close(self) -> None:
        if not self._open:
            return
        with self._lock:
            self._open = False
            if self._port is not None:
                self._port.close()

    def is_open(self) -> bool:
        return self._open

    def name(self) -> str:
        """Return the name of the last port opened, or an empty string."""
        return self._name

    def contains(self, name: str) -> bool:
        return name in available_ports()

    def write(self, data: bytes) -> int:
        """Queue ``data`` to be sent on the next poll; returns its length."""
        with self._lock:
            self._pending = bytes(data)
            return len(self._pending)

    def poll(self) -> int:
        """Send queued data, then collect what has arrived; returns bytes received."""
        if not self._open or self._port is None:
            return 0
        with self._lock:
            if self._pending:
                written = self._port.write(self._pending) or 0
                if written > 0:
                    self._port.flush()
                    self._pending = b""
                    self._received.clear()
                else:
                    return 0
            incoming = bytearray()
            while True:
                waiting = self._port.in_waiting
                if not waiting:
                    break
                chunk = self._port.read(waiting)
                if not chunk:
                    break
                incoming += chunk
            self._received += incoming
            return len(incoming)

    def read(self, msecs: int = 1) -> bytes:
        """Collect received data, waiting while it keeps arriving.

        ``msecs`` is the number of empty read rounds to wait for.
        """
        result = bytearray()
        count = 0
        while True:
            time.sleep(self.read_interval)
            if not self._open:
                return bytes(result)
            self.poll()
            with self._lock:
                chunk = bytes(self._received)
                self._received.clear()
            if chunk:
                result += chunk
                count = msecs - 1
            else:
                count += 1
            if count >= msecs:
                return bytes(result)

    def transmit(self, data: bytes, msecs: int = 1) -> bytes:
        """Send ``data`` and return the reply."""
        if self.write(data) <= 0:
            return b""
        reply = self.read(msecs)
        if len(reply) > SERIAL_LEN:
            raise SerialPortError(f"serial reply too long: {len(reply)} bytes")
        return reply

    def loop_test(self) -> bool:
        """Send every byte value 0..254 and check the same amount comes back."""
        sent = bytes(range(255))
        received = self.transmit(sent)
        if len(received) != len(sent):
            _log.warning("serial loop test failed: %d bytes received", len(received))
            return False
        _log.info("serial loop test passed")
        return True