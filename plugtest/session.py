"""An SNMP session: one agent, a queue of jobs and the UDP datagrams between them."""

from __future__ import annotations

import ipaddress
import logging
import random
import socket
import time
from collections import deque
from typing import Callable, Protocol, Sequence

from plugtest.jobs import AbstractJob, RequestSubValuesJob, RequestValuesJob, SetValueJob
from plugtest.snmpdata import DataType, SnmpData, parse_data

_log = logging.getLogger(__name__)

DEFAULT_RESPONSE_TIMEOUT = 10000
SNMP_PORT = 161
QUEUE_LIMIT = 10
HISTORY_SIZE = 10
MAX_DATAGRAM_SIZE = 65507
MAX_WORK_ID = 0x7FFF
MAX_REQUEST_ID = 0x7FFF

_ERROR_TEXTS = {
    0: "No errors",
    1: "Too big",
    2: "No such name",
    3: "Bad value",
    4: "Read only",
    5: "Other errors",
}

ResponseHandler = Callable[[int, list[SnmpData]], None]
FailureHandler = Callable[[int], None]


class DatagramTransport(Protocol):
    """Anything that sends a datagram the way a UDP socket does."""

    def sendto(self, data: bytes, address: tuple[str, int]) -> int: ...


def error_status_text(value: int) -> str:
    """Return the description of an SNMP error status."""
    return _ERROR_TEXTS.get(value, f"Unsupported error({value})")


class Session:
    """Runs SNMP jobs against one agent, one request at a time.

    Responses are fed in through :meth:`handle_datagram`; a caller that sees
    :attr:`response_deadline` pass calls :meth:`on_response_timeout`.
    Results are delivered to ``response_handlers`` and failures to
    ``failure_handlers``.
    """

    def __init__(
        self,
        transport: DatagramTransport | None = None,
        community: bytes | str = b"public",
        response_timeout: int = DEFAULT_RESPONSE_TIMEOUT,
    ) -> None:
        self._transport = transport
        self._owns_transport = transport is None
        self._agent_address: ipaddress.IPv4Address | ipaddress.IPv6Address | None = None
        self.community = community
        self.response_timeout = response_timeout
        self._work_id = 1
        self._request_id = -1
        self._request_history: deque[int] = deque(maxlen=HISTORY_SIZE)
        self._last_request = b""
        self._queue: deque[AbstractJob] = deque()
        self._current: AbstractJob | None = None
        self._deadline: float | None = None
        self.response_handlers: list[ResponseHandler] = []
        self.failure_handlers: list[FailureHandler] = []

    @property
    def agent_address(self) -> str | None:
        return None if self._agent_address is None else str(self._agent_address)

    @property
    def community(self) -> bytes:
        return self._community

    @community.setter
    def community(self, value: bytes | str) -> None:
        self._community = value.encode("latin-1") if isinstance(value, str) else bytes(value)

    @property
    def response_timeout(self) -> int:
        """Milliseconds to wait for a response."""
        return self._response_timeout

    @response_timeout.setter
    def response_timeout(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"response timeout must not be negative: {value}")
        self._response_timeout = int(value)

    @property
    def request_id(self) -> int:
        """The id of the request awaiting a response, or -1."""
        return self._request_id

    @property
    def request_history(self) -> list[int]:
        return list(self._request_history)

    @property
    def current_job(self) -> AbstractJob | None:
        return self._current

    @property
    def response_deadline(self) -> float | None:
        """Monotonic time at which the pending request expires, or None."""
        return self._deadline

    def set_agent_address(self, address: str) -> None:
        """Set the agent to talk to; the unspecified address is rejected."""
        parsed = ipaddress.ip_address(str(address))
        if parsed.is_unspecified:
            raise ValueError(f"invalid agent address: {address}")
        self._agent_address = parsed
        if self._owns_transport:
            if isinstance(self._transport, socket.socket):
                self._transport.close()
            family = socket.AF_INET6 if parsed.version == 6 else socket.AF_INET
            sock = socket.socket(family, socket.SOCK_DGRAM)
            sock.bind(("", 0))
            self._transport = sock

    def is_busy(self) -> bool:
        return self._current is not None or bool(self._queue)

    def request_values(self, oids: Sequence[str]) -> int:
        work_id = self._create_work_id()
        self._add_work(RequestValuesJob(self, work_id, list(oids)))
        return work_id

    def request_sub_values(self, oid: str) -> int:
        work_id = self._create_work_id()
        self._add_work(RequestSubValuesJob(self, work_id, oid))
        return work_id

    def set_value(self, community: bytes, oid: str, type: int, value: bytes) -> int:
        work_id = self._create_work_id()
        self._add_work(SetValueJob(self, work_id, community, oid, type, value))
        return work_id

    def _add_work(self, job: AbstractJob) -> None:
        if len(self._queue) < QUEUE_LIMIT:
            self._queue.append(job)
            self._start_next_work()
        else:
            _log.warning(
                "The snmp request (%s) for the agent (%s) has dropped, because the queue is full.",
                job.description(),
                self.agent_address,
            )

    def _start_next_work(self) -> None:
        if self._current is None and self._queue:
            self._current = self._queue.popleft()
            self._current.start()

    def complete_work(self, values: list[SnmpData]) -> None:
        """Deliver the result of the current job and start the next one."""
        if self._current is None:
            raise RuntimeError("no job is running")
        job_id = self._current.id
        self._current = None
        for handler in list(self.response_handlers):
            handler(job_id, values)
        self._start_next_work()

    def on_response_timeout(self) -> None:
        _log.warning(
            "No snmp response received from the agent (%s) for the request (%d); "
            "the current work %s will be canceled.",
            self.agent_address,
            self._request_id,
            self._current.description() if self._current is not None else "none",
        )
        self.cancel_work()

    def cancel_work(self) -> None:
        """Fail the current job, forget the pending request and start the next job."""
        if self._current is not None:
            job_id = self._current.id
            self._current = None
            for handler in list(self.failure_handlers):
                handler(job_id)
        self._deadline = None
        self._request_id = -1
        self._start_next_work()

    def _new_request(self, pdu_type: int, community: bytes, bindings: list[SnmpData]) -> None:
        if self._request_id != -1:
            _log.warning(
                "Already waiting for a response from the agent (%s)", self.agent_address
            )
            return
        self._update_request_id()
        packet = SnmpData.sequence()
        packet.add_child(SnmpData.integer(0))
        packet.add_child(SnmpData.string(community))
        request = SnmpData(pdu_type)
        request.add_child(SnmpData.integer(self._request_id))
        request.add_child(SnmpData.integer(0))
        request.add_child(SnmpData.integer(0))
        all_objects = SnmpData.sequence()
        for binding in bindings:
            all_objects.add_child(binding)
        request.add_child(all_objects)
        packet.add_child(request)
        self._send_datagram(packet.make_snmp_chunk())

    @staticmethod
    def _binding(name: str, value: SnmpData) -> SnmpData:
        binding = SnmpData.sequence()
        binding.add_child(SnmpData.oid(name.encode("latin-1")))
        binding.add_child(value)
        return binding

    def send_request_get_values(self, names: Sequence[str]) -> None:
        bindings = [self._binding(name, SnmpData.null()) for name in names]
        self._new_request(DataType.GET_REQUEST, self._community, bindings)

    def send_request_get_next_value(self, name: str) -> None:
        bindings = [self._binding(name, SnmpData.null())]
        self._new_request(DataType.GET_NEXT_REQUEST, self._community, bindings)

    def send_request_set_value(self, community: bytes, name: str, type: int, value: bytes) -> None:
        bindings = [self._binding(name, SnmpData(type, value))]
        self._new_request(DataType.SET_REQUEST, bytes(community), bindings)

    def handle_datagram(self, datagram: bytes) -> None:
        """Process one datagram received from the agent."""
        size = len(datagram)
        if not 0 < size <= MAX_DATAGRAM_SIZE:
            _log.warning(
                "Invalid size of UDP datagram received: %d from the agent (%s)",
                size,
                self.agent_address,
            )
            return
        values = self.response_data(datagram)
        if values:
            if self._current is None:
                _log.warning("Response received with no job running; ignored")
                return
            self._current.process_data(values)

    def _ignore(self, reason: str) -> None:
        _log.warning(
            "%s in a response of the agent (%s). The datagram will be ignored.",
            reason,
            self.agent_address,
        )

    def response_data(self, datagram: bytes) -> list[SnmpData]:
        """Extract the variable bindings answering the pending request."""
        result: list[SnmpData] = []
        for packet in parse_data(datagram):
            top = packet.children
            if len(top) != 3:
                self._ignore(f"Unexpected top packet's children count ({len(top)} vs 3)")
                continue
            response = top[2]
            if response.type != DataType.GET_RESPONSE:
                self._ignore(f"Unexpected response's type ({response.type})")
                continue
            children = response.children
            if len(children) != 4:
                self._ignore(f"Unexpected child count ({len(children)} vs 4)")
                continue
            request_id_data = children[0]
            if request_id_data.type != DataType.INTEGER:
                self._ignore(f"Unexpected request id's type ({request_id_data.type})")
                continue
            response_id = request_id_data.int_value()
            if response_id != self._request_id:
                history = ", ".join(str(item) for item in self._request_history)
                self._ignore(
                    f"Unexpected request id ({response_id} vs {self._request_id}), "
                    f"history: {history}"
                )
                continue
            self._deadline = None
            self._request_id = -1

            error_state, error_index = children[1], children[2]
            if error_state.type != DataType.INTEGER:
                self._ignore(f"Unexpected error state's type ({error_state.type})")
                continue
            if error_index.type != DataType.INTEGER:
                self._ignore(f"Unexpected error index's type ({error_index.type})")
                continue
            status, index = error_state.int_value(), error_index.int_value()
            if status or index:
                _log.warning(
                    "An error message received (status: %s; index: %d) from the agent (%s). "
                    "The last request will be resent.",
                    error_status_text(status),
                    index,
                    self.agent_address,
                )
                self._write_datagram(self._last_request)
                continue

            variables = children[3]
            if variables.type != DataType.SEQUENCE:
                self._ignore(f"Unexpected variable list's type ({variables.type})")
                continue
            for variable in reversed(variables.children):
                if variable.type != DataType.SEQUENCE:
                    self._ignore(f"Unexpected variable's type ({variable.type})")
                    continue
                items = variable.children
                if len(items) != 2:
                    self._ignore(f"Unexpected item count ({len(items)} vs 2)")
                    continue
                obj, value = items
                if obj.type != DataType.OBJECT:
                    self._ignore(f"Unexpected object's type ({obj.type})")
                    continue
                value.address = obj.data
                result.append(value)
        return result

    def _write_datagram(self, datagram: bytes) -> bool:
        if self._agent_address is None or self._transport is None:
            _log.warning("Unable to send a datagram: no agent address")
            return False
        try:
            sent = self._transport.sendto(datagram, (str(self._agent_address), SNMP_PORT))
        except OSError as exc:
            _log.warning("Unable to send a datagram to the agent [%s]: %s", self.agent_address, exc)
            return False
        if sent is None or sent < 0:
            _log.warning("Unable to send a datagram to the agent [%s]", self.agent_address)
            return False
        if sent < len(datagram):
            _log.warning("Unable to send all bytes of the datagram to [%s]", self.agent_address)
        elif sent > len(datagram):
            _log.warning(
                "More bytes (%d) than the datagram contains (%d) were sent to (%s)",
                sent,
                len(datagram),
                self.agent_address,
            )
        return sent == len(datagram)

    def _send_datagram(self, datagram: bytes) -> None:
        if self._write_datagram(datagram):
            self._last_request = datagram
            self._deadline = time.monotonic() + self._response_timeout / 1000.0
        else:
            # A network that refuses one datagram is not retried.
            self.cancel_work()

    def _create_work_id(self) -> int:
        self._work_id += 1
        if self._work_id < 1 or self._work_id > MAX_WORK_ID:
            self._work_id = 1
        return self._work_id

    def _update_request_id(self) -> None:
        self._request_id = random.randint(1, MAX_REQUEST_ID)
        self._request_history.append(self._request_id)