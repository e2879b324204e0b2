"""Units of SNMP work queued and run one at a time by a session."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, Sequence

from plugtest.snmpdata import SnmpData


class JobSession(Protocol):
    """What a job needs from the session that runs it."""

    def complete_work(self, values: list[SnmpData]) -> None: ...

    def send_request_get_values(self, names: Sequence[str]) -> None: ...

    def send_request_get_next_value(self, name: str) -> None: ...

    def send_request_set_value(
        self, community: bytes, name: str, type: int, value: bytes
    ) -> None: ...


class AbstractJob(ABC):
    """A request sent through a session, finished by the data it receives."""

    def __init__(self, session: JobSession, job_id: int) -> None:
        if session is None:
            raise ValueError("a job needs a session")
        if job_id <= 0:
            raise ValueError(f"job id must be positive: {job_id}")
        self._session = session
        self._id = job_id

    @property
    def id(self) -> int:
        return self._id

    @property
    def session(self) -> JobSession:
        return self._session

    @abstractmethod
    def start(self) -> None:
        """Send the first request of the job."""

    def process_data(self, values: list[SnmpData]) -> None:
        """Handle a response; by default the job is complete."""
        self._session.complete_work(values)

    @abstractmethod
    def description(self) -> str:
        """Return a short human-readable summary of the job."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id}, {self.description()!r})"


class RequestValuesJob(AbstractJob):
    """Reads the values of a fixed list of OIDs in one GET request."""

    def __init__(self, session: JobSession, job_id: int, oids: Sequence[str]) -> None:
        super().__init__(session, job_id)
        self._oids = list(oids)

    @property
    def oids(self) -> list[str]:
        return list(self._oids)

    def start(self) -> None:
        self._session.send_request_get_values(list(self._oids))

    def description(self) -> str:
        return "requestValues:" + "; ".join(self._oids)


class RequestSubValuesJob(AbstractJob):
    """Walks every value below a base OID with repeated GET-NEXT requests."""

    def __init__(self, session: JobSession, job_id: int, base_oid: str) -> None:
        super().__init__(session, job_id)
        self._base_oid = base_oid
        self._found: list[SnmpData] = []

    @property
    def base_oid(self) -> str:
        return self._base_oid

    @property
    def found(self) -> list[SnmpData]:
        return list(self._found)

    def start(self) -> None:
        self._session.send_request_get_next_value(self._base_oid)

    def process_data(self, values: list[SnmpData]) -> None:
        if not values:
            self._session.complete_work(values)
            return
        value = values[0]
        oid = bytes(value.address)
        prefix = (self._base_oid + ".").encode("latin-1")
        if len(values) == 1 and oid.startswith(prefix):
            self._found.append(value)
            self._session.send_request_get_next_value(oid.decode("latin-1"))
        else:
            self._session.complete_work(list(self._found))

    def description(self) -> str:
        return "requestSubValues: " + self._base_oid


class SetValueJob(AbstractJob):
    """Writes one value with a SET request."""

    def __init__(
        self,
        session: JobSession,
        job_id: int,
        community: bytes,
        oid: str,
        type: int,
        value: bytes,
    ) -> None:
        super().__init__(session, job_id)
        self._community = bytes(community)
        self._oid = oid
        self._type = int(type)
        self._value = bytes(value)

    def start(self) -> None:
        self._session.send_request_set_value(
            self._community, self._oid, self._type, self._value
        )

    def description(self) -> str:
        return "requestSetValue: " + self._oid