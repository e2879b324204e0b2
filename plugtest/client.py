"""A small facade over :class:`~plugtest.session.Session` for SNMP requests."""

from __future__ import annotations

from typing import Sequence

from plugtest.session import FailureHandler, ResponseHandler, Session


class SnmpClient:
    """Queues SNMP reads and writes against one agent.

    Results reach the callables in :attr:`response_handlers` as
    ``(job_id, values)``; failed jobs reach :attr:`failure_handlers`
    as ``job_id``.
    """

    def __init__(self, session: Session | None = None) -> None:
        self._session = session if session is not None else Session()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def agent_address(self) -> str | None:
        return self._session.agent_address

    @agent_address.setter
    def agent_address(self, address: str) -> None:
        self._session.set_agent_address(address)

    @property
    def community(self) -> bytes:
        return self._session.community

    @community.setter
    def community(self, value: bytes | str) -> None:
        self._session.community = value

    @property
    def response_timeout(self) -> int:
        """Milliseconds to wait for a response."""
        return self._session.response_timeout

    @response_timeout.setter
    def response_timeout(self, value: int) -> None:
        self._session.response_timeout = value

    @property
    def response_handlers(self) -> list[ResponseHandler]:
        return self._session.response_handlers

    @property
    def failure_handlers(self) -> list[FailureHandler]:
        return self._session.failure_handlers

    def is_busy(self) -> bool:
        return self._session.is_busy()

    def cancel_work(self) -> None:
        """Fail the running job and move on to the next one."""
        self._session.cancel_work()

    def request_value(self, oid: str) -> int:
        """Queue a GET of one OID; returns the job id."""
        return self.request_values([oid])

    def request_values(self, oids: Sequence[str]) -> int:
        """Queue a GET of several OIDs; returns the job id."""
        return self._session.request_values(list(oids))

    def request_sub_values(self, oid: str) -> int:
        """Queue a walk of every value below ``oid``; returns the job id."""
        return self._session.request_sub_values(oid)

    def set_value(self, community: bytes, oid: str, type: int, value: bytes) -> int:
        """Queue a SET of one value; returns the job id."""
        return self._session.set_value(community, oid, type, value)