from types import SimpleNamespace

import pytest

from plugtest.session import SNMP_PORT, Session, error_status_text
from plugtest.snmpdata import DataType, SnmpData, parse_data

SYS_DESCR = ".1.3.6.1.2.1.1.1.0"
SYS_NAME = ".1.3.6.1.2.1.1.5.0"
IF_INDEX = ".1.3.6.1.2.1.2.2.1.1"


class FakeTransport:
    def __init__(self, result=None):
        self.sent = []
        self.result = result

    def sendto(self, data, address):
        self.sent.append((bytes(data), address))
        if isinstance(self.result, Exception):
            raise self.result
        return len(data) if self.result is None else self.result


def make(result=None, address="192.0.2.10"):
    transport = FakeTransport(result)
    session = Session(transport)
    if address is not None:
        session.set_agent_address(address)
    responses, failures = [], []
    session.response_handlers.append(lambda job_id, values: responses.append((job_id, values)))
    session.failure_handlers.append(failures.append)
    return SimpleNamespace(
        session=session, transport=transport, responses=responses, failures=failures
    )


def response(request_id, bindings, error=0):
    top = SnmpData.sequence()
    top.add_child(SnmpData.integer(0))
    top.add_child(SnmpData.string(b"public"))
    pdu = SnmpData(DataType.GET_RESPONSE)
    pdu.add_child(SnmpData.integer(request_id))
    pdu.add_child(SnmpData.integer(error))
    pdu.add_child(SnmpData.integer(0))
    variables = SnmpData.sequence()
    for oid, value in bindings:
        binding = SnmpData.sequence()
        binding.add_child(SnmpData.oid(oid))
        binding.add_child(value)
        variables.add_child(binding)
    pdu.add_child(variables)
    top.add_child(pdu)
    return top.make_snmp_chunk()


def test_error_status_text():
    assert error_status_text(0) == "No errors"
    assert error_status_text(2) == "No such name"
    assert error_status_text(5) == "Other errors"
    assert error_status_text(9) == "Unsupported error(9)"


@pytest.mark.parametrize("address", ["0.0.0.0", "::", "not an address"])
def test_invalid_agent_address_rejected(address):
    session = Session(FakeTransport())
    with pytest.raises(ValueError):
        session.set_agent_address(address)
    assert session.agent_address is None


def test_get_request_on_the_wire():
    env = make()
    env.session.request_values([SYS_DESCR])
    assert len(env.transport.sent) == 1
    datagram, address = env.transport.sent[0]
    assert address == ("192.0.2.10", SNMP_PORT)
    top = parse_data(datagram)[0]
    assert top.type == DataType.SEQUENCE
    version, community, pdu = top.children
    assert version.int_value() == 0
    assert community.data == b"public"
    assert pdu.type == DataType.GET_REQUEST
    assert pdu.children[0].int_value() == env.session.request_id
    binding = pdu.children[3].children[0]
    assert binding.children[0].data == SYS_DESCR.encode()
    assert binding.children[1].type == DataType.NULL_DATA
    assert env.session.response_deadline is not None
    assert env.session.request_id in env.session.request_history


def test_response_delivers_values():
    env = make()
    job_id = env.session.request_values([SYS_DESCR])
    env.session.handle_datagram(
        response(env.session.request_id, [(SYS_DESCR, SnmpData.string(b"pdu"))])
    )
    assert len(env.responses) == 1
    got_id, values = env.responses[0]
    assert got_id == job_id
    assert values[0].address == SYS_DESCR.encode()
    assert values[0].text_value() == "pdu"
    assert not env.session.is_busy()
    assert env.session.request_id == -1
    assert env.session.response_deadline is None


def test_bindings_come_back_in_reverse_order():
    env = make()
    env.session.request_values([SYS_DESCR, SYS_NAME])
    env.session.handle_datagram(
        response(
            env.session.request_id,
            [(SYS_DESCR, SnmpData.integer(1)), (SYS_NAME, SnmpData.integer(2))],
        )
    )
    values = env.responses[0][1]
    assert [value.address for value in values] == [SYS_NAME.encode(), SYS_DESCR.encode()]


def test_wrong_request_id_is_ignored():
    env = make()
    env.session.request_values([SYS_DESCR])
    pending = env.session.request_id
    other = pending % 0x7FFF + 1
    env.session.handle_datagram(response(other, [(SYS_DESCR, SnmpData.integer(1))]))
    assert env.responses == []
    assert env.session.request_id == pending
    assert env.session.is_busy()


def test_error_status_resends_last_request():
    env = make()
    env.session.request_values([SYS_DESCR])
    env.session.handle_datagram(
        response(env.session.request_id, [(SYS_DESCR, SnmpData.null())], error=2)
    )
    assert env.responses == []
    assert len(env.transport.sent) == 2
    assert env.transport.sent[1] == env.transport.sent[0]
    assert env.session.is_busy()


def test_second_request_while_waiting_is_not_sent():
    env = make()
    env.session.request_values([SYS_DESCR])
    pending = env.session.request_id
    env.session.send_request_get_values([SYS_NAME])
    assert len(env.transport.sent) == 1
    assert env.session.request_id == pending


def test_timeout_fails_the_job():
    env = make()
    job_id = env.session.request_values([SYS_DESCR])
    env.session.on_response_timeout()
    assert env.failures == [job_id]
    assert not env.session.is_busy()
    assert env.session.request_id == -1
    assert env.session.response_deadline is None


@pytest.mark.parametrize("result", [-1, OSError("network down")])
def test_send_failure_cancels_job(result):
    env = make(result=result)
    job_id = env.session.request_values([SYS_DESCR])
    assert env.failures == [job_id]
    assert not env.session.is_busy()


def test_no_agent_address_cancels_job():
    env = make(address=None)
    job_id = env.session.request_values([SYS_DESCR])
    assert env.failures == [job_id]
    assert env.transport.sent == []


def test_work_ids_are_consecutive():
    env = make()
    ids = [env.session.request_values([SYS_DESCR]) for _ in range(3)]
    assert ids[1] == ids[0] + 1
    assert ids[2] == ids[1] + 1
    assert all(job_id >= 1 for job_id in ids)


def test_queue_limit_drops_extra_work():
    env = make()
    ids = [env.session.request_values([SYS_DESCR]) for _ in range(12)]
    for _ in range(12):
        env.session.cancel_work()
    assert env.failures == ids[:11]
    assert not env.session.is_busy()


def test_next_job_starts_after_completion():
    env = make()
    first = env.session.request_values([SYS_DESCR])
    second = env.session.request_values([SYS_NAME])
    env.session.handle_datagram(
        response(env.session.request_id, [(SYS_DESCR, SnmpData.integer(1))])
    )
    assert env.responses[0][0] == first
    assert env.session.current_job.id == second
    assert len(env.transport.sent) == 2


def test_sub_values_walk():
    env = make()
    job_id = env.session.request_sub_values(IF_INDEX)
    for suffix in (".1", ".2"):
        env.session.handle_datagram(
            response(env.session.request_id, [(IF_INDEX + suffix, SnmpData.integer(7))])
        )
    last_next = parse_data(env.transport.sent[-1][0])[0].children[2]
    assert last_next.type == DataType.GET_NEXT_REQUEST
    env.session.handle_datagram(
        response(env.session.request_id, [(".1.3.6.1.2.1.2.2.1.2.1", SnmpData.integer(7))])
    )
    assert len(env.responses) == 1
    got_id, values = env.responses[0]
    assert got_id == job_id
    assert [value.address for value in values] == [
        (IF_INDEX + ".1").encode(),
        (IF_INDEX + ".2").encode(),
    ]


def test_set_request_on_the_wire():
    env = make()
    value = (5).to_bytes(4, "big")
    env.session.set_value(b"private", SYS_NAME, DataType.INTEGER, value)
    datagram = env.transport.sent[0][0]
    assert bytes([DataType.SET_REQUEST]) in datagram
    assert SnmpData.oid(SYS_NAME).make_snmp_chunk() in datagram
    assert SnmpData(DataType.INTEGER, value).make_snmp_chunk() in datagram
    assert parse_data(datagram)[0].children[1].data == b"private"


@pytest.mark.parametrize("datagram", [b"", b"\x00" * 65508])
def test_bad_datagram_size_ignored(datagram):
    env = make()
    env.session.request_values([SYS_DESCR])
    env.session.handle_datagram(datagram)
    assert env.responses == []
    assert env.session.is_busy()


def test_unexpected_top_level_packet_gives_no_data():
    env = make()
    assert env.session.response_data(SnmpData.sequence().make_snmp_chunk()) == []


def test_complete_work_without_job_raises():
    env = make()
    with pytest.raises(RuntimeError):
        env.session.complete_work([])


def test_community_and_timeout_settings():
    session = Session(FakeTransport(), community="private", response_timeout=500)
    assert session.community == b"private"
    assert session.response_timeout == 500
    with pytest.raises(ValueError):
        session.response_timeout = -1