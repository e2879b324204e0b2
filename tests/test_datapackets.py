import pytest

from plugtest.datapackets import ARRAY_SIZE, DataPacket, DataPackets, shared_packets


def test_default_size():
    packets = DataPackets()
    assert len(packets) == ARRAY_SIZE
    assert list(packets) == [DataPacket()] * ARRAY_SIZE


def test_get_returns_same_object():
    packets = DataPackets(2)
    packets.get(1).ok = 5
    assert packets.get(1).ok == 5
    assert packets.get(0).ok == 0


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_get_out_of_range(index):
    with pytest.raises(IndexError):
        DataPackets(3).get(index)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        DataPackets(-1)


def test_packet_clear():
    packet = DataPacket(en=True, action=1, all=4, ok=3, err=1, value=2200)
    packet.clear()
    assert packet == DataPacket()


def test_clear_one_and_all():
    packets = DataPackets(3)
    for packet in packets:
        packet.en = True
        packet.all = 7
    packets.clear(1)
    assert packets.get(1) == DataPacket()
    assert packets.get(0).all == 7
    packets.clear_all()
    assert all(packet == DataPacket() for packet in packets)


def test_shared_packets_is_singleton():
    assert shared_packets() is shared_packets()
    assert len(shared_packets()) == ARRAY_SIZE