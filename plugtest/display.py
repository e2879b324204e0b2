"""The table that shows the live state of every socket under test."""

from __future__ import annotations

from plugtest.datapackets import DataPacket, DataPackets, shared_packets
from plugtest.table import Table

HEADER = ("编号", "动态", "状态值", "拔插次数", "成功次数", "失败次数")
TITLE = "测试数据列表"
INSERTED = "插入"
REMOVED = "拔出"


def format_packet(index: int, packet: DataPacket) -> list[str]:
    """Return the row texts for the packet at ``index``.

    A disabled packet yields only its 1-based number.
    """
    row = [str(index + 1)]
    if packet.en:
        row += [
            INSERTED if packet.action else REMOVED,
            f"{packet.value / 100.0:.3f}",
            str(packet.all),
            str(packet.ok),
            str(packet.err),
        ]
    return row


class DisplayTable(Table):
    """A :class:`Table` with one row per packet."""

    def __init__(self, packets: DataPackets | None = None) -> None:
        self.packets = packets if packets is not None else shared_packets()
        super().__init__(HEADER, len(self.packets), TITLE)

    def update_row(self, index: int) -> None:
        """Show the current state of the packet at ``index``."""
        packet = self.packets.get(index)
        values = format_packet(index, packet)
        if not packet.en:
            self.clear_row(index)
        self.set_row(index, values)

    def refresh(self) -> None:
        for index in range(len(self.packets)):
            self.update_row(index)