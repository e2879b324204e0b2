# plugtest

Building blocks for a plug/unplug endurance test bench. Relays are switched
over a serial line, readings are requested from SNMP agents, settings are kept
in an INI file, and the running counts of each test channel are held in a
table model ready for display.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `plugtest.common`: text and byte helpers. `is_digit_str` (the empty string
  counts as digits), `is_ip_address` (dotted-quad IPv4 only),
  `bytes_to_hex_str` and `bytes_to_uchar_str` (each byte followed by a space),
  and `hex_str_to_bytes`, which reads hex pairs, skips spaces between pairs,
  ignores a trailing unpaired digit and raises `ValueError` on a non-hex digit.
- `plugtest.colors`: the frozen `Color` dataclass, the status colours
  (`EMPTY`, `NORMAL`, `ALARM`, `OFFLINE`, `WARNING`), the 13-colour `PALETTE`
  with `palette_color(index)` wrapping around it, `temperature_color(value)`
  and `in_bound(minimum, value, maximum)`.
- `plugtest.config`: `data_path(name, home=None)` gives a path inside a
  `.PlugTest` directory under the home directory, creating the directory.
  `SettingsFile` is a grouped key/value store in an INI file (by default
  `sysconfig.ini` in that directory); `read_int` and `read_float` return `-1`
  for missing or malformed values, and every `write` saves the file.
  `Config` loads and saves a `ConfigItem`: agent IP, serial port name, push
  interval (10 when unset), four relay open/close commands with their enable
  flags, and three SNMP OIDs with their enable flags, all under keys of the
  form `<prefix>_...` (prefix `con` by default).
- `plugtest.datapackets`: `DataPacket` per test channel (`en`, `action`,
  `all`, `ok`, `err`, `value`), grouped in a fixed-size `DataPackets`
  (3 by default); `shared_packets()` returns one process-wide collection.
- `plugtest.snmpdata`: `SnmpData` and the `DataType` tags, a BER encoder and
  decoder for SNMP messages, with `parse_data`, `decode_oid`, `pack_oid` and
  `pack_length`. OIDs are handled in dotted form starting with `.1.3`.
- `plugtest.jobs`: `RequestValuesJob` (one GET), `RequestSubValuesJob`
  (a walk with repeated GET-NEXT below a base OID) and `SetValueJob`
  (one SET), all derived from `AbstractJob`.
- `plugtest.session`: `Session` queues up to 10 jobs, runs them one at a
  time, builds SNMP v1 request datagrams with random request ids, matches
  responses by request id, resends the last request when the agent reports an
  error status, and passes results to `response_handlers` and failed jobs to
  `failure_handlers`. `error_status_text` names SNMP error statuses.
- `plugtest.client`: `SnmpClient`, a facade over a session with
  `request_value`, `request_values`, `request_sub_values`, `set_value`,
  `is_busy` and `cancel_work`, plus `agent_address`, `community` and
  `response_timeout` properties.
- `plugtest.serialport`: `SerialPort`, a half-duplex link built on pyserial
  (8 data bits, no parity, one stop bit, 9600 baud by default). `write`
  queues data, `poll` sends it and collects what has arrived, `read` waits
  while data keeps coming, `transmit` does both and `loop_test` checks a
  looped-back line. `available_ports()` lists the system's ports; errors are
  raised as `SerialPortError`.
- `plugtest.table`: `Table`, an in-memory grid of `Cell` items under a
  header, with `---` as the placeholder text, rows added on demand, `resize`,
  red row backgrounds and alarm text colours, and `to_list` for export.
- `plugtest.display`: `format_packet` and `DisplayTable`, a table with one
  row per `DataPacket` that `refresh` brings up to date.

## Examples

Encoding and decoding BER:

```python
from plugtest.snmpdata import SnmpData, parse_data

message = SnmpData.sequence()
message.add_child(SnmpData.integer(0))
message.add_child(SnmpData.string(b"public"))
chunk = message.make_snmp_chunk()

(decoded,) = parse_data(chunk)
assert decoded.children[1].text_value() == "public"
```

Showing the channel counts:

```python
from plugtest.datapackets import DataPackets
from plugtest.display import DisplayTable

packets = DataPackets(3)
packet = packets.get(0)
packet.en = True
packet.action = 1
packet.value = 1234
packet.all, packet.ok = 10, 9
packet.err = 1

table = DisplayTable(packets)
table.refresh()
print(table.to_list())
```

Asking an agent for a value. The session sends datagrams but does not read
them; the caller receives replies and watches the deadline:

```python
import socket
import time

from plugtest.session import Session

sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
sock.settimeout(0.5)
session = Session(transport=sock)
session.set_agent_address("192.0.2.10")
session.response_handlers.append(lambda job_id, values: print(job_id, values))

session.request_values([".1.3.6.1.2.1.1.3.0"])
while session.is_busy():
    try:
        datagram, _ = sock.recvfrom(65535)
        session.handle_datagram(datagram)
    except socket.timeout:
        deadline = session.response_deadline
        if deadline is not None and time.monotonic() > deadline:
            session.on_response_timeout()
```

Talking to a relay board:

```python
from plugtest.serialport import SerialPort

with SerialPort() as port:
    port.open("/dev/ttyUSB0", 9600)
    reply = port.transmit(bytes.fromhex("01050000ff00"))
```

## What it does not do

- There is no command-line program and no graphical window; the table
  classes only hold text and colours for a front end to draw.
- `Session` has no receive loop or timer of its own: incoming datagrams must
  be passed to `handle_datagram`, and `on_response_timeout` called once
  `response_deadline` has passed.
- Only community-based SNMP v1 messages are built; SNMP v3 security is not
  supported.
- Nothing here runs the plug test itself: no code switches relays on a
  schedule or fills in the `DataPacket` counters.