# cubenet

`cubenet` is a small, layered network stack for a handful of radio nodes
("data cubes") that pass short text messages to one another. Each layer is a
plain Python object built on the one below it:

| Layer        | Module                 | What it does                                                  |
|--------------|------------------------|---------------------------------------------------------------|
| Radio        | `cubenet.radio`        | Fixed 32-byte payloads; an in-memory `Ether` connecting nodes |
| Data link    | `cubenet.datalink`     | One-byte length header, zero padding to the payload size      |
| Network      | `cubenet.network`      | Destination/source addresses, forwarding via routing table    |
| Transport    | `cubenet.transport`    | Start/data/end segments, stop-and-wait acknowledgements       |
| Application  | `cubenet.application`  | The rover's colour wheel and `LED:<COLOR>` commands           |

Supporting modules:

- `cubenet.protocol` – frame, packet and segment sizes, `SegmentId` and
  `segment_label`.
- `cubenet.addressing` – the four known nodes, `node_config(name)` returning a
  `NodeConfig` with each node's addresses and next-hop table,
  `resolve_data_link_addr` and `resolve_network_addr`. `NodeConfig.next_hop`
  raises `RoutingError` for an unknown destination.
- `cubenet.leds` – `LedColor` and a `StatusLed` that remembers its steady
  colour and can blink another one briefly. Pass `on_change` to drive a real
  or drawn LED, and `delay` to replace the blink pauses.
- `cubenet.console` – `Console`, a printf-style writer (standard output by
  default) that truncates each message to 256 characters.
- `cubenet.printing` – `format_packet` and `format_segment`, one-line
  summaries such as `<SegID 0d (DATA)>`.
- `cubenet.eventlog` – `MessageLog`, a three-slot circular log of received
  messages laid out in a 1024-byte EEPROM-style `bytearray`.

Errors are raised, not returned: a radio timeout is `ReceptionTimeout`, a
failed radio receive is `ReceptionError`, an unacknowledged send is
`TransmissionFailure` (all `RadioError`s), and a transport that gives up on a
segment after ten tries raises `AttemptLimitReached` (a `TransportError`).

Every layer that waits takes an optional `delay` callable (milliseconds); by
default it sleeps for real.

## Nodes and routes

Four nodes are known, with network address equal to port number:

| Node        | Network address | Data-link address |
|-------------|-----------------|-------------------|
| `cube0`     | `0x3A`          | `0x3A3A3A3A`      |
| `cube1`     | `0x3B`          | `0x3B3B3B3B`      |
| `cube2`     | `0x3C`          | `0x3C3C3C3C`      |
| `rover_trx` | `0x3F`          | `0x3F3F3F3F`      |

The nodes form a chain `0x3A – 0x3B – 0x3C – 0x3F`; each node's routing table
sends traffic one step along it:

```python
from cubenet.addressing import node_config, resolve_data_link_addr

cube0 = node_config("cube0")
cube0.next_hop(0x3F)              # 0x3B
resolve_data_link_addr(0x3C)      # 0x3C3C3C3C
```

## Sending a packet between neighbours

```python
import io

from cubenet.addressing import node_config
from cubenet.console import Console
from cubenet.datalink import DataLink
from cubenet.network import Network
from cubenet.radio import Ether, EtherTransceiver

ether = Ether()

def make(name):
    config = node_config(name)
    radio = EtherTransceiver(ether, config.data_link_addr)
    return Network(DataLink(radio), config, console=Console(io.StringIO()))

cube0, cube1 = make("cube0"), make("cube1")
cube0.transmit(b"hello", 0x3B, 0x3A)
cube1.receive(100)                # b"hello"
```

A node whose `receive` picks up a packet for another address forwards it
along its routing table and keeps waiting. `Transport.transmit` waits for an
acknowledgement after every segment, so its sender and receiver have to run
concurrently (for example in two threads sharing one `Ether`).

## Parsing LED commands

```python
from cubenet.application import parse_message
from cubenet.leds import LedColor

parse_message("Go touch some grass. LED:GREEN\r\n") == LedColor.GREEN
parse_message("no command here")                    # None
```

## Logging messages

```python
from cubenet.eventlog import LoggedMessage, MessageLog

log = MessageLog()        # a fresh, erased 1024-byte image
log.initialize()
log.log_message(b"hi", 0x3F)
log.latest()              # [LoggedMessage(source=0x3F, length=2, data=b"hi")]
```

Only the three newest messages are kept; `message_count()` keeps counting.

## What it does not do

- There is no driver for a physical radio. `Transceiver` is an abstract base
  class; the only implementation is the in-memory `EtherTransceiver`.
- There is no command-line program. `RoverApplication` is started from
  Python with `boot(...)` and `run(rounds)`.
- Only the rover's application is included; there is no ready-made program
  for a receiving cube that acts on `LED:` commands or logs what it receives,
  though `parse_message`, `StatusLed` and `MessageLog` provide the pieces.

## Requirements

Python 3.10 or later, and nothing outside the standard library. The tests
use pytest (`pip install .[test]`).