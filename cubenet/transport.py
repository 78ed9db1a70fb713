"""Transport layer: splits messages into acknowledged, sequenced segments.

Only one sender per receiver is expected at a time. Ports are globally
unique, so a port alone identifies an endpoint.

Segment layouts (byte offsets):

* START_OF_MESSAGE: length, sequence, destination port, source port,
  identifier, total message length (two bytes, big-endian), reserved.
* DATA: length, sequence, destination port, source port, identifier,
  start offset of the data (two bytes, big-endian), reserved, data.
* END_OF_MESSAGE and ACK: length, sequence, destination port,
  source port, identifier, reserved.

The receiver acknowledges every segment with the sequence number it expects
next and only acts on segments whose sequence number it expects. The
sender repeats a segment until its acknowledgement arrives.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from cubenet.addressing import NodeConfig, RoutingError, resolve_network_addr
from cubenet.network import Network
from cubenet.protocol import (
    ACK_SEGMENT_HEADER_LEN,
    DATA_SEGMENT_HEADER_LEN,
    END_SEGMENT_HEADER_LEN,
    MAX_SEGMENT_LEN,
    START_SEGMENT_HEADER_LEN,
    SegmentId,
)
from cubenet.radio import ReceptionError, ReceptionTimeout, TransmissionFailure

TRANSPORT_TX_ACK_TIMEOUT_MS = 1500
TRANSPORT_TX_ACK_DELAY_MS = 250
TRANSPORT_TX_SEGMENT_SPACING_MS = 250
TRANSPORT_TX_RETRY_DELAY_MS = 250
TRANSPORT_TX_ATTEMPT_LIMIT = 10

MAX_TRANSPORT_MESSAGE_LEN = 0xFFFF

_MAX_DATA_PAYLOAD = MAX_SEGMENT_LEN - DATA_SEGMENT_HEADER_LEN

_LENGTH = 0
_SEQUENCE = 1
_SOURCE_PORT = 3
_IDENTIFIER = 4
_FIELD = 5


class TransportError(Exception):
    """The transport layer could not complete a transfer."""


class AttemptLimitReached(TransportError):
    """A segment went unacknowledged for every permitted attempt."""


@dataclass(frozen=True)
class ReceivedMessage:
    """A reassembled message and what its sender announced about it."""

    data: bytes
    length: int
    source_port: int


def _next_seq(seq: int) -> int:
    return 1 if seq == 0 else 0


def _padded(segment: bytes) -> bytes:
    segment = bytes(segment[:MAX_SEGMENT_LEN])
    return segment + bytes(MAX_SEGMENT_LEN - len(segment))


def _field(segment: bytes) -> int:
    return (segment[_FIELD] << 8) + segment[_FIELD + 1]


def build_segments(message: bytes, dest_port: int, src_port: int) -> list[bytes]:
    """Split ``message`` into START, DATA and END segments with alternating sequence numbers."""
    message = bytes(message)
    length = len(message)
    if length > MAX_TRANSPORT_MESSAGE_LEN:
        raise ValueError(
            f"message of {length} bytes exceeds {MAX_TRANSPORT_MESSAGE_LEN}"
        )

    seq = 0
    segments = [
        bytes(
            [
                START_SEGMENT_HEADER_LEN,
                seq,
                dest_port,
                src_port,
                SegmentId.START_OF_MESSAGE,
                length >> 8,
                length & 0xFF,
                0,
            ]
        )
    ]
    seq = _next_seq(seq)

    for offset in range(0, length, _MAX_DATA_PAYLOAD):
        chunk = message[offset:offset + _MAX_DATA_PAYLOAD]
        header = bytes(
            [
                len(chunk) + DATA_SEGMENT_HEADER_LEN,
                seq,
                dest_port,
                src_port,
                SegmentId.DATA,
                offset >> 8,
                offset & 0xFF,
                0,
            ]
        )
        segments.append(header + chunk)
        seq = _next_seq(seq)

    segments.append(
        bytes(
            [
                END_SEGMENT_HEADER_LEN,
                seq,
                dest_port,
                src_port,
                SegmentId.END_OF_MESSAGE,
                0,
            ]
        )
    )
    return segments


def _sleep_ms(milliseconds: int) -> None:
    time.sleep(milliseconds / 1000)


class Transport:
    """Reliable message delivery over the network layer, one sender at a time."""

    def __init__(
        self,
        network: Network,
        config: NodeConfig,
        delay: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.network = network
        self.config = config
        self._delay = delay if delay is not None else _sleep_ms
        self._rx_seq = 0

    # ------------------------------------------------------------ receiving

    def _attempt_receive(self, timeout_ms: int) -> tuple[bytes, bool]:
        """Receive and acknowledge one segment; report whether it was new."""
        segment = _padded(self.network.receive(timeout_ms))
        seq = segment[_SEQUENCE]
        source = segment[_SOURCE_PORT]

        if segment[_IDENTIFIER] == SegmentId.START_OF_MESSAGE:
            self._rx_seq = seq

        self._delay(TRANSPORT_TX_ACK_DELAY_MS)
        ack = bytes(
            [
                ACK_SEGMENT_HEADER_LEN,
                _next_seq(seq),
                source,
                self.config.port,
                SegmentId.ACK,
                0,
            ]
        )
        try:
            self.network.transmit(
                ack, resolve_network_addr(source), self.config.network_addr
            )
        except (TransmissionFailure, RoutingError):
            # The sender repeats the segment if the acknowledgement is lost.
            pass

        if self._rx_seq != seq:
            return segment, False
        self._rx_seq = _next_seq(self._rx_seq)
        return segment, True

    def _next_segment(self, timeout_ms: int) -> bytes:
        while True:
            try:
                segment, fresh = self._attempt_receive(timeout_ms)
            except ReceptionError:
                continue
            if fresh:
                return segment

    def receive(self, buf_len: int, timeout_ms: int) -> ReceivedMessage:
        """Wait for a complete message and return it in a ``buf_len``-byte buffer.

        Data beyond ``buf_len`` is dropped; unused bytes are zero. Raises
        :class:`~cubenet.radio.ReceptionTimeout` when nothing arrives in time.
        """
        if buf_len < 0:
            raise ValueError("buffer length must not be negative")
        buffer = bytearray(buf_len)
        receiving = False
        length = 0
        source_port = 0

        while True:
            segment = self._next_segment(timeout_ms)
            identifier = segment[_IDENTIFIER]

            if not receiving:
                if identifier == SegmentId.START_OF_MESSAGE:
                    source_port = segment[_SOURCE_PORT]
                    length = _field(segment)
                    receiving = True
                continue

            if identifier == SegmentId.DATA:
                offset = _field(segment)
                end = max(segment[_LENGTH], DATA_SEGMENT_HEADER_LEN)
                chunk = segment[DATA_SEGMENT_HEADER_LEN:end]
                writable = chunk[:max(buf_len - offset, 0)]
                buffer[offset:offset + len(writable)] = writable
            elif identifier == SegmentId.END_OF_MESSAGE:
                return ReceivedMessage(bytes(buffer), length, source_port)
            elif identifier == SegmentId.START_OF_MESSAGE:
                # The sender gave up and started the message over.
                length = _field(segment)

    # --------------------------------------------------------- transmitting

    def _attempt_transmit(self, segment: bytes, dest_port: int, seq: int) -> bool:
        try:
            self.network.transmit(
                segment, resolve_network_addr(dest_port), self.config.network_addr
            )
        except TransmissionFailure:
            # Radio failures are unreliable; the acknowledgement decides.
            pass

        try:
            ack = _padded(self.network.receive(TRANSPORT_TX_ACK_TIMEOUT_MS))
        except ReceptionTimeout:
            return False
        except ReceptionError as exc:
            raise TransportError("error while waiting for acknowledgement") from exc

        if ack[_IDENTIFIER] != SegmentId.ACK:
            return False
        return ack[_SEQUENCE] != seq

    def _transmit_until_acknowledged(self, segment: bytes, dest_port: int) -> None:
        seq = segment[_SEQUENCE]
        for _ in range(TRANSPORT_TX_ATTEMPT_LIMIT):
            if self._attempt_transmit(segment, dest_port, seq):
                return
            self._delay(TRANSPORT_TX_RETRY_DELAY_MS)
        raise AttemptLimitReached(
            f"segment unacknowledged after {TRANSPORT_TX_ATTEMPT_LIMIT} attempts"
        )

    def transmit(self, message: bytes, dest_port: int) -> None:
        """Send ``message`` to ``dest_port``, each segment acknowledged in turn.

        Raises :class:`AttemptLimitReached` when a segment is never
        acknowledged and :class:`TransportError` on a reception error.
        """
        segments = build_segments(message, dest_port, self.config.port)
        last = len(segments) - 1
        for index, segment in enumerate(segments):
            self._transmit_until_acknowledged(segment, dest_port)
            if index < last:
                self._delay(TRANSPORT_TX_SEGMENT_SPACING_MS)