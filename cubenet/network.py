"""Network layer: addressed packets, routing and forwarding between nodes."""

from __future__ import annotations

import time
from typing import Callable, Optional

from cubenet.addressing import NodeConfig, RoutingError, resolve_data_link_addr
from cubenet.console import Console
from cubenet.datalink import DataLink
from cubenet.leds import LedColor, StatusLed
from cubenet.printing import format_packet
from cubenet.protocol import MAX_PACKET_LEN, PACKET_HEADER_LEN
from cubenet.radio import ReceptionError, ReceptionTimeout, TransmissionFailure

NETWORK_DELAY_MS = 1

_MAX_PACKET_PAYLOAD = MAX_PACKET_LEN - PACKET_HEADER_LEN


def _sleep_ms(milliseconds: int) -> None:
    time.sleep(milliseconds / 1000)


def build_packet(payload: bytes, dest_network_addr: int, src_network_addr: int) -> bytes:
    """Build a packet: length, destination, source, then the payload."""
    payload = bytes(payload)
    if len(payload) > _MAX_PACKET_PAYLOAD:
        raise ValueError(
            f"payload of {len(payload)} bytes exceeds {_MAX_PACKET_PAYLOAD}"
        )
    header = bytes([len(payload) + PACKET_HEADER_LEN, dest_network_addr, src_network_addr])
    return header + payload


class Network:
    """Delivers packets to this node and forwards those meant for others."""

    def __init__(
        self,
        link: DataLink,
        config: NodeConfig,
        console: Optional[Console] = None,
        led: Optional[StatusLed] = None,
        delay: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.link = link
        self.config = config
        self.console = console if console is not None else Console()
        self.led = led if led is not None else StatusLed()
        self._delay = delay if delay is not None else _sleep_ms

    def receive(self, timeout_ms: int) -> bytes:
        """Wait for a packet addressed to this node and return its payload.

        Packets for other nodes are forwarded while waiting; the timeout
        restarts after each packet received.
        """
        while True:
            self.console.write("Trying to receive a packet.\r\n")
            try:
                packet = self.link.receive(timeout_ms)
            except ReceptionError:
                self.console.write("[WARNING] Error in network_rx\r\n")
                raise
            except ReceptionTimeout:
                self.console.write("[INFO] Timeout in network_rx\r\n")
                raise

            self.led.blink(LedColor.OFF)
            self.console.write("Received a packet: ")
            self.console.write(format_packet(packet))

            packet_len = packet[0]
            payload = packet[PACKET_HEADER_LEN:packet_len]
            if packet[1] == self.config.network_addr:
                return bytes(payload)

            try:
                self.transmit(payload, packet[1], packet[2])
            except (TransmissionFailure, RoutingError):
                pass

    def transmit(
        self, payload: bytes, dest_network_addr: int, src_network_addr: int
    ) -> None:
        """Send ``payload`` towards ``dest_network_addr`` via the next hop.

        Raises :class:`~cubenet.addressing.RoutingError` when there is no
        route and :class:`~cubenet.radio.TransmissionFailure` when the next
        hop does not acknowledge.
        """
        self._delay(NETWORK_DELAY_MS)
        packet = build_packet(payload, dest_network_addr, src_network_addr)
        next_hop = self.config.next_hop(dest_network_addr)

        self.led.blink(LedColor.OFF)
        self.console.write("Transmitting a packet: ")
        self.console.write(format_packet(packet))

        self.link.transmit(packet, resolve_data_link_addr(next_hop))