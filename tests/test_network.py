import io

import pytest

from cubenet.addressing import RoutingError, node_config
from cubenet.console import Console
from cubenet.datalink import DataLink
from cubenet.leds import LedColor, StatusLed
from cubenet.network import NETWORK_DELAY_MS, Network, build_packet
from cubenet.protocol import PACKET_HEADER_LEN
from cubenet.radio import (
    Ether,
    EtherTransceiver,
    ReceptionError,
    ReceptionTimeout,
    Transceiver,
)


def _no_delay(ms):
    return None


def _make_node(ether, name, stream=None, led=None, delay=_no_delay):
    config = node_config(name)
    link = DataLink(EtherTransceiver(ether, config.data_link_addr))
    return Network(
        link,
        config,
        Console(stream if stream is not None else io.StringIO()),
        led if led is not None else StatusLed(delay=_no_delay),
        delay,
    )


@pytest.fixture
def nodes():
    ether = Ether()
    return {name: _make_node(ether, name) for name in ("cube0", "cube1", "cube2", "rover_trx")}


def test_build_packet_layout():
    packet = build_packet(b"xy", 0x3C, 0x3A)
    assert packet == bytes([2 + PACKET_HEADER_LEN, 0x3C, 0x3A]) + b"xy"


def test_build_packet_rejects_long_payload():
    with pytest.raises(ValueError):
        build_packet(bytes(29), 0x3C, 0x3A)


def test_direct_delivery(nodes):
    nodes["cube0"].transmit(b"hello", 0x3B, 0x3A)
    assert nodes["cube1"].receive(100) == b"hello"


def test_multi_hop_forwarding(nodes):
    nodes["cube0"].transmit(b"far away", 0x3C, 0x3A)
    with pytest.raises(ReceptionTimeout):
        nodes["cube1"].receive(50)
    assert nodes["cube2"].receive(100) == b"far away"


def test_rover_reaches_cube0_through_chain(nodes):
    nodes["rover_trx"].transmit(b"ping", 0x3A, 0x3F)
    with pytest.raises(ReceptionTimeout):
        nodes["cube2"].receive(50)
    with pytest.raises(ReceptionTimeout):
        nodes["cube1"].receive(50)
    assert nodes["cube0"].receive(100) == b"ping"


def test_console_messages():
    ether = Ether()
    out_a, out_b = io.StringIO(), io.StringIO()
    a = _make_node(ether, "cube0", stream=out_a)
    b = _make_node(ether, "cube1", stream=out_b)
    a.transmit(b"abcdefgh", 0x3B, 0x3A)
    b.receive(100)
    assert "Transmitting a packet: " in out_a.getvalue()
    assert "Trying to receive a packet.\r\n" in out_b.getvalue()
    assert "Received a packet: " in out_b.getvalue()


def test_timeout_is_reported():
    ether = Ether()
    out = io.StringIO()
    node = _make_node(ether, "cube0", stream=out)
    with pytest.raises(ReceptionTimeout):
        node.receive(0)
    assert out.getvalue().endswith("[INFO] Timeout in network_rx\r\n")


class _FaultyRadio(Transceiver):
    def transmit_payload(self, address, payload):
        return None

    def receive_payload(self, timeout_ms):
        raise ReceptionError("fault")


def test_reception_error_is_reported():
    out = io.StringIO()
    node = Network(
        DataLink(_FaultyRadio()),
        node_config("cube0"),
        Console(out),
        StatusLed(delay=_no_delay),
        _no_delay,
    )
    with pytest.raises(ReceptionError):
        node.receive(10)
    assert "[WARNING] Error in network_rx\r\n" in out.getvalue()


def test_transmit_blinks_and_restores_led():
    ether = Ether()
    _make_node(ether, "cube1")
    shown = []
    led = StatusLed(on_change=shown.append, delay=_no_delay)
    led.set(LedColor.GREEN)
    node = _make_node(ether, "cube0", led=led)
    node.transmit(b"x", 0x3B, 0x3A)
    assert shown[-2:] == [LedColor.OFF, LedColor.GREEN]
    assert led.color == LedColor.GREEN


def test_transmit_waits_network_delay():
    ether = Ether()
    _make_node(ether, "cube1")
    calls = []
    node = _make_node(ether, "cube0", delay=calls.append)
    node.transmit(b"x", 0x3B, 0x3A)
    assert calls == [NETWORK_DELAY_MS]


def test_unknown_destination_raises(nodes):
    with pytest.raises(RoutingError):
        nodes["cube0"].transmit(b"x", 0x50, 0x3A)