import pytest

from cubenet.datalink import DataLink, build_frame, frame_payload
from cubenet.protocol import FRAME_HEADER_LEN
from cubenet.radio import (
    TRX_PAYLOAD_LENGTH,
    Ether,
    EtherTransceiver,
    ReceptionError,
    ReceptionTimeout,
    Transceiver,
    TransmissionFailure,
)


def test_build_frame_layout():
    frame = build_frame(b"abc")
    assert len(frame) == TRX_PAYLOAD_LENGTH
    assert frame[0] == 3
    assert frame[FRAME_HEADER_LEN:FRAME_HEADER_LEN + 3] == b"abc"
    assert set(frame[FRAME_HEADER_LEN + 3:]) == {0}


@pytest.mark.parametrize("payload", [b"", b"x", bytes(range(31))])
def test_frame_round_trip(payload):
    body = frame_payload(build_frame(payload))
    assert len(body) == TRX_PAYLOAD_LENGTH - FRAME_HEADER_LEN
    assert body[: len(payload)] == payload


def test_build_frame_truncates_long_payload():
    payload = bytes(range(40))
    frame = build_frame(payload)
    assert len(frame) == TRX_PAYLOAD_LENGTH
    assert frame[0] == len(payload)
    assert frame[FRAME_HEADER_LEN:] == payload[: TRX_PAYLOAD_LENGTH - FRAME_HEADER_LEN]


def test_build_frame_rejects_oversized_length():
    with pytest.raises(ValueError):
        build_frame(bytes(300))


def test_datalink_round_trip_over_ether():
    ether = Ether()
    a = DataLink(EtherTransceiver(ether, 0x3A3A3A3A))
    b = DataLink(EtherTransceiver(ether, 0x3B3B3B3B))
    a.transmit(b"hello", 0x3B3B3B3B)
    received = b.receive(100)
    assert received[:5] == b"hello"
    assert len(received) == TRX_PAYLOAD_LENGTH - FRAME_HEADER_LEN


def test_receive_timeout():
    ether = Ether()
    link = DataLink(EtherTransceiver(ether, 0x3A3A3A3A))
    with pytest.raises(ReceptionTimeout):
        link.receive(0)


def test_transmit_to_unknown_address_fails():
    ether = Ether()
    link = DataLink(EtherTransceiver(ether, 0x3A3A3A3A))
    with pytest.raises(TransmissionFailure):
        link.transmit(b"data", 0x12345678)


class _BrokenRadio(Transceiver):
    def transmit_payload(self, address, payload):
        raise TransmissionFailure("broken")

    def receive_payload(self, timeout_ms):
        raise ReceptionError("broken")


def test_reception_error_propagates():
    link = DataLink(_BrokenRadio())
    with pytest.raises(ReceptionError):
        link.receive(10)