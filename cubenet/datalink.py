"""Data link layer: wraps packets in fixed-size radio frames."""

from __future__ import annotations

from cubenet.protocol import FRAME_HEADER_LEN
from cubenet.radio import TRX_PAYLOAD_LENGTH, TRX_PAYLOAD_PADDING, Transceiver

_MAX_FRAME_PAYLOAD = TRX_PAYLOAD_LENGTH - FRAME_HEADER_LEN


def build_frame(payload: bytes) -> bytes:
    """Build a zero-padded radio frame whose first byte is the payload length.

    Payload bytes that do not fit in the frame are dropped; the length byte
    still records the length that was asked for.
    """
    payload = bytes(payload)
    if len(payload) > 0xFF:
        raise ValueError(f"payload of {len(payload)} bytes exceeds 255")
    body = payload[:_MAX_FRAME_PAYLOAD]
    padding = bytes([TRX_PAYLOAD_PADDING]) * (_MAX_FRAME_PAYLOAD - len(body))
    return bytes([len(payload)]) + body + padding


def frame_payload(frame: bytes) -> bytes:
    """Return everything in ``frame`` after the frame header."""
    return bytes(frame[FRAME_HEADER_LEN:TRX_PAYLOAD_LENGTH])


class DataLink:
    """Sends and receives frames through a single transceiver."""

    def __init__(self, radio: Transceiver) -> None:
        self.radio = radio

    def receive(self, timeout_ms: int) -> bytes:
        """Wait for a frame and return its payload.

        Raises :class:`~cubenet.radio.ReceptionTimeout` or
        :class:`~cubenet.radio.ReceptionError` from the transceiver.
        """
        return frame_payload(self.radio.receive_payload(timeout_ms))

    def transmit(self, payload: bytes, addr: int) -> None:
        """Frame ``payload`` and send it to the data link address ``addr``.

        Raises :class:`~cubenet.radio.TransmissionFailure` if not acknowledged.
        """
        self.radio.transmit_payload(addr, build_frame(payload))