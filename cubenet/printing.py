"""One-line summaries of packets and segments for the diagnostic console."""

from __future__ import annotations

from typing import Optional

from cubenet.protocol import PACKET_HEADER_LEN, segment_label

_SEGMENT_ID_INDEX = 4


def format_segment(segment: Optional[bytes]) -> str:
    """Describe a segment by its identifier byte; ``None`` gives an empty string."""
    if segment is None:
        return ""
    if len(segment) <= _SEGMENT_ID_INDEX:
        raise ValueError(f"segment of {len(segment)} bytes has no identifier")
    segment_id = segment[_SEGMENT_ID_INDEX]
    return f"SegID {segment_id:02x} ({segment_label(segment_id)})"


def format_packet(packet: bytes) -> str:
    """Describe a packet as ``<segment summary>`` followed by CRLF."""
    segment = packet[PACKET_HEADER_LEN:]
    if len(segment) <= _SEGMENT_ID_INDEX:
        segment = None
    return f"<{format_segment(segment)}>\r\n"