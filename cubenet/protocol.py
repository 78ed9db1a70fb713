"""Wire-format sizes and segment identifiers shared by every layer of the stack."""

from __future__ import annotations

import enum

MAX_FRAME_LEN = 32
FRAME_HEADER_LEN = 1

MAX_PACKET_LEN = 31
PACKET_HEADER_LEN = 3

MAX_SEGMENT_LEN = 28
START_SEGMENT_HEADER_LEN = 8
DATA_SEGMENT_HEADER_LEN = 8
END_SEGMENT_HEADER_LEN = 6
ACK_SEGMENT_HEADER_LEN = 6

MAX_MESSAGE_LEN = 256
MESSAGE_HEADER_LEN = 1


class SegmentId(enum.IntEnum):
    """The identifier byte that tells transport segments apart."""

    START_OF_MESSAGE = 0x07
    DATA = 0x0D
    END_OF_MESSAGE = 0x09
    ACK = 0x0A

    def label(self) -> str:
        """Human-readable name of the segment type."""
        return self.name


def segment_label(value: int) -> str:
    """Name of the segment type for a raw identifier byte, or ``INVALID``."""
    try:
        return SegmentId(value).label()
    except ValueError:
        return "INVALID"