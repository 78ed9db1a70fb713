"""Persistent log of the last three received messages, kept in a small EEPROM image.

Layout of the 1024-byte image:

* byte 0: initialisation marker; anything other than ``0x77`` means uninitialised
* bytes 1-2: total number of messages logged (big-endian)
* byte ``64 * (slot + 1)``: source address of the message in ``slot``
* bytes ``64 * (slot + 1) + 1`` and ``+ 2``: its length (big-endian)
* bytes ``256 * (slot + 1)`` to ``256 * (slot + 2) - 1``: the message itself

Messages go into the three slots in turn, like a circular buffer, so the
same cells are not rewritten for every message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cubenet.console import Console

EEPROM_SIZE = 1024
LOG_INITIALIZED_MARKER = 0x77
LOG_SLOT_COUNT = 3
LOG_SLOT_SIZE = 256

_MARKER_ADDR = 0
_COUNT_ADDR = 1
_HEADER_STRIDE = 64


@dataclass(frozen=True)
class LoggedMessage:
    """One message read back from the log."""

    source: int
    length: int
    data: bytes


def _header_addr(slot: int) -> int:
    return _HEADER_STRIDE * (slot + 1)


def _message_addr(slot: int) -> int:
    return LOG_SLOT_SIZE * (slot + 1)


class MessageLog:
    """A circular log of received messages stored in an EEPROM image."""

    def __init__(self, eeprom: Optional[bytearray] = None) -> None:
        if eeprom is None:
            eeprom = bytearray(b"\xff" * EEPROM_SIZE)
        if not isinstance(eeprom, bytearray):
            raise TypeError("the EEPROM image must be a bytearray")
        if len(eeprom) < EEPROM_SIZE:
            raise ValueError(
                f"EEPROM image of {len(eeprom)} bytes is smaller than {EEPROM_SIZE}"
            )
        self.eeprom = eeprom

    def _read16(self, addr: int) -> int:
        return (self.eeprom[addr] << 8) + self.eeprom[addr + 1]

    def _write16(self, addr: int, value: int) -> None:
        value &= 0xFFFF
        self.eeprom[addr] = value >> 8
        self.eeprom[addr + 1] = value & 0xFF

    def initialize(self) -> None:
        """Mark the image as a log and clear the count, unless already marked."""
        if self.eeprom[_MARKER_ADDR] != LOG_INITIALIZED_MARKER:
            self.eeprom[_MARKER_ADDR] = LOG_INITIALIZED_MARKER
            self._write16(_COUNT_ADDR, 0)

    def message_count(self) -> int:
        """Total number of messages logged so far (wraps at 16 bits)."""
        return self._read16(_COUNT_ADDR)

    def log_message(self, message: bytes, source: int) -> None:
        """Store ``message`` from ``source`` in the next slot."""
        message = bytes(message)
        if len(message) > LOG_SLOT_SIZE:
            raise ValueError(
                f"message of {len(message)} bytes exceeds {LOG_SLOT_SIZE}"
            )
        if not 0 <= source <= 0xFF:
            raise ValueError(f"source address {source!r} does not fit in a byte")

        count = self.message_count()
        slot = count % LOG_SLOT_COUNT
        self._write16(_COUNT_ADDR, count + 1)
        header = _header_addr(slot)
        self.eeprom[header] = source
        self._write16(header + 1, len(message))
        start = _message_addr(slot)
        self.eeprom[start:start + len(message)] = message

    def _slots_newest_first(self) -> list[int]:
        count = self.message_count()
        slot = count % LOG_SLOT_COUNT
        slots = []
        for _ in range(min(LOG_SLOT_COUNT, count)):
            slot = LOG_SLOT_COUNT - 1 if slot == 0 else slot - 1
            slots.append(slot)
        return slots

    def latest(self) -> list[LoggedMessage]:
        """The stored messages, newest first (at most three)."""
        messages = []
        for slot in self._slots_newest_first():
            header = _header_addr(slot)
            length = self._read16(header + 1)
            start = _message_addr(slot)
            data = bytes(self.eeprom[start:start + min(length, LOG_SLOT_SIZE)])
            messages.append(LoggedMessage(self.eeprom[header], length, data))
        return messages

    def print_log(self, console: Console) -> None:
        """Write the message count and the stored messages, newest first."""
        count = self.message_count()
        console.write("::: Log of Messages :::\r\n")
        console.write("This cube has received %d messages.\r\n\r\n", count)
        for slot in self._slots_newest_first():
            console.write(
                "===== Logged message from %02x =====\r\n",
                self.eeprom[_header_addr(slot)],
            )
            start = _message_addr(slot)
            raw = bytearray(self.eeprom[start:start + LOG_SLOT_SIZE])
            raw[-1] = 0
            text = bytes(raw).split(b"\x00", 1)[0].decode("latin-1")
            console.write(text)
            console.write("====================================\r\n\r\n")