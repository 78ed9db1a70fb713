"""Fixed-size payload transceivers and an in-memory medium connecting them."""

from __future__ import annotations

import abc
import queue
import threading

TRX_PAYLOAD_LENGTH = 32
TRX_PAYLOAD_PADDING = 0x00
TRX_TIMEOUT_INDEFINITE = 15001

_MAX_ADDRESS = 0xFFFFFFFF


class RadioError(Exception):
    """Base class for transceiver errors."""


class ReceptionTimeout(RadioError):
    """No payload arrived before the timeout."""


class ReceptionError(RadioError):
    """The transceiver reported something other than a received payload."""


class TransmissionFailure(RadioError):
    """The payload was not acknowledged by the addressed transceiver."""


class Transceiver(abc.ABC):
    """A radio that sends and receives payloads of ``TRX_PAYLOAD_LENGTH`` bytes."""

    @abc.abstractmethod
    def transmit_payload(self, address: int, payload: bytes) -> None:
        """Send ``payload`` to the transceiver at ``address``."""

    @abc.abstractmethod
    def receive_payload(self, timeout_ms: int) -> bytes:
        """Wait for the next payload; ``TRX_TIMEOUT_INDEFINITE`` or more waits forever."""


def _check_address(address: int) -> None:
    if not 0 <= address <= _MAX_ADDRESS:
        raise ValueError(f"address {address!r} does not fit in 32 bits")


def _pad_payload(payload: bytes) -> bytes:
    payload = bytes(payload)
    if len(payload) > TRX_PAYLOAD_LENGTH:
        raise ValueError(
            f"payload of {len(payload)} bytes exceeds {TRX_PAYLOAD_LENGTH}"
        )
    padding = bytes([TRX_PAYLOAD_PADDING]) * (TRX_PAYLOAD_LENGTH - len(payload))
    return payload + padding


class Ether:
    """A shared medium that carries payloads between attached addresses."""

    def __init__(self) -> None:
        self._mailboxes: dict[int, queue.Queue[bytes]] = {}
        self._lock = threading.Lock()

    def attach(self, address: int) -> queue.Queue[bytes]:
        """Register a receiver at ``address`` and return its inbound queue."""
        _check_address(address)
        with self._lock:
            if address in self._mailboxes:
                raise ValueError(f"address {address:#010x} is already attached")
            mailbox: queue.Queue[bytes] = queue.Queue()
            self._mailboxes[address] = mailbox
        return mailbox

    def deliver(self, address: int, payload: bytes) -> None:
        """Pad ``payload`` and queue it for the receiver at ``address``."""
        _check_address(address)
        frame = _pad_payload(payload)
        with self._lock:
            mailbox = self._mailboxes.get(address)
        if mailbox is None:
            raise TransmissionFailure(
                f"no transceiver acknowledged address {address:#010x}"
            )
        mailbox.put(frame)


class EtherTransceiver(Transceiver):
    """A transceiver attached to an :class:`Ether` at a fixed receive address."""

    def __init__(self, ether: Ether, address: int) -> None:
        self._ether = ether
        self.address = address
        self._mailbox = ether.attach(address)

    def transmit_payload(self, address: int, payload: bytes) -> None:
        self._ether.deliver(address, payload)

    def receive_payload(self, timeout_ms: int) -> bytes:
        if timeout_ms < 0:
            raise ValueError("timeout must not be negative")
        if timeout_ms >= TRX_TIMEOUT_INDEFINITE:
            return self._mailbox.get()
        try:
            return self._mailbox.get(timeout=timeout_ms / 1000)
        except queue.Empty:
            raise ReceptionTimeout(
                f"nothing received within {timeout_ms} ms"
            ) from None