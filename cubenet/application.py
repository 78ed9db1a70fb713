"""The rover transceiver's application: cycles colours and tells every cube."""

from __future__ import annotations

import time
from typing import Callable, Optional, Union

from cubenet.console import Console
from cubenet.leds import LedColor, StatusLed
from cubenet.transport import AttemptLimitReached, Transport, TransportError

APPLICATION_MESSAGE_LEN = 79
EVERYONE = (0x3A, 0x3B, 0x3C)

COLOR_WHEEL: tuple[tuple[str, LedColor], ...] = (
    ("Go touch some grass. LED:GREEN\r\n", LedColor.GREEN),
    ("This color reminds me of the ocean. LED:CYAN\r\n", LedColor.CYAN),
    ('Is it pronounced "tomato" or "tomato"? LED:RED\r\n', LedColor.RED),
    ("This color is pretty. LED:MAGENTA\r\n", LedColor.MAGENTA),
    ("This is yellow? Are you sure? LED:YELLOW\r\n", LedColor.YELLOW),
    (
        "White chocolate is over-rated. Except when used in cookies. LED:WHITE\r\n",
        LedColor.WHITE,
    ),
    ("Do you like blue? LED:BLUE\r\n", LedColor.BLUE),
)

_COMMAND_ORDER = (
    LedColor.OFF,
    LedColor.BLUE,
    LedColor.GREEN,
    LedColor.CYAN,
    LedColor.RED,
    LedColor.MAGENTA,
    LedColor.YELLOW,
    LedColor.WHITE,
)


def parse_message(message: Union[str, bytes]) -> Optional[LedColor]:
    """Return the colour named by the first ``LED:<COLOR>`` command found, if any.

    Commands are tried in a fixed order (OFF, BLUE, GREEN, CYAN, RED,
    MAGENTA, YELLOW, WHITE); the first one that occurs anywhere wins.
    """
    if isinstance(message, (bytes, bytearray)):
        message = bytes(message).split(b"\x00", 1)[0].decode("latin-1")
    for color in _COMMAND_ORDER:
        if f"LED:{color.name}" in message:
            return color
    return None


def _sleep_ms(milliseconds: int) -> None:
    time.sleep(milliseconds / 1000)


class RoverApplication:
    """Spins a colour wheel and sends each colour to every cube in turn."""

    def __init__(
        self,
        transport: Transport,
        console: Optional[Console] = None,
        led: Optional[StatusLed] = None,
        delay: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.transport = transport
        self.console = console if console is not None else Console()
        self.led = led if led is not None else StatusLed()
        self._delay = delay if delay is not None else _sleep_ms

    def boot(self, network_addr: int) -> None:
        """Announce the node, then light white while the radio comes up."""
        self.led.set(LedColor.OFF)
        self.console.write("\r\n::: Wombat %02x :::\r\n", network_addr)
        self.led.set(LedColor.WHITE)
        self._delay(2000)

    def transmit(self, message: Union[str, bytes], dest_port: int) -> bool:
        """Send ``message`` in a fixed-length, zero-padded buffer; report success.

        Transport failures are reported on the console rather than raised.
        """
        if isinstance(message, str):
            message = message.encode("latin-1")
        data = bytes(message)[:APPLICATION_MESSAGE_LEN]
        data += bytes(APPLICATION_MESSAGE_LEN - len(data))
        try:
            self.transport.transmit(data, dest_port)
        except AttemptLimitReached:
            self.console.write("[WARNING] Transport layer reached attempt limit\r\n")
            return False
        except TransportError:
            self.console.write("[WARNING] Transport layer encountered an error\r\n")
            return False
        return True

    def run(self, rounds: Optional[int] = None) -> None:
        """Spin the colour wheel ``rounds`` times, or forever when ``None``."""
        self.console.write(
            "::: Rover's transceiver activated. Entering network mode. :::\r\n"
        )
        self.led.set(LedColor.BLUE)
        self._delay(1000)

        completed = 0
        while rounds is None or completed < rounds:
            for text, color in COLOR_WHEEL:
                self.led.set(color)
                for _ in range(5):
                    self.led.blink(color)
                self._delay(1000)
                for dest in EVERYONE:
                    self.transmit(text, dest)
                    self._delay(5000)
            completed += 1