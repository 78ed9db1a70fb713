"""The status LED of a cube: colours, steady state and short blinks."""

from __future__ import annotations

import enum
import time
from typing import Callable, Optional

BLINK_DURATION_MS = 25


class LedColor(enum.IntEnum):
    """LED colours; bit 2 is red, bit 1 green and bit 0 blue."""

    OFF = 0b000
    BLUE = 0b001
    GREEN = 0b010
    CYAN = 0b011
    RED = 0b100
    MAGENTA = 0b101
    YELLOW = 0b110
    WHITE = 0b111

    @property
    def red(self) -> bool:
        return bool(self & 0b100)

    @property
    def green(self) -> bool:
        return bool(self & 0b010)

    @property
    def blue(self) -> bool:
        return bool(self & 0b001)


def _sleep_ms(milliseconds: int) -> None:
    time.sleep(milliseconds / 1000)


class StatusLed:
    """An RGB LED that remembers its steady colour so a blink can restore it."""

    def __init__(
        self,
        on_change: Optional[Callable[[LedColor], None]] = None,
        delay: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._on_change = on_change
        self._delay = delay if delay is not None else _sleep_ms
        self._color = LedColor.OFF
        self._shown = LedColor.OFF

    @property
    def color(self) -> LedColor:
        """The steady colour the LED returns to after a blink."""
        return self._color

    @property
    def shown(self) -> LedColor:
        """The colour currently lit."""
        return self._shown

    def _show(self, color: LedColor) -> None:
        self._shown = color
        if self._on_change is not None:
            self._on_change(color)

    def set(self, color: int) -> None:
        """Light the LED steadily in ``color``."""
        color = LedColor(color)
        self._color = color
        self._show(color)

    def blink(self, color: int) -> None:
        """Flash ``color`` briefly, or flash off if it is already lit."""
        color = LedColor(color)
        self._show(LedColor.OFF if color == self._color else color)
        self._delay(BLINK_DURATION_MS)
        self._show(self._color)
        self._delay(BLINK_DURATION_MS)