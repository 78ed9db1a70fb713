"""Diagnostic text output with printf-style formatting and a length cap."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

UART_MESSAGE_MAX_LENGTH = 256


class Console:
    """Writes formatted diagnostic messages to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def write(self, message_format: str, *args: object) -> int:
        """Format and write a message; return the number of characters written.

        Messages longer than ``UART_MESSAGE_MAX_LENGTH`` are truncated.
        Without arguments the message is written as given.
        """
        text = message_format % args if args else message_format
        text = text[:UART_MESSAGE_MAX_LENGTH]
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(text)
        stream.flush()
        return len(text)