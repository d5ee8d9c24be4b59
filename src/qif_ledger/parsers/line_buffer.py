"""Line reading with push-back for the QIF reader."""

import asyncio
import inspect
from collections.abc import Awaitable
from typing import Protocol

from qif_ledger.exceptions import ParseCancelledError
from qif_ledger.parsers.tokens import QifToken, tokenize_line


class LineSource(Protocol):
    """Anything with a ``readline`` method.

    Regular text files return a string; async file objects return an
    awaitable that resolves to one.
    """

    def readline(self) -> str | Awaitable[str]: ...


class LineBuffer:
    """Tokenizes lines from a source and lets readers hand a token back.

    ``line_number`` is the 1-based number of the line most recently returned
    by ``next``. Pushing a token back steps it back by one, so reading the
    token again reports the same line number.
    """

    def __init__(
        self, source: LineSource, cancel_event: asyncio.Event | None = None
    ) -> None:
        self._source = source
        self.cancel_event = cancel_event
        self._stack: list[QifToken] = []
        self.line_number = 0

    async def next(self) -> QifToken:
        """Return the next token, preferring any pushed-back token.

        Raises:
            ParseCancelledError: If the cancel event is set.
        """
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ParseCancelledError(self.line_number)

        self.line_number += 1

        if self._stack:
            return self._stack.pop()

        line = self._source.readline()
        if inspect.isawaitable(line):
            line = await line
        else:
            # Give other tasks a turn between lines of a blocking source
            await asyncio.sleep(0)
        return tokenize_line(line)

    def push(self, token: QifToken) -> None:
        """Return a token to the front of the input."""
        self.line_number -= 1
        self._stack.append(token)

    @property
    def pending(self) -> int:
        return len(self._stack)
