"""Tests for the push-back line buffer."""

import asyncio
import io

import pytest

from qif_ledger.exceptions import ParseCancelledError
from qif_ledger.parsers.line_buffer import LineBuffer


class AsyncLines:
    """Minimal async file object."""

    def __init__(self, text: str) -> None:
        self._lines = io.StringIO(text)

    async def readline(self) -> str:
        await asyncio.sleep(0)
        return self._lines.readline()


class TestLineBuffer:
    """Tests for reading, pushing back and cancelling lines."""

    def test_reads_lines_and_counts(self):
        """Count each line as it is read."""
        async def run():
            buffer = LineBuffer(io.StringIO("!Account\nNChecking\n"))
            first = await buffer.next()
            assert buffer.line_number == 1
            second = await buffer.next()
            assert buffer.line_number == 2
            end = await buffer.next()
            return first, second, end

        first, second, end = asyncio.run(run())

        assert first.is_header
        assert second.value == "Checking"
        assert end.end_of_input

    def test_push_back_returns_identical_token_and_line_number(self):
        """Return a pushed-back token again with its line number."""
        async def run():
            buffer = LineBuffer(io.StringIO("NChecking\n^\n"))
            token = await buffer.next()
            line = buffer.line_number
            buffer.push(token)
            assert buffer.line_number == line - 1
            again = await buffer.next()
            return token, line, again, buffer.line_number

        token, line, again, line_again = asyncio.run(run())

        assert again is token
        assert line_again == line == 1

    def test_nested_push_back_is_last_in_first_out(self):
        """Re-read several pushed-back tokens in reverse order."""
        async def run():
            buffer = LineBuffer(io.StringIO("NA\nNB\nNC\n"))
            a = await buffer.next()
            b = await buffer.next()
            buffer.push(b)
            buffer.push(a)
            assert buffer.pending == 2
            assert buffer.line_number == 0
            return a, b, [await buffer.next() for _ in range(3)], buffer.line_number

        a, b, tokens, line = asyncio.run(run())

        assert tokens[0] is a
        assert tokens[1] is b
        assert tokens[2].value == "C"
        assert line == 3

    def test_async_source(self):
        """Await lines from an async source."""
        async def run():
            buffer = LineBuffer(AsyncLines("NA\n"))
            return await buffer.next(), await buffer.next()

        token, end = asyncio.run(run())

        assert token.value == "A"
        assert end.end_of_input

    def test_cancel_event_checked_before_read(self):
        """Stop before the next read once the event is set."""
        async def run():
            event = asyncio.Event()
            buffer = LineBuffer(io.StringIO("NA\nNB\n"), cancel_event=event)
            await buffer.next()
            event.set()
            await buffer.next()

        with pytest.raises(ParseCancelledError) as exc_info:
            asyncio.run(run())

        assert exc_info.value.line_number == 1

    def test_cancel_event_also_stops_pushed_back_reads(self):
        """Stop before re-reading a pushed-back token."""
        async def run():
            event = asyncio.Event()
            buffer = LineBuffer(io.StringIO("NA\n"), cancel_event=event)
            token = await buffer.next()
            buffer.push(token)
            event.set()
            await buffer.next()

        with pytest.raises(ParseCancelledError):
            asyncio.run(run())
