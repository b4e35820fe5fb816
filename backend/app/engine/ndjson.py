"""
NDJSON streaming primitives.

LineSplitter turns arbitrary chunks of a byte stream into complete text lines,
and decode_record turns one line into a GameRecord. Together they let the
aggregation run over a tournament export without holding it in memory.
"""

import codecs
import logging
from typing import AsyncIterable, AsyncIterator, List, Union

from pydantic import ValidationError

from backend.app.core.errors import DecodeError
from backend.app.schemas.game_record import GameRecord

logger = logging.getLogger(__name__)

Chunk = Union[bytes, str]


class LineSplitter:
    """
    Incremental newline splitter.

    Bytes go through an incremental UTF-8 decoder, so a multi-byte character
    cut in half by a chunk boundary is completed by the next chunk. The buffer
    never holds more than the current partial line.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)()
        self._parts: List[str] = []
        self._closed = False

    def feed(self, chunk: Chunk) -> List[str]:
        """Adds a chunk and returns every line it completed (newline stripped)."""
        if self._closed:
            raise RuntimeError("LineSplitter already flushed")

        try:
            text = self._decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
        except UnicodeDecodeError as e:
            raise DecodeError("Feed is not valid UTF-8 text.") from e
        if not text:
            return []

        if "\n" not in text:
            self._parts.append(text)
            return []

        # Only the completed prefix is joined and split; the tail starts a new partial line
        head, _, tail = text.rpartition("\n")
        self._parts.append(head)
        lines = "".join(self._parts).split("\n")
        self._parts = [tail] if tail else []
        return lines

    def flush(self) -> List[str]:
        """Signals end of stream. Returns the trailing line if it has content."""
        self._closed = True
        try:
            self._parts.append(self._decoder.decode(b"", final=True))
        except UnicodeDecodeError as e:
            raise DecodeError("Feed ended in the middle of a character.") from e
        trailing = "".join(self._parts)
        self._parts = []
        return [trailing] if trailing.strip() else []


async def aiter_lines(chunks: AsyncIterable[Chunk]) -> AsyncIterator[str]:
    """Yields the lines of an async chunk stream as soon as they are complete."""
    splitter = LineSplitter()
    async for chunk in chunks:
        for line in splitter.feed(chunk):
            yield line
    for line in splitter.flush():
        yield line


def decode_record(line: str, line_number: int = 0) -> GameRecord:
    """
    Parses one NDJSON line into a GameRecord.
    Any malformed line is fatal: skipping it would silently skew the counts.
    """
    try:
        return GameRecord.model_validate_json(line)
    except ValidationError as e:
        logger.warning(f"Undecodable feed line {line_number}: {e.errors()[0]['msg']}")
        raise DecodeError(
            f"Malformed game record on line {line_number}.", line_number=line_number
        ) from e


async def aiter_records(chunks: AsyncIterable[Chunk]) -> AsyncIterator[GameRecord]:
    """Splits, trims and decodes a chunk stream. Blank lines are skipped."""
    line_number = 0
    async for raw_line in aiter_lines(chunks):
        line_number += 1
        line = raw_line.strip()
        if not line:
            continue
        yield decode_record(line, line_number)
