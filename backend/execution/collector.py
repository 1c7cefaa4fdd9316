"""
Bounded capture of sandbox stdout/stderr
"""

import asyncio
import codecs
import logging
import os
from typing import List

logger = logging.getLogger(__name__)

OUTPUT_LIMIT = int(os.getenv('JUDGE_OUTPUT_LIMIT', '50000'))  # characters per stream
READ_CHUNK_SIZE = 4096


class BoundedBuffer:
    """
    Append-only text buffer that stops growing at a fixed ceiling.

    Chunks arriving after the ceiling is reached are dropped; what was
    captured before is kept untouched.
    """

    def __init__(self, limit: int = OUTPUT_LIMIT):
        self.limit = limit
        self._parts: List[str] = []
        self._size = 0
        self.dropped = 0

    @property
    def size(self) -> int:
        return self._size

    @property
    def full(self) -> bool:
        return self._size >= self.limit

    def append(self, text: str) -> None:
        remaining = self.limit - self._size
        if remaining <= 0:
            self.dropped += len(text)
            return
        if len(text) > remaining:
            self.dropped += len(text) - remaining
            text = text[:remaining]
        self._parts.append(text)
        self._size += len(text)

    def getvalue(self) -> str:
        return ''.join(self._parts)


class OutputCollector:
    """Collects both output streams of one sandbox process"""

    def __init__(self, limit: int = OUTPUT_LIMIT):
        self.stdout = BoundedBuffer(limit)
        self.stderr = BoundedBuffer(limit)

    async def pump(self, stream: asyncio.StreamReader, buffer: BoundedBuffer) -> None:
        """
        Read a stream until EOF into the buffer

        Reading continues past the ceiling so the child never blocks on a
        full pipe; the excess is simply discarded.
        """
        decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            # Excess chunks are decoded too; dropped counts characters
            buffer.append(decoder.decode(chunk))
        buffer.append(decoder.decode(b'', final=True))

        if buffer.dropped:
            logger.info(f"Output ceiling of {buffer.limit} reached, dropped {buffer.dropped} characters")

    async def collect(self, process: asyncio.subprocess.Process) -> None:
        """Drain stdout and stderr of the process concurrently"""
        await asyncio.gather(
            self.pump(process.stdout, self.stdout),
            self.pump(process.stderr, self.stderr),
        )

    def result(self) -> tuple:
        """Captured (stdout, stderr), trimmed of surrounding whitespace"""
        return self.stdout.getvalue().strip(), self.stderr.getvalue().strip()
