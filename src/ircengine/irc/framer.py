"""Byte stream to protocol line framing."""

from __future__ import annotations

import codecs


class LineFramer:
    """Split an inbound byte stream into complete protocol lines.

    Chunks are decoded incrementally, so a multi-byte UTF-8 sequence split
    across two reads is reassembled instead of corrupted. Lines end at LF;
    one trailing CR is stripped. Anything after the last LF is held until
    a later chunk completes it.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Incomplete trailing fragment not yet returned as a line."""
        return self._buffer

    def feed(self, data: bytes) -> list[str]:
        self._buffer += self._decoder.decode(data)
        lines: list[str] = []
        while True:
            idx = self._buffer.find("\n")
            if idx < 0:
                break
            line = self._buffer[:idx]
            self._buffer = self._buffer[idx + 1 :]
            if line.endswith("\r"):
                line = line[:-1]
            lines.append(line)
        return lines

    def reset(self) -> None:
        self._decoder.reset()
        self._buffer = ""
