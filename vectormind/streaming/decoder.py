"""Line framing for the chat event stream.

Network chunks can end anywhere, including in the middle of a frame or of a
multi-byte character. The decoder keeps the unfinished tail between calls and
only hands out complete ``data: `` lines.
"""

import logging
from collections.abc import Iterator

logger = logging.getLogger(__name__)

FRAME_PREFIX = "data: "
LINE_TERMINATOR = b"\n"


class FrameDecoder:
    """Split a chunked byte stream into ``data: `` frames.

    One decoder belongs to one exchange. Feed it every chunk in arrival order
    and call :meth:`close` when the body ends.
    """

    def __init__(self) -> None:
        self._buffer = b""

    @property
    def pending(self) -> int:
        """Number of buffered bytes that do not form a complete line yet."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> Iterator[str]:
        """Add a chunk and return the frames it completes.

        The buffer is updated immediately; the returned iterator only walks
        over the lines split off by this call.

        Args:
            chunk: Raw bytes as received from the transport.

        Returns:
            Iterator over complete frame lines, prefix included.
        """
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split(LINE_TERMINATOR)
        return self._frames(lines)

    def close(self) -> int:
        """Discard whatever is left in the buffer.

        A truncated trailing frame is not a frame.

        Returns:
            Number of bytes discarded.
        """
        discarded = len(self._buffer)
        if discarded:
            logger.debug(f"Discarding {discarded} bytes of unterminated frame data")
        self._buffer = b""
        return discarded

    @staticmethod
    def _frames(lines: list[bytes]) -> Iterator[str]:
        for raw in lines:
            line = raw.decode("utf-8", errors="replace").removesuffix("\r")
            if line.startswith(FRAME_PREFIX):
                yield line
