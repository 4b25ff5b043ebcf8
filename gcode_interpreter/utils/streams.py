"""
Input sources for the G-code loaders.

StreamSource gives every readable object, synchronous or asyncio, the same
``await read(size)`` interface. Failures of the underlying object surface as
SourceError.
"""

import asyncio
import inspect
import io
import logging
import os

from .errors import SourceError

logger = logging.getLogger(__name__)


class StreamSource:
    """Async pull interface over file objects, in-memory buffers and asyncio readers"""

    def __init__(self, stream, total: int | None = None, name: str | None = None):
        """
        Args:
            stream: Object with a read(size) method returning str or bytes
                (or an awaitable of them)
            total: Size of the source if known, reported in progress
            name: Label used in log and error messages
        """
        if stream is None:
            raise SourceError("No source given")
        if not callable(getattr(stream, "read", None)):
            raise SourceError(f"Source {type(stream).__name__} is not readable")
        self.stream = stream
        self.total = total
        self.name = name or getattr(stream, "name", None) or type(stream).__name__
        self.consumed = 0

    async def read(self, size: int) -> str | bytes:
        """
        Read up to size bytes/characters; an empty result means end of input.

        Synchronous reads yield to the event loop afterwards so other tasks
        run between chunks.
        """
        try:
            data = self.stream.read(size)
            if inspect.isawaitable(data):
                data = await data
            else:
                await asyncio.sleep(0)
        except Exception as e:
            raise SourceError(f"Failed to read {self.name}: {e}") from e
        if data is None:
            data = b""
        if not isinstance(data, (str, bytes, bytearray)):
            raise SourceError(f"Source {self.name} returned {type(data).__name__}, expected str or bytes")
        self.consumed += len(data)
        return data

    def close(self) -> None:
        close = getattr(self.stream, "close", None)
        if callable(close):
            close()


def streamify(text: str | bytes | None) -> StreamSource:
    """
    Wrap text in an in-memory source.

    None gives an empty source.
    """
    if text is None:
        text = ""
    if isinstance(text, (bytes, bytearray)):
        return StreamSource(io.BytesIO(text), total=len(text), name="<bytes>")
    return StreamSource(io.StringIO(text), total=len(text), name="<string>")


def _check_path(path) -> str | os.PathLike:
    if path is None or path == "":
        raise SourceError("No file path given")
    if not isinstance(path, (str, bytes, os.PathLike)):
        raise SourceError(f"Invalid file path: {path!r}")
    return path


def open_file(path) -> StreamSource:
    """
    Open a G-code file for streaming

    Args:
        path: File path

    Returns:
        StreamSource over the file opened in binary mode, total set to its size
    """
    path = _check_path(path)
    try:
        f = open(path, "rb")
    except OSError as e:
        raise SourceError(f"Cannot open {path}: {e}") from e
    try:
        total = os.fstat(f.fileno()).st_size
    except OSError:
        total = None
    logger.debug(f"Opened {path} ({total} bytes)")
    return StreamSource(f, total=total, name=str(path))


def read_text(path, encoding: str = "utf-8") -> str:
    """
    Read a whole G-code file

    Args:
        path: File path
        encoding: Text encoding, undecodable bytes are replaced

    Returns:
        File contents
    """
    path = _check_path(path)
    try:
        with open(path, encoding=encoding, errors="replace", newline="") as f:
            return f.read()
    except OSError as e:
        raise SourceError(f"Cannot read {path}: {e}") from e
