"""Chunked input reading with line reassembly."""

import io
import sys
from typing import Generator, TextIO

from slowlog.errors import InputReadError

STDIN_PATHS = ("-", "/dev/stdin")


def read_lines(stream: TextIO, chunk_size: int = 65536) -> Generator[str, None, None]:
    """Yield complete lines (without the newline) from *stream*.

    Reads fixed-size chunks and stitches lines that straddle chunk
    boundaries back together, so arbitrarily long lines come out whole.
    Raises InputReadError if the stream fails before end of input.
    """
    buffer = ""
    while True:
        try:
            chunk = stream.read(chunk_size)
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(f"can't read input data: {e}") from e
        if not chunk:
            break
        buffer += chunk
        if "\n" in buffer:
            *lines, buffer = buffer.split("\n")
            yield from lines
    if buffer:
        yield buffer


def read_file(path: str, chunk_size: int = 65536) -> Generator[str, None, None]:
    """Yield lines from *path*; '-' and /dev/stdin read standard input."""
    if path in STDIN_PATHS:
        # Same decoding as files. Detached, not closed: stdin belongs to the process.
        stdin = io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", errors="replace", newline="")
        try:
            yield from read_lines(stdin, chunk_size)
        finally:
            stdin.detach()
        return

    try:
        f = open(path, "r", encoding="utf-8", errors="replace", newline="")
    except OSError as e:
        raise InputReadError(f"can't open file: {path}: {e}") from e
    with f:
        yield from read_lines(f, chunk_size)
