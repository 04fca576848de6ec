"""Byte stream helpers.

``pipe_stream`` is the default transfer routine handed to TreeCopier's
constructor. Any coroutine with the same signature can replace it.
"""

from typing import Awaitable, Callable, Optional

from .core.adapter import AsyncByteReader, AsyncByteWriter

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_WRITE_CHUNK_SIZE = 32 * 1024

Pipe = Callable[..., Awaitable[int]]


async def pipe_stream(
    reader: AsyncByteReader,
    writer: AsyncByteWriter,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_data: Optional[Callable[[bytes], None]] = None,
) -> int:
    """Transfer bytes from ``reader`` to ``writer`` until end of stream.

    The first error from either side propagates immediately. Closing the
    handles is the caller's job.

    Args:
        reader: Source stream
        writer: Destination stream
        chunk_size: Bytes requested per read
        on_data: Called with each chunk after it is written

    Returns:
        Total bytes transferred
    """
    total = 0
    while True:
        chunk = await reader.read(chunk_size)
        if not chunk:
            break
        await writer.write(chunk)
        total += len(chunk)
        if on_data is not None:
            on_data(chunk)
    return total


async def read_all(reader: AsyncByteReader, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Drain a stream into one bytes object."""
    chunks = []
    while True:
        chunk = await reader.read(chunk_size)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


async def write_chunked(
    writer: AsyncByteWriter,
    data: bytes,
    chunk_size: int = DEFAULT_WRITE_CHUNK_SIZE,
) -> int:
    """Write ``data`` in fixed-size slices. Returns bytes written."""
    view = memoryview(data)
    for offset in range(0, len(view), chunk_size):
        await writer.write(bytes(view[offset:offset + chunk_size]))
    return len(view)
