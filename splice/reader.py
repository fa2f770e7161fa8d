"""Budgeted reads over arbitrary byte streams.

A ``.splice`` file declares its payload size up front.  Everything after
the header is read through a :class:`BoundedReader`, which refuses to
pull more than that many bytes from the wrapped stream.  Once the budget
is spent the reader reports end of input, even if the wrapped stream
still has data (trailing garbage, or the next pattern in a container).
"""

from __future__ import annotations

from typing import BinaryIO, Optional, Protocol

from .errors import IncompleteDataError


class Readable(Protocol):
    def read(self, size: int = -1) -> bytes: ...


def read_exact(
    stream: Readable, size: int, field: str, record: Optional[int] = None
) -> bytes:
    """Read exactly ``size`` bytes, looping over short reads.

    Raises :class:`IncompleteDataError` naming ``field`` when the stream
    ends first.
    """
    chunks = []
    received = 0
    while received < size:
        chunk = stream.read(size - received)
        if not chunk:
            raise IncompleteDataError(field, size, received, record=record)
        chunks.append(chunk)
        received += len(chunk)
    return b"".join(chunks)


class BoundedReader:
    """Wrap ``stream`` so at most ``limit`` bytes can be read from it.

    Any object with a ``read(n)`` method works as the wrapped stream,
    including another :class:`BoundedReader`.
    """

    def __init__(self, stream: Readable | BinaryIO, limit: int) -> None:
        if limit < 0:
            raise ValueError(f"negative read budget {limit}")
        self._stream = stream
        self._remaining = limit

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def exhausted(self) -> bool:
        return self._remaining == 0

    def read(self, size: int = -1) -> bytes:
        if self._remaining == 0:
            return b""
        if size < 0 or size > self._remaining:
            size = self._remaining
        data = self._stream.read(size)
        self._remaining -= len(data)
        return data

    def read_exact(
        self, size: int, field: str, record: Optional[int] = None
    ) -> bytes:
        return read_exact(self, size, field, record=record)
