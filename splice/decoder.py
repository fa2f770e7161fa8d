"""Decode ``.splice`` drum pattern files.

File layout::

  offset  size  field
  0x00    6     magic "SPLICE"
  0x06    8     payload size, big-endian int64 (counts bytes after this field)
  0x0E    32    version text, zero padded
  0x2E    4     tempo, little-endian float32
  0x32    ...   track records until the payload is used up

Track record: ``<i`` id, ``B`` name length L, L name bytes, 16 step bytes
(``0x01`` = on, anything else = off).

The header size is big-endian while every field inside the payload is
little-endian.  Both orders are part of the format.
"""

from __future__ import annotations

import io
import logging
import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional, Union

from .errors import FormatError, IncompleteDataError
from .pattern import STEPS_PER_TRACK, Pattern, Track
from .reader import BoundedReader, Readable, read_exact

logger = logging.getLogger(__name__)

MAGIC = b"SPLICE"
SIZE_FIELD = struct.Struct(">q")
HEADER_SIZE = len(MAGIC) + SIZE_FIELD.size
VERSION_SIZE = 32
TEMPO_FIELD = struct.Struct("<f")
TRACK_ID_FIELD = struct.Struct("<i")
STEP_ON = 0x01


@dataclass(frozen=True)
class PatternHeader:
    magic: bytes
    payload_size: int


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


class PatternDecoder:
    """Reads patterns from ``stream``.

    ``decode()`` may be called repeatedly to read consecutive patterns
    from one stream; each call consumes exactly one header plus its
    declared payload and leaves the stream positioned after it.
    """

    def __init__(
        self,
        stream: Union[Readable, BinaryIO],
        *,
        max_payload_size: Optional[int] = None,
    ) -> None:
        self._stream = stream
        self.max_payload_size = max_payload_size

    def read_header(self) -> PatternHeader:
        return self._parse_header(self._read_magic())

    def _read_magic(self) -> bytes:
        magic = b""
        while len(magic) < len(MAGIC):
            chunk = self._stream.read(len(MAGIC) - len(magic))
            if not chunk:
                break
            magic += chunk
        return magic

    def _parse_header(self, magic: bytes) -> PatternHeader:
        if len(magic) < len(MAGIC):
            raise IncompleteDataError("magic", len(MAGIC), len(magic))
        if magic != MAGIC:
            raise FormatError(f"invalid magic {magic!r}, expected {MAGIC!r}")

        (payload_size,) = SIZE_FIELD.unpack(
            read_exact(self._stream, SIZE_FIELD.size, "payload size")
        )
        if payload_size < 0:
            raise FormatError(f"negative payload size {payload_size}")
        if self.max_payload_size is not None and payload_size > self.max_payload_size:
            raise FormatError(
                f"payload size {payload_size} exceeds limit {self.max_payload_size}"
            )
        logger.debug("pattern header: payload %d bytes", payload_size)
        return PatternHeader(magic=magic, payload_size=payload_size)

    def decode(self) -> Pattern:
        header = self.read_header()
        return self._decode_payload(header)

    def _decode_payload(self, header: PatternHeader) -> Pattern:
        body = BoundedReader(self._stream, header.payload_size)

        version = _text(body.read_exact(VERSION_SIZE, "version").rstrip(b"\x00"))
        (tempo,) = TEMPO_FIELD.unpack(body.read_exact(TEMPO_FIELD.size, "tempo"))

        tracks: List[Track] = []
        while not body.exhausted:
            tracks.append(_read_track(body, len(tracks) + 1))

        logger.debug(
            "payload end: %d bytes consumed, stream left at first trailing byte",
            header.payload_size,
        )
        logger.debug(
            "decoded pattern %r: tempo %s, %d tracks", version, tempo, len(tracks)
        )
        return Pattern(version=version, tempo=tempo, tracks=tuple(tracks))

    def __iter__(self) -> Iterator[Pattern]:
        while True:
            magic = self._read_magic()
            if not magic:
                return
            yield self._decode_payload(self._parse_header(magic))


def _read_track(body: BoundedReader, record: int) -> Track:
    (track_id,) = TRACK_ID_FIELD.unpack(
        body.read_exact(TRACK_ID_FIELD.size, "track id", record)
    )
    name_len = body.read_exact(1, "track name length", record)[0]
    name = _text(body.read_exact(name_len, "track name", record))
    raw_steps = body.read_exact(STEPS_PER_TRACK, "track steps", record)
    steps = tuple(b == STEP_ON for b in raw_steps)
    logger.debug("track %d: id=%d name=%r", record, track_id, name)
    return Track(id=track_id, name=name, steps=steps)


def decode(
    stream: Union[Readable, BinaryIO], *, max_payload_size: Optional[int] = None
) -> Pattern:
    """Decode one pattern from ``stream``.

    Bytes after the declared payload are left unread.
    """
    return PatternDecoder(stream, max_payload_size=max_payload_size).decode()


def decode_bytes(data: bytes, *, max_payload_size: Optional[int] = None) -> Pattern:
    return decode(io.BytesIO(data), max_payload_size=max_payload_size)


def decode_file(
    path: Union[str, os.PathLike], *, max_payload_size: Optional[int] = None
) -> Pattern:
    """Open ``path`` and decode the pattern it holds."""

    with open(path, "rb") as fh:
        return decode(fh, max_payload_size=max_payload_size)


def iter_patterns(
    stream: Union[Readable, BinaryIO], *, max_payload_size: Optional[int] = None
) -> Iterator[Pattern]:
    """Yield back-to-back patterns until the stream ends at a pattern boundary."""

    return iter(PatternDecoder(stream, max_payload_size=max_payload_size))
