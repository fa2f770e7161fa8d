"""Byte-level builders for synthetic .splice files used across the tests."""

from __future__ import annotations

import struct
from typing import Iterable, Optional, Sequence, Tuple

TrackSpec = Tuple[int, str, Sequence[int]]

# Steps from the first pattern of the reference corpus.
KICK = [1, 0, 0, 0, 1, 0, 0, 0, 1, 0, 0, 0, 1, 0, 0, 0]
SNARE = [0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0]
CLAP = [0, 0, 0, 0, 1, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0]
HH_OPEN = [0, 0, 1, 0, 0, 0, 1, 0, 1, 0, 1, 0, 0, 0, 1, 0]
HH_CLOSE = [1, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 1]
COWBELL = [0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0]

PATTERN_1_TRACKS: list[TrackSpec] = [
    (0, "kick", KICK),
    (1, "snare", SNARE),
    (2, "clap", CLAP),
    (3, "hh-open", HH_OPEN),
    (4, "hh-close", HH_CLOSE),
    (5, "cowbell", COWBELL),
]


def encode_track(track_id: int, name: str, steps: Sequence[int]) -> bytes:
    raw_name = name.encode("utf-8")
    return (
        struct.pack("<i", track_id)
        + bytes([len(raw_name)])
        + raw_name
        + bytes(steps)
    )


def encode_payload(version: str, tempo: float, tracks: Iterable[TrackSpec]) -> bytes:
    raw_version = version.encode("utf-8").ljust(32, b"\x00")
    return (
        raw_version
        + struct.pack("<f", tempo)
        + b"".join(encode_track(*track) for track in tracks)
    )


def encode_pattern(
    version: str,
    tempo: float,
    tracks: Iterable[TrackSpec] = (),
    *,
    payload_size: Optional[int] = None,
    trailing: bytes = b"",
    magic: bytes = b"SPLICE",
) -> bytes:
    """Build a pattern file; ``payload_size`` overrides the true length."""

    payload = encode_payload(version, tempo, tracks)
    size = len(payload) if payload_size is None else payload_size
    return magic + struct.pack(">q", size) + payload + trailing
