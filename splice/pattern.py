"""In-memory representation of a decoded drum pattern, plus text rendering.

Rendered layout (one line per track, steps grouped in blocks of four)::

  Saved with HW Version: 0.808-alpha
  Tempo: 120
  (0) kick	|x---|x---|x---|x---|
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import List, Optional, Tuple

STEPS_PER_TRACK = 16
STEP_BLOCK = 4


@dataclass(frozen=True)
class Track:
    """One instrument lane with its 16 sixteenth-note steps."""

    id: int
    name: str
    steps: Tuple[bool, ...]

    def __post_init__(self) -> None:
        if len(self.steps) != STEPS_PER_TRACK:
            raise ValueError(
                f"track {self.id} has {len(self.steps)} steps, need {STEPS_PER_TRACK}"
            )

    def active_steps(self) -> List[int]:
        """Return the 0-based indices of steps that trigger."""

        return [idx for idx, on in enumerate(self.steps) if on]

    def __str__(self) -> str:
        return render_track(self)


@dataclass(frozen=True)
class Pattern:
    version: str
    tempo: float
    tracks: Tuple[Track, ...]

    def track_by_id(self, track_id: int) -> Optional[Track]:
        for track in self.tracks:
            if track.id == track_id:
                return track
        return None

    def track_by_name(self, name: str) -> Optional[Track]:
        for track in self.tracks:
            if track.name == name:
                return track
        return None

    def __str__(self) -> str:
        return render_text(self)


def format_tempo(tempo: float) -> str:
    """Shortest fixed-point text that reads back as the same float32."""

    target = struct.unpack("<f", struct.pack("<f", tempo))[0]
    for places in range(10):
        text = f"{tempo:.{places}f}"
        if struct.unpack("<f", struct.pack("<f", float(text)))[0] == target:
            return text
    return repr(tempo)


def render_track(track: Track) -> str:
    cells = []
    for idx, on in enumerate(track.steps):
        if idx % STEP_BLOCK == 0:
            cells.append("|")
        cells.append("x" if on else "-")
    cells.append("|")
    return f"({track.id}) {track.name}\t{''.join(cells)}\n"


def render_text(pattern: Pattern) -> str:
    lines = [
        f"Saved with HW Version: {pattern.version}\n",
        f"Tempo: {format_tempo(pattern.tempo)}\n",
    ]
    lines.extend(render_track(track) for track in pattern.tracks)
    return "".join(lines)
