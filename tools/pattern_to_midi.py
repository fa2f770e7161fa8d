#!/usr/bin/env python3
"""Export a decoded .splice pattern as a standard MIDI file.

Every active step becomes one sixteenth-note hit on the General MIDI
percussion channel (10).  Track names pick the GM drum key; names the
table does not know fall back to a key derived from the track id.

Requirements:
  pip install mido

Usage:
    python tools/pattern_to_midi.py pattern_1.splice -o pattern_1.mid
    python tools/pattern_to_midi.py pattern_1.splice -o loop.mid --bars 4
"""

from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
import sys
from typing import Dict, List, Tuple

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import mido

from splice.decoder import decode_file
from splice.log_config import setup_logging
from splice.pattern import STEPS_PER_TRACK, Pattern, Track

logger = logging.getLogger("splice.tools.pattern_to_midi")

GM_DRUM_CHANNEL = 9  # 0-based; shown as channel 10
STEPS_PER_BEAT = 4
MAX_SET_TEMPO = 0xFFFFFF  # 24-bit microseconds per beat

# ── Track name → GM percussion key ─────────────────────────────────────
GM_DRUM_KEYS: Dict[str, int] = {
    "kick": 36,
    "bass drum": 36,
    "rim": 37,
    "rimshot": 37,
    "snare": 38,
    "clap": 39,
    "hh-close": 42,
    "hh-closed": 42,
    "closed hh": 42,
    "hh-open": 46,
    "open hh": 46,
    "low-tom": 45,
    "mid-tom": 47,
    "hi-tom": 50,
    "high-tom": 50,
    "crash": 49,
    "ride": 51,
    "tambourine": 54,
    "cowbell": 56,
    "clave": 75,
    "maracas": 70,
    "shaker": 70,
}
FALLBACK_KEYS = (37, 39, 41, 43, 44, 48, 53, 60, 61, 62, 63, 64, 65, 66, 67, 68)


def drum_key_for_track(track: Track) -> int:
    """Return the GM percussion key used for ``track``."""

    key = GM_DRUM_KEYS.get(track.name.strip().lower())
    if key is not None:
        return key
    return FALLBACK_KEYS[track.id % len(FALLBACK_KEYS)]


def step_events(
    pattern: Pattern, bars: int, step_ticks: int
) -> List[Tuple[int, int, bool]]:
    """Absolute (tick, key, is_on) events for every active step, sorted."""

    events: List[Tuple[int, int, bool]] = []
    for track in pattern.tracks:
        key = drum_key_for_track(track)
        for bar in range(bars):
            for step in track.active_steps():
                onset = (bar * STEPS_PER_TRACK + step) * step_ticks
                events.append((onset, key, True))
                events.append((onset + step_ticks, key, False))
    # note_off before note_on at equal ticks keeps repeated hits distinct
    events.sort(key=lambda item: (item[0], item[2], item[1]))
    return events


def build_midi(
    pattern: Pattern,
    *,
    bars: int = 1,
    ticks_per_beat: int = 480,
    channel: int = GM_DRUM_CHANNEL,
    velocity: int = 100,
) -> mido.MidiFile:
    if bars < 1:
        raise ValueError(f"bars must be >= 1, got {bars}")
    if ticks_per_beat <= 0 or ticks_per_beat % STEPS_PER_BEAT:
        raise ValueError(
            f"ticks_per_beat must be a positive multiple of {STEPS_PER_BEAT}, got {ticks_per_beat}"
        )
    if not math.isfinite(pattern.tempo) or pattern.tempo <= 0:
        raise ValueError(f"cannot export tempo {pattern.tempo}: not a positive bpm")
    usec_per_beat = mido.bpm2tempo(pattern.tempo)
    if not 0 <= usec_per_beat <= MAX_SET_TEMPO:
        raise ValueError(
            f"cannot export tempo {pattern.tempo}: {usec_per_beat} us per beat "
            f"exceeds the set_tempo limit {MAX_SET_TEMPO}"
        )

    step_ticks = ticks_per_beat // STEPS_PER_BEAT
    track = mido.MidiTrack()
    track.append(mido.MetaMessage("track_name", name=pattern.version or "splice", time=0))
    track.append(mido.MetaMessage("set_tempo", tempo=usec_per_beat, time=0))
    track.append(mido.MetaMessage("time_signature", numerator=4, denominator=4, time=0))

    last_tick = 0
    for tick, key, is_on in step_events(pattern, bars, step_ticks):
        msg_type = "note_on" if is_on else "note_off"
        track.append(
            mido.Message(
                msg_type,
                channel=channel,
                note=key,
                velocity=velocity if is_on else 0,
                time=tick - last_tick,
            )
        )
        last_tick = tick

    end_tick = bars * STEPS_PER_TRACK * step_ticks
    track.append(mido.MetaMessage("end_of_track", time=max(0, end_tick - last_tick)))

    midi = mido.MidiFile(type=0, ticks_per_beat=ticks_per_beat)
    midi.tracks.append(track)
    return midi


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a .splice drum pattern into a MIDI file",
    )
    parser.add_argument("input", type=Path, help="Path to the .splice pattern")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output .mid path (default: input with .mid suffix)",
    )
    parser.add_argument("--bars", type=int, default=1, help="Times to repeat the bar")
    parser.add_argument("--ticks-per-beat", type=int, default=480)
    parser.add_argument(
        "--channel",
        type=int,
        default=GM_DRUM_CHANNEL + 1,
        help="1-based MIDI channel (default 10, GM percussion)",
    )
    parser.add_argument("--velocity", type=int, default=100)
    parser.add_argument(
        "--max-payload",
        type=int,
        default=None,
        help="Reject files declaring a payload larger than this many bytes",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)

    if not 1 <= args.channel <= 16:
        parser.error(f"--channel must be 1-16, got {args.channel}")
    if not 1 <= args.velocity <= 127:
        parser.error(f"--velocity must be 1-127, got {args.velocity}")
    if args.bars < 1:
        parser.error(f"--bars must be >= 1, got {args.bars}")
    if args.ticks_per_beat <= 0 or args.ticks_per_beat % STEPS_PER_BEAT:
        parser.error(
            f"--ticks-per-beat must be a positive multiple of {STEPS_PER_BEAT}, "
            f"got {args.ticks_per_beat}"
        )

    try:
        pattern = decode_file(args.input, max_payload_size=args.max_payload)
        midi = build_midi(
            pattern,
            bars=args.bars,
            ticks_per_beat=args.ticks_per_beat,
            channel=args.channel - 1,
            velocity=args.velocity,
        )
    except (ValueError, OSError) as err:
        logger.debug("export failed for %s", args.input, exc_info=True)
        print(f"{args.input}: ERR {err}", file=sys.stderr)
        return 1

    out_path = args.output if args.output is not None else args.input.with_suffix(".mid")
    midi.save(str(out_path))
    logger.info(
        "wrote %s: %d tracks, %d bars at %s bpm",
        out_path,
        len(pattern.tracks),
        args.bars,
        pattern.tempo,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
