"""Exceptions raised while decoding ``.splice`` pattern files."""

from __future__ import annotations

from typing import Optional


class PatternError(ValueError):
    """Base class for every pattern decoding failure."""


class FormatError(PatternError):
    """The input is not a well-formed pattern file (bad magic, bad size)."""


class IncompleteDataError(FormatError):
    """Fewer bytes were available than a field requires.

    ``record`` is the 1-based track record index when the short read
    happened inside the track stream, otherwise ``None``.
    """

    def __init__(
        self,
        field: str,
        expected: int,
        received: int,
        record: Optional[int] = None,
    ) -> None:
        self.field = field
        self.expected = expected
        self.received = received
        self.record = record
        where = field if record is None else f"{field} (record {record})"
        super().__init__(
            f"incomplete {where}: need {expected} bytes, got {received}"
        )
