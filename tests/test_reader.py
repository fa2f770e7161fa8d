from pathlib import Path
import io
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from splice.errors import IncompleteDataError  # noqa: E402
from splice.reader import BoundedReader, read_exact  # noqa: E402


class CountingStream:
    """BytesIO that records every read request."""

    def __init__(self, data: bytes) -> None:
        self._buf = io.BytesIO(data)
        self.requests: list[int] = []

    def read(self, size: int = -1) -> bytes:
        self.requests.append(size)
        return self._buf.read(size)


def test_read_never_exceeds_budget() -> None:
    stream = CountingStream(b"abcdefghij")
    reader = BoundedReader(stream, 4)
    assert reader.read(10) == b"abcd"
    assert reader.remaining == 0
    assert stream.requests == [4]


def test_exhausted_reader_does_not_touch_stream() -> None:
    stream = CountingStream(b"abcdefghij")
    reader = BoundedReader(stream, 3)
    reader.read()
    calls = len(stream.requests)
    assert reader.exhausted
    assert reader.read(5) == b""
    assert reader.read() == b""
    assert len(stream.requests) == calls
    assert stream.read() == b"defghij"


def test_zero_budget_is_immediately_exhausted() -> None:
    reader = BoundedReader(io.BytesIO(b"data"), 0)
    assert reader.exhausted
    assert reader.read() == b""


def test_remaining_tracks_short_reads() -> None:
    reader = BoundedReader(io.BytesIO(b"ab"), 5)
    assert reader.read(5) == b"ab"
    assert reader.remaining == 3
    assert not reader.exhausted


def test_negative_budget_rejected() -> None:
    with pytest.raises(ValueError):
        BoundedReader(io.BytesIO(b""), -1)


def test_bounded_readers_compose() -> None:
    outer = BoundedReader(io.BytesIO(b"0123456789"), 8)
    inner = BoundedReader(outer, 3)
    assert inner.read() == b"012"
    assert inner.exhausted
    assert outer.remaining == 5
    assert outer.read() == b"34567"


def test_read_exact_loops_over_partial_reads() -> None:
    class Dribble:
        def __init__(self, data: bytes) -> None:
            self._buf = io.BytesIO(data)

        def read(self, size: int = -1) -> bytes:
            return self._buf.read(min(size, 2))

    assert read_exact(Dribble(b"abcdefg"), 7, "field") == b"abcdefg"


def test_read_exact_reports_field_and_counts() -> None:
    reader = BoundedReader(io.BytesIO(b"abcdef"), 3)
    with pytest.raises(IncompleteDataError) as excinfo:
        reader.read_exact(4, "tempo")
    err = excinfo.value
    assert (err.field, err.expected, err.received, err.record) == ("tempo", 4, 3, None)
    assert "incomplete tempo: need 4 bytes, got 3" in str(err)


def test_read_exact_zero_bytes() -> None:
    reader = BoundedReader(io.BytesIO(b""), 0)
    assert reader.read_exact(0, "track name") == b""


def test_incomplete_data_error_hierarchy() -> None:
    from splice.errors import FormatError, PatternError

    err = IncompleteDataError("track steps", 16, 10, record=17)
    assert isinstance(err, FormatError)
    assert isinstance(err, PatternError)
    assert isinstance(err, ValueError)
    assert str(err) == "incomplete track steps (record 17): need 16 bytes, got 10"
