"""Decoder for ``.splice`` drum-machine pattern files."""

from .decoder import (  # noqa: F401
    HEADER_SIZE,
    MAGIC,
    VERSION_SIZE,
    PatternDecoder,
    PatternHeader,
    decode,
    decode_bytes,
    decode_file,
    iter_patterns,
)
from .errors import FormatError, IncompleteDataError, PatternError  # noqa: F401
from .pattern import (  # noqa: F401
    STEPS_PER_TRACK,
    Pattern,
    Track,
    format_tempo,
    render_text,
)
from .reader import BoundedReader, read_exact  # noqa: F401
