import io
from itertools import islice
from typing import Iterable, List, Optional

from csvscout.data.constants import (
    DEFAULT_DELIMITER, DELIMITER_CANDIDATES, ESCAPE_CHAR, NON_DELIMITER_CHARS, SNIFF_WINDOW_SIZE
)
from csvscout.errors import MalformedSampleError
from csvscout.models import LineStatistics, SampleLine
from csvscout.utils import get_logger

logger = get_logger(__name__)

def normalize_separator(separator: Optional[str]) -> Optional[str]:
    """Only the first character of a user separator is used. Empty means none."""
    if not separator:
        return None
    return separator[0]

def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedSampleError(f"Sample is not valid UTF-8 text: {e}") from e

def _split_lines(text: str, window: int) -> List[str]:
    """
    Splits on \\r\\n, \\r and \\n only. Other Unicode line breaks (form feed,
    U+2028, ...) are field content, not record boundaries.
    """
    buffer = io.StringIO(text, newline=None)
    return [line.rstrip("\n") for line in islice(buffer, window)]

def _read_stream(stream, window: int) -> str:
    binary = isinstance(stream, (io.RawIOBase, io.BufferedIOBase))
    reader = None
    chunks = []
    try:
        reader = io.TextIOWrapper(stream, encoding="utf-8", newline=None) if binary else stream
        for _ in range(window):
            chunk = reader.readline()
            if not chunk:
                break
            chunks.append(chunk)
    # ValueError covers decoding errors and reads on a closed stream
    except (OSError, ValueError) as e:
        raise MalformedSampleError(f"Failed to read sample stream: {e}") from e
    finally:
        # Leave the caller's binary stream open
        if binary and reader is not None and not stream.closed:
            reader.detach()
    # Duck-typed binary readers that are not io classes
    return "".join(_decode(bytes(c)) if isinstance(c, (bytes, bytearray)) else c for c in chunks)

def read_sample_text(source, window: int = SNIFF_WINDOW_SIZE) -> List[str]:
    """
    Reads at most `window` raw lines from the source.
    Accepts a string, UTF-8 bytes, or a readable text/binary stream.
    Streams are read line by line so large files are never loaded whole.
    """
    if isinstance(source, str):
        text = source
    elif isinstance(source, (bytes, bytearray)):
        text = _decode(bytes(source))
    elif hasattr(source, "readline"):
        text = _read_stream(source, window)
    else:
        raise MalformedSampleError(f"Cannot read a sample from {type(source).__name__}")

    return _split_lines(text, window)

def sample_lines(source, window: int = SNIFF_WINDOW_SIZE) -> List[SampleLine]:
    """Stage 1: truncates the input to the sampling window."""
    lines = read_sample_text(source, window)
    logger.debug(f"Sampled {len(lines)} lines (window {window}).")
    return [SampleLine(index=i, text=line) for i, line in enumerate(lines)]

def build_line_statistics(line: str, separator: Optional[str] = None) -> LineStatistics:
    """
    Scans a line once, counting delimiter candidates and quote/escape characters.
    A delimiter right after an un-doubled backslash is escaped text: it is not
    counted and the line is flagged as having escapes.
    """
    delimiters = set(DEFAULT_DELIMITER + DELIMITER_CANDIDATES)
    separator = normalize_separator(separator)
    if separator:
        delimiters.add(separator)

    delimiter_counts = {}
    quote_counts = {}
    first_delimiter = None
    escapes = False
    escaping = False  # previous char is a backslash that is not itself escaped

    for char in line:
        if char in delimiters:
            if escaping and char != ESCAPE_CHAR:
                escapes = True
            else:
                delimiter_counts[char] = delimiter_counts.get(char, 0) + 1
                if first_delimiter is None:
                    first_delimiter = char
        elif char in NON_DELIMITER_CHARS:
            quote_counts[char] = quote_counts.get(char, 0) + 1
        escaping = char == ESCAPE_CHAR and not escaping

    return LineStatistics(
        delimiter_counts=delimiter_counts,
        quote_counts=quote_counts,
        first_delimiter=first_delimiter,
        escapes=escapes,
    )

def build_all_statistics(lines: Iterable[SampleLine], separator: Optional[str] = None) -> List[LineStatistics]:
    """Stage 2: one LineStatistics per sampled line, in order."""
    stats = [build_line_statistics(line.text, separator) for line in lines]
    if any(s.escapes for s in stats):
        logger.debug("Escaped delimiters found in sample.")
    return stats
