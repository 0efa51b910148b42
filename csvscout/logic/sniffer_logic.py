import csv
import io
from typing import Iterable, List, Optional, Sequence, Tuple

from csvscout.data.constants import DEFAULT_QUOTE_CHAR, DELIMITER_PREFERENCE, QUOTE_CANDIDATES
from csvscout.errors import UnrecognizedFormatError
from csvscout.models import LineStatistics
from csvscout.utils import all_match, any_match, get_logger

logger = get_logger(__name__)

# Known delimiters rank by position in the preference string
_PREFERENCE_RANK = {char: idx for idx, char in enumerate(DELIMITER_PREFERENCE)}

# (delimiter, header fields, first data record)
DelimiterMatch = Tuple[str, Optional[List[str]], Optional[List[str]]]

def guess_quote(line_stats: Sequence[LineStatistics]) -> str:
    """
    Picks the quote character.
    A candidate wins if it appears on at least one line and its count is even
    (balanced) on every line where it appears. Candidates are tried in priority
    order; falls back to the double quote.
    """
    for quote in QUOTE_CANDIDATES:
        found = any_match(line_stats, lambda s: s.contains_quote_char(quote))
        if found and all_match(line_stats, lambda s: s.has_balanced_quotes(quote)):
            logger.debug(f"Quote character {quote!r} is present and balanced.")
            return quote
    logger.debug(f"No balanced quote candidate. Defaulting to {DEFAULT_QUOTE_CHAR!r}.")
    return DEFAULT_QUOTE_CHAR

def delimiter_rank(char: str) -> int:
    """Sort key: preference position, or past every known delimiter by code point."""
    return _PREFERENCE_RANK.get(char, len(DELIMITER_PREFERENCE) + ord(char))

def rank_delimiters(delimiters: Iterable[str]) -> List[str]:
    return sorted(set(delimiters), key=delimiter_rank)

def trial_parse(text: str, delimiter: str, quote_char: str, header_row: bool) -> Tuple[Optional[List[str]], List[List[str]]]:
    """
    Parses the sample for real with the candidate format.
    Blank lines are skipped. With header_row the first record becomes the header.
    Returns (header or None, data records).
    """
    reader = csv.reader(
        io.StringIO(text, newline=""),
        delimiter=delimiter,
        quotechar=quote_char,
        doublequote=True,
        skipinitialspace=False,
        strict=False,
    )
    records = [row for row in reader if row]
    if not header_row or not records:
        return None, records
    return records[0], records[1:]

def guess_delimiter(line_stats: Sequence[LineStatistics], text: str, quote_char: str, header_row: bool) -> DelimiterMatch:
    """
    Validates the delimiters found on the first line, most preferred first.

    1. Header path: a trial parse whose records all match the header width
       wins immediately.
    2. Fallback: a delimiter whose count on every line equals the first
       line's count is remembered as consistent.
    After all candidates, the best ranked consistent delimiter wins.
    Raises UnrecognizedFormatError when nothing qualifies.
    """
    if not line_stats:
        raise UnrecognizedFormatError("Unrecognized format: empty sample")

    first_line = line_stats[0]
    candidates = rank_delimiters(c for c, n in first_line.delimiter_counts.items() if n > 0)
    logger.debug(f"Ranked delimiter candidates: {candidates}")

    consistent = []
    for delim in candidates:
        if delim == quote_char:
            logger.debug(f"Skipping {delim!r}: same as the quote character.")
            continue

        try:
            header, records = trial_parse(text, delim, quote_char, header_row)
        except csv.Error as e:
            logger.debug(f"Trial parse with {delim!r} failed: {e}")
            header, records = None, []

        if header is not None:
            width = len(header)
            if all_match(records, lambda r: len(r) == width):
                logger.info(f"Delimiter {delim!r} accepted via header ({width} columns).")
                return delim, header, records[0]
            logger.debug(f"Delimiter {delim!r}: record widths do not match header width {width}.")

        expected = first_line.delimiter_count(delim)
        if all(s.delimiter_count(delim) == expected for s in line_stats[1:]):
            logger.debug(f"Delimiter {delim!r}: {expected} per line on every line.")
            consistent.append(delim)

    if len(consistent) == 1:
        logger.info(f"Delimiter {consistent[0]!r} accepted via line counts.")
        return consistent[0], None, None
    if consistent:
        best = next(d for d in candidates if d in consistent)
        logger.info(f"{len(consistent)} consistent delimiters {consistent}. Preferring {best!r}.")
        return best, None, None

    logger.warning(f"No delimiter candidate passed validation. Tried: {candidates}")
    raise UnrecognizedFormatError("Unrecognized format", candidates=candidates)
