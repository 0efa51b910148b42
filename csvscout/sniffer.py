import io
import os
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from csvscout.errors import MalformedSampleError
from csvscout.logic.line_stats import build_all_statistics, normalize_separator, sample_lines
from csvscout.logic.sniffer_logic import guess_delimiter, guess_quote
from csvscout.models import FormatDescriptor, QuoteMode
from csvscout.utils import get_logger

logger = get_logger(__name__)

def detect_format(sample, header_row: bool = False, separator: Optional[str] = None) -> FormatDescriptor:
    """
    Infers delimiter, quote character and (optionally) header of a delimited-text sample.
    Only the first SNIFF_WINDOW_SIZE lines are consulted.

    Raises UnrecognizedFormatError if no delimiter can be validated and
    MalformedSampleError if the sample cannot be read as text.
    """
    logger.info("Stage 1: Sampling input...")
    lines = sample_lines(sample)
    separator = normalize_separator(separator)

    logger.info(f"Stage 2: Building statistics for {len(lines)} lines...")
    line_stats = build_all_statistics(lines, separator)

    logger.info("Stage 3: Detecting quote character...")
    quote_char = guess_quote(line_stats)

    logger.info("Stage 4: Ranking and validating delimiters...")
    text = "\n".join(line.text for line in lines)
    delimiter, header, first_record = guess_delimiter(line_stats, text, quote_char, header_row)

    descriptor = FormatDescriptor(
        delimiter=delimiter,
        quote_char=quote_char,
        quote_mode=QuoteMode.MINIMAL,
        header_fields=header,
        first_record=first_record,
    )
    logger.info(f"Detected format: delimiter={delimiter!r} quote={quote_char!r} header={header is not None}")
    return descriptor

def sniff_file(file_path: Union[str, Path], header_row: bool = False, separator: Optional[str] = None) -> FormatDescriptor:
    """Detects the format of a UTF-8 text file, reading only the sampling window."""
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    logger.info(f"Sniffing file: {path}")
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return detect_format(f, header_row=header_row, separator=separator)
    except OSError as e:
        raise MalformedSampleError(f"Failed to read {path}: {e}") from e

def load_frame(source, descriptor: FormatDescriptor, nrows: Optional[int] = None) -> pd.DataFrame:
    """
    Loads delimited text into a DataFrame using a detected format.
    `source` may be a file path, raw text or a text stream. Values stay strings.
    """
    if isinstance(source, Path) or (isinstance(source, str) and '\n' not in source and os.path.isfile(source)):
        buffer = source
    elif isinstance(source, str):
        buffer = io.StringIO(source)
    else:
        buffer = source

    skipped = []

    def _skip_bad_line(fields):
        skipped.append(fields)
        return None

    try:
        df = pd.read_csv(
            buffer,
            sep=descriptor.delimiter,
            quotechar=descriptor.quote_char,
            header=0 if descriptor.has_header else None,
            engine="python",
            nrows=nrows,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            # Rows with extra separators are dropped rather than failing the load
            on_bad_lines=_skip_bad_line,
        )
    except pd.errors.EmptyDataError:
        logger.warning("No data found to create DataFrame.")
        return pd.DataFrame()

    if skipped:
        logger.warning(f"Skipped {len(skipped)} rows with more fields than expected (first: {skipped[0]}).")

    if descriptor.has_header:
        df.columns = [str(c).strip() for c in df.columns]

    return df
