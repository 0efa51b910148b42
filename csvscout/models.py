import csv
from enum import Enum
from typing import Dict, List, Optional, Type
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, model_validator

# --- Sample Models ---
class QuoteMode(str, Enum):
    MINIMAL = "minimal"

class SampleLine(BaseModel):
    """One raw line of the sample and its position."""
    model_config = ConfigDict(frozen=True)

    index: NonNegativeInt = Field(..., description="0-based position of the line in the sample.")
    text: str = Field(..., description="The raw line, without its line terminator.")

class LineStatistics(BaseModel):
    """Per-line character counts gathered by a single scan."""
    model_config = ConfigDict(frozen=True)

    delimiter_counts: Dict[str, NonNegativeInt] = Field(default_factory=dict, description="Delimiter candidate -> occurrences.")
    quote_counts: Dict[str, NonNegativeInt] = Field(default_factory=dict, description="Quote/non-delimiter character -> occurrences.")
    first_delimiter: Optional[str] = Field(None, description="First delimiter candidate counted on the line.")
    escapes: bool = Field(False, description="A delimiter candidate was escaped with a backslash.")

    def delimiter_count(self, char: str) -> int:
        return self.delimiter_counts.get(char, 0)

    def contains_quote_char(self, char: str) -> bool:
        return char in self.quote_counts

    def has_balanced_quotes(self, char: str) -> bool:
        count = self.quote_counts.get(char)
        return count is None or count % 2 == 0

# --- Result Model ---
class FormatDescriptor(BaseModel):
    """The detected shape of a delimited-text sample."""
    model_config = ConfigDict(frozen=True)

    delimiter: str = Field(..., min_length=1, max_length=1, description="Field separator.")
    quote_char: str = Field(..., min_length=1, max_length=1, description="Field enclosing character.")
    quote_mode: QuoteMode = Field(QuoteMode.MINIMAL, description="Quote only the fields that need it.")
    header_fields: Optional[List[str]] = Field(None, description="Ordered field names when a header row was detected.")
    first_record: Optional[List[str]] = Field(None, description="First data record, for previews.")

    @model_validator(mode="after")
    def _delimiter_differs_from_quote(self) -> "FormatDescriptor":
        if self.delimiter == self.quote_char:
            raise ValueError(f"delimiter and quote_char must differ, both are {self.delimiter!r}")
        return self

    @property
    def has_header(self) -> bool:
        return self.header_fields is not None

    def to_dialect(self) -> Type[csv.Dialect]:
        """Builds a csv.Dialect subclass for reading/writing with the standard library."""
        return type("DetectedDialect", (csv.Dialect,), {
            "delimiter": self.delimiter,
            "quotechar": self.quote_char,
            "escapechar": None,
            "doublequote": True,
            "skipinitialspace": False,
            "lineterminator": "\r\n",
            "quoting": csv.QUOTE_MINIMAL,
        })
