from typing import List, Optional


class SniffError(ValueError):
    """Base class for everything the sniffer raises on purpose."""


class UnrecognizedFormatError(SniffError):
    """No delimiter candidate survived the header or the fallback checks."""

    def __init__(self, message: str = "Unrecognized format", candidates: Optional[List[str]] = None):
        super().__init__(message)
        self.candidates = list(candidates or [])


class MalformedSampleError(SniffError):
    """The sample could not be read as line-oriented text."""
