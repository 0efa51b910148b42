import logging
import os
from typing import Callable, Iterable, TypeVar

from csvscout.data.constants import LOG_FORMAT, LOG_LEVEL_ENV_VAR

T = TypeVar("T")

_ROOT_LOGGER_NAME = "csvscout"


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger under the package root logger.
    The root logger gets one stream handler, level from CSVSCOUT_LOG_LEVEL (default INFO).
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
        root.setLevel(getattr(logging, level_name, logging.INFO))

    if name == _ROOT_LOGGER_NAME or name.startswith(_ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return root.getChild(name)


def all_match(items: Iterable[T], predicate: Callable[[T], bool]) -> bool:
    """
    True when every item satisfies the predicate. Stops at the first miss.
    An empty iterable is NOT a match: callers rely on "no records" failing.
    """
    matched = False
    for item in items:
        if not predicate(item):
            return False
        matched = True
    return matched


def any_match(items: Iterable[T], predicate: Callable[[T], bool]) -> bool:
    """True when at least one item satisfies the predicate. Stops at the first hit."""
    for item in items:
        if predicate(item):
            return True
    return False
