"""
Version string arithmetic for ``major.minor.revision.build`` versions.

Versions are handled as lists of their four *textual* components so that a
component no strategy touches is written back exactly as it was read.
"""
import re
from enum import Enum
from typing import List, Union

from projstamp.errors import FormatError

INITIAL_VERSION = "1.0.0.0"

MAJOR, MINOR, REVISION, BUILD = range(4)

_COMPONENT = re.compile(r"[0-9]+")


class Strategy(Enum):
    """Which components a stamp increments and which it zeroes."""

    FULL_REVISION = "FullRevision"
    REVISION_ONLY = "RevisionOnly"
    NEW_MINOR = "NewMinor"
    NEW_MAJOR = "NewMajor"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, "Strategy"]) -> "Strategy":
        """Look up a strategy by name.

        ``FullRevision``, ``full-revision``, ``full_revision`` and
        ``FULL_REVISION`` all resolve to the same member.
        """
        if isinstance(value, cls):
            return value
        key = re.sub(r"[-_\s]", "", str(value)).lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown strategy: {value!r} (expected one of {choices})")


def parse_version(text: str) -> List[str]:
    """Split *text* into its four components.

    Raises:
        FormatError: if there are not exactly four components or any of
            them is not a non-negative base-10 integer.
    """
    parts = text.split(".")
    if len(parts) != 4 or not all(_COMPONENT.fullmatch(p) for p in parts):
        raise FormatError(text)
    return parts


def format_version(parts: List[str]) -> str:
    return ".".join(parts)


def increment(parts: List[str], index: int) -> List[str]:
    """Return a copy of *parts* with component *index* increased by one."""
    bumped = list(parts)
    bumped[index] = str(int(bumped[index]) + 1)
    return bumped


def reset(parts: List[str], index: int) -> List[str]:
    """Return a copy of *parts* with component *index* set to ``"0"``."""
    zeroed = list(parts)
    zeroed[index] = "0"
    return zeroed


def bump_version(text: str, strategy: Union[str, Strategy], reset_build: bool = False) -> str:
    """Compute the version that follows *text* under *strategy*.

    ``reset_build`` zeroes the build component after the strategy has been
    applied, whichever strategy it was.
    """
    strategy = Strategy.parse(strategy)
    parts = parse_version(text)

    if strategy is Strategy.FULL_REVISION:
        parts = increment(parts, BUILD)
        parts = increment(parts, REVISION)
    elif strategy is Strategy.REVISION_ONLY:
        parts = increment(parts, REVISION)
    elif strategy is Strategy.NEW_MINOR:
        parts = increment(parts, MINOR)
        parts = reset(parts, REVISION)
    elif strategy is Strategy.NEW_MAJOR:
        parts = increment(parts, MAJOR)
        parts = reset(parts, MINOR)
        parts = reset(parts, REVISION)

    if reset_build:
        parts = reset(parts, BUILD)

    return format_version(parts)
