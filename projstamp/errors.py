"""
Exception types raised while locating and stamping project files.
"""
from pathlib import Path
from typing import Optional, Union


class StampError(Exception):
    """Base class for every projstamp failure."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


class NotFoundError(StampError):
    """The folder to scan does not exist."""


class ParseError(StampError):
    """A project file is not well-formed markup."""

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        super().__init__(message, path)
        self.line = line
        self.column = column


class StructuralError(StampError):
    """No property group holds a target-framework declaration."""


class FormatError(StampError):
    """A version string is not four dot-separated integers."""

    def __init__(self, version: str, path: Optional[Union[str, Path]] = None):
        super().__init__(
            f"invalid version '{version}', expected major.minor.revision.build", path
        )
        self.version = version


class ConfigError(StampError):
    """The configuration file is missing or invalid."""
