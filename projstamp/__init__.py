"""
projstamp package.

Bumps the version fields of MSBuild-style project files found under a
folder, split into focused modules by responsibility.
"""
from projstamp.errors import (
    ConfigError,
    FormatError,
    NotFoundError,
    ParseError,
    StampError,
    StructuralError,
)
from projstamp.locator import locate
from projstamp.stamper import StampResult, stamp
from projstamp.versioning import Strategy, bump_version


def main():
    """Convenience entry point; delegates to projstamp.cli.main()."""
    from projstamp.cli import main as _main
    return _main()


__all__ = [
    "ConfigError",
    "FormatError",
    "NotFoundError",
    "ParseError",
    "StampError",
    "StampResult",
    "Strategy",
    "StructuralError",
    "bump_version",
    "locate",
    "main",
    "stamp",
]
