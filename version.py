"""
Version information for projstamp.

This file is the single source of truth for the tool's own version.
It is rewritten by bump_version.py.
"""

# Version components
VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_REVISION = 0
VERSION_BUILD = 0

# Full version string
__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_REVISION}.{VERSION_BUILD}"


def get_version() -> str:
    """Return the full version string."""
    return __version__
