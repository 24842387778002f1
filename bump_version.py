#!/usr/bin/env python3
"""
Version bumping script for projstamp itself.

Usage:
    python bump_version.py FullRevision     # 1.0.0.0 -> 1.0.1.1
    python bump_version.py RevisionOnly     # 1.0.0.0 -> 1.0.1.0
    python bump_version.py NewMinor         # 1.2.3.4 -> 1.3.0.4
    python bump_version.py NewMajor -r      # 1.2.3.4 -> 2.0.0.0
    python bump_version.py                  # Shows current version
    python bump_version.py set X.Y.Z.W      # Set specific version
"""
import re
import sys
from pathlib import Path
from typing import List, Optional

from projstamp.errors import FormatError
from projstamp.versioning import Strategy, bump_version as next_version, parse_version


VERSION_FILE = Path(__file__).parent / "version.py"
COMPONENTS = ("VERSION_MAJOR", "VERSION_MINOR", "VERSION_REVISION", "VERSION_BUILD")


def read_version(version_file: Optional[Path] = None) -> str:
    """Read the current version from version.py."""
    version_file = version_file or VERSION_FILE
    content = version_file.read_text()
    parts = [re.search(rf'{name} = (\d+)', content).group(1) for name in COMPONENTS]
    return ".".join(parts)


def write_version(version: str, version_file: Optional[Path] = None):
    """Write *version* into the component constants of version.py."""
    parts: List[str] = parse_version(version)
    version_file = version_file or VERSION_FILE
    content = version_file.read_text()
    for name, value in zip(COMPONENTS, parts):
        content = re.sub(rf'{name} = \d+', f'{name} = {int(value)}', content)
    version_file.write_text(content)


def bump_version(strategy: str, reset_build: bool = False, version_file: Optional[Path] = None) -> str:
    """Bump the version with the given strategy."""
    old_version = read_version(version_file)
    new_version = next_version(old_version, Strategy.parse(strategy), reset_build)
    write_version(new_version, version_file)

    print(f"Bumped version: {old_version} -> {new_version}")
    return new_version


def set_version(version_str: str, version_file: Optional[Path] = None) -> str:
    """Set a specific version."""
    old_version = read_version(version_file)
    write_version(version_str, version_file)
    new_version = read_version(version_file)

    print(f"Set version: {old_version} -> {new_version}")
    return new_version


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(f"Current version: {read_version()}")
        print("\nUsage:")
        print("  python bump_version.py <strategy> [-r]  # FullRevision, RevisionOnly, NewMinor, NewMajor")
        print("  python bump_version.py set X.Y.Z.W      # Set specific version")
        return 0

    action = argv[0]
    try:
        if action.lower() == "set" and len(argv) >= 2:
            set_version(argv[1])
        else:
            reset_build = "-r" in argv[1:] or "--reset-build" in argv[1:]
            bump_version(action, reset_build)
    except (ValueError, FormatError) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
