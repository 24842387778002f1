"""
Find project files (``*.??proj``) below a folder.
"""
import fnmatch
import logging
import os
from pathlib import Path
from typing import Iterator, Union

from projstamp.errors import NotFoundError

logger = logging.getLogger(__name__)

PROJECT_FILE_PATTERN = "*.??proj"


def is_project_file(name: str) -> bool:
    """Case-insensitive match of a file name against ``*.??proj``."""
    return fnmatch.fnmatchcase(name.lower(), PROJECT_FILE_PATTERN)


def locate(root: Union[str, Path], recursive: bool = True) -> Iterator[Path]:
    """Return a lazy sequence of project files under *root*.

    Within a directory, entries are visited in sorted order and a directory's
    own files come before those of its subdirectories.

    Raises:
        NotFoundError: immediately, if *root* is not an existing directory.
    """
    root = Path(root)
    if not root.is_dir():
        raise NotFoundError("folder does not exist", root)
    logger.debug(f"locate: scanning {root} (recursive={recursive})")
    return _walk(root, recursive)


def _walk(root: Path, recursive: bool) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            if not is_project_file(name):
                continue
            path = Path(dirpath) / name
            if path.is_file():
                yield path
        if not recursive:
            break
