"""
Stamp a new version into one project file.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, Union

from projstamp.backup import DEFAULT_MAX_BACKUPS, backup_file
from projstamp.errors import FormatError
from projstamp.project_file import ProjectDocument, get_or_insert_field
from projstamp.versioning import INITIAL_VERSION, Strategy, bump_version

logger = logging.getLogger(__name__)

VERSION_FIELD = "Version"
ASSEMBLY_VERSION_FIELD = "AssemblyVersion"
FILE_VERSION_FIELD = "FileVersion"


@dataclass(frozen=True)
class StampResult:
    """Outcome of stamping one file."""

    filepath: Path
    old_version: str
    new_version: str

    def to_record(self) -> Dict[str, str]:
        return {
            "filepath": str(self.filepath),
            "newVersion": self.new_version,
            "oldVersion": self.old_version,
        }

    def __str__(self) -> str:
        return f"{self.filepath}: {self.old_version} --> {self.new_version}"


def stamp(
    filepath: Union[str, Path],
    strategy: Union[str, Strategy] = Strategy.FULL_REVISION,
    reset_build: bool = False,
    *,
    dry_run: bool = False,
    backup: bool = False,
    max_backups: int = DEFAULT_MAX_BACKUPS,
) -> StampResult:
    """Bump the version fields of the project file at *filepath*.

    The ``Version``, ``AssemblyVersion`` and ``FileVersion`` fields of the
    property group holding ``TargetFramework`` all receive the new version;
    missing ones are created first.  Only ``Version`` is read.  Nothing is
    written when *dry_run* is set or when any step fails.

    Raises:
        ParseError: the file is not well-formed XML.
        StructuralError: no property group declares the target framework.
        FormatError: the current version is not four integer components.
    """
    filepath = Path(filepath)
    strategy = Strategy.parse(strategy)

    document = ProjectDocument.load(filepath)
    group = document.find_property_group()

    version = get_or_insert_field(group, VERSION_FIELD, INITIAL_VERSION)
    assembly_version = get_or_insert_field(group, ASSEMBLY_VERSION_FIELD, "")
    file_version = get_or_insert_field(group, FILE_VERSION_FIELD, "")

    old_version = (version.text or "").strip()
    try:
        new_version = bump_version(old_version, strategy, reset_build)
    except FormatError as e:
        e.path = filepath
        raise

    for field in (version, assembly_version, file_version):
        field.text = new_version

    if dry_run:
        logger.info(f"stamp: [dry run] {filepath}: {old_version} -> {new_version}")
    else:
        if backup:
            backup_file(filepath, max_backups)
        document.save(filepath)
        logger.info(f"stamp: {filepath}: {old_version} -> {new_version} ({strategy})")

    return StampResult(filepath, old_version, new_version)


def stamp_all(
    paths: Iterable[Path],
    strategy: Union[str, Strategy] = Strategy.FULL_REVISION,
    reset_build: bool = False,
    **options,
) -> Iterator[StampResult]:
    """Stamp each of *paths* in turn, yielding results as they are produced.

    The first failure propagates and leaves the remaining paths untouched.
    """
    for path in paths:
        yield stamp(path, strategy, reset_build, **options)
