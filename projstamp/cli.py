"""
projstamp command line
======================
Scans a folder for project files (*.??proj) and bumps the Version,
AssemblyVersion and FileVersion fields of the property group that declares
TargetFramework. One line is printed per stamped file, as soon as the file
has been written.

Strategies:
  FullRevision   bump build and revision   1.0.0.0 -> 1.0.1.1
  RevisionOnly   bump revision             1.0.0.0 -> 1.0.1.0
  NewMinor       bump minor, zero revision 2.5.3.9 -> 2.6.0.9
  NewMajor       bump major, zero minor and revision
                                           2.5.3.9 -> 3.0.0.9

Examples:
  # Stamp every project below the current directory
  projstamp

  # Start a new minor version and zero the build number
  projstamp src --strategy NewMinor --reset-build

  # Preview only, one JSON object per file
  projstamp src --dry-run --json

Exit status: 0 when every file was stamped, 1 when at least one file
failed, 2 for usage errors, a missing folder or a bad config file.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from projstamp.constants import APP_NAME, APP_VERSION, LOG_LEVELS, setup_logging
from projstamp.config import load_config
from projstamp.errors import ConfigError, FormatError, NotFoundError, ParseError, StructuralError
from projstamp.locator import locate
from projstamp.stamper import stamp
from projstamp.versioning import Strategy

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FILE_ERRORS = 1
EXIT_USAGE = 2

# Failures that concern a single file; everything else aborts the run.
FILE_ERRORS = (ParseError, StructuralError, FormatError, OSError)


def _strategy_arg(value: str) -> Strategy:
    try:
        return Strategy.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description='Bump the version numbers of the project files under a folder.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        'folder',
        nargs='?',
        default=None,
        help='Folder to scan (default: current directory)'
    )
    parser.add_argument(
        '--strategy', '-s',
        type=_strategy_arg,
        default=None,
        metavar='{' + ','.join(s.value for s in Strategy) + '}',
        help='Which components to bump (default: FullRevision)'
    )
    parser.add_argument(
        '--reset-build', '-r',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Set the build component to 0 after bumping'
    )
    parser.add_argument(
        '--recurse',
        dest='recursive',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Scan subfolders too (default: yes); --no-recurse scans only the folder itself'
    )
    parser.add_argument(
        '--dry-run', '-n',
        action='store_true',
        help='Report the new versions without writing any file'
    )
    parser.add_argument(
        '--backup',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Keep a timestamped copy of each file before overwriting it'
    )
    parser.add_argument(
        '--fail-fast',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Stop at the first file that cannot be stamped'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print one JSON object per stamped file'
    )
    parser.add_argument(
        '--config', '-c',
        default=None,
        help='Path to a JSON config file'
    )
    parser.add_argument(
        '--log-level',
        choices=list(LOG_LEVELS),
        type=str.upper,
        default=None,
        help='Logging level (default: WARNING)'
    )
    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'%(prog)s {APP_VERSION}'
    )
    return parser


def _pick(flag, configured):
    return configured if flag is None else flag


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.log_level:
        config["logging"]["level"] = args.log_level
    setup_logging(config)

    folder = Path(args.folder) if args.folder else Path.cwd()
    strategy = _pick(args.strategy, Strategy.parse(config["strategy"]))
    reset_build = _pick(args.reset_build, config["reset_build"])
    recursive = _pick(args.recursive, config["recursive"])
    fail_fast = _pick(args.fail_fast, config["fail_fast"])
    backup = _pick(args.backup, config["backup"]["enabled"])
    max_backups = config["backup"]["max_backups"]

    try:
        paths = locate(folder, recursive)
    except NotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    logger.info(
        f"Stamping projects under {folder} (strategy={strategy}, reset_build={reset_build}"
        f"{', dry run' if args.dry_run else ''})"
    )

    stamped = 0
    failed = 0
    for path in paths:
        try:
            result = stamp(
                path,
                strategy,
                reset_build,
                dry_run=args.dry_run,
                backup=backup,
                max_backups=max_backups,
            )
        except FILE_ERRORS as e:
            failed += 1
            print(f"Error: {e}", file=sys.stderr)
            logger.debug(f"Failed to stamp {path}", exc_info=True)
            if fail_fast:
                logger.error("Stopping at the first failure (--fail-fast)")
                break
            continue

        stamped += 1
        if args.json:
            print(json.dumps(result.to_record()), flush=True)
        else:
            print(result, flush=True)

    if stamped == 0 and failed == 0:
        logger.warning(f"No project files found under {folder}")
    logger.info(f"Done: {stamped} stamped, {failed} failed")

    return EXIT_FILE_ERRORS if failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
