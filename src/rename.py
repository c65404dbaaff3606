"""
Sony camera directory names and their conversion to dated directory names.

The camera names each DCIM sub-directory ``0YYMMDD0``: the first and last digits
are padding, the rest is a two digit year, the month and the day.  Conversion is
positional and lossy, there is no way back from ``YYYY-MM-DD`` to the raw name.
"""
import logging
import os
import re
from datetime import date
from typing import List, NamedTuple, Optional

from src.exceptions import DirectoryReadError, InvalidLength, RenameFailure

logger = logging.getLogger('rename_sony_photos')

EXPECTED_DIR_NAME_LENGTH = 8
DATE_DIR_PATTERN = re.compile(r'[0-9]{8}')

RENAMED = 'renamed'
SKIPPED = 'skipped'
FAILED = 'failed'


class RenameOutcome(NamedTuple):
    name: str
    new_name: Optional[str]
    status: str
    error: Optional[Exception] = None


def is_valid_date_dir(name: str) -> bool:
    return DATE_DIR_PATTERN.fullmatch(name) is not None


def convert_dir_name(name: str, century: str) -> str:
    """
    Convert a raw ``0YYMMDD0`` name to ``YYYY-MM-DD`` using the given
    two digit century.  Month and day are copied verbatim.
    """
    if len(name) != EXPECTED_DIR_NAME_LENGTH:
        raise InvalidLength(f"invalid directory name length: {name}")
    year = century + name[1:3]
    return f"{year}-{name[3:5]}-{name[5:7]}"


def century_prefix(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{today.year:04d}"[:2]


def rename_directories(path: str, century: Optional[str] = None) -> List[RenameOutcome]:
    """
    Rename every camera-named directory directly inside ``path``.

    Regular files are ignored, directories with other names are skipped.  A failed
    rename is logged and recorded in its outcome; the remaining entries are still
    processed.  Only a failure to list ``path`` itself is raised.
    """
    try:
        entries = sorted(os.scandir(path), key=lambda e: e.name)
    except OSError as e:
        raise DirectoryReadError(f"failed to read directory {path}: {e}") from e

    # One prefix for the whole batch, even if the clock crosses a century meanwhile
    century = century or century_prefix()
    outcomes = []
    for entry in entries:
        if not entry.is_dir(follow_symlinks=False):
            continue

        name = entry.name
        if not is_valid_date_dir(name):
            logger.info("Skipping directory (invalid format): %s", name)
            outcomes.append(RenameOutcome(name, None, SKIPPED))
            continue

        try:
            new_name = convert_dir_name(name, century)
        except InvalidLength as e:
            logger.error("Error converting directory name %s: %s", name, e)
            outcomes.append(RenameOutcome(name, None, FAILED, e))
            continue

        old_path = os.path.join(path, name)
        new_path = os.path.join(path, new_name)
        try:
            os.rename(old_path, new_path)
        except OSError as e:
            error = RenameFailure(f"failed to rename {old_path} to {new_path}: {e}")
            error.__cause__ = e
            logger.error(str(error))
            outcomes.append(RenameOutcome(name, new_name, FAILED, error))
            continue

        logger.info("Renamed: %s -> %s", name, new_name)
        outcomes.append(RenameOutcome(name, new_name, RENAMED))

    return outcomes
