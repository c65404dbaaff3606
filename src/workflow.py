"""
The copy, rename, delete and eject pipeline.

Every mutating step takes a ``dry_run`` flag; when set the step only logs what it
would do and touches neither the filesystem nor any external process.
"""
import logging
import os
import shutil
import stat
from typing import List, Optional

from src.config import WorkflowContext
from src.defaults import DCIM_DIR_NAME, DRY_RUN_PREFIX
from src.dependency import VolumeEjector, get_volume_ejector
from src.exceptions import (BackupMissing, CopyFailure, DeleteFailure,
                            DestinationMissing, EjectFailure, NotADirectory,
                            NotFound, PreconditionError, SourceMissing,
                            StageFailure, StatError, WorkflowError)
from src.rename import RenameOutcome, century_prefix, rename_directories

logger = logging.getLogger('rename_sony_photos')


def copy_tree(src: str, dst: str, dry_run: bool = False) -> None:
    """
    Recursively copy the contents of ``src`` into ``dst``, keeping file modes.
    Existing directories under ``dst`` are merged into.  Stops at the first
    failure and leaves whatever was already copied in place.
    """
    if dry_run:
        logger.info("%s Would copy directory: %s -> %s", DRY_RUN_PREFIX, src, dst)
        return

    try:
        entries = sorted(os.scandir(src), key=lambda e: e.name)
    except OSError as e:
        raise CopyFailure("failed to read source directory", src) from e

    try:
        os.makedirs(dst, exist_ok=True)
    except OSError as e:
        raise CopyFailure("failed to create destination directory", dst) from e

    for entry in entries:
        src_path = os.path.join(src, entry.name)
        dst_path = os.path.join(dst, entry.name)
        if entry.is_dir(follow_symlinks=False):
            copy_tree(src_path, dst_path)
            continue
        try:
            # shutil.copy carries the permission bits along with the data
            shutil.copy(src_path, dst_path)
        except OSError as e:
            raise CopyFailure("failed to copy file", src_path) from e
        logger.debug("Copied %s -> %s", src_path, dst_path)


def remove_contents(directory: str, dry_run: bool = False) -> None:
    """Delete everything inside ``directory`` but keep the directory itself."""
    if dry_run:
        logger.info("%s Would remove contents of: %s", DRY_RUN_PREFIX, directory)
        return

    try:
        entries = sorted(os.scandir(directory), key=lambda e: e.name)
    except OSError as e:
        raise DeleteFailure("failed to read directory", directory) from e

    for entry in entries:
        path = os.path.join(directory, entry.name)
        try:
            if entry.is_dir(follow_symlinks=False):
                shutil.rmtree(path)
            else:
                os.remove(path)
        except OSError as e:
            raise DeleteFailure("failed to remove", path) from e
        logger.debug("Removed %s", path)


def eject_volume(volume_name: str, dry_run: bool = False,
                 ejector: Optional[VolumeEjector] = None) -> None:
    if dry_run:
        logger.info("%s Would eject volume: %s", DRY_RUN_PREFIX, volume_name)
        return
    ejector = ejector or get_volume_ejector()
    if not ejector.supported:
        logger.info("Eject not supported here, skipping volume: %s", volume_name)
        return
    ejector.eject(volume_name)


def check_directory_exists(path: str) -> None:
    try:
        st = os.stat(path)
    except FileNotFoundError as e:
        raise NotFound(f"directory does not exist: {path}") from e
    except OSError as e:
        raise StatError(f"failed to check directory {path}: {e}") from e
    if not stat.S_ISDIR(st.st_mode):
        raise NotADirectory(f"path is not a directory: {path}")


def _eject_or_warn(volume_name: str, dry_run: bool, ejector: Optional[VolumeEjector]) -> None:
    try:
        eject_volume(volume_name, dry_run, ejector)
    except EjectFailure as e:
        logger.warning("Warning: %s", e)


def _volume_name(path: str) -> str:
    # "/Volumes/1-1/" -> "1-1"
    return os.path.basename(os.path.normpath(path))


def _stage(description: str, func, *args) -> None:
    try:
        func(*args)
    except (WorkflowError, OSError) as e:
        raise StageFailure(description, e) from e


def run(context: WorkflowContext, dry_run: Optional[bool] = None,
        ejector: Optional[VolumeEjector] = None,
        century: Optional[str] = None) -> List[RenameOutcome]:
    """
    Move the photos off the target card onto the destination volume.

    The card's DCIM tree is copied to the staging directory, camera-named
    directories are renamed there, the result is copied to the destination and
    both the card and the staging directory are emptied before the card is
    ejected.  Stages abort the run on their first failure; nothing is rolled
    back.  Returns the rename outcomes, empty for a dry run.
    """
    dry_run = context.dry_run if dry_run is None else dry_run
    tmp_dir = context.tmp_dir
    source_dcim = os.path.join(context.target_path, DCIM_DIR_NAME)

    try:
        check_directory_exists(context.destination_path)
    except PreconditionError as e:
        raise DestinationMissing(f"destination check failed: {e}") from e
    try:
        check_directory_exists(source_dcim)
    except PreconditionError as e:
        raise SourceMissing(f"source DCIM check failed: {e}") from e

    if dry_run:
        logger.info("%s Would create temporary directory: %s", DRY_RUN_PREFIX, tmp_dir)
    else:
        _stage("failed to create temporary directory", os.makedirs, tmp_dir, 0o755, True)

    logger.info("Copying photos from %s to %s", source_dcim, tmp_dir)
    _stage("failed to copy files to temp directory", copy_tree, source_dcim, tmp_dir, dry_run)

    logger.info("Renaming directories in %s", tmp_dir)
    outcomes = []
    if dry_run:
        logger.info("%s Would rename directories in: %s", DRY_RUN_PREFIX, tmp_dir)
    else:
        century = century or century_prefix()
        try:
            outcomes = rename_directories(tmp_dir, century)
        except WorkflowError as e:
            raise StageFailure("failed to rename directories", e) from e

    logger.info("Copying renamed directories to %s", context.destination_path)
    _stage("failed to copy to destination", copy_tree, tmp_dir, context.destination_path, dry_run)

    logger.info("Deleting photos from source: %s", source_dcim)
    _stage("failed to delete source files", remove_contents, source_dcim, dry_run)

    logger.info("Cleaning up temporary directory: %s", tmp_dir)
    _stage("failed to clean temporary directory", remove_contents, tmp_dir, dry_run)

    volume_name = _volume_name(context.target_path)
    logger.info("Ejecting volume: %s", volume_name)
    _eject_or_warn(volume_name, dry_run, ejector)

    return outcomes


def run_backup_cleanup(context: WorkflowContext, dry_run: Optional[bool] = None,
                       ejector: Optional[VolumeEjector] = None) -> None:
    """Empty the backup card's DCIM directory and eject the card."""
    dry_run = context.dry_run if dry_run is None else dry_run
    backup_dcim = os.path.join(context.backup_path, DCIM_DIR_NAME)

    try:
        check_directory_exists(context.backup_path)
    except PreconditionError as e:
        raise BackupMissing(f"backup path check failed: {e}") from e
    try:
        check_directory_exists(backup_dcim)
    except PreconditionError as e:
        raise BackupMissing(f"backup DCIM check failed: {e}") from e

    logger.info("Deleting photos from backup: %s", backup_dcim)
    _stage("failed to delete backup files", remove_contents, backup_dcim, dry_run)

    volume_name = _volume_name(context.backup_path)
    logger.info("Ejecting backup volume: %s", volume_name)
    _eject_or_warn(volume_name, dry_run, ejector)


def rename_only(path: str, dry_run: bool = False,
                century: Optional[str] = None) -> List[RenameOutcome]:
    if dry_run:
        logger.info("%s Would rename directories in: %s", DRY_RUN_PREFIX, path)
        return []
    logger.info("Renaming directories in: %s", path)
    return rename_directories(path, century or century_prefix())
