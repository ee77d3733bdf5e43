"""
Backup snapshots of the managed items under the target root.

A snapshot is a directory named <prefix>_<YYYYMMDD_HHMMSS> next to the live
items. It is taken before any destructive change, verified item by item,
and never deleted or restored automatically.
"""

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Set

from ccsetup.assets import AssetItem
from ccsetup.errors import BackupError


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def snapshot_name(prefix: str, now: Optional[datetime] = None) -> str:
    """Build the snapshot directory name for a point in time."""
    return f"{prefix}_{(now or datetime.now()).strftime(TIMESTAMP_FORMAT)}"


def allocate_snapshot_dir(target_root: Path, prefix: str, now: Optional[datetime] = None) -> Path:
    """Create a fresh, empty snapshot directory.

    Two operations within the same second would share a name, so a numeric
    suffix is appended instead of reusing (and overwriting) the older one.
    """
    base = snapshot_name(prefix, now)
    candidate = target_root / base
    counter = 0

    while True:
        try:
            candidate.mkdir()
            return candidate
        except FileExistsError:
            counter += 1
            candidate = target_root / f"{base}_{counter}"
        except OSError as e:
            raise BackupError(f"Cannot create backup directory {candidate}: {e}") from e


def _tree_entries(root: Path) -> Set[str]:
    """Relative paths of every entry below root."""
    entries = set()
    for dirpath, dirnames, filenames in os.walk(root):
        rel = os.path.relpath(dirpath, root)
        for name in dirnames + filenames:
            entries.add(os.path.normpath(os.path.join(rel, name)))
    return entries


def verify_copy(source: Path, copy: Path) -> Optional[str]:
    """Check that copy mirrors source.

    Returns:
        None if the copy looks complete, otherwise a reason string
    """
    if source.is_dir():
        if not copy.is_dir():
            return "directory missing from backup"
        missing = _tree_entries(source) - _tree_entries(copy)
        if missing:
            return f"{len(missing)} entries missing from backup (e.g. {sorted(missing)[0]})"
        return None

    if not copy.is_file():
        return "file missing from backup"
    if source.stat().st_size != copy.stat().st_size:
        return "size mismatch"
    return None


def _copy_item(item: AssetItem, snapshot: Path) -> None:
    dest = snapshot / item.name
    if item.is_dir:
        shutil.copytree(item.destination, dest, symlinks=True)
    else:
        shutil.copy2(item.destination, dest)


def create_snapshot(
    target_root: Path,
    items: Iterable[AssetItem],
    prefix: str,
    now: Optional[datetime] = None,
) -> Optional[Path]:
    """Back up every item that currently exists under the target root.

    Items that are not present are skipped. If none are present, no
    snapshot is created.

    Returns:
        Path of the new snapshot, or None if there was nothing to back up

    Raises:
        BackupError: if the snapshot cannot be created or a copy fails
            verification. The live items are untouched in that case.
    """
    present = []
    for item in items:
        if item.exists_at_destination():
            present.append(item)
        else:
            logger.debug(f"Backup: {item.name} not present, skipping")

    if not present:
        return None

    snapshot = allocate_snapshot_dir(target_root, prefix, now)

    for item in present:
        try:
            _copy_item(item, snapshot)
            problem = verify_copy(item.destination, snapshot / item.name)
        except (OSError, shutil.Error) as e:
            raise BackupError(f"Backup of {item.name} failed: {e}", snapshot) from e

        if problem:
            raise BackupError(f"Backup of {item.name} incomplete: {problem}", snapshot)

        logger.debug(f"Backup: {item.name} -> {snapshot / item.name}")

    return snapshot


def list_snapshots(target_root: Path, prefix: str) -> List[Path]:
    """List existing snapshots under the target root, oldest first."""
    if not target_root.is_dir():
        return []
    return sorted(
        p for p in target_root.glob(f"{prefix}_*")
        if p.is_dir()
    )
