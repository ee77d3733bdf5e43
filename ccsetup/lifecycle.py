"""
Install, update and uninstall of the asset tree.

Usage:
    ccsetup install    # Copy agents, skills, commands, hooks into ~/.claude
    ccsetup update     # Pull the source checkout, then install again
    ccsetup uninstall  # Back up, then remove the managed items

Every destructive operation takes a backup snapshot first. If the snapshot
cannot be made, nothing at the target is touched. Individual copy or delete
failures are collected on the result and do not stop the remaining items.
"""

import logging
import os
import shutil
import stat
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

import click

from ccsetup.assets import AssetItem, AssetTree
from ccsetup.backup import create_snapshot, list_snapshots
from ccsetup.config import SetupConfig
from ccsetup.errors import FatalPreconditionError
from ccsetup.sync import SyncResult, sync_source


logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


@dataclass
class ItemFailure:
    """A single managed item that could not be copied, changed or removed."""
    name: str
    error: str

    def __str__(self) -> str:
        return f"{self.name}: {self.error}"


@dataclass
class OperationResult:
    """Outcome of a lifecycle operation that did not fail fatally."""
    operation: str
    target_root: Path
    backup: Optional[Path] = None
    installed: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    failures: List[ItemFailure] = field(default_factory=list)
    settings_action: str = ""  # installed | replaced | kept | retained
    cancelled: bool = False
    sync: Optional[SyncResult] = None

    @property
    def ok(self) -> bool:
        return not self.failures

    def fail(self, name: str, error) -> None:
        failure = ItemFailure(name, str(error))
        self.failures.append(failure)
        logger.debug(f"{self.operation}: {failure}")


def _decline(prompt: str) -> bool:
    return False


def _echo(verbose: bool, message: str) -> None:
    if verbose:
        click.echo(message)


def ensure_target_root(target_root: Path) -> None:
    """Create the target root if missing.

    Raises:
        FatalPreconditionError: if it cannot be created
    """
    try:
        target_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FatalPreconditionError(f"Cannot create target directory {target_root}: {e}") from e


def check_source(source_root: Path) -> None:
    """Refuse to run against a missing source tree."""
    if not source_root.is_dir():
        raise FatalPreconditionError(
            f"Source directory not found: {source_root} "
            "(pass --source, or install ccsetup with `pip install -e .` from its checkout)"
        )


# ============================================================================
# Copy helpers
# ============================================================================

def _copy_item(item: AssetItem, result: OperationResult) -> bool:
    """Copy one item from source to destination, overwriting."""
    if item.is_dir and not item.source.is_dir():
        result.fail(item.name, f"missing from source ({item.source})")
        return False
    if not item.is_dir and not item.source.is_file():
        result.fail(item.name, f"missing from source ({item.source})")
        return False

    try:
        if item.is_dir:
            shutil.copytree(item.source, item.destination, dirs_exist_ok=True)
        else:
            shutil.copy2(item.source, item.destination)
    except (OSError, shutil.Error) as e:
        result.fail(item.name, e)
        return False

    result.installed.append(item.name)
    return True


def make_executable(hooks_dir: Path, result: OperationResult) -> int:
    """Set the execute bits on every file below hooks_dir.

    Returns:
        Number of files updated
    """
    count = 0
    for path in _hook_files(hooks_dir):
        try:
            mode = path.stat().st_mode
            os.chmod(path, mode | EXEC_BITS)
            count += 1
        except OSError as e:
            result.fail(f"hooks/{path.relative_to(hooks_dir)}", f"cannot make executable: {e}")
    return count


def _hook_files(hooks_dir: Path) -> List[Path]:
    """Regular files below hooks_dir. Symlinks are skipped so nothing
    outside the target root gets modified through them."""
    return [
        path for path in sorted(hooks_dir.rglob("*"))
        if not path.is_symlink() and path.is_file()
    ]


def pin_interpreter(
    hooks_dir: Path,
    source_dir: Path,
    result: OperationResult,
    python: Optional[str] = None,
) -> int:
    """
    Point the shebang of installed Python hook scripts at the running interpreter.

    The host executes hooks directly. `#!/usr/bin/env python3` resolves to
    the first python3 on PATH, which may not have ccsetup installed. Only
    scripts that also exist under source_dir are changed.

    Returns:
        Number of scripts rewritten
    """
    python = python if python is not None else sys.executable
    if not python or any(ch.isspace() for ch in python):
        logger.debug(f"Not pinning hook interpreter: unusable path {python!r}")
        return 0

    count = 0
    for path in _hook_files(hooks_dir):
        if path.suffix != ".py" or not (source_dir / path.relative_to(hooks_dir)).is_file():
            continue
        try:
            data = path.read_bytes()
            first, sep, rest = data.partition(b"\n")
            if not (first.startswith(b"#!") and b"python" in first):
                continue
            path.write_bytes(b"#!" + os.fsencode(python) + sep + rest)
            count += 1
        except OSError as e:
            result.fail(f"hooks/{path.relative_to(hooks_dir)}", f"cannot set interpreter: {e}")
    return count


def _install_settings(
    tree: AssetTree,
    confirm_overwrite: Confirm,
    result: OperationResult,
    verbose: bool,
) -> None:
    settings = tree.settings()

    if not settings.source.is_file():
        result.fail(settings.name, f"missing from source ({settings.source})")
        return

    if settings.destination.exists():
        if not confirm_overwrite(f"{settings.name} already exists. Replace it?"):
            result.settings_action = "kept"
            _echo(verbose, f"  Keeping existing {settings.name}")
            return
        action = "replaced"
    else:
        action = "installed"

    try:
        shutil.copy2(settings.source, settings.destination)
    except OSError as e:
        result.fail(settings.name, e)
        return

    result.settings_action = action
    result.installed.append(settings.name)
    _echo(verbose, f"  {settings.name} {action}")


# ============================================================================
# Operations
# ============================================================================

def install(
    config: SetupConfig,
    confirm_overwrite: Confirm = _decline,
    verbose: bool = True,
) -> OperationResult:
    """
    Install the asset tree into the target root.

    Args:
        config: Resolved source/target settings
        confirm_overwrite: Asked before replacing an existing settings file
        verbose: Print progress

    Returns:
        OperationResult with per-item failures, if any

    Raises:
        FatalPreconditionError: missing source, target root not creatable,
            or backup failed. Nothing was overwritten.
    """
    check_source(config.source_root)
    ensure_target_root(config.target_root)

    tree = AssetTree(config.source_root, config.target_root)
    result = OperationResult("install", config.target_root)

    # Backup before any overwrite
    result.backup = create_snapshot(config.target_root, tree.all_items(), config.backup_prefix)
    if result.backup:
        _echo(verbose, f"Backed up existing files to {result.backup}")

    for item in tree.directories() + tree.plain_files():
        _echo(verbose, f"  Copying {item.name}...")
        _copy_item(item, result)

    if tree.hooks_destination.is_dir():
        pin_interpreter(tree.hooks_destination, tree.hooks_source, result)
        make_executable(tree.hooks_destination, result)

    _install_settings(tree, confirm_overwrite, result, verbose)

    return result


def update(
    config: SetupConfig,
    confirm_overwrite: Confirm = _decline,
    sync: bool = True,
    verbose: bool = True,
) -> OperationResult:
    """Sync the source checkout (best-effort), then install."""
    sync_result = None
    if sync:
        _echo(verbose, "Fetching latest version...")
        sync_result = sync_source(config.source_root, config.sync_timeout)
        if sync_result.attempted and not sync_result.ok:
            _echo(verbose, f"  Sync failed ({sync_result.message}), installing current source")

    result = install(config, confirm_overwrite=confirm_overwrite, verbose=verbose)
    result.operation = "update"
    result.sync = sync_result
    return result


def _remove_item(item: AssetItem, result: OperationResult) -> None:
    path = item.destination
    try:
        if path.is_symlink() or not path.is_dir():
            path.unlink()
        else:
            shutil.rmtree(path)
    except OSError as e:
        result.fail(item.name, e)
        return
    result.removed.append(item.name)


def uninstall(
    config: SetupConfig,
    confirm: Confirm = _decline,
    verbose: bool = True,
) -> OperationResult:
    """
    Remove the managed items from the target root.

    The settings file is backed up but kept in place.

    Raises:
        BackupError: if the backup failed. Nothing was deleted.
    """
    result = OperationResult("uninstall", config.target_root)

    if not confirm("This removes all agents, skills, commands and hooks. Continue?"):
        result.cancelled = True
        return result

    tree = AssetTree(config.source_root, config.target_root)
    to_remove = [item for item in tree.removable_items() if item.exists_at_destination()]
    if not to_remove:
        _echo(verbose, "Nothing to uninstall.")
        return result

    result.backup = create_snapshot(config.target_root, tree.all_items(), config.backup_prefix)
    _echo(verbose, f"Backup saved to {result.backup}")

    for item in to_remove:
        _echo(verbose, f"  Removing {item.name}...")
        _remove_item(item, result)

    if tree.settings().exists_at_destination():
        result.settings_action = "retained"

    return result


# ============================================================================
# Status
# ============================================================================

@dataclass
class InstallStatus:
    """What is currently provisioned under the target root."""
    target_root: Path
    present: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    non_executable_hooks: List[str] = field(default_factory=list)
    snapshots: List[Path] = field(default_factory=list)

    @property
    def installed(self) -> bool:
        return not self.missing


def check_installation(config: SetupConfig) -> InstallStatus:
    """Inspect the target root without changing it."""
    tree = AssetTree(config.source_root, config.target_root)
    status = InstallStatus(config.target_root)

    for item in tree.all_items():
        if item.exists_at_destination():
            status.present.append(item.name)
        else:
            status.missing.append(item.name)

    hooks_dir = tree.hooks_destination
    if hooks_dir.is_dir():
        for path in _hook_files(hooks_dir):
            if not path.stat().st_mode & stat.S_IXUSR:
                status.non_executable_hooks.append(str(path.relative_to(hooks_dir)))

    status.snapshots = list_snapshots(config.target_root, config.backup_prefix)
    return status
