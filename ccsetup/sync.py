"""
Source checkout sync for update.

If the asset source lives in a git checkout, update pulls the latest
version first. A failed pull is never fatal: the source already on disk is
installed instead.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple


logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of a source sync attempt."""
    attempted: bool
    ok: bool = False
    checkout: Optional[Path] = None
    message: str = ""


def run_git(args: List[str], cwd: Path, timeout: int) -> Tuple[int, str, str]:
    """Run a git command.

    Returns:
        Tuple of (return_code, stdout, stderr)
    """
    cmd = ["git"] + args
    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=timeout,
    )
    return result.returncode, result.stdout, result.stderr


def find_checkout(path: Path) -> Optional[Path]:
    """Find the git checkout containing path, if any."""
    path = path.resolve()
    for parent in [path] + list(path.parents):
        if (parent / ".git").exists():
            return parent
    return None


def sync_source(source_root: Path, timeout: int = 60) -> SyncResult:
    """Pull the latest source from upstream, best-effort."""
    checkout = find_checkout(source_root)
    if checkout is None:
        logger.debug(f"{source_root} is not in a git checkout, skipping sync")
        return SyncResult(attempted=False, message="not a git checkout")

    try:
        code, out, err = run_git(["pull", "--ff-only"], checkout, timeout)
    except FileNotFoundError:
        logger.warning("git not found, installing source as-is")
        return SyncResult(attempted=True, checkout=checkout, message="git not found")
    except subprocess.TimeoutExpired:
        logger.warning(f"git pull timed out after {timeout}s, installing source as-is")
        return SyncResult(attempted=True, checkout=checkout, message="git pull timed out")
    except OSError as e:
        logger.warning(f"git pull failed: {e}")
        return SyncResult(attempted=True, checkout=checkout, message=str(e))

    if code != 0:
        message = (err or out).strip() or f"git pull exited with {code}"
        logger.warning(f"git pull failed in {checkout}: {message}")
        return SyncResult(attempted=True, checkout=checkout, message=message)

    return SyncResult(attempted=True, ok=True, checkout=checkout, message=out.strip())
