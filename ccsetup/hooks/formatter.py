#!/usr/bin/env python3
"""
Post-write hook - formats a just-written file by its extension.

Called by the host AFTER a file is written. The path is read from
$CLAUDE_FILE_PATH, or from tool_input.file_path in a JSON payload on stdin.

Formatting is best-effort: missing tools, non-zero exits and timeouts are
logged and ignored. The hook always exits 0 so the host is never blocked.
"""

import enum
import logging
import os
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, TextIO, Tuple

from ccsetup.hooks import configure_hook_logging, read_payload, tool_input_value


logger = logging.getLogger("ccsetup.hooks.formatter")

PATH_ENV = "CLAUDE_FILE_PATH"
TIMEOUT_ENV = "CCSETUP_FORMAT_TIMEOUT"
DEFAULT_TIMEOUT = 30.0


class FileKind(enum.Enum):
    JAVASCRIPT = "javascript"
    GO = "go"
    RUST = "rust"
    PYTHON = "python"
    UNKNOWN = "unknown"


EXTENSIONS = {
    "ts": FileKind.JAVASCRIPT,
    "tsx": FileKind.JAVASCRIPT,
    "js": FileKind.JAVASCRIPT,
    "jsx": FileKind.JAVASCRIPT,
    "json": FileKind.JAVASCRIPT,
    "go": FileKind.GO,
    "rs": FileKind.RUST,
    "py": FileKind.PYTHON,
}


@dataclass(frozen=True)
class FormatterSpec:
    """How to format one kind of file.

    candidates are command templates tried in order; the first whose tool
    is on PATH is run. If requires is set, that file must exist in the
    working directory.
    """
    candidates: Tuple[Tuple[str, ...], ...]
    requires: Optional[str] = None


FORMATTERS = {
    FileKind.JAVASCRIPT: FormatterSpec(
        candidates=(("npx", "prettier", "--write", "{path}"),),
        requires="package.json",
    ),
    FileKind.GO: FormatterSpec(candidates=(("gofmt", "-w", "{path}"),)),
    FileKind.RUST: FormatterSpec(candidates=(("rustfmt", "{path}"),)),
    FileKind.PYTHON: FormatterSpec(
        candidates=(
            ("black", "{path}"),
            ("ruff", "format", "{path}"),
        ),
    ),
}


def classify(file_path: str) -> FileKind:
    """Map a file path to its kind by suffix."""
    suffix = Path(file_path).suffix
    if not suffix:
        return FileKind.UNKNOWN
    return EXTENSIONS.get(suffix[1:], FileKind.UNKNOWN)


def build_command(spec: FormatterSpec, file_path: str) -> Optional[Tuple[str, ...]]:
    """Pick the first available formatter and fill in the path."""
    for template in spec.candidates:
        if shutil.which(template[0]):
            return tuple(part.replace("{path}", file_path) for part in template)
    return None


def get_timeout(environ: Mapping[str, str]) -> float:
    try:
        value = float(environ.get(TIMEOUT_ENV, DEFAULT_TIMEOUT))
    except ValueError:
        return DEFAULT_TIMEOUT
    return value if value > 0 else DEFAULT_TIMEOUT


def format_file(file_path: str, cwd: Optional[Path] = None, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """Format a file if a formatter for its kind is available.

    Never raises.

    Returns:
        True if a formatter ran and exited 0, False otherwise
    """
    try:
        kind = classify(file_path)
        spec = FORMATTERS.get(kind)
        if spec is None:
            logger.debug(f"No formatter for {file_path} ({kind.value})")
            return False

        workdir = cwd or Path.cwd()
        if spec.requires and not (workdir / spec.requires).exists():
            logger.debug(f"Skipping {file_path}: {spec.requires} not found in {workdir}")
            return False

        command = build_command(spec, file_path)
        if command is None:
            logger.debug(f"Skipping {file_path}: no {kind.value} formatter installed")
            return False

        result = subprocess.run(
            command,
            cwd=workdir,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        if result.returncode != 0:
            logger.debug(f"{command[0]} exited {result.returncode} for {file_path}: {result.stderr.strip()[:200]}")
            return False

        logger.debug(f"Formatted {file_path} with {command[0]}")
        return True

    except subprocess.TimeoutExpired:
        logger.debug(f"Formatter timed out after {timeout}s on {file_path}")
    except Exception as e:
        logger.debug(f"Formatter failed on {file_path}: {e}")
    return False


def get_file_path(environ: Mapping[str, str], stdin: Optional[TextIO] = None) -> str:
    """Get the written file's path from the environment, else from stdin."""
    file_path = environ.get(PATH_ENV, "")
    if file_path:
        return file_path
    return tool_input_value(read_payload(stdin), "file_path")


def main(environ: Optional[Mapping[str, str]] = None, stdin: Optional[TextIO] = None) -> int:
    """Hook entry point. Always returns 0."""
    try:
        env = os.environ if environ is None else environ
        configure_hook_logging(env)
        file_path = get_file_path(env, stdin)
        if file_path:
            format_file(file_path, timeout=get_timeout(env))
    except Exception as e:
        logger.debug(f"Post-write hook error: {e}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
