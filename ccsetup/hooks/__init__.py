"""
Host hooks.

- guard: runs before a shell command and can block it (exit code 2)
- formatter: runs after a file write and formats it, never blocks

The host reads hook stdout/stderr, so diagnostics go to a log file:
$CCSETUP_HOOK_LOG, or ccsetup-hooks.log in the temp directory.
"""

import json
import logging
import os
import sys
import tempfile
from typing import Any, Dict, Mapping, Optional, TextIO

LOG_ENV = "CCSETUP_HOOK_LOG"

_configured = False


def get_log_path(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return env.get(LOG_ENV) or os.path.join(tempfile.gettempdir(), "ccsetup-hooks.log")


def configure_hook_logging(environ: Optional[Mapping[str, str]] = None) -> None:
    """Send ccsetup.hooks log records to the hook log file.

    An unwritable log file is ignored; hooks must not fail because of it.
    """
    global _configured
    if _configured:
        return
    _configured = True

    logger = logging.getLogger("ccsetup.hooks")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    try:
        handler = logging.FileHandler(get_log_path(environ), encoding="utf-8")
    except OSError:
        logger.addHandler(logging.NullHandler())
        return
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(name)s: %(message)s"))
    logger.addHandler(handler)


def read_payload(stdin: Optional[TextIO] = None) -> Dict[str, Any]:
    """Read the host's JSON payload from stdin, if one was piped in.

    Returns {} when stdin is a terminal, empty, or not JSON.
    """
    stream = sys.stdin if stdin is None else stdin
    try:
        if stream is None or stream.isatty():
            return {}
        raw = stream.read()
    except (OSError, ValueError):
        return {}

    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def tool_input_value(payload: Dict[str, Any], key: str) -> str:
    """Get tool_input[key] from a host payload as a string."""
    tool_input = payload.get("tool_input")
    if not isinstance(tool_input, dict):
        return ""
    value = tool_input.get(key, "")
    return value if isinstance(value, str) else ""
