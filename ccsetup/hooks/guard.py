#!/usr/bin/env python3
"""
Pre-bash hook - blocks dangerous shell commands.

Called by the host BEFORE a Bash command runs. The command is read from
$CLAUDE_BASH_COMMAND, or from tool_input.command in a JSON payload on stdin.

Matching is literal, case-sensitive substring containment. It is crude on
purpose: a harmless command that merely mentions a listed pattern (for
example `echo "rm -rf / is bad"`) is blocked too.

Exit codes:
    0  allow
    2  block (reason on stderr)
    1  hook error
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, TextIO

from ccsetup.hooks import configure_hook_logging, read_payload, tool_input_value


logger = logging.getLogger("ccsetup.hooks.guard")

COMMAND_ENV = "CLAUDE_BASH_COMMAND"

EXIT_ALLOW = 0
EXIT_ERROR = 1
EXIT_BLOCK = 2

# Literal substrings, checked in order. No regex semantics: the ".*" in the
# curl/wget entries is matched as written.
DANGEROUS_PATTERNS = (
    "rm -rf /",
    "rm -rf ~",
    "rm -rf $HOME",
    ":(){:|:&};:",
    "mkfs",
    "dd if=",
    "> /dev/sd",
    "chmod -R 777 /",
    "curl.*| bash",
    "wget.*| bash",
)


@dataclass(frozen=True)
class GuardDecision:
    """Result of checking one command."""
    blocked: bool
    pattern: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return EXIT_BLOCK if self.blocked else EXIT_ALLOW


def find_pattern(text: str, patterns: Iterable[str]) -> Optional[str]:
    """Return the first pattern that occurs in text, or None."""
    for pattern in patterns:
        if pattern in text:
            return pattern
    return None


def contains_any(text: str, patterns: Iterable[str]) -> bool:
    """Check whether any of the substrings occurs in text."""
    return find_pattern(text, patterns) is not None


def check_command(command: str, patterns: Iterable[str] = DANGEROUS_PATTERNS) -> GuardDecision:
    """Decide whether a command may run."""
    pattern = find_pattern(command, patterns)
    if pattern is None:
        return GuardDecision(blocked=False)
    return GuardDecision(blocked=True, pattern=pattern)


def get_command(environ: Mapping[str, str], stdin: Optional[TextIO] = None) -> str:
    """Get the candidate command from the environment, else from stdin."""
    command = environ.get(COMMAND_ENV, "")
    if command:
        return command
    return tool_input_value(read_payload(stdin), "command")


def main(environ: Optional[Mapping[str, str]] = None, stdin: Optional[TextIO] = None) -> int:
    """Hook entry point. Returns the process exit code."""
    env = os.environ if environ is None else environ
    configure_hook_logging(env)

    try:
        command = get_command(env, stdin)
        decision = check_command(command)
    except Exception as e:
        logger.exception(f"Guard error: {e}")
        print(f"ccsetup guard error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if decision.blocked:
        logger.info(f"BLOCKED ({decision.pattern}): {command[:200]}")
        print(f"BLOCKED: Potentially dangerous command detected: {decision.pattern}", file=sys.stderr)
    return decision.exit_code


if __name__ == "__main__":
    sys.exit(main())
