"""Shared fixtures: a small asset source tree and a config pointing at tmp dirs."""

import json
from pathlib import Path

import pytest

from ccsetup.config import SetupConfig


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@pytest.fixture
def source_root(tmp_path):
    """Asset source with every managed item present."""
    src = tmp_path / "source"
    write(src / "agents" / "architect.md", "# architect\n")
    write(src / "agents" / "debugger.md", "# debugger\n")
    write(src / "skills" / "review" / "SKILL.md", "# review skill\n")
    write(src / "skills" / "edge" / "SKILL.md", "# edge skill\n")
    write(src / "commands" / "new.md", "# /new\n")
    hook = write(src / "hooks" / "pre-bash.py", "#!/usr/bin/env python3\n")
    hook.chmod(0o644)
    write(src / "hooks" / "post-write.py", "#!/usr/bin/env python3\n").chmod(0o644)
    write(src / "CLAUDE.md", "# preferences\n")
    write(src / "README.md", "# usage\n")
    write(src / "settings.json", json.dumps({"source": True}))
    return src


@pytest.fixture
def target_root(tmp_path):
    return tmp_path / "home" / ".claude"


@pytest.fixture
def config(source_root, target_root):
    return SetupConfig(target_root=target_root, source_root=source_root)


@pytest.fixture
def populated_target(target_root):
    """A target root holding a previous, user-edited installation."""
    write(target_root / "agents" / "old-agent.md", "old agent\n")
    write(target_root / "skills" / "legacy" / "SKILL.md", "legacy skill\n")
    write(target_root / "commands" / "old.md", "old command\n")
    write(target_root / "hooks" / "pre-bash.py", "old hook\n")
    write(target_root / "CLAUDE.md", "old preferences\n")
    write(target_root / "settings.json", '{"custom": "CUSTOM_MARKER"}')
    return target_root


def tree_contents(root: Path) -> dict:
    """Map of relative path -> bytes for every file below root."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }
