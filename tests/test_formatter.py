"""
Tests for the post-write formatter hook.

The formatter must never raise and the hook must always exit 0, whatever
happens to the external tool.
"""

import io
import json
import subprocess

import pytest

from ccsetup.hooks import formatter
from ccsetup.hooks.formatter import (
    FORMATTERS,
    FileKind,
    build_command,
    classify,
    format_file,
    get_timeout,
)


class FakeRun:
    """Records subprocess.run calls and returns a fixed exit code."""

    def __init__(self, returncode=0, exc=None):
        self.returncode = returncode
        self.exc = exc
        self.calls = []

    def __call__(self, command, **kwargs):
        self.calls.append((command, kwargs))
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(command, self.returncode, "", "boom")


def which_only(*available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestClassify:
    """Test extension classification."""

    @pytest.mark.parametrize("path,kind", [
        ("src/app.ts", FileKind.JAVASCRIPT),
        ("src/App.tsx", FileKind.JAVASCRIPT),
        ("index.js", FileKind.JAVASCRIPT),
        ("view.jsx", FileKind.JAVASCRIPT),
        ("package.json", FileKind.JAVASCRIPT),
        ("main.go", FileKind.GO),
        ("lib.rs", FileKind.RUST),
        ("tool.py", FileKind.PYTHON),
        ("/abs/path/to/module.py", FileKind.PYTHON),
    ])
    def test_known(self, path, kind):
        assert classify(path) == kind

    @pytest.mark.parametrize("path", [
        "README.md",
        "Makefile",
        "archive.tar.gz",
        "script.PY",
        "",
    ])
    def test_unknown(self, path):
        assert classify(path) == FileKind.UNKNOWN

    def test_every_known_kind_has_formatter(self):
        for kind in FileKind:
            if kind is not FileKind.UNKNOWN:
                assert kind in FORMATTERS
        assert FileKind.UNKNOWN not in FORMATTERS


class TestBuildCommand:
    """Test formatter selection."""

    def test_python_prefers_black(self, monkeypatch):
        monkeypatch.setattr(formatter.shutil, "which", which_only("black", "ruff"))
        assert build_command(FORMATTERS[FileKind.PYTHON], "a.py") == ("black", "a.py")

    def test_python_falls_back_to_ruff(self, monkeypatch):
        monkeypatch.setattr(formatter.shutil, "which", which_only("ruff"))
        assert build_command(FORMATTERS[FileKind.PYTHON], "a.py") == ("ruff", "format", "a.py")

    def test_none_when_no_tool(self, monkeypatch):
        monkeypatch.setattr(formatter.shutil, "which", which_only())
        assert build_command(FORMATTERS[FileKind.GO], "main.go") is None

    def test_path_with_spaces_stays_one_argument(self, monkeypatch):
        monkeypatch.setattr(formatter.shutil, "which", which_only("gofmt"))
        assert build_command(FORMATTERS[FileKind.GO], "my dir/main.go") == ("gofmt", "-w", "my dir/main.go")


class TestFormatFile:
    """Test best-effort formatting."""

    def test_unknown_kind_is_noop(self, tmp_path, monkeypatch):
        run = FakeRun()
        monkeypatch.setattr(formatter.subprocess, "run", run)
        assert format_file("notes.md", cwd=tmp_path) is False
        assert run.calls == []

    def test_runs_formatter(self, tmp_path, monkeypatch):
        run = FakeRun()
        monkeypatch.setattr(formatter.shutil, "which", which_only("rustfmt"))
        monkeypatch.setattr(formatter.subprocess, "run", run)

        assert format_file("lib.rs", cwd=tmp_path, timeout=5) is True
        command, kwargs = run.calls[0]
        assert command == ("rustfmt", "lib.rs")
        assert kwargs["timeout"] == 5
        assert kwargs["cwd"] == tmp_path

    def test_missing_tool_skipped(self, tmp_path, monkeypatch):
        run = FakeRun()
        monkeypatch.setattr(formatter.shutil, "which", which_only())
        monkeypatch.setattr(formatter.subprocess, "run", run)
        assert format_file("main.go", cwd=tmp_path) is False
        assert run.calls == []

    def test_javascript_requires_package_json(self, tmp_path, monkeypatch):
        run = FakeRun()
        monkeypatch.setattr(formatter.shutil, "which", which_only("npx"))
        monkeypatch.setattr(formatter.subprocess, "run", run)

        assert format_file("app.ts", cwd=tmp_path) is False
        assert run.calls == []

        (tmp_path / "package.json").write_text("{}")
        assert format_file("app.ts", cwd=tmp_path) is True
        assert run.calls[0][0] == ("npx", "prettier", "--write", "app.ts")

    def test_nonzero_exit_swallowed(self, tmp_path, monkeypatch):
        monkeypatch.setattr(formatter.shutil, "which", which_only("black"))
        monkeypatch.setattr(formatter.subprocess, "run", FakeRun(returncode=123))
        assert format_file("bad.py", cwd=tmp_path) is False

    def test_timeout_swallowed(self, tmp_path, monkeypatch):
        monkeypatch.setattr(formatter.shutil, "which", which_only("black"))
        monkeypatch.setattr(
            formatter.subprocess, "run",
            FakeRun(exc=subprocess.TimeoutExpired(["black"], 1)),
        )
        assert format_file("slow.py", cwd=tmp_path, timeout=1) is False

    def test_os_error_swallowed(self, tmp_path, monkeypatch):
        monkeypatch.setattr(formatter.shutil, "which", which_only("gofmt"))
        monkeypatch.setattr(formatter.subprocess, "run", FakeRun(exc=PermissionError("denied")))
        assert format_file("main.go", cwd=tmp_path) is False

    def test_unreadable_file_real_tools(self, tmp_path):
        """Whatever is installed on this machine, a missing file never raises."""
        assert format_file(str(tmp_path / "missing.py"), cwd=tmp_path, timeout=10) in (True, False)


class TestFormatterMain:
    """Test the hook entry point always succeeds."""

    def _env(self, tmp_path, **extra):
        env = {"CCSETUP_HOOK_LOG": str(tmp_path / "hooks.log")}
        env.update(extra)
        return env

    def test_no_path(self, tmp_path):
        assert formatter.main(self._env(tmp_path), io.StringIO("")) == 0

    def test_unknown_extension(self, tmp_path):
        env = self._env(tmp_path, CLAUDE_FILE_PATH=str(tmp_path / "notes.txt"))
        assert formatter.main(env, io.StringIO("")) == 0

    def test_path_from_stdin_payload(self, tmp_path, monkeypatch):
        seen = []
        monkeypatch.setattr(formatter, "format_file", lambda path, **kw: seen.append(path))
        payload = json.dumps({"tool_name": "Write", "tool_input": {"file_path": "x.go"}})
        assert formatter.main(self._env(tmp_path), io.StringIO(payload)) == 0
        assert seen == ["x.go"]

    def test_unexpected_error_still_zero(self, tmp_path, monkeypatch):
        def boom(path, **kwargs):
            raise RuntimeError("broken")

        monkeypatch.setattr(formatter, "format_file", boom)
        env = self._env(tmp_path, CLAUDE_FILE_PATH="a.py")
        assert formatter.main(env, io.StringIO("")) == 0

    def test_timeout_from_env(self):
        assert get_timeout({"CCSETUP_FORMAT_TIMEOUT": "5"}) == 5.0
        assert get_timeout({"CCSETUP_FORMAT_TIMEOUT": "junk"}) == formatter.DEFAULT_TIMEOUT
        assert get_timeout({"CCSETUP_FORMAT_TIMEOUT": "-1"}) == formatter.DEFAULT_TIMEOUT
        assert get_timeout({}) == formatter.DEFAULT_TIMEOUT
