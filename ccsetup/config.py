"""
ccsetup configuration.

Settings are resolved in layers (lowest -> highest priority):
  1. Hardcoded defaults
  2. ccsetup.yaml in the repository root
  3. Environment (CCSETUP_TARGET, CCSETUP_SOURCE)
  4. Explicit overrides (CLI options)

The YAML file is optional. A missing or malformed file falls back to the
defaults so a broken config never prevents an uninstall.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


logger = logging.getLogger(__name__)

CONFIG_FILENAME = "ccsetup.yaml"

DEFAULT_BACKUP_PREFIX = "backup"
DEFAULT_SYNC_TIMEOUT = 60

ENV_TARGET = "CCSETUP_TARGET"
ENV_SOURCE = "CCSETUP_SOURCE"


def get_repo_root() -> Path:
    """Get the ccsetup checkout root."""
    return Path(__file__).parent.parent


def default_target_root() -> Path:
    return Path.home() / ".claude"


def default_source_root() -> Path:
    return get_repo_root() / "assets"


@dataclass
class SetupConfig:
    """Resolved settings for one lifecycle operation."""
    target_root: Path = field(default_factory=default_target_root)
    source_root: Path = field(default_factory=default_source_root)
    backup_prefix: str = DEFAULT_BACKUP_PREFIX
    sync_timeout: int = DEFAULT_SYNC_TIMEOUT

    def to_dict(self) -> dict:
        return {
            "target_root": str(self.target_root),
            "source_root": str(self.source_root),
            "backup_prefix": self.backup_prefix,
            "sync_timeout": self.sync_timeout,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SetupConfig":
        config = cls()
        if data.get("target_root"):
            config.target_root = Path(data["target_root"]).expanduser()
        if data.get("source_root"):
            config.source_root = Path(data["source_root"]).expanduser()
        if data.get("backup_prefix"):
            config.backup_prefix = str(data["backup_prefix"])
        if data.get("sync_timeout") is not None:
            try:
                config.sync_timeout = max(1, int(data["sync_timeout"]))
            except (TypeError, ValueError):
                logger.warning(f"Invalid sync_timeout {data['sync_timeout']!r}, using {config.sync_timeout}")
        return config


def get_config_path(repo_root: Optional[Path] = None) -> Path:
    """Get the config file path for a checkout."""
    return (repo_root or get_repo_root()) / CONFIG_FILENAME


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read a YAML config file. Returns {} if missing or unusable."""
    if not path.is_file():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {path}: expected a mapping")
        return {}
    return data


def load_config(
    target_root: Optional[str] = None,
    source_root: Optional[str] = None,
    repo_root: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> SetupConfig:
    """Resolve configuration from file, environment and explicit overrides."""
    env = os.environ if environ is None else environ

    root = repo_root or get_repo_root()
    data = read_config_file(get_config_path(root))

    # Relative paths in the file are relative to the checkout
    for key in ("target_root", "source_root"):
        if isinstance(data.get(key), str):
            path = Path(data[key]).expanduser()
            data[key] = str(path if path.is_absolute() else root / path)

    if env.get(ENV_TARGET):
        data["target_root"] = env[ENV_TARGET]
    if env.get(ENV_SOURCE):
        data["source_root"] = env[ENV_SOURCE]

    if target_root:
        data["target_root"] = target_root
    if source_root:
        data["source_root"] = source_root

    return SetupConfig.from_dict(data)
