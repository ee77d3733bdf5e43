"""
The managed asset tree.

Four asset directories and three root files are provisioned together into
the target root. Their names are fixed; only the source and target roots
vary.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple


# Asset directory names, in copy order
AGENTS = "agents"
SKILLS = "skills"
COMMANDS = "commands"
HOOKS = "hooks"

ASSET_DIRS: Tuple[str, ...] = (AGENTS, SKILLS, COMMANDS, HOOKS)

# Root files
PREFERENCES_FILE = "CLAUDE.md"
GUIDE_FILE = "README.md"
SETTINGS_FILE = "settings.json"

# Root files that install overwrites and uninstall removes
PLAIN_ROOT_FILES: Tuple[str, ...] = (PREFERENCES_FILE, GUIDE_FILE)

ROOT_FILES: Tuple[str, ...] = PLAIN_ROOT_FILES + (SETTINGS_FILE,)


@dataclass(frozen=True)
class AssetItem:
    """One managed item: an asset directory or a root file."""
    name: str
    source: Path
    destination: Path
    is_dir: bool

    @property
    def is_settings(self) -> bool:
        return not self.is_dir and self.name == SETTINGS_FILE

    def exists_at_destination(self) -> bool:
        if self.is_dir:
            return self.destination.is_dir()
        return self.destination.is_file()


@dataclass(frozen=True)
class AssetTree:
    """The asset tree bound to a source root and a target root."""
    source_root: Path
    target_root: Path

    def directories(self) -> List[AssetItem]:
        return [
            AssetItem(name, self.source_root / name, self.target_root / name, True)
            for name in ASSET_DIRS
        ]

    def plain_files(self) -> List[AssetItem]:
        """Root files other than the settings document."""
        return [
            AssetItem(name, self.source_root / name, self.target_root / name, False)
            for name in PLAIN_ROOT_FILES
        ]

    def settings(self) -> AssetItem:
        return AssetItem(
            SETTINGS_FILE,
            self.source_root / SETTINGS_FILE,
            self.target_root / SETTINGS_FILE,
            False,
        )

    def all_items(self) -> List[AssetItem]:
        """Every managed item, settings included."""
        return self.directories() + self.plain_files() + [self.settings()]

    def removable_items(self) -> List[AssetItem]:
        """Items that uninstall deletes. The settings document stays."""
        return self.directories() + self.plain_files()

    def existing_items(self) -> List[AssetItem]:
        """Managed items currently present under the target root."""
        return [item for item in self.all_items() if item.exists_at_destination()]

    @property
    def hooks_destination(self) -> Path:
        return self.target_root / HOOKS

    @property
    def hooks_source(self) -> Path:
        return self.source_root / HOOKS
