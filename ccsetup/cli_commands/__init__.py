"""
ccsetup CLI Commands - Modular command structure.

Structure:
    cli_commands/
    ├── __init__.py      # This file - registration
    └── lifecycle.py     # install, update, uninstall, status

Usage:
    from ccsetup.cli_commands import register_all

    @click.group()
    def cli():
        pass

    register_all(cli)
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_all(cli: "click.Group") -> None:
    """Register all command modules with the CLI group.

    Each module has a `register(cli)` function that adds its commands
    to the CLI group using Click decorators.
    """
    from . import lifecycle

    lifecycle.register(cli)
