"""
ccsetup CLI - provision agents, skills, commands and hooks for the host.

Commands:
- install: Copy the asset tree into the target root
- update: Pull the source checkout, then install
- uninstall: Back up and remove the managed items
- status: Show what is installed and which backups exist
"""

import logging

import click

from ccsetup import __version__
from ccsetup.cli_commands import register_all


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool):
    """ccsetup - install and maintain a ~/.claude configuration.

    Every destructive step is preceded by a timestamped backup inside the
    target directory. Restoring a backup is a manual copy.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


register_all(cli)


# ============================================================================
# Entry Point
# ============================================================================

def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
