"""
Lifecycle Commands - install, update, uninstall, status.

Exit codes:
- 0: success, including runs where individual items failed (each is reported)
- 0: uninstall cancelled at the confirmation prompt
- 1: fatal precondition (source missing, target not creatable, backup failed)
"""

import sys

import click

from ccsetup.config import load_config
from ccsetup.errors import SetupError


def _confirm(prompt: str) -> bool:
    """Ask a yes/no question, defaulting to no. EOF counts as no."""
    try:
        return click.confirm(prompt, default=False)
    except click.Abort:
        click.echo("")
        return False


def _always(prompt: str) -> bool:
    return True


def _report(result) -> None:
    """Print the per-item failures and a summary line."""
    for failure in result.failures:
        click.echo(f"  Failed: {failure}", err=True)

    if result.backup:
        click.echo(f"\nBackup: {result.backup}")

    click.echo("")
    if result.failures:
        click.echo(f"{result.operation.capitalize()} finished with {len(result.failures)} failed item(s).")
    else:
        click.echo(f"{result.operation.capitalize()} complete.")


def _run_install(operation, config, overwrite_settings: bool, **kwargs):
    confirm = _always if overwrite_settings else _confirm
    try:
        result = operation(config, confirm_overwrite=confirm, **kwargs)
    except SetupError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _report(result)
    if result.sync is not None and result.sync.attempted and not result.sync.ok:
        click.echo(f"Note: source sync failed ({result.sync.message}); installed the source on disk.")
    click.echo(f"\nInstalled into {result.target_root}")
    click.echo("Restart the host application to load changes.")


def register(cli):
    """Register lifecycle commands with CLI."""

    @cli.command()
    @click.option("--source", default=None, type=click.Path(file_okay=False),
                  help="Asset source directory (default: assets/ in this checkout).")
    @click.option("--target", default=None, type=click.Path(file_okay=False),
                  help="Target directory (default: ~/.claude).")
    @click.option("--overwrite-settings", is_flag=True,
                  help="Replace an existing settings.json without asking.")
    def install(source, target, overwrite_settings):
        """Install agents, skills, commands and hooks."""
        from ccsetup.lifecycle import install as do_install

        config = load_config(target_root=target, source_root=source)
        click.echo(f"Installing from {config.source_root}")
        _run_install(do_install, config, overwrite_settings)

    @cli.command()
    @click.option("--source", default=None, type=click.Path(file_okay=False),
                  help="Asset source directory (default: assets/ in this checkout).")
    @click.option("--target", default=None, type=click.Path(file_okay=False),
                  help="Target directory (default: ~/.claude).")
    @click.option("--overwrite-settings", is_flag=True,
                  help="Replace an existing settings.json without asking.")
    @click.option("--no-sync", is_flag=True, help="Skip pulling the source checkout.")
    def update(source, target, overwrite_settings, no_sync):
        """Pull the latest source and reinstall.

        A failed pull is reported but does not stop the install.
        """
        from ccsetup.lifecycle import update as do_update

        config = load_config(target_root=target, source_root=source)
        _run_install(do_update, config, overwrite_settings, sync=not no_sync)

    @cli.command()
    @click.option("--target", default=None, type=click.Path(file_okay=False),
                  help="Target directory (default: ~/.claude).")
    @click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation.")
    def uninstall(target, yes):
        """Remove agents, skills, commands and hooks.

        settings.json is kept. Everything is backed up first.
        """
        from ccsetup.lifecycle import uninstall as do_uninstall

        config = load_config(target_root=target)
        try:
            result = do_uninstall(config, confirm=_always if yes else _confirm)
        except SetupError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

        if result.cancelled:
            click.echo("Cancelled.")
            return

        if not result.removed and not result.failures:
            return

        _report(result)
        if result.settings_action == "retained":
            click.echo("settings.json was kept.")
        click.echo("Restart the host application to apply.")

    @cli.command()
    @click.option("--target", default=None, type=click.Path(file_okay=False),
                  help="Target directory (default: ~/.claude).")
    def status(target):
        """Show installation status and existing backups."""
        from ccsetup.lifecycle import check_installation

        config = load_config(target_root=target)
        st = check_installation(config)

        click.echo(f"Target: {st.target_root}")
        click.echo(f"  Installed: {', '.join(st.present) if st.present else 'nothing'}")
        if st.missing:
            click.echo(f"  Missing: {', '.join(st.missing)}")
        if st.non_executable_hooks:
            click.echo(f"  Hooks not executable: {', '.join(st.non_executable_hooks)}")

        if st.snapshots:
            click.echo(f"\nBackups ({len(st.snapshots)}):")
            for snapshot in st.snapshots:
                click.echo(f"  {snapshot.name}")
        else:
            click.echo("\nBackups: none")
