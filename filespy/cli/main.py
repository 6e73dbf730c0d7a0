# filespy/cli/main.py

import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from filespy.core.bookmark_store import BookmarkStore
from filespy.core.errors import BookmarkUnresolvable, DirectoryUnreadable, ExportWriteFailed, SessionRecordMissing
from filespy.core.filesystem import scan_directory
from filespy.core.paths import HOME_ENV_VAR, session_file_path, settings_file_path
from filespy.core.report import default_export_name, describe, export_report
from filespy.core.session_store import SessionStateStore
from filespy.core.settings_store import JsonSettingsStore

console = Console()
logger = logging.getLogger(__name__)


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(version="1.0", prog_name="FileSpy")
@click.option('--home', type=click.Path(file_okay=False, dir_okay=True, path_type=Path), envvar=HOME_ENV_VAR,
              default=None, help="Directory holding FileSpy's settings and session record.")
def fs(home: Path):
    """
    FileSpy - inspect folders and the raw attributes of their entries.

    Use `[COMMAND] --help` for more information on a specific command.
    """
    if home is not None:
        # The path helpers read the override from the environment.
        os.environ[HOME_ENV_VAR] = str(home)


@fs.command(name="ls")
@click.argument('path', type=click.Path(file_okay=False, dir_okay=True, path_type=Path), default=".")
@click.option('-a', '--all', 'show_hidden', is_flag=True, help="Include entries whose names start with a period.")
def list_folder(path: Path, show_hidden: bool):
    """Lists the entries of a folder in enumeration order."""
    try:
        entries = scan_directory(path.resolve(), show_hidden)
    except DirectoryUnreadable as e:
        console.print(f"[bold red]Could not read {path}: {e.reason.name}[/bold red]")
        sys.exit(1)

    table = Table(title=str(path.resolve()), style="cyan", title_style="bold magenta")
    table.add_column("Name", style="green", no_wrap=True)
    table.add_column("Kind", style="blue")
    for entry in entries:
        table.add_row(entry.name, "Folder" if entry.is_directory else "File")
    console.print(table)


@fs.command()
@click.argument('path', type=click.Path(path_type=Path))
def info(path: Path):
    """Prints the attribute report of a file or folder."""
    # Plain echo: rich would re-wrap the tab-separated lines.
    click.echo(describe(path.absolute()))


@fs.command()
@click.argument('path', type=click.Path(path_type=Path))
@click.option('-o', '--output', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Where to write the report. Defaults to NAME.fs.txt in the current directory.")
def export(path: Path, output: Path):
    """Writes the attribute report of PATH to a UTF-8 text file."""
    destination = output if output is not None else Path.cwd() / default_export_name(path)
    try:
        export_report(path.absolute(), destination)
    except ExportWriteFailed as e:
        console.print(f"[bold red]Unable to save file: {e.description}[/bold red]")
        sys.exit(1)
    console.print(f"[bold green]Saved info to {destination}[/bold green]")


@fs.command()
def session():
    """Shows the folder and selection remembered from the last GUI session."""
    table = Table(title="Stored Session", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="bold magenta")

    try:
        folder_line, selection_line = SessionStateStore(session_file_path()).load()
        table.add_row("Folder", folder_line or "-")
        table.add_row("Selection", selection_line or "-")
    except SessionRecordMissing as e:
        table.add_row("Record", f"none ({e.reason.name})")

    bookmarks = BookmarkStore(JsonSettingsStore(settings_file_path()))
    try:
        bookmarked = bookmarks.resolve_stored()
        table.add_row("Bookmark", str(bookmarked) if bookmarked is not None else "-")
    except BookmarkUnresolvable as e:
        table.add_row("[red]Bookmark[/red]", f"unresolvable: {e}")

    console.print(table)


@fs.command()
@click.argument('path', type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path))
def bookmark(path: Path):
    """Remembers PATH as the working directory the GUI reopens."""
    try:
        BookmarkStore(JsonSettingsStore(settings_file_path())).create(path)
    except OSError as e:
        console.print(f"[bold red]Failed to save bookmark for {path}: {e}[/bold red]")
        logger.error("CLI bookmark command failed.", exc_info=True)
        sys.exit(1)
    console.print(f"[bold green]Bookmarked {path.resolve()}[/bold green]")
