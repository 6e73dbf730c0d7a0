# filespy/main.py

import click

from filespy.cli.main import fs
from filespy.gui.main_window import run_gui


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
def main():
    """
    FileSpy: a small folder browser that shows the raw attributes of files.

    Use the 'gui' command to open the browser window, or 'cli' followed by
    one of its sub-commands to inspect folders from the terminal.

    Example (GUI): python -m filespy.main gui
    Example (CLI): python -m filespy.main cli ls ~/Documents
    """
    pass


@click.command()
def gui():
    """Opens the browser window."""
    run_gui()


main.add_command(gui)
main.add_command(fs, name='cli')

if __name__ == '__main__':
    main()
