"""
CLI interface for directory bookmarks.

Usage:
    pathmark record --name proj
    pathmark list
    cd "$(pathmark select proj)"
"""

import json
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from . import commands
from .config import CONFIG_KEYS, config_as_dict, load_config, set_config_value
from .errors import NotFoundError, PathmarkError
from .logging_config import configure_ops_log, configure_quiet_mode, enable_debug_mode
from .store import PathStore
from .types import Bookmark


# Configure quiet mode by default (warnings only)
# Set PATHMARK_VERBOSE=1 to enable debug mode via environment
if os.environ.get("PATHMARK_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        print(f"pathmark {version('pathmark')}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_json_output = False
_store_override: Optional[Path] = None


def _json_callback(value: bool):
    global _json_output
    _json_output = value


def _get_json_output() -> bool:
    return _json_output


def _store_callback(value: Optional[Path]):
    global _store_override
    _store_override = value


def _get_store_override() -> Optional[Path]:
    return _store_override


app = typer.Typer(
    name="pathmark",
    help="Bookmark directories and jump back to them.",
    no_args_is_help=True,
    rich_markup_mode=None,
)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON",
        callback=_json_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
    store: Annotated[Optional[Path], typer.Option(
        "--store", "-s",
        envvar="PATHMARK_STORE",
        help="Path to the bookmark file (default: ~/.pathmark/paths.json)",
        callback=_store_callback,
        is_eager=True,
    )] = None,
):
    """Bookmark directories and jump back to them."""


# -----------------------------------------------------------------------------
# Common Options
# -----------------------------------------------------------------------------

SelectorArgument = Annotated[
    Optional[str],
    typer.Argument(
        help="Bookmark number or exact name (prompted for when omitted)",
        show_default=False,
    )
]


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _get_store() -> PathStore:
    """Build the store from config, handling errors gracefully."""
    try:
        config = load_config()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if _get_store_override() is not None:
        config.store_override = _get_store_override()
    configure_ops_log(config.home)
    return PathStore(
        config.store_path,
        exclusive_quick=config.exclusive_quick,
        lock=config.lock,
    )


def _format_line(b: Bookmark, number_width: int = 0, name_width: int = 0) -> str:
    """One display line: number, name, path, and flags."""
    flags = []
    if b.is_quick:
        flags.append("quick")
    if b.is_last:
        flags.append("last")
    number = str(b.sequence_number).rjust(number_width)
    name = (b.name or "-").ljust(name_width)
    line = f"{number}  {name}  {b.path}"
    if flags:
        line += f"  [{', '.join(flags)}]"
    return line


def _format_bookmarks(bookmarks: list[Bookmark], as_json: bool = False) -> str:
    if as_json:
        return json.dumps([b.to_dict() for b in bookmarks], indent=2)
    if not bookmarks:
        return "No bookmarks."
    number_width = max(len(str(b.sequence_number)) for b in bookmarks)
    name_width = max(len(b.name or "-") for b in bookmarks)
    return "\n".join(_format_line(b, number_width, name_width) for b in bookmarks)


def _format_one(b: Bookmark) -> str:
    if _get_json_output():
        return json.dumps(b.to_dict(), indent=2)
    return _format_line(b)


def _prompt_selector(store: PathStore) -> str:
    """Ask for a selector on an interactive terminal.

    The list goes to stderr so stdout stays clean for ``cd "$(...)"``.
    """
    if not sys.stdin.isatty():
        typer.echo("Error: a selector is required (stdin is not a terminal)", err=True)
        raise typer.Exit(1)
    bookmarks = list(commands.list_bookmarks(store))
    if not bookmarks:
        typer.echo("No bookmarks.", err=True)
        raise typer.Exit(1)
    typer.echo(_format_bookmarks(bookmarks), err=True)
    return typer.prompt("Bookmark", err=True)


def _fail(e: PathmarkError) -> None:
    typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(1)


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@app.command()
def record(
    name: Annotated[Optional[str], typer.Option(
        "--name", "-n",
        help="Name for the bookmark"
    )] = None,
):
    """
    Bookmark the current directory.

    \b
    Examples:
        pathmark record               # Unnamed bookmark
        pathmark record -n proj       # Named bookmark
    """
    store = _get_store()
    try:
        bookmark = commands.record(store, name)
    except PathmarkError as e:
        _fail(e)
    typer.echo(_format_one(bookmark))


@app.command("list")
def list_cmd():
    """List bookmarks in stored order."""
    store = _get_store()
    bookmarks = list(commands.list_bookmarks(store))
    typer.echo(_format_bookmarks(bookmarks, as_json=_get_json_output()))


@app.command()
def select(selector: SelectorArgument = None):
    """
    Resolve a bookmark and print its directory.

    A process can't change its parent shell's directory, so wrap it:

    \b
        cd "$(pathmark select proj)"
        cd "$(pathmark select 2)"
    """
    store = _get_store()
    if selector is None:
        selector = _prompt_selector(store)
    try:
        bookmark = commands.select(store, selector)
    except PathmarkError as e:
        _fail(e)
    typer.echo(json.dumps(bookmark.to_dict()) if _get_json_output() else bookmark.path)


@app.command()
def remove(selector: SelectorArgument = None):
    """Remove a bookmark; the remaining ones are renumbered."""
    store = _get_store()
    if selector is None:
        selector = _prompt_selector(store)
    try:
        bookmark = commands.remove(store, selector)
    except PathmarkError as e:
        _fail(e)
    if _get_json_output():
        typer.echo(_format_one(bookmark))
    else:
        typer.echo(f"Removed {_format_line(bookmark)}")


@app.command()
def clear(
    yes: Annotated[bool, typer.Option(
        "--yes", "-y",
        help="Don't ask for confirmation"
    )] = False,
):
    """Remove all bookmarks."""
    store = _get_store()
    if not yes:
        typer.confirm("Remove all bookmarks?", abort=True)
    try:
        count = commands.clear_all(store)
    except PathmarkError as e:
        _fail(e)
    typer.echo(f"Removed {count} bookmark(s).")


@app.command("set-quick")
def set_quick(selector: SelectorArgument = None):
    """Mark a bookmark as the quick path."""
    store = _get_store()
    if selector is None:
        selector = _prompt_selector(store)
    try:
        bookmark = commands.set_quick(store, selector)
    except PathmarkError as e:
        _fail(e)
    typer.echo(_format_one(bookmark))


@app.command("get-quick")
def get_quick():
    """Print the quick path's directory."""
    store = _get_store()
    try:
        bookmark = commands.get_quick(store)
    except NotFoundError as e:
        _fail(e)
    typer.echo(json.dumps(bookmark.to_dict()) if _get_json_output() else bookmark.path)


@app.command()
def last():
    """Print the directory of the most recently selected bookmark."""
    store = _get_store()
    try:
        bookmark = commands.last(store)
    except NotFoundError as e:
        _fail(e)
    typer.echo(json.dumps(bookmark.to_dict()) if _get_json_output() else bookmark.path)


@app.command()
def config(
    key: Annotated[Optional[str], typer.Argument(
        help=f"Setting to show or change ({', '.join(CONFIG_KEYS)})"
    )] = None,
    value: Annotated[Optional[str], typer.Argument(
        help="New value to store in pathmark.toml"
    )] = None,
):
    """
    Show or change configuration.

    \b
    Examples:
        pathmark config                        # All settings
        pathmark config quick.exclusive        # One setting
        pathmark config quick.exclusive true   # Change a setting
    """
    try:
        cfg = load_config()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if _get_store_override() is not None:
        cfg.store_override = _get_store_override()

    if key is not None and value is not None:
        try:
            set_config_value(cfg, key, value)
        except (KeyError, ValueError) as e:
            msg = e.args[0] if isinstance(e, KeyError) else str(e)
            typer.echo(f"Error: {msg}", err=True)
            raise typer.Exit(1)

    values = config_as_dict(cfg)
    if key is not None:
        if key not in values:
            typer.echo(f"Error: Unknown config key '{key}'", err=True)
            raise typer.Exit(1)
        values = {key: values[key]}

    if _get_json_output():
        typer.echo(json.dumps(values, indent=2))
    else:
        for k, v in values.items():
            if isinstance(v, bool):
                v = str(v).lower()
            typer.echo(f"{k} = {v}")


# -----------------------------------------------------------------------------

def main():
    try:
        app()
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="pathmark CLI")
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
