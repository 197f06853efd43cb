"""Click entry point for the ``teleproj`` command.

One invocation does one thing: add a path, remove an index, list the saved
projects, or resolve a query.  When several are given the first in that
order wins, so a mutation always beats resolution.

On a successful resolution the path is printed alone on stdout, which lets a
shell wrapper ``cd`` into it::

    tp() {
        local target
        target="$(teleproj "$@")" || return $?
        if [ -d "$target" ]; then cd "$target"; else printf '%s\\n' "$target"; fi
    }

Entry point registered in pyproject.toml::

    [project.scripts]
    teleproj = "teleproj.cli.main:cli"

Usage examples::

    teleproj --add ~/src/blog-app
    teleproj --list
    teleproj blog
    teleproj 0
    teleproj --remove 1
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from teleproj import __version__
from teleproj.config import TeleprojConfig
from teleproj.errors import Ambiguous, ResolutionError, StoreError, TeleprojError
from teleproj.models.project import ProjectEntry
from teleproj.resolver.resolver import resolve
from teleproj.storage.store import ProjectStore

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(version=__version__, prog_name="teleproj")
@click.argument("project", required=False)
@click.option(
    "-a",
    "--add",
    "add_path",
    default=None,
    metavar="PATH",
    help="Save a project directory.",
)
@click.option(
    "-r",
    "--remove",
    "remove_index",
    type=click.IntRange(min=0),
    default=None,
    metavar="INDEX",
    help="Remove the saved project at INDEX.",
)
@click.option(
    "-l",
    "--list",
    "list_all",
    is_flag=True,
    default=False,
    help="List saved projects with their indices.",
)
@click.option(
    "--json-output",
    "output_json",
    is_flag=True,
    default=False,
    help="With --list, print the projects as JSON.",
)
@click.option(
    "--store-path",
    type=click.Path(dir_okay=False),
    default=None,
    envvar="TELEPROJ_STORE_PATH",
    help="Path to the project list file. Defaults to ~/.teleproj.json.",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log debug output to stderr.",
)
def cli(
    project: Optional[str],
    add_path: Optional[str],
    remove_index: Optional[int],
    list_all: bool,
    output_json: bool,
    store_path: Optional[str],
    verbose: bool,
) -> None:
    """Jump to a saved project by index or name.

    PROJECT is either an index from --list or a (partial) project name.
    The matching path is printed on its own so a shell function can cd
    into it.
    """
    config = TeleprojConfig.load(
        store_path=store_path,
        log_level="DEBUG" if verbose else None,
    )
    config.configure_logging()
    store = ProjectStore(config.store_path)

    try:
        if add_path is not None:
            _run_add(store, add_path)
        elif remove_index is not None:
            _run_remove(store, remove_index)
        elif list_all:
            _run_list(store, output_json)
        elif project is not None:
            _run_resolve(store, project)
        else:
            click.echo("Use --help for usage information")
    except StoreError as exc:
        logger.debug("Store failure", exc_info=True)
        click.secho(f"Fatal: {exc}", fg="red", err=True)
        sys.exit(1)
    except ResolutionError as exc:
        _render_resolution_error(exc)
        sys.exit(1)
    except TeleprojError as exc:
        click.secho(f"Error: {exc}", fg="red", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def _run_add(store: ProjectStore, raw_path: str) -> None:
    """Normalise *raw_path* to an absolute path and append it."""
    path = _normalise_path(raw_path)
    if not Path(path).is_dir():
        click.secho(
            f"Warning: '{click.format_filename(path)}' is not an existing directory; "
            "saving it anyway.",
            fg="yellow",
            err=True,
        )
    projects = store.load()
    index = store.add(projects, path)
    click.echo(f"Added path [{index}]: {click.format_filename(path)}")


def _run_remove(store: ProjectStore, index: int) -> None:
    projects = store.load()
    removed = store.remove(projects, index)
    click.echo(f"Removed path [{index}]: {removed}")


def _run_list(store: ProjectStore, output_json: bool) -> None:
    entries = store.list(store.load())

    if output_json:
        click.echo(json.dumps(_collect_list(entries), indent=2))
        return

    if not entries:
        click.echo("No paths saved yet. Use --add to add some!")
        return

    click.echo("Saved projects:")
    for entry in entries:
        line = _format_entry(entry)
        if not entry.exists():
            line += " [missing]"
        click.echo(line)


def _run_resolve(store: ProjectStore, query: str) -> None:
    resolution = resolve(store.list(store.load()), query)
    logger.debug(
        "Resolved %r via %s to index %d",
        query,
        resolution.kind.value,
        resolution.index,
    )
    click.echo(resolution.path)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _collect_list(entries: list[ProjectEntry]) -> list[dict]:
    """Build the JSON-serialisable listing."""
    return [
        {
            "index": entry.index,
            "name": entry.name,
            "path": entry.path,
            "exists": entry.exists(),
        }
        for entry in entries
    ]


def _format_entry(entry: ProjectEntry) -> str:
    return f"  {entry.index}: {entry.name} ({entry.path})"


def _render_resolution_error(exc: ResolutionError) -> None:
    """Explain a failed resolution or index lookup on stderr."""
    if isinstance(exc, Ambiguous):
        click.secho(f"Multiple projects match '{exc.query}'. Please choose:", err=True)
        for entry in exc.candidates:
            click.echo(_format_entry(entry), err=True)
        click.echo("\nUse the specific index number to jump to a project.", err=True)
        return
    click.secho(f"Error: {exc}", fg="red", err=True)


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------


def _normalise_path(raw_path: str) -> str:
    """Expand ``~`` and return an absolute, symlink-resolved path string."""
    return str(Path(raw_path).expanduser().resolve())


if __name__ == "__main__":
    cli()
