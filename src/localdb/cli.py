"""localdb CLI — inspect and edit a JSON document store.

Commands:
    localdb init [PATH]            create localdb.toml + an empty store file
    localdb add KEY=VALUE...       create a record
    localdb list                   dump every record
    localdb show ID                dump one record
    localdb set ID KEY=VALUE...    shallow-merge fields into a record
    localdb rm ID                  delete every record with ID
    localdb find KEY=VALUE...      records where all fields are equal
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click

from localdb.config import StoreConfig, init_config, load_config
from localdb.models import match_fields
from localdb.store import CorruptStoreError, JsonStore

logger = logging.getLogger("localdb.cli")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _decode(raw: str) -> Any:
    """JSON-decode a command-line value, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _parse_fields(pairs: tuple[str, ...]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            msg = f"expected KEY=VALUE, got {pair!r}"
            raise click.BadParameter(msg, param_hint="FIELDS")
        fields[key] = _decode(value)
    return fields


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _load_cfg(ctx: click.Context) -> StoreConfig:
    opts = ctx.find_root().obj
    try:
        cfg = load_config(opts["root"])
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc
    if opts["db"]:
        cfg.path = Path(opts["db"]).expanduser().resolve()
    return cfg


def _open_store(ctx: click.Context) -> JsonStore:
    cfg = _load_cfg(ctx)
    try:
        return cfg.open()
    except OSError as exc:
        raise click.ClickException(f"cannot open {cfg.path}: {exc}") from exc


def _run(op: Any, *args: Any) -> Any:
    """Call a store operation, turning storage failures into click errors."""
    try:
        return op(*args)
    except CorruptStoreError as exc:
        raise click.ClickException(f"corrupt store: {exc}") from exc
    except OSError as exc:
        raise click.ClickException(str(exc)) from exc


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="localdb")
@click.option("--db", default=None, help="Store file (overrides localdb.toml)")
@click.option("--root", default=None, help="Project root (default: search upward from cwd)")
@click.option("-v", "--verbose", is_flag=True, help="Log store operations to stderr")
@click.pass_context
def cli(ctx: click.Context, db: str | None, root: str | None, verbose: bool) -> None:
    """localdb — records in a single JSON file."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(message)s")
    ctx.obj = {"db": db, "root": root}


# ---------------------------------------------------------------------------
# localdb init
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("path", required=False)
@click.option("--dir", "root", default=None, help="Project root  [default: --root, else .]")
@click.pass_context
def init(ctx: click.Context, path: str | None, root: str | None) -> None:
    """Create localdb.toml and an empty store file.

    PATH is relative to the project root. A group-level --db is used instead
    when PATH is omitted, written to localdb.toml as an absolute path.
    """
    opts = ctx.find_root().obj
    if path and opts["db"]:
        msg = "give the store path as PATH or --db, not both"
        raise click.UsageError(msg)
    if opts["db"]:
        path = str(Path(opts["db"]).expanduser().resolve())
    root_path = Path(root or opts["root"] or ".").resolve()

    try:
        config_path = init_config(root_path, path=path)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("localdb.toml already exists — skipping init")
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="PATH") from exc

    try:
        cfg = load_config(root_path)
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc
    if opts["db"]:
        cfg.path = Path(path)
    try:
        store = cfg.open()
    except OSError as exc:
        raise click.ClickException(f"cannot create {cfg.path}: {exc}") from exc
    click.echo(f"Store : {store.path}")


# ---------------------------------------------------------------------------
# localdb add / list / show
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("fields", nargs=-1, required=True)
@click.pass_context
def add(ctx: click.Context, fields: tuple[str, ...]) -> None:
    """Create a record from KEY=VALUE pairs (VALUE is JSON if it parses)."""
    values = _parse_fields(fields)
    store = _open_store(ctx)
    _echo_json(_run(store.create, values))


@cli.command(name="list")
@click.pass_context
def list_cmd(ctx: click.Context) -> None:
    """Print every record."""
    store = _open_store(ctx)
    _echo_json(_run(store.read))


@cli.command()
@click.argument("record_id")
@click.pass_context
def show(ctx: click.Context, record_id: str) -> None:
    """Print the record with RECORD_ID."""
    store = _open_store(ctx)
    record = _run(store.get, _decode(record_id))
    if record is None:
        click.echo(f"No record: {record_id}", err=True)
        raise SystemExit(1)
    _echo_json(record)


# ---------------------------------------------------------------------------
# localdb set / rm
# ---------------------------------------------------------------------------


@cli.command(name="set")
@click.argument("record_id")
@click.argument("fields", nargs=-1, required=True)
@click.pass_context
def set_cmd(ctx: click.Context, record_id: str, fields: tuple[str, ...]) -> None:
    """Merge KEY=VALUE pairs into the record with RECORD_ID."""
    values = _parse_fields(fields)
    store = _open_store(ctx)
    record = _run(store.update, _decode(record_id), values)
    if record is None:
        click.echo(f"No record: {record_id}", err=True)
        raise SystemExit(1)
    _echo_json(record)


@cli.command()
@click.argument("record_id")
@click.pass_context
def rm(ctx: click.Context, record_id: str) -> None:
    """Delete every record with RECORD_ID."""
    store = _open_store(ctx)
    if not _run(store.delete, _decode(record_id)):
        click.echo(f"No record: {record_id}", err=True)
        raise SystemExit(1)
    click.echo(f"Deleted {record_id}")


# ---------------------------------------------------------------------------
# localdb find
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("fields", nargs=-1, required=True)
@click.pass_context
def find(ctx: click.Context, fields: tuple[str, ...]) -> None:
    """Print records whose fields equal every KEY=VALUE pair."""
    expected = _parse_fields(fields)
    store = _open_store(ctx)
    matches = _run(store.query, match_fields(**expected))
    logger.debug("find %s: %d match(es)", expected, len(matches))
    _echo_json(matches)
