"""Click CLI entry point for the ``lm`` command.

Handles argument parsing, config loading, and error display. All business
logic is delegated to ``client``, ``pipeline``, ``config``, and ``render``
modules.
"""

from __future__ import annotations

import logging
import sys
from datetime import date, datetime
from pathlib import Path

import click
import httpx

from lunchmoney_cli import __version__
from lunchmoney_cli.client import LunchMoneyError


def _validate_date(value: str, flag: str) -> date:
    """Parse *value* as ``YYYY-MM-DD`` or raise ``click.BadParameter``."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(
            f"invalid {flag} date {value!r} (expected YYYY-MM-DD)"
        ) from None


def _validate_date_range(start: str, end: str) -> None:
    start_date = _validate_date(start, "--start")
    end_date = _validate_date(end, "--end")
    if end_date < start_date:
        raise click.BadParameter("--end cannot be earlier than --start")


def _parse_tx_id(raw: str) -> int:
    """Parse a positive transaction id or raise ``click.BadParameter``."""
    try:
        tx_id = int(raw)
    except ValueError:
        tx_id = 0
    if tx_id <= 0:
        raise click.BadParameter(f"invalid transaction id {raw!r}")
    return tx_id


def _configure_logging(verbose: bool, debug: bool) -> None:
    """Set up logging based on verbosity flags."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        force=True,
    )


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _open_client(ctx: click.Context):
    """Load config and the API key, then build a client.

    Exits with status 1 if either is missing; no request is sent.
    """
    from lunchmoney_cli.client import LunchMoneyClient
    from lunchmoney_cli.config import ConfigError, load_api_key, resolve_config

    config_path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        config = resolve_config(config_path, Path.cwd())
        api_key = load_api_key(config)
    except FileNotFoundError as exc:
        _fail(f"{exc}. Run 'lm init' to create a config file.")
    except ConfigError as exc:
        _fail(str(exc))
    except OSError as exc:
        _fail(f"could not read configuration: {exc}")

    client = LunchMoneyClient(api_key, base_url=config.base_url, timeout=config.timeout)
    return client, config


@click.group()
@click.version_option(version=__version__, prog_name="lunchmoney-cli")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to lm.toml (default: ./lm.toml if present).",
)
@click.option("--verbose", is_flag=True, default=False, help="Detailed progress output.")
@click.option("--debug", is_flag=True, default=False, help="Developer-level diagnostics.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool, debug: bool) -> None:
    """Command-line client for the Lunch Money personal-finance API."""
    _configure_logging(verbose, debug)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# ===========================================================================
# lm tx
# ===========================================================================


@cli.group()
def tx() -> None:
    """Transaction operations."""


@tx.command("list")
@click.option("--start", required=True, help="Start date (YYYY-MM-DD).")
@click.option("--end", default=None, help="End date (YYYY-MM-DD), defaults to today.")
@click.option(
    "--unreviewed", is_flag=True, default=False,
    help="List unreviewed transactions (default is reviewed).",
)
@click.option(
    "--include-pending", is_flag=True, default=False,
    help="List pending transactions only (requires --unreviewed).",
)
@click.option("--json", "json_output", is_flag=True, default=False, help="Output JSON.")
@click.pass_context
def tx_list(
    ctx: click.Context,
    start: str,
    end: str | None,
    unreviewed: bool,
    include_pending: bool,
    json_output: bool,
) -> None:
    """List transactions, newest first."""
    if end is None:
        end = date.today().isoformat()

    try:
        _validate_date_range(start, end)
        if include_pending and not unreviewed:
            raise click.BadParameter(
                "--include-pending requires --unreviewed "
                "(pending transactions are always unreviewed)"
            )
    except click.BadParameter as exc:
        _fail(exc.format_message())

    from lunchmoney_cli.pipeline import fetch_transaction_views
    from lunchmoney_cli.render import print_json, print_transactions_table

    client, config = _open_client(ctx)
    try:
        with client:
            views = fetch_transaction_views(
                client,
                start,
                end,
                unreviewed=unreviewed,
                include_pending=include_pending,
                page_size=config.page_size,
            )
    except (LunchMoneyError, httpx.HTTPError) as exc:
        _fail(str(exc))

    if json_output:
        print_json(views)
    else:
        print_transactions_table(views)


@tx.command("update")
@click.argument("tx_id")
@click.option("--category-id", type=int, default=None, help="Category ID.")
@click.option("--note", default=None, help="Transaction note.")
@click.pass_context
def tx_update(
    ctx: click.Context,
    tx_id: str,
    category_id: int | None,
    note: str | None,
) -> None:
    """Update a transaction category and/or note."""
    try:
        parsed_id = _parse_tx_id(tx_id)
        if category_id is None and note is None:
            raise click.BadParameter("must provide at least one of --category-id or --note")
        if category_id is not None and category_id <= 0:
            raise click.BadParameter("--category-id must be a positive integer")
        if note is not None and not note.strip():
            raise click.BadParameter("--note cannot be empty")
    except click.BadParameter as exc:
        _fail(exc.format_message())

    client, _ = _open_client(ctx)
    try:
        with client:
            client.update_transaction(parsed_id, category_id=category_id, note=note)
    except (LunchMoneyError, httpx.HTTPError) as exc:
        _fail(str(exc))

    updated_fields = []
    if category_id is not None:
        updated_fields.append("category")
    if note is not None:
        updated_fields.append("note")
    click.echo(f"Updated transaction {parsed_id} ({', '.join(updated_fields)}).")


@tx.command("mark-reviewed")
@click.argument("tx_ids", nargs=-1, required=True)
@click.pass_context
def tx_mark_reviewed(ctx: click.Context, tx_ids: tuple[str, ...]) -> None:
    """Mark one or more transactions as reviewed."""
    try:
        ids = [_parse_tx_id(raw) for raw in tx_ids]
    except click.BadParameter as exc:
        _fail(exc.format_message())

    client, _ = _open_client(ctx)
    try:
        with client:
            updated = client.mark_reviewed(ids)
    except (LunchMoneyError, httpx.HTTPError) as exc:
        _fail(str(exc))

    click.echo(f"Marked {len(updated)} transaction(s) as reviewed.")


# ===========================================================================
# lm category
# ===========================================================================


@cli.group()
def category() -> None:
    """Category operations."""


@category.command("list")
@click.option("--json", "json_output", is_flag=True, default=False, help="Output JSON.")
@click.pass_context
def category_list(ctx: click.Context, json_output: bool) -> None:
    """List categories, grouped and sorted by name."""
    from lunchmoney_cli.pipeline import fetch_category_views
    from lunchmoney_cli.render import print_categories_table, print_json

    client, _ = _open_client(ctx)
    try:
        with client:
            views = fetch_category_views(client)
    except (LunchMoneyError, httpx.HTTPError) as exc:
        _fail(str(exc))

    if json_output:
        print_json(views)
    else:
        print_categories_table(views)


# ===========================================================================
# lm init
# ===========================================================================


@cli.command()
@click.option(
    "--dir", "target_dir", default=".", type=click.Path(), help="Directory to write lm.toml into."
)
def init(target_dir: str) -> None:
    """Write a default lm.toml configuration file."""
    from lunchmoney_cli.config import initialize

    target = Path(target_dir).resolve()

    try:
        config_path = initialize(target)
    except OSError as exc:
        _fail(f"could not write config: {exc}")

    click.echo(f"Config file: {config_path}")
