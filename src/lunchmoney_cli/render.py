"""Table and JSON output for CLI commands.

- :func:`print_transactions_table` / :func:`print_categories_table` write
  left-aligned columns separated by two spaces.
- :func:`print_json` writes indented JSON of the views' ``to_dict()`` form.
"""

from __future__ import annotations

import json

import click

from lunchmoney_cli.models import CategoryView, TransactionView

TRANSACTION_COLUMNS = [
    "DATE",
    "ID",
    "DESCRIPTION",
    "CATEGORY",
    "NOTE",
    "AMOUNT",
    "ACCOUNT",
    "STATUS",
    "PENDING",
]

CATEGORY_COLUMNS = ["ID", "NAME", "GROUP", "INCOME", "EXCLUDE_FROM_TOTALS"]

_COLUMN_GAP = 2


def print_json(views: list[TransactionView] | list[CategoryView]) -> None:
    click.echo(json.dumps([v.to_dict() for v in views], indent=2))


def print_transactions_table(views: list[TransactionView]) -> None:
    """Print one row per transaction, or a notice when there are none."""
    if not views:
        click.echo("No transactions found.")
        return

    rows = [
        [
            v.date,
            str(v.id),
            v.description,
            v.category,
            v.notes,
            f"{v.amount:.2f}",
            v.account,
            v.status,
            _format_bool(v.is_pending),
        ]
        for v in views
    ]
    for line in format_table(TRANSACTION_COLUMNS, rows):
        click.echo(line)


def print_categories_table(views: list[CategoryView]) -> None:
    rows = [
        [
            str(v.id),
            v.name,
            v.group,
            _format_bool(v.is_income),
            _format_bool(v.exclude_from_totals),
        ]
        for v in views
    ]
    for line in format_table(CATEGORY_COLUMNS, rows):
        click.echo(line)


def format_table(headers: list[str], rows: list[list[str]]) -> list[str]:
    """Return header and rows padded to the widest cell of each column.

    Trailing whitespace is stripped from every line.
    """
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    lines: list[str] = []
    for row in [headers, *rows]:
        padded = [cell.ljust(widths[i] + _COLUMN_GAP) for i, cell in enumerate(row)]
        lines.append("".join(padded).rstrip())
    return lines


def _format_bool(value: bool) -> str:
    return "true" if value else "false"
