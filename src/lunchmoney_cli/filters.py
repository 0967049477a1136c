"""Filtering and ordering applied before presentation."""

from __future__ import annotations

from lunchmoney_cli.models import CategoryMeta, CategoryView, Transaction, TransactionView


def should_exclude_from_totals(tx: Transaction, categories: dict[int, CategoryMeta]) -> bool:
    """True if *tx* has a category that resolves and is excluded from totals.

    Uncategorized transactions and unknown category ids are kept.
    """
    if tx.category_id is None:
        return False
    meta = categories.get(tx.category_id)
    if meta is None:
        return False
    return meta.exclude_from_totals


def filter_excluded_from_totals(
    transactions: list[Transaction],
    categories: dict[int, CategoryMeta],
) -> list[Transaction]:
    """Drop transactions whose category is flagged exclude-from-totals.

    Only meaningful for reviewed listings; callers skip it for unreviewed
    and pending listings.
    """
    return [tx for tx in transactions if not should_exclude_from_totals(tx, categories)]


def sort_newest_first(views: list[TransactionView]) -> list[TransactionView]:
    """Sort by date descending, then id descending.

    Dates are fixed-width ``YYYY-MM-DD`` so string order is chronological.
    ``sorted`` is stable, including with ``reverse=True``.
    """
    return sorted(views, key=lambda v: (v.date, v.id), reverse=True)


def sort_categories(views: list[CategoryView]) -> list[CategoryView]:
    """Sort by group name, then category name."""
    return sorted(views, key=lambda v: (v.group, v.name))
