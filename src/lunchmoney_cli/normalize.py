"""Join fetched transactions against the lookup tables.

:func:`to_transaction_view` turns one raw :class:`Transaction` into the
display-ready :class:`TransactionView`:

- the amount is negated (upstream is outflow-positive, views are
  income-positive);
- the type is classified as ``income``, ``expense`` or ``transfer``;
- category, group, tag and account ids are resolved to display strings.

:func:`to_category_views` builds the rows for ``lm category list``.
"""

from __future__ import annotations

import logging

from lunchmoney_cli.models import (
    AccountMeta,
    Category,
    CategoryMeta,
    CategoryView,
    Transaction,
    TransactionView,
)

logger = logging.getLogger(__name__)

# Matched by exact name; a renamed category falls back to "expense".
TRANSFER_CATEGORY_NAME = "Payment, Transfer"
CASH_ACCOUNT = "Cash Transaction"

TYPE_EXPENSE = "expense"
TYPE_INCOME = "income"
TYPE_TRANSFER = "transfer"


def to_transaction_view(
    tx: Transaction,
    categories: dict[int, CategoryMeta],
    tags: dict[int, str],
    manual: dict[int, AccountMeta],
    plaid: dict[int, AccountMeta],
) -> TransactionView:
    """Build the view for one transaction.

    Args:
        tx: Transaction as fetched from the API.
        categories: Category lookup from
            :func:`~lunchmoney_cli.lookups.build_category_lookup`.
        tags: Tag id to name.
        manual: Manual account lookup.
        plaid: Plaid account lookup.

    Returns:
        The normalized :class:`TransactionView`.
    """
    amount = -tx.amount

    category_name = ""
    category_group = ""
    tx_type = TYPE_INCOME if amount > 0 else TYPE_EXPENSE

    # A resolved category always wins over the amount sign.
    meta = categories.get(tx.category_id) if tx.category_id is not None else None
    if meta is not None:
        category_name = meta.name
        category_group = meta.group
        if meta.is_income:
            tx_type = TYPE_INCOME
        elif meta.name == TRANSFER_CATEGORY_NAME:
            tx_type = TYPE_TRANSFER
        else:
            tx_type = TYPE_EXPENSE

    account, institution = _resolve_account(tx, manual, plaid)

    return TransactionView(
        id=tx.id,
        date=tx.date,
        description=tx.payee,
        category=category_name,
        amount=amount,
        account=account,
        institution=institution,
        group=category_group,
        type=tx_type,
        notes=tx.notes if tx.notes is not None else "",
        tags=", ".join(_resolve_tag_names(tx, tags)),
        status=tx.status,
        is_pending=tx.is_pending,
    )


def to_category_views(categories: list[Category]) -> list[CategoryView]:
    """Build one row per non-archived category, in listing order."""
    group_names = {c.id: c.name for c in categories if c.is_group}

    views: list[CategoryView] = []
    for c in categories:
        if c.archived:
            continue
        group = group_names.get(c.group_id, "") if c.group_id is not None else ""
        views.append(
            CategoryView(
                id=c.id,
                name=c.name,
                group=group,
                is_income=c.is_income,
                exclude_from_totals=c.exclude_from_totals,
            )
        )
    return views


def _resolve_tag_names(tx: Transaction, tags: dict[int, str]) -> list[str]:
    """Return the sorted names of the known tags on *tx*; unknown ids are dropped."""
    names: list[str] = []
    for tag_id in tx.tag_ids:
        name = tags.get(tag_id)
        if name is None:
            logger.debug("Transaction %d references unknown tag %d", tx.id, tag_id)
            continue
        names.append(name)
    return sorted(names)


def _resolve_account(
    tx: Transaction,
    manual: dict[int, AccountMeta],
    plaid: dict[int, AccountMeta],
) -> tuple[str, str]:
    """Return ``(display, institution)`` for the account behind *tx*."""
    if tx.manual_account_id is not None:
        info = manual.get(tx.manual_account_id)
        if info is None:
            logger.debug("Unknown manual account %d", tx.manual_account_id)
            return f"manual:{tx.manual_account_id}", ""
        return info.display_name, info.institution

    if tx.plaid_account_id is not None:
        info = plaid.get(tx.plaid_account_id)
        if info is None:
            logger.debug("Unknown plaid account %d", tx.plaid_account_id)
            return f"plaid:{tx.plaid_account_id}", ""
        return info.display_name, info.institution

    return CASH_ACCOUNT, ""
