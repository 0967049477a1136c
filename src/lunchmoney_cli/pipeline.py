"""Pipeline orchestration for the Lunch Money CLI.

Composes the stages of one ``lm tx list`` invocation:

1. **Fetch** -- transactions (all pages), then categories, tags, manual
   accounts and Plaid accounts, one request after the other.
2. **Index** -- build the identifier-keyed lookup tables.
3. **Filter** -- drop exclude-from-totals transactions (reviewed listings
   only).
4. **Normalize** -- join each transaction into a
   :class:`~lunchmoney_cli.models.TransactionView`.
5. **Sort** -- newest first.

Any error aborts the whole run; there is no partial result.
"""

from __future__ import annotations

import logging

from lunchmoney_cli.client import LunchMoneyClient
from lunchmoney_cli.filters import (
    filter_excluded_from_totals,
    sort_categories,
    sort_newest_first,
)
from lunchmoney_cli.lookups import (
    build_category_lookup,
    build_manual_account_lookup,
    build_plaid_account_lookup,
    build_tag_lookup,
)
from lunchmoney_cli.models import (
    DEFAULT_PAGE_SIZE,
    CategoryView,
    ListTransactionsParams,
    TransactionView,
)
from lunchmoney_cli.normalize import to_category_views, to_transaction_view

logger = logging.getLogger(__name__)

STATUS_REVIEWED = "reviewed"
STATUS_UNREVIEWED = "unreviewed"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def fetch_transaction_views(
    client: LunchMoneyClient,
    start_date: str,
    end_date: str,
    unreviewed: bool = False,
    include_pending: bool = False,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> list[TransactionView]:
    """Fetch, join, filter and sort the transactions in a date range.

    Args:
        client: Authenticated API client.
        start_date: First day, ``YYYY-MM-DD``.
        end_date: Last day, ``YYYY-MM-DD``.
        unreviewed: List unreviewed instead of reviewed transactions.
        include_pending: List pending transactions only. Pending
            transactions are always unreviewed, so the exclude-from-totals
            filter is skipped as for *unreviewed*.
        page_size: Transactions requested per page.

    Returns:
        The views, newest first.
    """
    params = ListTransactionsParams(start_date=start_date, end_date=end_date, limit=page_size)
    if include_pending:
        params.is_pending = True
    else:
        params.status = STATUS_UNREVIEWED if unreviewed else STATUS_REVIEWED

    # -- Stage 1: Fetch -------------------------------------------------------
    transactions = client.list_transactions(params)
    logger.info("Fetched %d transactions (%s to %s)", len(transactions), start_date, end_date)

    categories = client.list_categories()
    tags = client.list_tags()
    manual_accounts = client.list_manual_accounts()
    plaid_accounts = client.list_plaid_accounts()
    logger.info(
        "Fetched %d categories, %d tags, %d manual accounts, %d plaid accounts",
        len(categories),
        len(tags),
        len(manual_accounts),
        len(plaid_accounts),
    )

    # -- Stage 2: Index -------------------------------------------------------
    category_lookup = build_category_lookup(categories)
    tag_lookup = build_tag_lookup(tags)
    manual_lookup = build_manual_account_lookup(manual_accounts)
    plaid_lookup = build_plaid_account_lookup(plaid_accounts)

    # -- Stage 3: Filter ------------------------------------------------------
    if not unreviewed and not include_pending:
        kept = filter_excluded_from_totals(transactions, category_lookup)
        if len(kept) != len(transactions):
            logger.info(
                "Excluded %d transactions in exclude-from-totals categories",
                len(transactions) - len(kept),
            )
        transactions = kept

    # -- Stage 4: Normalize ---------------------------------------------------
    views = [
        to_transaction_view(tx, category_lookup, tag_lookup, manual_lookup, plaid_lookup)
        for tx in transactions
    ]

    # -- Stage 5: Sort --------------------------------------------------------
    return sort_newest_first(views)


def fetch_category_views(client: LunchMoneyClient) -> list[CategoryView]:
    """Fetch categories and return the non-archived ones sorted by group and name."""
    categories = client.list_categories()
    logger.info("Fetched %d categories", len(categories))
    return sort_categories(to_category_views(categories))
