"""Core data models for the Lunch Money CLI.

This module defines the dataclasses shared by the client, the lookup
builders, the normalizer, and the renderer. It has zero internal imports --
everything depends on it, but it depends on nothing within the package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

DEFAULT_BASE_URL = "https://api.lunchmoney.dev/v2"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PAGE_SIZE = 1000
DEFAULT_API_KEY_ENV = "LUNCHMONEY_API_KEY"


# ---------------------------------------------------------------------------
# Remote resources
# ---------------------------------------------------------------------------


@dataclass
class Transaction:
    """A transaction as returned by the ``/transactions`` endpoint.

    Attributes:
        id: Server-assigned transaction identifier.
        date: Transaction date as an ISO ``YYYY-MM-DD`` string.
        payee: Payee or description text.
        amount: Amount in the account holder's base currency. Upstream
            convention: positive means money leaving the account.
        category_id: Assigned category, or None if uncategorized.
        manual_account_id: Manual account, or None.
        plaid_account_id: Linked (Plaid) account, or None. At most one of
            the two account ids is set; neither means a cash transaction.
        notes: Free-text note, or None.
        status: ``"reviewed"`` or ``"unreviewed"``.
        is_pending: True while the bank still reports it as pending.
        tag_ids: Identifiers of the tags attached to the transaction.
    """

    id: int
    date: str
    payee: str
    amount: Decimal
    category_id: int | None = None
    manual_account_id: int | None = None
    plaid_account_id: int | None = None
    notes: str | None = None
    status: str = ""
    is_pending: bool = False
    tag_ids: list[int] = field(default_factory=list)


@dataclass
class Category:
    """An entry from the flattened ``/categories`` listing.

    Groups and leaf categories share one collection. A leaf points at its
    group through ``group_id``; groups have ``is_group`` set.
    """

    id: int
    name: str
    is_income: bool = False
    exclude_from_totals: bool = False
    group_id: int | None = None
    is_group: bool = False
    archived: bool = False


@dataclass
class Tag:
    """A transaction tag."""

    id: int
    name: str


@dataclass
class ManualAccount:
    """A manually-tracked account."""

    id: int
    name: str
    institution_name: str | None = None
    display_name: str | None = None


@dataclass
class PlaidAccount:
    """An account linked through Plaid. Always has an institution."""

    id: int
    name: str
    institution_name: str = ""
    display_name: str | None = None


@dataclass
class ListTransactionsParams:
    """Query for a paginated transaction listing.

    Exactly one of ``status`` and ``is_pending`` must be set.

    Attributes:
        start_date: First day of the range, ``YYYY-MM-DD``.
        end_date: Last day of the range, ``YYYY-MM-DD``.
        status: ``"reviewed"`` or ``"unreviewed"``.
        is_pending: Restrict the listing to pending transactions.
        limit: Page size. Values <= 0 fall back to 1000.
    """

    start_date: str
    end_date: str
    status: str | None = None
    is_pending: bool | None = None
    limit: int = DEFAULT_PAGE_SIZE


# ---------------------------------------------------------------------------
# Lookup values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CategoryMeta:
    """Resolved display data for one category id."""

    name: str
    group: str = ""
    is_income: bool = False
    exclude_from_totals: bool = False


@dataclass(frozen=True)
class AccountMeta:
    """Resolved display data for one manual or Plaid account id."""

    display_name: str
    institution: str = ""


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


@dataclass
class TransactionView:
    """Display-ready transaction produced by the normalizer.

    Attributes:
        id: Transaction identifier.
        date: ``YYYY-MM-DD`` date string.
        description: Payee text.
        category: Category name, or empty string.
        amount: Signed amount. Positive means income.
        account: Account display name, a ``manual:<id>`` / ``plaid:<id>``
            placeholder, or ``"Cash Transaction"``.
        institution: Institution name, or empty string.
        group: Category group name, or empty string.
        type: ``"expense"``, ``"income"`` or ``"transfer"``.
        notes: Note text, or empty string.
        tags: Sorted tag names joined with ``", "``.
        status: Review status as reported by the server.
        is_pending: Pending flag as reported by the server.
    """

    id: int
    date: str
    description: str
    category: str
    amount: Decimal
    account: str
    institution: str
    group: str
    type: str
    notes: str
    tags: str
    status: str
    is_pending: bool

    def to_dict(self) -> dict:
        """Return the JSON output shape (amount as a float)."""
        return {
            "id": self.id,
            "date": self.date,
            "description": self.description,
            "category": self.category,
            "amount": float(self.amount),
            "account": self.account,
            "institution": self.institution,
            "group": self.group,
            "type": self.type,
            "notes": self.notes,
            "tags": self.tags,
            "status": self.status,
            "is_pending": self.is_pending,
        }


@dataclass
class CategoryView:
    """Display-ready category row for ``lm category list``."""

    id: int
    name: str
    group: str
    is_income: bool
    exclude_from_totals: bool

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "group": self.group,
            "is_income": self.is_income,
            "exclude_from_totals": self.exclude_from_totals,
        }


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class AppConfig:
    """Application configuration loaded from ``lm.toml``.

    Attributes:
        base_url: API root. Default: ``https://api.lunchmoney.dev/v2``.
        timeout: Per-request timeout in seconds. Default: 30.
        page_size: Transactions requested per page. Default: 1000.
        api_key_env: Name of the environment variable holding the API key.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    api_key_env: str = DEFAULT_API_KEY_ENV
