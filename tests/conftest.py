"""Shared pytest fixtures for Lunch Money CLI tests.

Provides reusable fixtures for:
- Raw API payloads (categories, tags, manual and Plaid accounts) shaped like
  the JSON the server returns.
- fake_api: an in-memory stand-in for the Lunch Money API, served through
  ``httpx.MockTransport`` so the real client code runs end to end without
  network access.
"""

from __future__ import annotations

import json

import httpx
import pytest

from lunchmoney_cli.client import LunchMoneyClient

BASE_URL = "https://api.lunchmoney.test/v2"
API_KEY = "test-api-key"


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


class FakeLunchMoney:
    """Routes requests to canned JSON responses and records every request.

    ``transaction_pages`` is served in order, one page per GET
    ``/transactions``. Requests beyond the last page get the last page again.
    """

    def __init__(
        self,
        transaction_pages: list[dict] | None = None,
        categories: list[dict] | None = None,
        tags: list[dict] | None = None,
        manual_accounts: list[dict] | None = None,
        plaid_accounts: list[dict] | None = None,
    ) -> None:
        self.transaction_pages = transaction_pages or [{"transactions": [], "has_more": False}]
        self.categories = categories or []
        self.tags = tags or []
        self.manual_accounts = manual_accounts or []
        self.plaid_accounts = plaid_accounts or []
        self.requests: list[httpx.Request] = []
        self._page_index = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "GET" and path.endswith("/transactions"):
            page = self.transaction_pages[min(self._page_index, len(self.transaction_pages) - 1)]
            self._page_index += 1
            return httpx.Response(200, json=page)
        if request.method == "GET" and path.endswith("/categories"):
            return httpx.Response(200, json={"categories": self.categories})
        if request.method == "GET" and path.endswith("/tags"):
            return httpx.Response(200, json={"tags": self.tags})
        if request.method == "GET" and path.endswith("/manual_accounts"):
            return httpx.Response(200, json={"manual_accounts": self.manual_accounts})
        if request.method == "GET" and path.endswith("/plaid_accounts"):
            return httpx.Response(200, json={"plaid_accounts": self.plaid_accounts})
        if request.method == "PUT" and path.endswith("/transactions"):
            body = json.loads(request.content)
            updated = [
                {"id": u["id"], "date": "2026-01-15", "payee": "", "to_base": 0, "status": u["status"]}
                for u in body["transactions"]
            ]
            return httpx.Response(200, json={"transactions": updated})

        return httpx.Response(404, json={"message": f"no route for {request.method} {path}"})

    def client(self) -> LunchMoneyClient:
        return LunchMoneyClient(
            API_KEY,
            base_url=BASE_URL,
            transport=httpx.MockTransport(self.handler),
        )

    def paths(self) -> list[str]:
        """Request paths relative to the API root, in request order."""
        prefix = httpx.URL(BASE_URL).path
        return [r.url.path[len(prefix):] for r in self.requests]


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------


def transaction_payload(
    tx_id: int,
    date: str = "2026-01-15",
    payee: str = "Whole Foods",
    to_base: float = 42.5,
    category_id: int | None = None,
    manual_account_id: int | None = None,
    plaid_account_id: int | None = None,
    notes: str | None = None,
    status: str = "reviewed",
    is_pending: bool = False,
    tag_ids: list[int] | None = None,
) -> dict:
    """Build one transaction object as returned by GET /transactions."""
    return {
        "id": tx_id,
        "date": date,
        "payee": payee,
        "amount": f"{to_base:.4f}",
        "currency": "usd",
        "to_base": to_base,
        "category_id": category_id,
        "manual_account_id": manual_account_id,
        "plaid_account_id": plaid_account_id,
        "notes": notes,
        "status": status,
        "is_pending": is_pending,
        "tag_ids": tag_ids or [],
    }


@pytest.fixture
def category_payloads() -> list[dict]:
    """Flattened categories: two groups, leaves, an archived entry and an orphan.

    - 100 "Food" (group): 1 "Groceries", 2 "Restaurants"
    - 200 "Income" (group): 3 "Salary" (income)
    - 4 "Payment, Transfer" (exclude from totals, no group)
    - 5 "Old Stuff" (archived)
    - 6 "Orphan" (group id 999 does not exist)
    """
    return [
        {"id": 1, "name": "Groceries", "is_income": False, "exclude_from_totals": False,
         "group_id": 100, "is_group": False, "archived": False},
        {"id": 100, "name": "Food", "is_income": False, "exclude_from_totals": False,
         "group_id": None, "is_group": True, "archived": False},
        {"id": 2, "name": "Restaurants", "is_income": False, "exclude_from_totals": False,
         "group_id": 100, "is_group": False, "archived": False},
        {"id": 200, "name": "Income", "is_income": True, "exclude_from_totals": False,
         "group_id": None, "is_group": True, "archived": False},
        {"id": 3, "name": "Salary", "is_income": True, "exclude_from_totals": False,
         "group_id": 200, "is_group": False, "archived": False},
        {"id": 4, "name": "Payment, Transfer", "is_income": False, "exclude_from_totals": True,
         "group_id": None, "is_group": False, "archived": False},
        {"id": 5, "name": "Old Stuff", "is_income": False, "exclude_from_totals": False,
         "group_id": None, "is_group": False, "archived": True},
        {"id": 6, "name": "Orphan", "is_income": False, "exclude_from_totals": False,
         "group_id": 999, "is_group": False, "archived": False},
    ]


@pytest.fixture
def tag_payloads() -> list[dict]:
    return [
        {"id": 10, "name": "vacation"},
        {"id": 11, "name": "business"},
        {"id": 12, "name": "reimbursable"},
    ]


@pytest.fixture
def manual_account_payloads() -> list[dict]:
    return [
        {"id": 20, "name": "Checking", "institution_name": "  Local CU  ", "display_name": ""},
        {"id": 21, "name": "Savings", "institution_name": None, "display_name": " Rainy Day "},
    ]


@pytest.fixture
def plaid_account_payloads() -> list[dict]:
    return [
        {"id": 30, "name": "Credit Card", "institution_name": "Chase", "display_name": None},
        {"id": 31, "name": "Checking", "institution_name": "Ally", "display_name": "Main Checking"},
    ]


@pytest.fixture
def fake_api(
    category_payloads: list[dict],
    tag_payloads: list[dict],
    manual_account_payloads: list[dict],
    plaid_account_payloads: list[dict],
) -> FakeLunchMoney:
    """A FakeLunchMoney with the sample auxiliary resources and no transactions."""
    return FakeLunchMoney(
        categories=category_payloads,
        tags=tag_payloads,
        manual_accounts=manual_account_payloads,
        plaid_accounts=plaid_account_payloads,
    )
