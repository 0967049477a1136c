"""Lunch Money API client.

Wraps a single :class:`httpx.Client` configured with the base URL, bearer
token and JSON headers. Every call is a blocking round trip; nothing is
retried or cached. Non-success responses are decoded into :class:`APIError`.
Transport failures (connection errors, timeouts) are raised by httpx
unchanged.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal, InvalidOperation

import httpx

from lunchmoney_cli.models import (
    DEFAULT_BASE_URL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEOUT,
    Category,
    ListTransactionsParams,
    ManualAccount,
    PlaidAccount,
    Tag,
    Transaction,
)

logger = logging.getLogger(__name__)


class LunchMoneyError(Exception):
    """Base exception for Lunch Money client errors."""


class APIError(LunchMoneyError):
    """The API answered with an unexpected HTTP status.

    Attributes:
        status_code: HTTP status of the response.
        message: Messages decoded from the error envelope joined with
            ``"; "``, the trimmed raw body when the body is not JSON, or an
            empty string.
        response_body: The raw response text.
    """

    def __init__(
        self,
        status_code: int,
        message: str = "",
        response_body: str | None = None,
    ):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body

        text = f"api request failed with status {status_code}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


class PaginationError(LunchMoneyError):
    """The server claimed more pages exist but returned an empty page."""


class LunchMoneyClient:
    """
    Client for the Lunch Money v2 API.

    Features:
    - Paginated transaction listing
    - Categories, tags, manual and Plaid account listings
    - Single transaction update and bulk mark-reviewed

    Usable as a context manager; the underlying connection pool is closed
    on exit.
    """

    DEFAULT_TIMEOUT = DEFAULT_TIMEOUT

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize Lunch Money client.

        Args:
            api_key: Personal access token, sent as a bearer token.
            base_url: API root, e.g. ``https://api.lunchmoney.dev/v2``.
            timeout: Overall timeout per request, in seconds.
            transport: Optional httpx transport (tests pass a
                :class:`httpx.MockTransport`).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> LunchMoneyClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -----------------------------------------------------------------------
    # Transactions
    # -----------------------------------------------------------------------

    def list_transactions(self, params: ListTransactionsParams) -> list[Transaction]:
        """Fetch every transaction matching *params*, following pagination.

        The offset advances by the number of rows in the previous page until
        the server reports ``has_more = false``. Pages are concatenated in
        server order.

        Raises:
            ValueError: If a date is missing, or if neither or both of
                ``status`` and ``is_pending`` are set.
            PaginationError: If a page is empty while ``has_more`` is true.
            APIError: On a non-200 response.
        """
        if not params.start_date:
            raise ValueError("start date is required")
        if not params.end_date:
            raise ValueError("end date is required")
        if params.status and params.is_pending:
            raise ValueError("status and is_pending filters are mutually exclusive")
        if not params.status and not params.is_pending:
            raise ValueError("either a status or the is_pending filter is required")

        limit = params.limit if params.limit and params.limit > 0 else DEFAULT_PAGE_SIZE

        transactions: list[Transaction] = []
        offset = 0

        while True:
            query: dict[str, str | int] = {
                "start_date": params.start_date,
                "end_date": params.end_date,
                "limit": limit,
                "offset": offset,
            }
            if params.is_pending:
                query["is_pending"] = "true"
            else:
                query["status"] = params.status

            body = self._request("GET", "/transactions", params=query)
            page = _parse_items(body, "transactions", _parse_transaction)
            transactions.extend(page)

            has_more = bool(body.get("has_more"))
            logger.debug(
                "Fetched %d transactions at offset %d (has_more=%s)",
                len(page),
                offset,
                has_more,
            )
            if not has_more:
                break
            if not page:
                raise PaginationError(
                    "pagination indicated more results but received empty page"
                )
            offset += len(page)

        return transactions

    def update_transaction(
        self,
        tx_id: int,
        category_id: int | None = None,
        note: str | None = None,
    ) -> Transaction:
        """Set the category and/or note of one transaction.

        Only the supplied fields are sent.

        Raises:
            ValueError: If neither *category_id* nor *note* is given.
            APIError: On a response other than 200 or 201.
        """
        if category_id is None and note is None:
            raise ValueError("must provide category_id and/or note")

        payload: dict[str, int | str] = {}
        if category_id is not None:
            payload["category_id"] = category_id
        if note is not None:
            payload["notes"] = note

        body = self._request(
            "PUT",
            f"/transactions/{tx_id}",
            payload=payload,
            expected=(200, 201),
        )
        if not isinstance(body, dict):
            raise LunchMoneyError("unexpected response shape: expected a transaction object")
        return _parse_item(_parse_transaction, body)

    def mark_reviewed(self, tx_ids: list[int]) -> list[Transaction]:
        """Mark every transaction in *tx_ids* as reviewed in one request.

        Returns:
            The transactions the server reports as updated.

        Raises:
            ValueError: If *tx_ids* is empty.
            APIError: On a non-200 response.
        """
        if not tx_ids:
            raise ValueError("at least one transaction id is required")

        payload = {"transactions": [{"id": tx_id, "status": "reviewed"} for tx_id in tx_ids]}
        body = self._request("PUT", "/transactions", payload=payload)
        return _parse_items(body, "transactions", _parse_transaction)

    # -----------------------------------------------------------------------
    # Auxiliary resources
    # -----------------------------------------------------------------------

    def list_categories(self) -> list[Category]:
        """Fetch categories and category groups in flattened form."""
        body = self._request("GET", "/categories", params={"format": "flattened"})
        return _parse_items(body, "categories", _parse_category)

    def list_tags(self) -> list[Tag]:
        body = self._request("GET", "/tags")
        return _parse_items(body, "tags", _parse_tag)

    def list_manual_accounts(self) -> list[ManualAccount]:
        body = self._request("GET", "/manual_accounts")
        return _parse_items(body, "manual_accounts", _parse_manual_account)

    def list_plaid_accounts(self) -> list[PlaidAccount]:
        body = self._request("GET", "/plaid_accounts")
        return _parse_items(body, "plaid_accounts", _parse_plaid_account)

    # -----------------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        payload: dict | None = None,
        expected: tuple[int, ...] = (200,),
    ):
        """Send one request and return the decoded JSON body."""
        logger.debug("%s %s params=%s", method, path, params)
        response = self._http.request(method, path, params=params, json=payload)

        if response.status_code not in expected:
            raise _decode_api_error(response)

        try:
            return response.json()
        except ValueError as exc:
            raise LunchMoneyError(f"failed to decode response: {exc}") from exc


def _decode_api_error(response: httpx.Response) -> APIError:
    """Build an :class:`APIError` from a non-success response.

    The error envelope is ``{"message": str, "errors": [{"errMsg": str}]}``,
    both keys optional. A body that is not JSON becomes the message as-is
    (trimmed).
    """
    body = response.text
    try:
        envelope = json.loads(body)
    except ValueError:
        return APIError(response.status_code, body.strip(), response_body=body)

    parts: list[str] = []
    if isinstance(envelope, dict):
        message = envelope.get("message")
        if isinstance(message, str) and message:
            parts.append(message)
        details = envelope.get("errors")
        if isinstance(details, list):
            for detail in details:
                if not isinstance(detail, dict):
                    continue
                err_msg = detail.get("errMsg")
                if isinstance(err_msg, str) and err_msg:
                    parts.append(err_msg)

    return APIError(response.status_code, "; ".join(parts), response_body=body)


def _envelope_items(body: object, key: str) -> list[dict]:
    """Return the list stored under *key* in a response envelope."""
    if not isinstance(body, dict):
        raise LunchMoneyError(f"unexpected response shape: expected an object with {key!r}")
    items = body.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise LunchMoneyError(f"unexpected response shape: {key!r} is not a list")
    return items


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)


def _to_decimal(value: object) -> Decimal:
    """Convert a JSON number or numeric string to Decimal.

    Floats go through ``str`` so ``42.5`` becomes ``Decimal("42.5")`` rather
    than its binary expansion.
    """
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise LunchMoneyError(f"invalid amount: {value!r}") from exc


def _parse_item(parse, data: object):
    """Apply *parse* to one response item, mapping shape errors to LunchMoneyError."""
    try:
        return parse(data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise LunchMoneyError(f"unexpected response shape: {exc!r}") from exc


def _parse_items(body: object, key: str, parse) -> list:
    return [_parse_item(parse, item) for item in _envelope_items(body, key)]


def _parse_transaction(data: dict) -> Transaction:
    # Only the base-currency amount is used; a missing value decodes as zero.
    return Transaction(
        id=int(data["id"]),
        date=data.get("date") or "",
        payee=data.get("payee") or "",
        amount=_to_decimal(data.get("to_base")),
        category_id=_optional_int(data.get("category_id")),
        manual_account_id=_optional_int(data.get("manual_account_id")),
        plaid_account_id=_optional_int(data.get("plaid_account_id")),
        notes=data.get("notes"),
        status=data.get("status") or "",
        is_pending=bool(data.get("is_pending")),
        tag_ids=[int(tag_id) for tag_id in data.get("tag_ids") or []],
    )


def _parse_category(data: dict) -> Category:
    return Category(
        id=int(data["id"]),
        name=data.get("name") or "",
        is_income=bool(data.get("is_income")),
        exclude_from_totals=bool(data.get("exclude_from_totals")),
        group_id=_optional_int(data.get("group_id")),
        is_group=bool(data.get("is_group")),
        archived=bool(data.get("archived")),
    )


def _parse_tag(data: dict) -> Tag:
    return Tag(id=int(data["id"]), name=data.get("name") or "")


def _parse_manual_account(data: dict) -> ManualAccount:
    return ManualAccount(
        id=int(data["id"]),
        name=data.get("name") or "",
        institution_name=data.get("institution_name"),
        display_name=data.get("display_name"),
    )


def _parse_plaid_account(data: dict) -> PlaidAccount:
    return PlaidAccount(
        id=int(data["id"]),
        name=data.get("name") or "",
        institution_name=data.get("institution_name") or "",
        display_name=data.get("display_name"),
    )
