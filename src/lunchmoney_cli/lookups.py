"""Identifier-keyed lookup tables built from the auxiliary API listings.

Each builder makes a single pass over its input (two for categories) and
never raises on dangling references: a leaf whose group id is unknown just
gets an empty group name.
"""

from __future__ import annotations

from lunchmoney_cli.models import (
    AccountMeta,
    Category,
    CategoryMeta,
    ManualAccount,
    PlaidAccount,
    Tag,
)


def build_category_lookup(categories: list[Category]) -> dict[int, CategoryMeta]:
    """Map every category id to its name, group name and flags.

    Group names are collected first so that leaves can resolve their
    ``group_id`` regardless of listing order. Only one level of nesting
    exists, so no recursive resolution is needed.
    """
    group_names = {c.id: c.name for c in categories if c.is_group}

    lookup: dict[int, CategoryMeta] = {}
    for c in categories:
        group = group_names.get(c.group_id, "") if c.group_id is not None else ""
        lookup[c.id] = CategoryMeta(
            name=c.name,
            group=group,
            is_income=c.is_income,
            exclude_from_totals=c.exclude_from_totals,
        )
    return lookup


def build_tag_lookup(tags: list[Tag]) -> dict[int, str]:
    return {t.id: t.name for t in tags}


def build_manual_account_lookup(accounts: list[ManualAccount]) -> dict[int, AccountMeta]:
    """Display name is the trimmed override if set, else the raw name."""
    lookup: dict[int, AccountMeta] = {}
    for a in accounts:
        display = (a.display_name or "").strip()
        if not display:
            display = a.name
        institution = (a.institution_name or "").strip()
        lookup[a.id] = AccountMeta(display_name=display, institution=institution)
    return lookup


def build_plaid_account_lookup(accounts: list[PlaidAccount]) -> dict[int, AccountMeta]:
    """Display name is the trimmed override if set, else ``"<institution> <name>"``."""
    lookup: dict[int, AccountMeta] = {}
    for a in accounts:
        display = (a.display_name or "").strip()
        if not display:
            display = f"{a.institution_name} {a.name}".strip()
        lookup[a.id] = AccountMeta(display_name=display, institution=a.institution_name)
    return lookup
