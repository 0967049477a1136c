"""Tests for lunchmoney_cli.lookups -- identifier-keyed lookup tables."""

from __future__ import annotations

from lunchmoney_cli.lookups import (
    build_category_lookup,
    build_manual_account_lookup,
    build_plaid_account_lookup,
    build_tag_lookup,
)
from lunchmoney_cli.models import (
    AccountMeta,
    Category,
    CategoryMeta,
    ManualAccount,
    PlaidAccount,
    Tag,
)


class TestCategoryLookup:
    """Two-pass category lookup with group resolution."""

    def test_leaf_resolves_group_name(self):
        categories = [
            Category(id=100, name="Food", is_group=True),
            Category(id=1, name="Groceries", group_id=100),
        ]
        lookup = build_category_lookup(categories)

        assert lookup[1] == CategoryMeta(name="Groceries", group="Food")

    def test_group_listed_after_leaf(self):
        """Group names resolve regardless of listing order."""
        categories = [
            Category(id=1, name="Groceries", group_id=100),
            Category(id=100, name="Food", is_group=True),
        ]
        lookup = build_category_lookup(categories)

        assert lookup[1].group == "Food"

    def test_groups_are_in_the_lookup_too(self):
        lookup = build_category_lookup([Category(id=100, name="Food", is_group=True)])

        assert lookup[100] == CategoryMeta(name="Food", group="")

    def test_missing_group_is_empty_string(self):
        lookup = build_category_lookup([Category(id=6, name="Orphan", group_id=999)])

        assert lookup[6].group == ""

    def test_group_id_pointing_at_non_group(self):
        """A group_id that refers to a leaf does not resolve."""
        categories = [
            Category(id=1, name="Groceries"),
            Category(id=2, name="Snacks", group_id=1),
        ]
        lookup = build_category_lookup(categories)

        assert lookup[2].group == ""

    def test_flags_are_carried(self):
        categories = [
            Category(id=3, name="Salary", is_income=True),
            Category(id=4, name="Payment, Transfer", exclude_from_totals=True),
        ]
        lookup = build_category_lookup(categories)

        assert lookup[3].is_income is True
        assert lookup[3].exclude_from_totals is False
        assert lookup[4].exclude_from_totals is True

    def test_archived_categories_are_kept(self):
        """Archived categories still resolve for old transactions."""
        lookup = build_category_lookup([Category(id=5, name="Old Stuff", archived=True)])

        assert lookup[5].name == "Old Stuff"

    def test_empty(self):
        assert build_category_lookup([]) == {}


class TestTagLookup:
    def test_maps_id_to_name(self):
        lookup = build_tag_lookup([Tag(id=10, name="vacation"), Tag(id=11, name="business")])

        assert lookup == {10: "vacation", 11: "business"}


class TestManualAccountLookup:
    """Display name falls back to the raw name; institution is trimmed."""

    def test_blank_display_name_uses_raw_name(self):
        accounts = [ManualAccount(id=20, name="Checking", display_name="")]
        lookup = build_manual_account_lookup(accounts)

        assert lookup[20].display_name == "Checking"

    def test_whitespace_display_name_uses_raw_name(self):
        accounts = [ManualAccount(id=20, name="Checking", display_name="   ")]
        lookup = build_manual_account_lookup(accounts)

        assert lookup[20].display_name == "Checking"

    def test_missing_display_name_uses_raw_name(self):
        accounts = [ManualAccount(id=20, name="Checking", display_name=None)]

        assert build_manual_account_lookup(accounts)[20].display_name == "Checking"

    def test_display_name_override_is_trimmed(self):
        accounts = [ManualAccount(id=21, name="Savings", display_name=" Rainy Day ")]

        assert build_manual_account_lookup(accounts)[21].display_name == "Rainy Day"

    def test_institution_trimmed_or_empty(self):
        accounts = [
            ManualAccount(id=20, name="Checking", institution_name="  Local CU  "),
            ManualAccount(id=21, name="Savings", institution_name=None),
        ]
        lookup = build_manual_account_lookup(accounts)

        assert lookup[20] == AccountMeta(display_name="Checking", institution="Local CU")
        assert lookup[21] == AccountMeta(display_name="Savings", institution="")


class TestPlaidAccountLookup:
    """Display name falls back to "<institution> <name>"."""

    def test_no_display_name_joins_institution_and_name(self):
        accounts = [PlaidAccount(id=30, name="Credit Card", institution_name="Chase")]
        lookup = build_plaid_account_lookup(accounts)

        assert lookup[30] == AccountMeta(display_name="Chase Credit Card", institution="Chase")

    def test_display_name_override(self):
        accounts = [
            PlaidAccount(
                id=31, name="Checking", institution_name="Ally", display_name=" Main Checking "
            )
        ]
        lookup = build_plaid_account_lookup(accounts)

        assert lookup[31].display_name == "Main Checking"
        assert lookup[31].institution == "Ally"

    def test_blank_display_name_falls_back(self):
        accounts = [
            PlaidAccount(id=30, name="Credit Card", institution_name="Chase", display_name="  ")
        ]

        assert build_plaid_account_lookup(accounts)[30].display_name == "Chase Credit Card"

    def test_fallback_is_trimmed(self):
        accounts = [PlaidAccount(id=32, name="Brokerage ", institution_name="")]

        assert build_plaid_account_lookup(accounts)[32].display_name == "Brokerage"
