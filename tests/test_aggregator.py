"""Tests for the accounts and bills views."""

from datetime import date
from decimal import Decimal

from moonlit_ledger.aggregator import (
    aggregate_accounts,
    aggregate_bills,
    content_lines,
    parse_account_entries,
)
from moonlit_ledger.records import DateRange

MARCH = DateRange(date(2025, 3, 1), date(2025, 3, 3))


class TestAccountEntries:
    def test_several_entries_on_one_line(self):
        assert parse_account_entries("Jeanny=10; Nina=80") == [
            ("Jeanny", Decimal("10")),
            ("Nina", Decimal("80")),
        ]

    def test_malformed_entries_are_dropped(self):
        assert parse_account_entries("no amount; a=b=c; Anna=abc; =5; Lyn= 20") == [
            ("Lyn", Decimal("20")),
        ]

    def test_content_lines_drop_blanks(self):
        assert content_lines("\\nJeanny=10\\n\\nNina=5\\n") == ["Jeanny=10", "Nina=5"]


class TestAggregateAccounts:
    """Tests for account totals across a date range."""

    def test_totals_per_name(self, week_store):
        report = aggregate_accounts(week_store, MARCH)

        assert report.total_for("Jeanny") == Decimal("15")
        assert report.total_for("Nina") == Decimal("180")
        assert report.total_for("Nobody") == Decimal("0")
        assert report.render_totals() == (
            "Total Accounts :\n\nJeanny: 10+5 = 15\nNina: 80+100 = 180"
        )

    def test_header_uses_padded_dates(self, week_store):
        report = aggregate_accounts(week_store, MARCH)
        assert report.header == "Moonlit Bakery Accounts from 03/01/2025 to 03/03/2025:"

    def test_empty_sections_render_none(self, week_store):
        report = aggregate_accounts(week_store, MARCH)

        assert len(report.days) == 3
        assert report.render_days()[0] == (
            "Date: 3/1/2025:\n"
            "  Account AM:\n"
            "    Jeanny=10; Nina=80\n"
            "  Account PM:\n"
            "    None\n"
            "\n\n."
        )

    def test_range_limits_days(self, week_store):
        report = aggregate_accounts(week_store, DateRange(date(2025, 3, 3), date(2025, 3, 3)))

        assert [day.record_date for day in report.days] == [date(2025, 3, 3)]
        assert report.render_totals() == "Total Accounts :\n\nNina: 100 = 100"

    def test_no_records(self):
        report = aggregate_accounts([], MARCH)
        assert report.days == []
        assert report.render_totals() == "Total Accounts :"


class TestAggregateBills:
    def test_empty_days_are_omitted(self, week_store):
        report = aggregate_bills(week_store, MARCH)

        assert report.header == "Check Bills from 03/01/2025 to 03/03/2025"
        assert report.render_days() == ["Date 03/01/2025:\n1. Meralco 2300\nWater 410\n\n"]

    def test_other_field(self, week_store):
        report = aggregate_bills(week_store, MARCH, key="accountspm")
        assert report.days == [(date(2025, 3, 3), "Nina=100")]
