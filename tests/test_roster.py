"""Tests for duty-roster parsing and attendance accumulation."""

from datetime import date
from decimal import Decimal

import pytest

from moonlit_ledger.records import DateRange
from moonlit_ledger.roster import (
    ROSTER_RULES,
    accumulate_attendance,
    classify_token,
    parse_roster,
    parse_roster_entries,
)


class TestClassifyToken:
    """Tests for single roster tokens."""

    def test_overtime(self):
        entry = classify_token("Nina(OT:3)")
        assert entry.name == "Nina"
        assert entry.fraction == Decimal("1.25")
        assert entry.rule == "overtime"

    def test_undertime(self):
        entry = classify_token("Anna(UT:2)")
        assert entry.name == "Anna"
        assert abs(entry.fraction - Decimal(1) / Decimal(6)) < Decimal("1e-20")

    def test_full_day(self):
        entry = classify_token(" Romelyn ")
        assert entry.name == "Romelyn"
        assert entry.fraction == Decimal("1")

    @pytest.mark.parametrize("token", ["Jeanny(HD)", "Jeanny(hd)", "Jeanny (HD)"])
    def test_half_day(self, token):
        entry = classify_token(token)
        assert entry.name == "Jeanny"
        assert entry.fraction == Decimal("0.5")

    def test_fractional_overtime_hours(self):
        assert classify_token("Nina(ot:1.5)").fraction == Decimal("1.125")

    def test_custom_shift_length(self):
        assert classify_token("Nina(OT:4)", shift_hours=Decimal("8")).fraction == Decimal("1.5")

    def test_shift_length_from_settings(self, monkeypatch):
        monkeypatch.setenv("MOONLIT_SHIFT_HOURS", "10")
        assert classify_token("Anna(UT:5)").fraction == Decimal("0.5")

    @pytest.mark.parametrize("token", ["", "   ", "Nina(OT:abc)", "(HD)", "Anna(UT:)"])
    def test_unparseable_tokens_are_skipped(self, token):
        assert classify_token(token) is None

    def test_rules_are_in_precedence_order(self):
        assert [rule.name for rule in ROSTER_RULES] == [
            "half_day",
            "overtime",
            "undertime",
            "full_day",
        ]


class TestParseRoster:
    def test_mixed_roster(self):
        attendance = parse_roster("Romelyn, Nina(OT:3), Anna(UT:6), Jeanny(HD)")
        assert attendance == {
            "Romelyn": Decimal("1"),
            "Nina": Decimal("1.25"),
            "Anna": Decimal("0.5"),
            "Jeanny": Decimal("0.5"),
        }

    def test_empty_tokens_contribute_nothing(self):
        assert parse_roster("Nina,, ,Anna,") == {"Nina": Decimal("1"), "Anna": Decimal("1")}

    def test_repeated_name_is_summed(self):
        assert parse_roster("Nina(HD), Nina(HD)") == {"Nina": Decimal("1.0")}

    def test_entries_keep_order(self):
        names = [entry.name for entry in parse_roster_entries("B, A(HD), C")]
        assert names == ["B", "A", "C"]

    def test_empty_roster(self):
        assert parse_roster("") == {}


class TestAccumulateAttendance:
    """Tests for summing attendance across dates."""

    def test_full_range(self, week_store):
        attendance = accumulate_attendance(
            week_store, DateRange(date(2025, 3, 1), date(2025, 3, 3))
        )

        assert list(attendance) == ["Romelyn", "Nina", "Anna", "Jeanny"]
        assert attendance["Romelyn"] == Decimal("2.5")
        assert attendance["Nina"] == Decimal("2.25")
        assert attendance["Jeanny"] == Decimal("0.5")

    def test_dates_outside_range_are_ignored(self, week_store):
        attendance = accumulate_attendance(
            week_store, DateRange(date(2025, 3, 2), date(2025, 3, 2))
        )
        assert attendance == {"Romelyn": Decimal("1"), "Jeanny": Decimal("0.5")}

    def test_no_cap_on_total(self, week_store):
        for record in week_store:
            record.roster = 'duties="Nina(OT:12)"'
        attendance = accumulate_attendance(
            week_store, DateRange(date(2025, 3, 1), date(2025, 3, 3))
        )
        assert attendance == {"Nina": Decimal("6")}
