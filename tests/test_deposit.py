"""Tests for the deposit rollup."""

from decimal import Decimal

from moonlit_ledger.deposit import (
    DEPOSIT_LABELS,
    blank_deposit_rows,
    calculate_deposit,
    encode_deposit_summary,
    parse_deposit_summary,
    sum_expense_lines,
)


def _rows(**values: str) -> dict[str, str]:
    rows = blank_deposit_rows()
    for label, value in values.items():
        rows[label.replace("_", " ")] = value
    return rows


class TestDepositSummary:
    def test_every_row_keeps_its_escape(self):
        text = encode_deposit_summary({"Sales AM": "1200", "NS": ""})
        assert text == "Sales AM: 1200\\nNS: \\n"

    def test_expenses_span_lines_until_grand_total(self):
        rows = parse_deposit_summary(
            "Sales AM: 1200\\nExpenses: Gas=100\\nFlour=50\\n\\nGrand Net Total: 1050\\n"
        )

        assert rows == {
            "Sales AM": "1200",
            "Expenses": "Gas=100\\nFlour=50\\n",
            "Grand Net Total": "1050",
        }

    def test_lines_without_label_are_dropped(self):
        assert parse_deposit_summary("stray\\nNS: 40") == {"NS": "40"}

    def test_empty_summary(self):
        assert parse_deposit_summary("") == {}

    def test_labels_in_display_order(self):
        assert DEPOSIT_LABELS[0] == "Sales AM"
        assert DEPOSIT_LABELS[-1] == "Deposited (Y or N)"
        assert len(DEPOSIT_LABELS) == 9


class TestCalculateDeposit:
    """Tests for total sales and grand net total."""

    def test_grand_net_total(self):
        rows = _rows(
            Sales_AM="1200",
            Sales_PM="1358",
            Coffee_Sales="300",
            Total_Previous="500",
            Expenses="Gas=100\nFlour=50",
        )

        result = calculate_deposit(rows)

        assert result.total_sales == Decimal("2858")
        assert result.expenses == Decimal("150")
        assert result.grand_net_total == Decimal("3208")

    def test_blank_rows_give_zero(self):
        result = calculate_deposit(blank_deposit_rows())
        assert result.grand_net_total == Decimal("0")

    def test_missing_rows_are_zero(self):
        assert calculate_deposit({"NS": "40"}).total_sales == Decimal("40")


def test_sum_expense_lines_skips_unpriced_lines():
    value = "1. Gas=100\\nnote only\\nFlour=abc\\nOil=25.5\\na=b=c"
    assert sum_expense_lines(value) == Decimal("125.5")
