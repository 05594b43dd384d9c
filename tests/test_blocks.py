"""Tests for numbered-block columns."""

from moonlit_ledger.blocks import append_numbered_block, block_lines, scan_column


class TestScanColumn:
    def test_empty_column(self):
        scan = scan_column([])
        assert scan.is_empty
        assert scan.last_number == 0

    def test_finds_highest_header_and_last_row(self):
        scan = scan_column(["1. Flour", "Sugar", "", "4.", "Gas", "", "2. Oil", "", ""])
        assert scan.last_non_empty == 6
        assert scan.last_number == 4

    def test_bare_number_counts_as_header(self):
        assert scan_column(["7", "Gas"]).last_number == 7

    def test_number_without_dot_inside_text_is_not_a_header(self):
        assert scan_column(["12 pcs pandesal"]).last_number == 0

    def test_reads_every_row(self):
        column = ["1. a"] + [""] * 300 + ["9. z"]
        scan = scan_column(column)
        assert scan.last_number == 9
        assert scan.last_non_empty == 301


class TestAppendNumberedBlock:
    """Tests for appending numbered blocks."""

    def test_blocks_of_varied_size_are_numbered_with_single_gaps(self):
        column: list[str] = []
        column = append_numbered_block(column, "a\nb")
        column = append_numbered_block(column, "c")
        column = append_numbered_block(column, "d\ne\nf")

        assert column == ["1. a", "b", "", "2. c", "", "3. d", "e", "f"]

    def test_trailing_blank_rows_are_reused(self):
        column = append_numbered_block(["1. a", "", "", ""], "b")
        assert column == ["1. a", "", "2. b"]

    def test_numbering_continues_past_gaps(self):
        column = append_numbered_block(["3. x", "", "", "", "5. y"], "z")
        assert column[-1] == "6. z"
        assert column[-2] == ""

    def test_blank_input_is_a_noop(self):
        assert append_numbered_block(["1. a"], "  \n \n") == ["1. a"]

    def test_inner_blank_lines_are_kept(self):
        column = append_numbered_block([], "\n  first \n\n second\n\n")
        assert column == ["1. first", "", "second"]

    def test_empty_column_continues_from_paired_column(self):
        am = ["1. Flour", "", "2. Gas"]
        pm = append_numbered_block([], "Sugar", paired_column=am)
        assert pm == ["3. Sugar"]

    def test_paired_column_ignored_once_target_has_content(self):
        am = ["1. Flour", "", "2. Gas", "", "3. Oil"]
        pm = append_numbered_block(["3. Sugar"], "Salt", paired_column=am)
        assert pm[-1] == "4. Salt"

    def test_long_column_keeps_every_row(self):
        column = [f"line {i}" for i in range(250)]

        result = append_numbered_block(column, "new")

        assert result[:250] == column
        assert result[250:] == ["", "1. new"]

    def test_header_deep_in_column_is_not_reused(self):
        column = ["1. a", "b", "c", "d"] + ["note"] * 300 + ["", "2. e"]

        result = append_numbered_block(column, "f")

        assert result[: len(column)] == column
        assert result[-2:] == ["", "3. f"]

    def test_paired_column_does_not_lower_numbering(self):
        pm = append_numbered_block([], "Salt", paired_column=[])
        assert pm == ["1. Salt"]


def test_block_lines_trims_and_drops_outer_blanks():
    assert block_lines("\r\n a \r\n\r\n b \r\n") == ["a", "", "b"]
