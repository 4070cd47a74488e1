"""Tests for git/parsers.py - numstat and name-status parsing."""

from branchlens.git.parsers import parse_name_status, parse_numstat
from branchlens.models import NameStatusRow, NumstatRow


class TestParseNameStatus:
    def test_parses_rows_including_renames(self):
        output = "\n".join(
            [
                "M\tsrc/App.tsx",
                "A\tREADME.md",
                "R100\tsrc/old.ts\tsrc/new.ts",
            ]
        )

        assert parse_name_status(output) == [
            NameStatusRow(path="src/App.tsx", status_code="M"),
            NameStatusRow(path="README.md", status_code="A"),
            NameStatusRow(path="src/new.ts", status_code="R", previous_path="src/old.ts"),
        ]

    def test_copy_rows_carry_previous_path(self):
        rows = parse_name_status("C075\tlib/a.py\tlib/b.py")
        assert rows == [NameStatusRow(path="lib/b.py", status_code="C", previous_path="lib/a.py")]

    def test_status_code_is_uppercased_first_character(self):
        rows = parse_name_status("m\tsrc/app.js")
        assert rows[0].status_code == "M"

    def test_blank_and_pathless_lines_are_dropped(self):
        output = "\n\nM\n  \nD\tgone.txt\n"
        assert parse_name_status(output) == [NameStatusRow(path="gone.txt", status_code="D")]

    def test_paths_are_normalized(self):
        rows = parse_name_status("M\t./src\\app.js\r")
        assert rows[0].path == "src/app.js"

    def test_empty_output(self):
        assert parse_name_status("") == []


class TestParseNumstat:
    def test_parses_rows_including_binary(self):
        output = "\n".join(["15\t3\tsrc/App.tsx", "-\t-\tassets/icon.png"])

        assert parse_numstat(output) == [
            NumstatRow(path="src/App.tsx", added=15, removed=3, binary=False),
            NumstatRow(path="assets/icon.png", added=0, removed=0, binary=True),
        ]

    def test_non_numeric_counts_default_to_zero(self):
        rows = parse_numstat("x\t7abc\tsrc/app.js")
        assert rows[0].added == 0
        assert rows[0].removed == 7
        assert rows[0].binary is False

    def test_two_path_fields_mean_rename(self):
        rows = parse_numstat("4\t1\tsrc/old.ts\tsrc/new.ts")
        assert rows == [
            NumstatRow(path="src/new.ts", added=4, removed=1, previous_path="src/old.ts")
        ]

    def test_brace_rename_notation_is_expanded(self):
        rows = parse_numstat("2\t2\tsrc/{old => new}/app.ts")
        assert rows[0].path == "src/new/app.ts"
        assert rows[0].previous_path == "src/old/app.ts"

    def test_brace_rename_into_new_directory(self):
        rows = parse_numstat("0\t0\t{ => lib}/util.py")
        assert rows[0].path == "lib/util.py"
        assert rows[0].previous_path == "util.py"

    def test_plain_rename_notation_is_expanded(self):
        rows = parse_numstat("1\t0\told.txt => new.txt")
        assert rows[0].path == "new.txt"
        assert rows[0].previous_path == "old.txt"

    def test_short_lines_are_dropped(self):
        assert parse_numstat("12\tsrc/app.js\n\n") == []

    def test_preserves_row_order(self):
        output = "1\t0\tz.py\n2\t0\ta.py\n3\t0\tm.py"
        assert [row.path for row in parse_numstat(output)] == ["z.py", "a.py", "m.py"]
