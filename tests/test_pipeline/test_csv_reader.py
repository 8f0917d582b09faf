"""
Tests for the CSV reader.
"""

import pytest

from showdesk.pipeline.csv_reader import read_csv
from showdesk.pipeline.errors import CsvParseError


class TestReadCsv:

    def test_rows_keyed_by_header(self, make_csv):
        table = read_csv(make_csv(["Show Name", "Format"], [["Alpha", "audio"]]))
        assert table.headers == ["Show Name", "Format"]
        assert table.rows[0].cells == {"Show Name": "Alpha", "Format": "audio"}

    def test_bom_tolerated(self):
        table = read_csv(b"\xef\xbb\xbfShow Name\nAlpha\n")
        assert table.headers == ["Show Name"]

    def test_headers_stripped(self):
        assert read_csv(b" Show Name ,Genre\nA,Music\n").headers == ["Show Name", "Genre"]

    def test_blank_lines_skipped_line_numbers_kept(self):
        table = read_csv(b"Show Name\nAlpha\n\nBeta\n")
        assert [r.cells["Show Name"] for r in table.rows] == ["Alpha", "Beta"]
        assert [r.row_number for r in table.rows] == [1, 2]
        assert [r.line_number for r in table.rows] == [2, 4]

    def test_delimiter_only_row_kept(self):
        table = read_csv(b"Show Name,Format\nAlpha,audio\n,\nBeta,video\n")
        assert [r.cells["Show Name"] for r in table.rows] == ["Alpha", "", "Beta"]
        assert [r.row_number for r in table.rows] == [1, 2, 3]
        assert [r.line_number for r in table.rows] == [2, 3, 4]

    def test_quoted_empty_cells_kept(self):
        table = read_csv(b'Show Name,Format\n"",""\n')
        assert table.rows[0].cells == {"Show Name": "", "Format": ""}

    def test_multiline_cell_line_numbers(self):
        table = read_csv(b'Show Name,Primary Contact (Host)\nAlpha,"Jo\nSmith"\nBeta,x\n')
        assert table.rows[0].cells["Primary Contact (Host)"] == "Jo\nSmith"
        assert table.rows[1].line_number == 4

    def test_short_row_allowed(self):
        table = read_csv(b"Show Name,Format,Genre\nAlpha,audio\n")
        assert table.rows[0].cells == {"Show Name": "Alpha", "Format": "audio"}

    def test_trailing_empty_cells_allowed(self):
        table = read_csv(b"Show Name\nAlpha,,\n")
        assert len(table.rows) == 1

    def test_extra_cells_rejected(self):
        with pytest.raises(CsvParseError, match="line 2"):
            read_csv(b"Show Name\nAlpha,surplus\n")

    def test_ignored_headers(self):
        table = read_csv(b"Show Name,Notes\nAlpha,hi\n")
        assert table.ignored_headers == ["Notes"]

    def test_empty_file(self):
        with pytest.raises(CsvParseError):
            read_csv(b"   \n")

    def test_not_utf8(self):
        with pytest.raises(CsvParseError, match="UTF-8"):
            read_csv(b"Show Name\n\xff\xfe\n")

    def test_unterminated_quote(self):
        with pytest.raises(CsvParseError):
            read_csv(b'Show Name\n"Alpha\n')

    def test_row_limit(self):
        with pytest.raises(CsvParseError, match="more than 2 rows"):
            read_csv(b"Show Name\nA\nB\nC\n", max_rows=2)

    def test_header_only(self):
        assert read_csv(b"Show Name,Format\n").rows == []
