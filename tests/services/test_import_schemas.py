"""Tests for import row parsing and validation."""

import pytest
from pydantic import ValidationError

from heatsheet.services.entry_errors import ErrorKind
from heatsheet.services.import_schemas import ImportRow, parse_entries_csv, rows_from_records


class TestImportRow:
    """Tests for ImportRow validation."""

    def test_valid_automatic_row(self):
        row = ImportRow(team=" WCC ", first_name="Ava", last_name="Smith", event_number=3)

        assert row.team == "WCC"
        assert not row.is_manual
        assert row.swimmer_label == "Ava Smith"

    def test_blank_heat_and_lane_are_automatic(self):
        row = ImportRow(
            team="WCC",
            first_name="Ava",
            last_name="Smith",
            event_number="3",
            heat_number=" ",
            lane_number="",
        )
        assert row.heat_number is None
        assert row.lane_number is None

    def test_manual_row(self):
        row = ImportRow(
            team="WCC",
            first_name="Ava",
            last_name="Smith",
            event_number=3,
            heat_number="2",
            lane_number="5",
        )
        assert row.is_manual
        assert (row.heat_number, row.lane_number) == (2, 5)

    def test_heat_only_is_automatic(self):
        row = ImportRow(
            team="WCC", first_name="Ava", last_name="Smith", event_number=3, heat_number=2
        )
        assert not row.is_manual

    def test_invalid_event_number(self):
        with pytest.raises(ValidationError, match="Event number must be 1 or greater"):
            ImportRow(team="WCC", first_name="Ava", last_name="Smith", event_number=0)

    def test_non_numeric_lane(self):
        with pytest.raises(ValidationError):
            ImportRow(
                team="WCC", first_name="Ava", last_name="Smith", event_number=1, lane_number="x"
            )

    def test_zero_lane(self):
        with pytest.raises(ValidationError, match="start at 1"):
            ImportRow(
                team="WCC", first_name="Ava", last_name="Smith", event_number=1, lane_number=0
            )

    def test_blank_name(self):
        with pytest.raises(ValidationError, match="must not be blank"):
            ImportRow(team="WCC", first_name="  ", last_name="Smith", event_number=1)


class TestRowsFromRecords:
    """Tests for rows_from_records()."""

    def test_header_spellings(self):
        rows, errors = rows_from_records(
            [{"Team": "WCC", "FirstName": "Ava", "LastName": "Smith", "Event Number": "2"}]
        )

        assert errors == []
        assert rows[0].event_number == 2
        assert rows[0].row_number == 1

    def test_missing_required_field(self):
        rows, errors = rows_from_records(
            [
                {"team": "WCC", "first_name": "Ava", "last_name": "Smith", "event_number": "1"},
                {"team": "WCC", "first_name": "Mia", "last_name": "", "event_number": "1"},
            ]
        )

        assert len(rows) == 1
        assert errors[0].row_number == 2
        assert errors[0].field == "last_name"
        assert errors[0].message.startswith("Invalid format.")

    def test_bad_value_names_field(self):
        _, errors = rows_from_records(
            [{"team": "WCC", "first_name": "A", "last_name": "B", "event_number": "one"}],
            start=5,
        )

        assert errors[0].kind == ErrorKind.VALIDATION
        assert errors[0].field == "event_number"
        assert errors[0].row_number == 5


class TestParseEntriesCsv:
    """Tests for parse_entries_csv()."""

    def test_parse_file(self, tmp_path):
        csv_file = tmp_path / "entries.csv"
        csv_file.write_text(
            "team,first_name,last_name,event_number,heat_number,lane_number\n"
            "WCC,Ava,Smith,1,,\n"
            "WCC,Mia,Jones,1,1,4\n"
            "WCC,Leo,,2,,\n",
            encoding="utf-8",
        )

        rows, errors = parse_entries_csv(csv_file)

        assert [r.row_number for r in rows] == [2, 3]
        assert rows[1].is_manual
        assert [e.row_number for e in errors] == [4]

    def test_byte_order_mark(self, tmp_path):
        csv_file = tmp_path / "entries.csv"
        csv_file.write_text(
            "\ufeffTeam,FirstName,LastName,EventNumber\nWCC,Ava,Smith,1\n", encoding="utf-8"
        )

        rows, errors = parse_entries_csv(csv_file)

        assert errors == []
        assert rows[0].team == "WCC"
