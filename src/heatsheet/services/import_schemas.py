"""Pydantic schemas and CSV parsing for bulk entry imports."""

import csv
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ValidationError, field_validator

from heatsheet.services.entry_errors import EntryError, validation_error

REQUIRED_COLUMNS = ("team", "first_name", "last_name", "event_number")

# Normalized header -> ImportRow field. Headers are lowercased with spaces
# and underscores removed before lookup, so "FirstName" and "first_name"
# both work.
HEADER_ALIASES: dict[str, str] = {
    "team": "team",
    "teamid": "team",
    "firstname": "first_name",
    "lastname": "last_name",
    "eventnumber": "event_number",
    "event": "event_number",
    "heat": "heat_number",
    "heatnumber": "heat_number",
    "lane": "lane_number",
    "lanenumber": "lane_number",
}


class ImportRow(BaseModel):
    """One entry line: who swims which event, optionally where."""

    team: str
    first_name: str
    last_name: str
    event_number: int
    heat_number: int | None = None
    lane_number: int | None = None
    row_number: int = 0

    @field_validator("team", "first_name", "last_name")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("event_number")
    @classmethod
    def validate_event_number(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Event number must be 1 or greater")
        return v

    @field_validator("heat_number", "lane_number", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        """Empty cells mean 'assign automatically'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("heat_number", "lane_number")
    @classmethod
    def validate_positive(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError("Heat and lane numbers start at 1")
        return v

    @property
    def is_manual(self) -> bool:
        return self.heat_number is not None and self.lane_number is not None

    @property
    def swimmer_label(self) -> str:
        return f"{self.first_name} {self.last_name}"


def _normalize_record(record: dict) -> dict:
    normalized: dict = {}
    for key, value in record.items():
        if key is None:
            continue
        field = HEADER_ALIASES.get(key.strip().lower().replace("_", "").replace(" ", ""))
        if field:
            normalized[field] = value.strip() if isinstance(value, str) else value
    return normalized


def _describe(exc: ValidationError) -> tuple[str, str]:
    first = exc.errors()[0]
    field = str(first["loc"][0]) if first.get("loc") else "row"
    return field, f"{field}: {first['msg']}"


def rows_from_records(
    records: Iterable[dict], start: int = 1
) -> tuple[list[ImportRow], list[EntryError]]:
    """Build ImportRows from loose dict records.

    Args:
        records: Mappings keyed by column header (any supported spelling)
        start: Row number of the first record

    Returns:
        Tuple of (rows, errors); a bad record yields an error, not a row
    """
    rows: list[ImportRow] = []
    errors: list[EntryError] = []

    for row_num, record in enumerate(records, start=start):
        data = _normalize_record(record)
        missing = [c for c in REQUIRED_COLUMNS if not str(data.get(c) or "").strip()]
        if missing:
            errors.append(
                validation_error(
                    "Invalid format. Required: team, first_name, last_name, event_number",
                    field=missing[0],
                    row_number=row_num,
                )
            )
            continue
        try:
            rows.append(ImportRow(**data, row_number=row_num))
        except ValidationError as e:
            field, message = _describe(e)
            errors.append(validation_error(message, field=field, row_number=row_num))

    return rows, errors


def parse_entries_csv(csv_path: Path) -> tuple[list[ImportRow], list[EntryError]]:
    """Parse an entries CSV file.

    Expected header: team,first_name,last_name,event_number,heat_number,lane_number
    (heat and lane columns optional). Rows are numbered from 2; the header
    is row 1.
    """
    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        return rows_from_records(reader, start=2)
