"""Entry assignment engine."""

from heatsheet.services.eligibility import (
    Eligibility,
    GenderClass,
    classify,
    eligible_events,
    is_eligible,
)
from heatsheet.services.entry_errors import (
    ConcurrentModificationError,
    EntryError,
    ErrorKind,
    PersistenceError,
    Severity,
)
from heatsheet.services.entry_service import EntryResult, EntryService, list_entries, place_entry
from heatsheet.services.heat_table import HeatTable, PlacementPolicy
from heatsheet.services.import_schemas import ImportRow, parse_entries_csv, rows_from_records
from heatsheet.services.placement import LaneAllocator, Placement, PlacementMode, PlacementResult
from heatsheet.services.reconciliation import (
    ReconcileResult,
    ReconcileState,
    ReconciliationEngine,
)

__all__ = [
    "classify",
    "ConcurrentModificationError",
    "Eligibility",
    "eligible_events",
    "EntryError",
    "EntryResult",
    "EntryService",
    "ErrorKind",
    "GenderClass",
    "HeatTable",
    "ImportRow",
    "is_eligible",
    "LaneAllocator",
    "list_entries",
    "parse_entries_csv",
    "PersistenceError",
    "place_entry",
    "Placement",
    "PlacementMode",
    "PlacementPolicy",
    "PlacementResult",
    "ReconcileResult",
    "ReconcileState",
    "ReconciliationEngine",
    "rows_from_records",
    "Severity",
]
