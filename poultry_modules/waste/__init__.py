"""
Waste Module (``poultry_modules.waste``).

One row per (day, chicken type) recording over-distribution (stock handed
out beyond what the loading batches could cover) and operator-entered
other waste.  The distribution ledger books over-distribution through
``WasteLedger`` as a best-effort side effect; ``WasteService`` serves the
manual entries and the waste reports.
"""

from poultry_modules.waste.models import (
    ChickenTypeWaste,
    DailyWaste,
    WasteDayEntry,
    WasteDayReport,
    WasteSummary,
)

__all__ = [
    "ChickenTypeWaste",
    "DailyWaste",
    "WasteDayEntry",
    "WasteDayReport",
    "WasteSummary",
]
