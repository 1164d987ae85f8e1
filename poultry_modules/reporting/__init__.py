"""
Reporting Module (``poultry_modules.reporting``).

Read-side reconciliation: daily stock snapshots (loaded vs distributed
net weight with an operator adjustment), daily and ranged profit, and
customer statements.  Everything is recomputed from the ledgers' records.
"""

from poultry_modules.reporting.models import CustomerStatement, ProfitReport, StockSnapshot

__all__ = ["CustomerStatement", "ProfitReport", "StockSnapshot"]
