"""
Distribution Module (``poultry_modules.distribution``).

Distributions are stock outflow to customers.  Creating one selects a
source loading batch from the eligible pool, draws what the batch can
cover, charges the customer the full amount and books any shortage as
over-distribution waste.  Updates apply deltas; deletes reverse the
record exactly.  Every write is one atomic transaction.
"""

from poultry_modules.distribution.models import DailyNetWeight, Distribution

__all__ = ["DailyNetWeight", "Distribution"]
