"""
Loading Module (``poultry_modules.loading``).

Loading batches are stock intake: a count of birds of one chicken type
received from one supplier, weighed either net or gross, priced per
kilogram.  Each batch carries running distributed / remaining counters
that the distribution ledger moves under a row lock.

Each service method owns its transaction boundary (commit / rollback).
"""

from poultry_modules.loading.models import LoadingBatch, LoadingStatistics, QualityGrade

__all__ = ["LoadingBatch", "LoadingStatistics", "QualityGrade"]
