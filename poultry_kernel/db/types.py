"""
Module: poultry_kernel.db.types
Responsibility: Annotated column type aliases shared by every model, so that
    weights, money, and counts have one definition system-wide.
Architecture position: Kernel > DB.  May be imported by models/ and modules'
    orm.py files.  MUST NOT import from services/ or domain/.

Invariants enforced:
    - No floats: weights and amounts are Decimal with 9 fractional digits.
    - Counts (number of birds / crates) are integers.
"""

from decimal import Decimal
from typing import Annotated

from sqlalchemy import BigInteger, Numeric, String

# Monetary amount: 38 digits total, 9 decimal places
Money = Annotated[Decimal, Numeric(38, 9)]

# Mass in the business's weight unit (kilograms)
Weight = Annotated[Decimal, Numeric(38, 9)]

# Unit count (birds); may be signed for running counters
Count = Annotated[int, BigInteger]

ShortText = Annotated[str, String(100)]

LongText = Annotated[str, String(2000)]

WEIGHT_DECIMAL_PLACES = 9
