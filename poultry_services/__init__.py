"""
poultry_services -- Package init and public API.

Responsibility:
    The caller-facing boundary.  ``LedgerAPI`` composes the module
    services over one unit of work per call and returns ``LedgerResult``
    values instead of raising.

Architecture position:
    Services -- above poultry_modules and poultry_kernel.

    Dependency direction:
        poultry_services/ -> poultry_modules/  (allowed)
        poultry_services/ -> poultry_kernel/   (allowed)
        poultry_modules/  -> poultry_services/ (FORBIDDEN)
        poultry_kernel/   -> poultry_services/ (FORBIDDEN)
"""

from poultry_services.ledger_api import (
    HTTP_STATUS_BY_KIND,
    LedgerAPI,
    LedgerResult,
    bootstrap,
)

__all__ = [
    "HTTP_STATUS_BY_KIND",
    "LedgerAPI",
    "LedgerResult",
    "bootstrap",
]
