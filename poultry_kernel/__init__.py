"""
Poultry Kernel

Shared infrastructure for the poultry wholesale ledger:
- Typed errors and structured logging
- Engine / session lifecycle with bounded waits
- Directory entities (customers, chicken types, suppliers, employees)
- The customer debt account shared by distributions and payments
"""

__version__ = "0.1.0"
