"""
Typed Exception Hierarchy for the Poultry Ledger.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the ledger must react to failures precisely: a missing customer is
a 404, a lost update is a retry, a shortage on an update is a user decision.
Parsing message strings for that is fragile, so every failure has:

  1. A TYPED exception class (catch by type, not message)
  2. A CODE attribute (machine-readable, API-safe)
  3. An ERROR_KIND attribute (the category the boundary maps to a status)
  4. Structured DATA as attributes (not just a message string)

Example - RIGHT way:
    try:
        service.update_distribution(distribution_id, quantity=40, actor_id=actor)
    except InsufficientInventoryError as e:
        api_response(code=e.code, requested=e.requested, available=e.available)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from PoultryLedgerError:

    PoultryLedgerError (base)
    |
    +-- InvalidInputError                    invalid_input
    |   +-- MalformedIdentifierError
    |   +-- SameEmployeeTransferError
    |
    +-- NotFoundError                        not_found
    |   +-- CustomerNotFoundError
    |   +-- ChickenTypeNotFoundError
    |   +-- SupplierNotFoundError
    |   +-- EmployeeNotFoundError
    |   +-- LoadingNotFoundError
    |   +-- DistributionNotFoundError
    |   +-- PaymentNotFoundError
    |   +-- ExpenseNotFoundError
    |
    +-- InsufficientInventoryError           insufficient_inventory
    |
    +-- InsufficientFundsError               insufficient_funds
    |
    +-- ConflictError                        conflict (retryable)
    |   +-- OptimisticLockError
    |   +-- LoadingInUseError
    |   +-- DuplicateChickenTypeError
    |
    +-- PersistenceError
        +-- PersistenceUnavailableError      unavailable (retryable)
        +-- PersistenceTimeoutError          timeout (retryable)

Unexpected exceptions (programming errors) are NOT wrapped here.  Only the
caller-facing boundary (poultry_services.ledger_api) turns them into an
``internal`` result, after logging them with full context.

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Input           | INVALID_INPUT               | Negative / non-finite / missing field
                | MALFORMED_IDENTIFIER        | Id is not a UUID
                | SAME_EMPLOYEE_TRANSFER      | Transfer sender == receiver
----------------|-----------------------------|-----------------------------------------
Lookup          | CUSTOMER_NOT_FOUND          | Customer id doesn't exist
                | CHICKEN_TYPE_NOT_FOUND      | Chicken type id/name doesn't exist
                | SUPPLIER_NOT_FOUND          | Supplier id doesn't exist
                | EMPLOYEE_NOT_FOUND          | Employee id doesn't exist
                | LOADING_NOT_FOUND           | Loading batch id doesn't exist
                | DISTRIBUTION_NOT_FOUND      | Distribution id doesn't exist
                | PAYMENT_NOT_FOUND           | Payment id doesn't exist
                | EXPENSE_NOT_FOUND           | Employee expense id doesn't exist
----------------|-----------------------------|-----------------------------------------
Inventory       | INSUFFICIENT_INVENTORY      | Update asks more than the batch holds
----------------|-----------------------------|-----------------------------------------
Cash            | INSUFFICIENT_FUNDS          | Transfer above sender's available cash
----------------|-----------------------------|-----------------------------------------
Conflict        | OPTIMISTIC_LOCK_CONFLICT    | Row changed by a concurrent transaction
                | LOADING_IN_USE              | Delete of a batch still distributed from
                | DUPLICATE_CHICKEN_TYPE      | Chicken type name already registered
----------------|-----------------------------|-----------------------------------------
Persistence     | PERSISTENCE_UNAVAILABLE     | Store unreachable / pool exhausted
                | PERSISTENCE_TIMEOUT         | Statement or pool wait timed out

===============================================================================
"""


class ErrorKind:
    """Stable error categories the caller-facing boundary maps to statuses."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    INSUFFICIENT_INVENTORY = "insufficient_inventory"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


class PoultryLedgerError(Exception):
    """
    Base exception for all poultry ledger errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification, and an `error_kind` for boundary mapping.
    """

    code: str = "POULTRY_LEDGER_ERROR"
    error_kind: str = ErrorKind.INTERNAL
    retryable: bool = False


# Input-related exceptions


class InvalidInputError(PoultryLedgerError):
    """A field failed a shape or range precondition."""

    code: str = "INVALID_INPUT"
    error_kind: str = ErrorKind.INVALID_INPUT

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid value for {field}: {reason}")


class MalformedIdentifierError(InvalidInputError):
    """An identifier could not be parsed as a UUID."""

    code: str = "MALFORMED_IDENTIFIER"

    def __init__(self, field: str, value: str):
        self.value = value
        super().__init__(field, f"'{value}' is not a valid identifier")


class SameEmployeeTransferError(InvalidInputError):
    """Transfer sender and receiver are the same employee."""

    code: str = "SAME_EMPLOYEE_TRANSFER"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(
            "to_employee_id", "sender and receiver must be different employees"
        )


# Lookup-related exceptions


class NotFoundError(PoultryLedgerError):
    """Base exception for referenced entities that do not exist."""

    code: str = "NOT_FOUND"
    error_kind: str = ErrorKind.NOT_FOUND
    entity_type: str = "entity"

    def __init__(self, entity_ref: str):
        self.entity_ref = entity_ref
        super().__init__(f"{self.entity_type} not found: {entity_ref}")


class CustomerNotFoundError(NotFoundError):
    code: str = "CUSTOMER_NOT_FOUND"
    entity_type: str = "Customer"


class ChickenTypeNotFoundError(NotFoundError):
    code: str = "CHICKEN_TYPE_NOT_FOUND"
    entity_type: str = "Chicken type"


class SupplierNotFoundError(NotFoundError):
    code: str = "SUPPLIER_NOT_FOUND"
    entity_type: str = "Supplier"


class EmployeeNotFoundError(NotFoundError):
    code: str = "EMPLOYEE_NOT_FOUND"
    entity_type: str = "Employee"


class LoadingNotFoundError(NotFoundError):
    code: str = "LOADING_NOT_FOUND"
    entity_type: str = "Loading"


class DistributionNotFoundError(NotFoundError):
    code: str = "DISTRIBUTION_NOT_FOUND"
    entity_type: str = "Distribution"


class PaymentNotFoundError(NotFoundError):
    code: str = "PAYMENT_NOT_FOUND"
    entity_type: str = "Payment"


class ExpenseNotFoundError(NotFoundError):
    code: str = "EXPENSE_NOT_FOUND"
    entity_type: str = "Employee expense"


# Inventory and cash exceptions


class InsufficientInventoryError(PoultryLedgerError):
    """
    A change asks more stock of a loading batch than it holds.

    Raised on the distribution update path when the increase exceeds the
    source batch's remaining counters, and when a loading is shrunk below
    what has already been distributed from it.
    """

    code: str = "INSUFFICIENT_INVENTORY"
    error_kind: str = ErrorKind.INSUFFICIENT_INVENTORY

    def __init__(self, loading_id: str, measure: str, requested: str, available: str):
        self.loading_id = loading_id
        self.measure = measure
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient {measure} on loading {loading_id}: "
            f"requested {requested}, available {available}"
        )


class InsufficientFundsError(PoultryLedgerError):
    """Staff transfer exceeds the sender's available collected cash."""

    code: str = "INSUFFICIENT_FUNDS"
    error_kind: str = ErrorKind.INSUFFICIENT_FUNDS

    def __init__(self, employee_id: str, requested: str, available: str):
        self.employee_id = employee_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient available collected amount for employee {employee_id}: "
            f"requested {requested}, available {available}"
        )


# Conflict exceptions


class ConflictError(PoultryLedgerError):
    """Base exception for write conflicts and refused state transitions."""

    code: str = "CONFLICT"
    error_kind: str = ErrorKind.CONFLICT


class OptimisticLockError(ConflictError):
    """Optimistic locking conflict detected."""

    code: str = "OPTIMISTIC_LOCK_CONFLICT"
    retryable: bool = True

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"Optimistic lock conflict on {entity_type} {entity_id}: "
            "entity was modified by another transaction"
        )


class LoadingInUseError(ConflictError):
    """Loading batch cannot be deleted while distributions draw from it."""

    code: str = "LOADING_IN_USE"

    def __init__(self, loading_id: str, distributed_quantity: int, distribution_count: int):
        self.loading_id = loading_id
        self.distributed_quantity = distributed_quantity
        self.distribution_count = distribution_count
        super().__init__(
            f"Loading {loading_id} is referenced by {distribution_count} "
            f"distribution(s) (distributed quantity {distributed_quantity}); "
            "delete those distributions first"
        )


class DuplicateChickenTypeError(ConflictError):
    """A chicken type with this name already exists."""

    code: str = "DUPLICATE_CHICKEN_TYPE"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Chicken type already exists: {name}")


# Persistence exceptions


class PersistenceError(PoultryLedgerError):
    """Base exception for failures reaching the persistent store."""

    code: str = "PERSISTENCE_ERROR"
    error_kind: str = ErrorKind.UNAVAILABLE
    retryable: bool = True


class PersistenceUnavailableError(PersistenceError):
    """Store unreachable, connection dropped, or pool exhausted."""

    code: str = "PERSISTENCE_UNAVAILABLE"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Persistent store unavailable during {operation}")


class PersistenceTimeoutError(PersistenceError):
    """A statement or pool checkout exceeded its bounded wait."""

    code: str = "PERSISTENCE_TIMEOUT"
    error_kind: str = ErrorKind.TIMEOUT

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Persistent store timed out during {operation}")
