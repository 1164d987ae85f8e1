"""Driver and pool failures translated into retryable persistence errors."""

import pytest
from sqlalchemy.exc import DisconnectionError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from poultry_kernel.db.engine import session_scope, translate_persistence_errors
from poultry_kernel.exceptions import (
    ErrorKind,
    InvalidInputError,
    PersistenceTimeoutError,
    PersistenceUnavailableError,
)


def _operational(message: str) -> OperationalError:
    return OperationalError("UPDATE customers SET ...", {}, Exception(message))


class TestTranslatePersistenceErrors:

    @pytest.mark.parametrize("message", [
        "database is locked",
        "canceling statement due to statement timeout",
        "lock timeout",
    ])
    def test_timeouts(self, message):
        with pytest.raises(PersistenceTimeoutError) as exc_info:
            with translate_persistence_errors("create_payment"):
                raise _operational(message)

        assert exc_info.value.error_kind == ErrorKind.TIMEOUT
        assert exc_info.value.retryable is True
        assert exc_info.value.code == "PERSISTENCE_TIMEOUT"

    def test_pool_checkout_timeout(self):
        with pytest.raises(PersistenceTimeoutError):
            with translate_persistence_errors("create_payment"):
                raise PoolTimeoutError("QueuePool limit reached")

    def test_other_operational_failure_is_unavailable(self):
        with pytest.raises(PersistenceUnavailableError) as exc_info:
            with translate_persistence_errors("create_payment"):
                raise _operational("could not connect to server: Connection refused")

        assert exc_info.value.error_kind == ErrorKind.UNAVAILABLE
        assert exc_info.value.retryable is True
        assert exc_info.value.code == "PERSISTENCE_UNAVAILABLE"

    def test_disconnect_is_unavailable(self):
        with pytest.raises(PersistenceUnavailableError):
            with translate_persistence_errors("create_payment"):
                raise DisconnectionError("server closed the connection")

    def test_ledger_errors_pass_through(self):
        with pytest.raises(InvalidInputError):
            with translate_persistence_errors("create_payment"):
                raise InvalidInputError("paid_amount", "must be >= 0")

    def test_failure_is_logged(self, captured_logs):
        with pytest.raises(PersistenceUnavailableError):
            with translate_persistence_errors("list_customers"):
                raise _operational("server closed the connection unexpectedly")

        warnings = [r for r in captured_logs() if r["message"] == "persistence_unavailable"]
        assert warnings[0]["operation"] == "list_customers"


class TestSessionScope:

    def test_driver_failure_rolls_back_and_translates(self, session_factory):
        with pytest.raises(PersistenceTimeoutError):
            with session_scope("create_loading", session_factory):
                raise _operational("database is locked")
