"""
Structured JSON logging for the poultry ledger.

Every record is one JSON object per line::

    {"ts": ..., "level": "INFO", "logger": "poultry_kernel.modules.payment.service",
     "message": "payment_created", "correlation_id": ..., "operation": "create_payment",
     "payment_id": ..., "remaining_amount": "200"}

Call-scoped fields (correlation id, actor, operation, entity) come from
``LogContext``, which ``LedgerAPI`` binds once per call.  Ledger errors
attached with ``exc_info`` contribute their code, kind, retryability and
structured attributes (``exc_loading_id``, ``exc_measure``, ...).
"""

__all__ = [
    "CONTEXT_FIELDS",
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any, Iterator
from uuid import UUID

from poultry_kernel.exceptions import PoultryLedgerError

CONTEXT_FIELDS = ("correlation_id", "actor_id", "operation", "entity_id")

_LOGGER_PREFIX = "poultry_kernel"

_call_context: ContextVar[dict[str, str]] = ContextVar("ledger_log_context", default={})


class LogContext:
    """Call-scoped log fields, safe across threads and tasks."""

    @staticmethod
    def _merged(fields: dict[str, str | None]) -> dict[str, str]:
        unknown = set(fields) - set(CONTEXT_FIELDS)
        if unknown:
            raise TypeError(f"unknown log context field(s): {sorted(unknown)}")
        merged = dict(_call_context.get())
        merged.update({k: v for k, v in fields.items() if v is not None})
        return merged

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Set fields for the rest of the current context; None values are ignored."""
        _call_context.set(cls._merged(fields))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_call_context.get())

    @classmethod
    def clear(cls) -> None:
        _call_context.set({})

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[None]:
        """Set fields for the duration of the block, then restore the previous ones."""
        token = _call_context.set(cls._merged(fields))
        try:
            yield
        finally:
            _call_context.reset(token)


# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "taskName",
}


def _json_default(value: Any) -> Any:
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    if isinstance(exc, PoultryLedgerError):
        fields["exc_code"] = exc.code
        fields["exc_kind"] = exc.error_kind
        fields["exc_retryable"] = exc.retryable
        for attr, value in vars(exc).items():
            if not attr.startswith("_"):
                fields[f"exc_{attr}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON line per record: base fields, call context, extras, exception."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``poultry_kernel`` namespace, e.g. ``modules.payment.service``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configured = False


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach one JSON handler to the ledger's logger tree. Later calls are no-ops."""
    global _configured
    if _configured:
        return
    _configured = True

    ledger_logger = logging.getLogger(_LOGGER_PREFIX)
    ledger_logger.setLevel(level)
    ledger_logger.propagate = False

    target = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    target.setFormatter(StructuredFormatter())
    ledger_logger.addHandler(target)


def reset_logging() -> None:
    """Drop the handler and level set by ``configure_logging`` (tests)."""
    global _configured
    _configured = False
    ledger_logger = logging.getLogger(_LOGGER_PREFIX)
    ledger_logger.handlers.clear()
    ledger_logger.setLevel(logging.WARNING)
