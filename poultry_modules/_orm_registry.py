"""
Module ORM Registry (``poultry_modules._orm_registry``).

Ensures every kernel and module SQLAlchemy model is imported so that
``Base.metadata`` holds all table definitions before
``poultry_kernel.db.engine.create_tables()`` runs.

Scripts, entrypoints and ``tests/conftest.py`` go through
``create_tables()``, which calls ``import_all_orm_models()``.
"""


def import_all_orm_models() -> None:
    """Import kernel models and every ``poultry_modules.*.orm`` module.

    Idempotent -- repeated calls are harmless.
    """
    import poultry_kernel.models  # noqa: F401
    # fmt: off
    import poultry_modules.distribution.orm  # noqa: F401
    import poultry_modules.expenses.orm  # noqa: F401
    import poultry_modules.loading.orm  # noqa: F401
    import poultry_modules.payment.orm  # noqa: F401
    import poultry_modules.reporting.orm  # noqa: F401
    import poultry_modules.transfers.orm  # noqa: F401
    import poultry_modules.waste.orm  # noqa: F401
    # fmt: on
