import pytest

from dispute_resolution.database import _coerce_async_dsn


@pytest.mark.parametrize(
    "dsn, expected",
    [
        ("postgresql://u:p@db:5432/disputes", "postgresql+asyncpg://u:p@db:5432/disputes"),
        ("postgres://u:p@db/disputes", "postgresql+asyncpg://u:p@db/disputes"),
        ("postgresql+psycopg2://u:p@db/disputes", "postgresql+asyncpg://u:p@db/disputes"),
        ("postgresql+asyncpg://u:p@db/disputes", "postgresql+asyncpg://u:p@db/disputes"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
        ("not-a-dsn", "not-a-dsn"),
    ],
)
def test_ledger_dsn_uses_async_driver(dsn, expected):
    assert _coerce_async_dsn(dsn) == expected
