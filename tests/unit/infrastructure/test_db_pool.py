"""
Name: Database Pool Tests

Responsibilities:
  - Lazy open on first use, reuse afterwards
  - Reset after connectivity failures (next call reopens)
  - Scoped transactions and definitive close()

Notes:
  - Uses an injected pool_factory double (no real DB)
"""

from contextlib import contextmanager
from unittest.mock import MagicMock

import psycopg
import pytest
from sii_dicri.infrastructure.db import (
    DatabaseConnectionError,
    DatabasePool,
    PoolClosedError,
)

pytestmark = pytest.mark.unit


def _fake_pool(conn=None, *, fail_with=None):
    fake = MagicMock()

    @contextmanager
    def _connection():
        if fail_with is not None:
            raise fail_with
        yield conn if conn is not None else MagicMock()

    fake.connection.side_effect = _connection
    return fake


class TestPoolLifecycle:
    def test_pool_is_opened_lazily_and_reused(self):
        fake = _fake_pool()
        factory = MagicMock(return_value=fake)
        db = DatabasePool("postgresql://test", pool_factory=factory)

        assert db.is_open is False
        with db.connection():
            pass
        with db.connection():
            pass

        factory.assert_called_once()
        assert factory.call_args.kwargs["open"] is False
        fake.open.assert_called_once()
        assert db.is_open is True

    def test_open_failure_raises_database_connection_error(self):
        fake = MagicMock()
        fake.open.side_effect = psycopg.OperationalError("boom")
        db = DatabasePool("postgresql://test", pool_factory=MagicMock(return_value=fake))

        with pytest.raises(DatabaseConnectionError):
            with db.connection():
                pass
        assert db.is_open is False

    def test_connectivity_error_resets_and_next_call_reopens(self):
        broken = _fake_pool(fail_with=psycopg.OperationalError("server closed"))
        healthy = _fake_pool()
        factory = MagicMock(side_effect=[broken, healthy])
        db = DatabasePool("postgresql://test", pool_factory=factory)

        with pytest.raises(DatabaseConnectionError):
            with db.connection():
                pass
        broken.close.assert_called_once()
        assert db.is_open is False

        with db.connection():
            pass
        assert factory.call_count == 2

    def test_close_is_definitive(self):
        fake = _fake_pool()
        db = DatabasePool("postgresql://test", pool_factory=MagicMock(return_value=fake))
        with db.connection():
            pass

        db.close()
        db.close()

        fake.close.assert_called_once()
        with pytest.raises(PoolClosedError):
            with db.connection():
                pass

    def test_transaction_wraps_connection_transaction(self):
        conn = MagicMock()
        db = DatabasePool(
            "postgresql://test", pool_factory=MagicMock(return_value=_fake_pool(conn))
        )

        with db.transaction() as tx_conn:
            assert tx_conn is conn

        conn.transaction.assert_called_once()
        conn.transaction.return_value.__exit__.assert_called_once()

    def test_transaction_propagates_errors_to_the_transaction_block(self):
        conn = MagicMock()
        conn.transaction.return_value.__exit__.return_value = False
        db = DatabasePool(
            "postgresql://test", pool_factory=MagicMock(return_value=_fake_pool(conn))
        )

        with pytest.raises(ValueError):
            with db.transaction():
                raise ValueError("rollback")

        exc_type = conn.transaction.return_value.__exit__.call_args.args[0]
        assert exc_type is ValueError

    def test_ping(self):
        conn = MagicMock()
        conn.execute.return_value.fetchone.return_value = (1,)
        db = DatabasePool(
            "postgresql://test", pool_factory=MagicMock(return_value=_fake_pool(conn))
        )
        assert db.ping() is True
        conn.execute.assert_called_once_with("SELECT 1")
