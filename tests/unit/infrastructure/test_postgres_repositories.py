"""
Name: PostgreSQL Repository Tests (offline)

Responsibilities:
  - Row mapping and parameter binding
  - Error translation (UniqueViolation, RaiseException, generic psycopg.Error)
  - Workflow re-check inside the write transaction (roles read from DB)

Notes:
  - The DatabasePool is replaced by a MagicMock; no real DB
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import psycopg
import pytest
from psycopg import errors as pg_errors
from sii_dicri.crosscutting.exceptions import DatabaseError
from sii_dicri.domain.entities import EstadoExpediente, ExpedienteData
from sii_dicri.domain.errors import (
    DuplicateUsernameError,
    EditForbiddenError,
    ExpedienteNotFoundError,
    JustificationRequiredError,
    PersistenceRuleViolation,
    UnknownRoleError,
)
from sii_dicri.infrastructure.repositories import (
    PostgresCatalogRepository,
    PostgresExpedienteRepository,
    PostgresUserRepository,
)

pytestmark = pytest.mark.unit

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _cursor(*, one=None, all_rows=None, rowcount=0):
    cur = MagicMock()
    cur.fetchone.return_value = one
    cur.fetchall.return_value = all_rows or []
    cur.rowcount = rowcount
    return cur


def _pool(conn):
    pool = MagicMock()

    @contextmanager
    def _scoped():
        yield conn

    pool.connection.side_effect = _scoped
    pool.transaction.side_effect = _scoped
    return pool


def _expediente_row(estado="BORRADOR"):
    return (
        10, "EXP-2024-000010", "Robo", 1, "Fiscalía Metropolitana", 2, "Robo",
        date(2024, 4, 30), estado, None, 5, "tecnico1", NOW, None, None, True,
    )


class TestPostgresUserRepository:
    def test_get_user_by_username_maps_row(self):
        conn = MagicMock()
        conn.execute.return_value = _cursor(
            one=(5, "tecnico1", "$argon2id$x", "Ana", None, "López", None,
                 "ana@dicri.test", True, NOW)
        )
        repo = PostgresUserRepository(_pool(conn))

        user = repo.get_user_by_username("tecnico1")

        assert user.id == 5
        assert user.usuario == "tecnico1"
        assert user.activo is True
        assert conn.execute.call_args.args[1] == ("tecnico1",)

    def test_list_users_binds_named_params(self):
        conn = MagicMock()
        conn.execute.return_value = _cursor(
            all_rows=[(5, "tecnico1", "Ana", None, "López", None, "a@x", True,
                       ["TECNICO"], [1])]
        )
        repo = PostgresUserRepository(_pool(conn))

        users = repo.list_users(search=" ana ", activo=None)

        assert users[0].roles == ["TECNICO"]
        assert conn.execute.call_args.args[1] == {"activo": None, "search": "%ana%"}

    def test_insert_roles_detects_unknown_ids(self):
        conn = MagicMock()
        conn.execute.side_effect = [_cursor(one=(9,)), _cursor(rowcount=1)]
        repo = PostgresUserRepository(_pool(conn))

        with pytest.raises(UnknownRoleError):
            with repo.transaction() as tx:
                user_id = tx.insert_user(MagicMock(), None)
                tx.insert_roles(user_id, [1, 2, 2], None)

        batch_params = conn.execute.call_args.args[1]
        assert batch_params == (9, None, [1, 2])

    def test_unique_violation_becomes_duplicate_username(self):
        conn = MagicMock()
        conn.execute.side_effect = pg_errors.UniqueViolation("duplicate key")
        repo = PostgresUserRepository(_pool(conn))

        with pytest.raises(DuplicateUsernameError):
            with repo.transaction() as tx:
                tx.insert_user(MagicMock(), None)

    def test_generic_psycopg_error_becomes_database_error(self):
        conn = MagicMock()
        conn.execute.side_effect = psycopg.ProgrammingError("syntax error")
        repo = PostgresUserRepository(_pool(conn))

        with pytest.raises(DatabaseError):
            repo.list_roles()


class TestPostgresExpedienteRepository:
    def test_change_estado_rechecks_with_db_roles(self):
        conn = MagicMock()
        conn.execute.side_effect = [
            _cursor(one=("REVISION",)),
            _cursor(all_rows=[("coordinador",)]),
            _cursor(rowcount=1),
        ]
        repo = PostgresExpedienteRepository(_pool(conn))

        change = repo.change_estado(10, EstadoExpediente.RECHAZADO, " Falta acta ", 7)

        assert change.origen == EstadoExpediente.REVISION
        update_params = conn.execute.call_args.args[1]
        assert update_params == ("RECHAZADO", "Falta acta", 7, 10)

    def test_change_estado_without_justification_never_writes(self):
        conn = MagicMock()
        conn.execute.side_effect = [
            _cursor(one=("REVISION",)),
            _cursor(all_rows=[("COORDINADOR",)]),
        ]
        repo = PostgresExpedienteRepository(_pool(conn))

        with pytest.raises(JustificationRequiredError):
            repo.change_estado(10, EstadoExpediente.RECHAZADO, None, 7)
        assert conn.execute.call_count == 2

    def test_locked_row_missing_is_not_found(self):
        conn = MagicMock()
        conn.execute.return_value = _cursor(one=None)
        repo = PostgresExpedienteRepository(_pool(conn))

        with pytest.raises(ExpedienteNotFoundError):
            repo.delete_expediente(99, 7)

    def test_create_requires_editor_role_from_db(self):
        conn = MagicMock()
        conn.execute.return_value = _cursor(all_rows=[("COORDINADOR",)])
        repo = PostgresExpedienteRepository(_pool(conn))
        data = ExpedienteData(
            descripcion="x",
            id_fiscalia=1,
            fiscalia="F",
            id_tipo_caso=1,
            tipo_caso="T",
            fecha_hecho=date(2024, 1, 1),
        )

        with pytest.raises(EditForbiddenError):
            repo.create_expediente(data, 7)

    def test_create_returns_mapped_row_without_logging(self, caplog):
        conn = MagicMock()
        conn.execute.side_effect = [
            _cursor(all_rows=[("TECNICO",)]),
            _cursor(one=(10,)),
            _cursor(one=_expediente_row()),
        ]
        repo = PostgresExpedienteRepository(_pool(conn))
        data = ExpedienteData(
            descripcion="Robo",
            id_fiscalia=1,
            fiscalia="Fiscalía Metropolitana",
            id_tipo_caso=2,
            tipo_caso="Robo",
            fecha_hecho=date(2024, 4, 30),
        )

        with caplog.at_level(logging.INFO, logger="sii-dicri"):
            exp = repo.create_expediente(data, 5)

        assert exp.numero == "EXP-2024-000010"
        assert not [r for r in caplog.records if r.getMessage() == "Expediente creado"]

    def test_delete_returns_cascaded_count(self):
        conn = MagicMock()
        conn.execute.side_effect = [
            _cursor(one=("BORRADOR",)),
            _cursor(all_rows=[("TECNICO",)]),
            _cursor(rowcount=3),
            _cursor(rowcount=1),
        ]
        repo = PostgresExpedienteRepository(_pool(conn))

        assert repo.delete_expediente(10, 7) == 3

    def test_raise_exception_keeps_db_message(self):
        conn = MagicMock()
        conn.execute.side_effect = pg_errors.RaiseException("El expediente está cerrado")
        repo = PostgresExpedienteRepository(_pool(conn))

        with pytest.raises(PersistenceRuleViolation) as exc_info:
            repo.delete_indicio(3, 7)
        assert "cerrado" in exc_info.value.message

    def test_get_expediente_maps_row(self):
        conn = MagicMock()
        conn.execute.return_value = _cursor(one=_expediente_row("RECHAZADO"))
        repo = PostgresExpedienteRepository(_pool(conn))

        exp = repo.get_expediente(10)

        assert exp.numero == "EXP-2024-000010"
        assert exp.estado == EstadoExpediente.RECHAZADO
        assert exp.usuario_registro == "tecnico1"


class TestPostgresCatalogRepository:
    def test_list_fiscalias(self):
        conn = MagicMock()
        conn.execute.return_value = _cursor(all_rows=[(1, "Fiscalía A", True)])
        repo = PostgresCatalogRepository(_pool(conn))

        entries = repo.list_fiscalias()

        assert entries[0].id == 1
        assert entries[0].nombre == "Fiscalía A"

    def test_get_tipo_caso_missing(self):
        conn = MagicMock()
        conn.execute.return_value = _cursor(one=None)
        repo = PostgresCatalogRepository(_pool(conn))

        assert repo.get_tipo_caso(42) is None
