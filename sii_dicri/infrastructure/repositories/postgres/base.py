"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/base.py
============================================================
Class: PostgresRepository

Responsibilities:
- Centralizar el acceso al DatabasePool inyectado.
- Ejecutar SELECT fetchone/fetchall con logging + DatabaseError consistentes.
- Abrir transacciones acotadas que traducen errores de psycopg:
    * RAISE EXCEPTION en la base (SQLSTATE P0001) -> PersistenceRuleViolation
      con el mensaje original (la base es el árbitro final).
    * Cualquier otro psycopg.Error -> DatabaseError (detalle solo en logs).
- Dejar pasar DomainRuleViolation / DatabaseError sin re-envolver.

Collaborators:
- infrastructure.db.pool.DatabasePool
- crosscutting.exceptions.DatabaseError
- domain.errors.PersistenceRuleViolation
============================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Mapping, Sequence, Union

import psycopg
from psycopg import errors as pg_errors

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import UserRole
from ....domain.errors import PersistenceRuleViolation
from ....identity.users import roles_from_names
from ...db.pool import DatabasePool

_Params = Union[Sequence[object], Mapping[str, object]]


def _bind(params: _Params):
    return params if isinstance(params, Mapping) else tuple(params)


class PostgresRepository:
    _SQL_ACTOR_ROLES = """
        SELECT r.nombre
        FROM usuario_rol ur
        JOIN roles r ON r.id_rol = ur.id_rol
        JOIN usuarios u ON u.id_usuario = ur.id_usuario
        WHERE ur.id_usuario = %s AND r.activo AND u.activo
    """

    def __init__(self, pool: DatabasePool):
        # Pool inyectado por el composition root (o un doble en tests).
        self._pool = pool

    # =========================================================
    # Helpers (DRY + errores consistentes)
    # =========================================================
    def _fetchone(
        self, *, query: str, params: _Params, context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            with self._pool.connection() as conn:
                return conn.execute(query, _bind(params)).fetchone()
        except DatabaseError:
            raise
        except psycopg.Error as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    def _fetchall(
        self, *, query: str, params: _Params, context_msg: str, extra: dict
    ) -> list[tuple]:
        try:
            with self._pool.connection() as conn:
                return conn.execute(query, _bind(params)).fetchall()
        except DatabaseError:
            raise
        except psycopg.Error as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    @contextmanager
    def _transaction(self, context_msg: str, extra: dict) -> Iterator[psycopg.Connection]:
        try:
            with self._pool.transaction() as conn:
                yield conn
        except pg_errors.RaiseException as exc:
            message = (exc.diag.message_primary or "").strip() or str(exc)
            logger.info(context_msg, extra={**extra, "regla": message})
            raise PersistenceRuleViolation(message) from exc
        except DatabaseError:
            raise
        except psycopg.Error as exc:
            translated = self._translate_error(exc)
            if translated is not None:
                logger.info(context_msg, extra={**extra, "regla": str(translated)})
                raise translated from exc
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    def _translate_error(self, exc: psycopg.Error) -> Exception | None:
        """Hook: traducir violaciones de constraints a errores de dominio."""
        return None

    def _load_actor_roles(self, conn: psycopg.Connection, actor_id: int) -> frozenset[UserRole]:
        """Roles activos del actor leídos de la base (no del token)."""
        rows = conn.execute(self._SQL_ACTOR_ROLES, (actor_id,)).fetchall()
        return roles_from_names(row[0] for row in rows)
