"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios para autenticación (por usuario / por id).
  - Listar usuarios con sus roles y el catálogo de roles (administración).
  - Abrir la transacción de escritura de usuario + roles:
      insert/update usuario -> DELETE de todas sus asignaciones ->
      INSERT en lote de las nuevas (UNNEST), todo o nada.
  - Traducir la violación del índice único parcial (usuario activo)
    a DuplicateUsernameError.

Collaborators:
  - infrastructure.db.pool.DatabasePool
  - domain.entities (User, UserSummary, Role, NewUser, UserChanges)
  - domain.errors (DuplicateUsernameError, UnknownRoleError)
  - Tablas: usuarios, roles, usuario_rol

Constraints / Notes:
  - Repositorio puro: NO valida política de contraseñas ni roles mínimos
    (eso vive en application/usecases/users).
  - SQL parametrizado siempre.
  - Orden estable en listados: usuario ASC, id ASC.
============================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

import psycopg
from psycopg import errors as pg_errors

from ....domain.entities import NewUser, Role, User, UserChanges, UserSummary
from ....domain.errors import DuplicateUsernameError, UnknownRoleError
from .base import PostgresRepository

_USER_COLUMNS = (
    "id_usuario, usuario, password_hash, primer_nombre, segundo_nombre, "
    "primer_apellido, segundo_apellido, email, activo, fecha_registro"
)

_UNIQUE_ACTIVE_USERNAME_INDEX = "uq_usuarios_usuario_activo"


def _row_to_user(row: tuple) -> User:
    return User(
        id=row[0],
        usuario=row[1],
        password_hash=row[2],
        primer_nombre=row[3],
        segundo_nombre=row[4],
        primer_apellido=row[5],
        segundo_apellido=row[6],
        email=row[7],
        activo=bool(row[8]),
        fecha_registro=row[9],
    )


class _PostgresUserWriteSession:
    """Sentencias de escritura sobre UNA conexión dentro de una transacción."""

    _SQL_INSERT_USER = """
        INSERT INTO usuarios (
            usuario, password_hash, primer_nombre, segundo_nombre,
            primer_apellido, segundo_apellido, email, activo, id_usuario_registro
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, TRUE, %s)
        RETURNING id_usuario
    """

    _SQL_UPDATE_USER = """
        UPDATE usuarios
        SET primer_nombre = %s,
            segundo_nombre = %s,
            primer_apellido = %s,
            segundo_apellido = %s,
            email = %s,
            activo = %s,
            password_hash = COALESCE(%s, password_hash),
            id_usuario_modificacion = %s,
            fecha_modificacion = now()
        WHERE id_usuario = %s
    """

    _SQL_DELETE_ROLES = "DELETE FROM usuario_rol WHERE id_usuario = %s"

    # Solo se insertan roles existentes y activos; la diferencia de conteo
    # delata ids desconocidos.
    _SQL_INSERT_ROLES_BATCH = """
        INSERT INTO usuario_rol (id_usuario, id_rol, id_usuario_asigna)
        SELECT %s, r.id_rol, %s
        FROM roles r
        WHERE r.id_rol = ANY(%s::int[]) AND r.activo
    """

    def __init__(self, conn: psycopg.Connection):
        self._conn = conn

    def insert_user(self, data: NewUser, acting_user_id: Optional[int]) -> int:
        row = self._conn.execute(
            self._SQL_INSERT_USER,
            (
                data.usuario,
                data.password_hash,
                data.primer_nombre,
                data.segundo_nombre,
                data.primer_apellido,
                data.segundo_apellido,
                data.email,
                acting_user_id,
            ),
        ).fetchone()
        return int(row[0])

    def update_user(
        self,
        user_id: int,
        changes: UserChanges,
        password_hash: Optional[str],
        acting_user_id: Optional[int],
    ) -> bool:
        cur = self._conn.execute(
            self._SQL_UPDATE_USER,
            (
                changes.primer_nombre,
                changes.segundo_nombre,
                changes.primer_apellido,
                changes.segundo_apellido,
                changes.email,
                changes.activo,
                password_hash,
                acting_user_id,
                user_id,
            ),
        )
        return cur.rowcount == 1

    def delete_roles(self, user_id: int) -> None:
        self._conn.execute(self._SQL_DELETE_ROLES, (user_id,))

    def insert_roles(
        self, user_id: int, role_ids: Sequence[int], acting_user_id: Optional[int]
    ) -> None:
        unique_ids = sorted(set(int(r) for r in role_ids))
        cur = self._conn.execute(
            self._SQL_INSERT_ROLES_BATCH, (user_id, acting_user_id, unique_ids)
        )
        if cur.rowcount != len(unique_ids):
            raise UnknownRoleError()


class PostgresUserRepository(PostgresRepository):
    """Repositorio PostgreSQL de usuarios y asignaciones de roles."""

    # Con varios registros homónimos (inactivos) se prefiere el activo.
    _SQL_GET_BY_USERNAME = f"""
        SELECT {_USER_COLUMNS}
        FROM usuarios
        WHERE lower(usuario) = lower(%s)
        ORDER BY activo DESC, id_usuario DESC
        LIMIT 1
    """

    _SQL_GET_BY_ID = f"SELECT {_USER_COLUMNS} FROM usuarios WHERE id_usuario = %s"

    _SQL_ROLES_FOR_USER = """
        SELECT r.id_rol, r.nombre, r.activo
        FROM usuario_rol ur
        JOIN roles r ON r.id_rol = ur.id_rol
        WHERE ur.id_usuario = %s
        ORDER BY r.id_rol ASC
    """

    _SQL_LIST_USERS = """
        SELECT u.id_usuario, u.usuario, u.primer_nombre, u.segundo_nombre,
               u.primer_apellido, u.segundo_apellido, u.email, u.activo,
               COALESCE(array_agg(r.nombre ORDER BY r.id_rol)
                        FILTER (WHERE r.activo), '{}') AS roles,
               COALESCE(array_agg(r.id_rol ORDER BY r.id_rol)
                        FILTER (WHERE r.activo), '{}') AS role_ids
        FROM usuarios u
        LEFT JOIN usuario_rol ur ON ur.id_usuario = u.id_usuario
        LEFT JOIN roles r ON r.id_rol = ur.id_rol
        WHERE (%(activo)s::boolean IS NULL OR u.activo = %(activo)s::boolean)
          AND (
            %(search)s::text IS NULL
            OR u.usuario ILIKE %(search)s
            OR u.email ILIKE %(search)s
            OR concat_ws(' ', u.primer_nombre, u.segundo_nombre,
                         u.primer_apellido, u.segundo_apellido) ILIKE %(search)s
          )
        GROUP BY u.id_usuario
        ORDER BY u.usuario ASC, u.id_usuario ASC
    """

    _SQL_LIST_ROLES = "SELECT id_rol, nombre, activo FROM roles ORDER BY id_rol ASC"

    # =========================================================
    # Lecturas
    # =========================================================
    def get_user_by_username(self, usuario: str) -> Optional[User]:
        row = self._fetchone(
            query=self._SQL_GET_BY_USERNAME,
            params=(usuario,),
            context_msg="PostgresUserRepository: get_user_by_username failed",
            extra={"usuario": usuario},
        )
        return _row_to_user(row) if row else None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        row = self._fetchone(
            query=self._SQL_GET_BY_ID,
            params=(user_id,),
            context_msg="PostgresUserRepository: get_user_by_id failed",
            extra={"user_id": user_id},
        )
        return _row_to_user(row) if row else None

    def list_roles_for_user(self, user_id: int) -> list[Role]:
        rows = self._fetchall(
            query=self._SQL_ROLES_FOR_USER,
            params=(user_id,),
            context_msg="PostgresUserRepository: list_roles_for_user failed",
            extra={"user_id": user_id},
        )
        return [Role(id=r[0], nombre=r[1], activo=bool(r[2])) for r in rows]

    def list_users(
        self, *, search: Optional[str] = None, activo: Optional[bool] = True
    ) -> list[UserSummary]:
        pattern = f"%{search.strip()}%" if search and search.strip() else None
        rows = self._fetchall(
            query=self._SQL_LIST_USERS,
            params={"activo": activo, "search": pattern},
            context_msg="PostgresUserRepository: list_users failed",
            extra={"search": search, "activo": activo},
        )
        return [
            UserSummary(
                id=r[0],
                usuario=r[1],
                primer_nombre=r[2],
                segundo_nombre=r[3],
                primer_apellido=r[4],
                segundo_apellido=r[5],
                email=r[6],
                activo=bool(r[7]),
                roles=list(r[8] or []),
                role_ids=list(r[9] or []),
            )
            for r in rows
        ]

    def list_roles(self) -> list[Role]:
        rows = self._fetchall(
            query=self._SQL_LIST_ROLES,
            params=(),
            context_msg="PostgresUserRepository: list_roles failed",
            extra={},
        )
        return [Role(id=r[0], nombre=r[1], activo=bool(r[2])) for r in rows]

    # =========================================================
    # Escritura transaccional
    # =========================================================
    def _translate_error(self, exc: psycopg.Error) -> Exception | None:
        if isinstance(exc, pg_errors.UniqueViolation):
            constraint = getattr(exc.diag, "constraint_name", None)
            if constraint in (None, _UNIQUE_ACTIVE_USERNAME_INDEX):
                return DuplicateUsernameError()
        if isinstance(exc, pg_errors.ForeignKeyViolation):
            return UnknownRoleError()
        return None

    @contextmanager
    def transaction(self) -> Iterator[_PostgresUserWriteSession]:
        with self._transaction(
            "PostgresUserRepository: transaction failed", extra={}
        ) as conn:
            yield _PostgresUserWriteSession(conn)
