"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/expediente.py
============================================================
Class: PostgresExpedienteRepository

Responsibilities:
- Listar y leer expedientes/indicios activos (soft delete excluido).
- Crear expedientes con `numero_expediente` generado en el mismo INSERT
  a partir de una secuencia (EXP-<año>-<secuencia de 6 dígitos>).
- Escrituras protegidas: dentro de la transacción se bloquea la fila del
  expediente (SELECT ... FOR UPDATE), se leen los roles del actor desde la
  base y se re-evalúan las reglas del workflow antes de escribir.
- Soft delete de expediente en cascada sobre sus indicios (misma transacción).

Collaborators:
- infrastructure.db.pool.DatabasePool
- domain.expediente_workflow (check_transition / check_editable / can_create)
- domain.errors (NotFound, reglas)
- Tablas: expedientes, indicios, usuarios, usuario_rol, roles

Constraints / Notes:
- Repo no decide "qué" regla aplica: delega en expediente_workflow.
- Orden estable en listados: fecha_registro DESC, id DESC.
============================================================
"""

from __future__ import annotations

from typing import Optional

import psycopg

from ....domain.entities import (
    EstadoChange,
    EstadoExpediente,
    Expediente,
    ExpedienteData,
    ExpedienteFilters,
    Indicio,
    IndicioData,
)
from ....domain.errors import (
    EditForbiddenError,
    ExpedienteNotFoundError,
    IndicioNotFoundError,
)
from ....domain.expediente_workflow import can_create, check_editable, check_transition
from .base import PostgresRepository

_EXPEDIENTE_COLUMNS = (
    "e.id_expediente, e.numero_expediente, e.descripcion, e.id_fiscalia, "
    "e.fiscalia_nombre, e.id_tipo_caso, e.tipo_caso_nombre, e.fecha_hecho, "
    "e.estado, e.justificacion_rechazo, e.id_usuario_registro, u.usuario, "
    "e.fecha_registro, e.id_usuario_modificacion, e.fecha_modificacion, e.activo"
)

_INDICIO_COLUMNS = (
    "id_indicio, id_expediente, nombre, descripcion, color, tamano, peso, "
    "ubicacion, id_usuario_registro, fecha_registro, activo"
)


def _row_to_expediente(row: tuple) -> Expediente:
    return Expediente(
        id=row[0],
        numero=row[1],
        descripcion=row[2],
        id_fiscalia=row[3],
        fiscalia=row[4],
        id_tipo_caso=row[5],
        tipo_caso=row[6],
        fecha_hecho=row[7],
        estado=EstadoExpediente(row[8]),
        justificacion_rechazo=row[9],
        id_usuario_registro=row[10],
        usuario_registro=row[11],
        fecha_registro=row[12],
        id_usuario_modificacion=row[13],
        fecha_modificacion=row[14],
        activo=bool(row[15]),
    )


def _row_to_indicio(row: tuple) -> Indicio:
    return Indicio(
        id=row[0],
        id_expediente=row[1],
        nombre=row[2],
        descripcion=row[3],
        color=row[4],
        tamano=row[5],
        peso=row[6],
        ubicacion=row[7],
        id_usuario_registro=row[8],
        fecha_registro=row[9],
        activo=bool(row[10]),
    )


class PostgresExpedienteRepository(PostgresRepository):
    """Repositorio PostgreSQL de expedientes e indicios."""

    # =========================================================
    # SQL Constantes
    # =========================================================
    _SQL_LIST = f"""
        SELECT {_EXPEDIENTE_COLUMNS}
        FROM expedientes e
        LEFT JOIN usuarios u ON u.id_usuario = e.id_usuario_registro
        WHERE e.activo
          AND (%(estado)s::text IS NULL OR e.estado = %(estado)s::text)
          AND (%(desde)s::date IS NULL OR e.fecha_hecho >= %(desde)s::date)
          AND (%(hasta)s::date IS NULL OR e.fecha_hecho <= %(hasta)s::date)
        ORDER BY e.fecha_registro DESC, e.id_expediente DESC
    """

    _SQL_GET = f"""
        SELECT {_EXPEDIENTE_COLUMNS}
        FROM expedientes e
        LEFT JOIN usuarios u ON u.id_usuario = e.id_usuario_registro
        WHERE e.id_expediente = %s AND e.activo
    """

    _SQL_LOCK = """
        SELECT estado
        FROM expedientes
        WHERE id_expediente = %s AND activo
        FOR UPDATE
    """

    _SQL_INSERT = """
        INSERT INTO expedientes (
            numero_expediente, descripcion, id_fiscalia, fiscalia_nombre,
            id_tipo_caso, tipo_caso_nombre, fecha_hecho, estado,
            id_usuario_registro
        )
        VALUES (
            'EXP-' || to_char(now(), 'YYYY') || '-'
                || lpad(nextval('seq_numero_expediente')::text, 6, '0'),
            %s, %s, %s, %s, %s, %s, 'BORRADOR', %s
        )
        RETURNING id_expediente
    """

    _SQL_UPDATE = """
        UPDATE expedientes
        SET descripcion = %s,
            id_fiscalia = %s,
            fiscalia_nombre = %s,
            id_tipo_caso = %s,
            tipo_caso_nombre = %s,
            fecha_hecho = %s,
            id_usuario_modificacion = %s,
            fecha_modificacion = now()
        WHERE id_expediente = %s
    """

    _SQL_UPDATE_ESTADO = """
        UPDATE expedientes
        SET estado = %s,
            justificacion_rechazo = %s,
            id_usuario_modificacion = %s,
            fecha_modificacion = now()
        WHERE id_expediente = %s
    """

    _SQL_SOFT_DELETE = """
        UPDATE expedientes
        SET activo = FALSE,
            id_usuario_modificacion = %s,
            fecha_modificacion = now()
        WHERE id_expediente = %s
    """

    _SQL_SOFT_DELETE_INDICIOS_OF = """
        UPDATE indicios
        SET activo = FALSE,
            id_usuario_modificacion = %s,
            fecha_modificacion = now()
        WHERE id_expediente = %s AND activo
    """

    _SQL_LIST_INDICIOS = f"""
        SELECT {_INDICIO_COLUMNS}
        FROM indicios
        WHERE id_expediente = %s AND activo
        ORDER BY id_indicio ASC
    """

    _SQL_GET_INDICIO = f"""
        SELECT {_INDICIO_COLUMNS}
        FROM indicios
        WHERE id_indicio = %s AND activo
    """

    _SQL_INDICIO_PARENT = """
        SELECT id_expediente FROM indicios WHERE id_indicio = %s AND activo
    """

    _SQL_INSERT_INDICIO = """
        INSERT INTO indicios (
            id_expediente, nombre, descripcion, color, tamano, peso, ubicacion,
            id_usuario_registro
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING id_indicio
    """

    _SQL_UPDATE_INDICIO = """
        UPDATE indicios
        SET nombre = %s,
            descripcion = %s,
            color = %s,
            tamano = %s,
            peso = %s,
            ubicacion = %s,
            id_usuario_modificacion = %s,
            fecha_modificacion = now()
        WHERE id_indicio = %s
    """

    _SQL_SOFT_DELETE_INDICIO = """
        UPDATE indicios
        SET activo = FALSE,
            id_usuario_modificacion = %s,
            fecha_modificacion = now()
        WHERE id_indicio = %s
    """

    # =========================================================
    # Helpers de escritura protegida
    # =========================================================
    def _lock_estado(self, conn: psycopg.Connection, expediente_id: int) -> EstadoExpediente:
        row = conn.execute(self._SQL_LOCK, (expediente_id,)).fetchone()
        if row is None:
            raise ExpedienteNotFoundError()
        return EstadoExpediente(row[0])

    def _lock_editable(
        self, conn: psycopg.Connection, expediente_id: int, actor_id: int
    ) -> None:
        estado = self._lock_estado(conn, expediente_id)
        check_editable(estado, self._load_actor_roles(conn, actor_id))

    def _indicio_parent(self, conn: psycopg.Connection, indicio_id: int) -> int:
        row = conn.execute(self._SQL_INDICIO_PARENT, (indicio_id,)).fetchone()
        if row is None:
            raise IndicioNotFoundError()
        return int(row[0])

    # =========================================================
    # Lecturas
    # =========================================================
    def list_expedientes(self, filters: ExpedienteFilters) -> list[Expediente]:
        params = {
            "estado": filters.estado.value if filters.estado else None,
            "desde": filters.fecha_inicio,
            "hasta": filters.fecha_fin,
        }
        rows = self._fetchall(
            query=self._SQL_LIST,
            params=params,
            context_msg="PostgresExpedienteRepository: list_expedientes failed",
            extra={k: str(v) for k, v in params.items() if v is not None},
        )
        return [_row_to_expediente(r) for r in rows]

    def get_expediente(self, expediente_id: int) -> Optional[Expediente]:
        row = self._fetchone(
            query=self._SQL_GET,
            params=(expediente_id,),
            context_msg="PostgresExpedienteRepository: get_expediente failed",
            extra={"expediente_id": expediente_id},
        )
        return _row_to_expediente(row) if row else None

    def list_indicios(self, expediente_id: int) -> list[Indicio]:
        rows = self._fetchall(
            query=self._SQL_LIST_INDICIOS,
            params=(expediente_id,),
            context_msg="PostgresExpedienteRepository: list_indicios failed",
            extra={"expediente_id": expediente_id},
        )
        return [_row_to_indicio(r) for r in rows]

    def get_indicio(self, indicio_id: int) -> Optional[Indicio]:
        row = self._fetchone(
            query=self._SQL_GET_INDICIO,
            params=(indicio_id,),
            context_msg="PostgresExpedienteRepository: get_indicio failed",
            extra={"indicio_id": indicio_id},
        )
        return _row_to_indicio(row) if row else None

    # =========================================================
    # Expedientes
    # =========================================================
    def create_expediente(self, data: ExpedienteData, actor_id: int) -> Expediente:
        extra = {"actor_id": actor_id}
        with self._transaction(
            "PostgresExpedienteRepository: create_expediente failed", extra
        ) as conn:
            if not can_create(self._load_actor_roles(conn, actor_id)):
                raise EditForbiddenError()
            row = conn.execute(
                self._SQL_INSERT,
                (
                    data.descripcion,
                    data.id_fiscalia,
                    data.fiscalia,
                    data.id_tipo_caso,
                    data.tipo_caso,
                    data.fecha_hecho,
                    actor_id,
                ),
            ).fetchone()
            created = conn.execute(self._SQL_GET, (row[0],)).fetchone()

        return _row_to_expediente(created)

    def update_expediente(
        self, expediente_id: int, data: ExpedienteData, actor_id: int
    ) -> None:
        extra = {"expediente_id": expediente_id, "actor_id": actor_id}
        with self._transaction(
            "PostgresExpedienteRepository: update_expediente failed", extra
        ) as conn:
            self._lock_editable(conn, expediente_id, actor_id)
            conn.execute(
                self._SQL_UPDATE,
                (
                    data.descripcion,
                    data.id_fiscalia,
                    data.fiscalia,
                    data.id_tipo_caso,
                    data.tipo_caso,
                    data.fecha_hecho,
                    actor_id,
                    expediente_id,
                ),
            )

    def change_estado(
        self,
        expediente_id: int,
        destino: EstadoExpediente,
        justificacion: Optional[str],
        actor_id: int,
    ) -> EstadoChange:
        extra = {
            "expediente_id": expediente_id,
            "actor_id": actor_id,
            "destino": destino.value,
        }
        with self._transaction(
            "PostgresExpedienteRepository: change_estado failed", extra
        ) as conn:
            origen = self._lock_estado(conn, expediente_id)
            roles = self._load_actor_roles(conn, actor_id)
            to_store = check_transition(origen, destino, roles, justificacion)
            conn.execute(
                self._SQL_UPDATE_ESTADO,
                (destino.value, to_store, actor_id, expediente_id),
            )
        return EstadoChange(id_expediente=expediente_id, origen=origen, destino=destino)

    def delete_expediente(self, expediente_id: int, actor_id: int) -> int:
        extra = {"expediente_id": expediente_id, "actor_id": actor_id}
        with self._transaction(
            "PostgresExpedienteRepository: delete_expediente failed", extra
        ) as conn:
            self._lock_editable(conn, expediente_id, actor_id)
            cascaded = conn.execute(
                self._SQL_SOFT_DELETE_INDICIOS_OF, (actor_id, expediente_id)
            ).rowcount
            conn.execute(self._SQL_SOFT_DELETE, (actor_id, expediente_id))
        return int(cascaded or 0)

    # =========================================================
    # Indicios
    # =========================================================
    def create_indicio(
        self, expediente_id: int, data: IndicioData, actor_id: int
    ) -> int:
        extra = {"expediente_id": expediente_id, "actor_id": actor_id}
        with self._transaction(
            "PostgresExpedienteRepository: create_indicio failed", extra
        ) as conn:
            self._lock_editable(conn, expediente_id, actor_id)
            row = conn.execute(
                self._SQL_INSERT_INDICIO,
                (
                    expediente_id,
                    data.nombre,
                    data.descripcion,
                    data.color,
                    data.tamano,
                    data.peso,
                    data.ubicacion,
                    actor_id,
                ),
            ).fetchone()
        return int(row[0])

    def update_indicio(self, indicio_id: int, data: IndicioData, actor_id: int) -> None:
        extra = {"indicio_id": indicio_id, "actor_id": actor_id}
        with self._transaction(
            "PostgresExpedienteRepository: update_indicio failed", extra
        ) as conn:
            parent_id = self._indicio_parent(conn, indicio_id)
            self._lock_editable(conn, parent_id, actor_id)
            conn.execute(
                self._SQL_UPDATE_INDICIO,
                (
                    data.nombre,
                    data.descripcion,
                    data.color,
                    data.tamano,
                    data.peso,
                    data.ubicacion,
                    actor_id,
                    indicio_id,
                ),
            )

    def delete_indicio(self, indicio_id: int, actor_id: int) -> None:
        extra = {"indicio_id": indicio_id, "actor_id": actor_id}
        with self._transaction(
            "PostgresExpedienteRepository: delete_indicio failed", extra
        ) as conn:
            parent_id = self._indicio_parent(conn, indicio_id)
            self._lock_editable(conn, parent_id, actor_id)
            conn.execute(self._SQL_SOFT_DELETE_INDICIO, (actor_id, indicio_id))
