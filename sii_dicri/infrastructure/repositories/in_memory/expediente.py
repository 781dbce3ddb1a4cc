"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/expediente.py
============================================================
Class: InMemoryExpedienteRepository

Responsibilities:
  - Almacenar expedientes e indicios en memoria (tests / desarrollo local).
  - Generar `numero` con una secuencia propia (EXP-<año>-<000001>).
  - Re-evaluar reglas del workflow en cada escritura con los roles que
    devuelve `roles_provider` (la "base" de usuarios), no los del token.
  - Soft delete con cascada a indicios.

Collaborators:
  - domain.expediente_workflow
  - infrastructure.repositories.in_memory.user.InMemoryUserRepository
    (fuente habitual de roles_provider)

Constraints / Notes:
  - Thread-safe: Lock alrededor de cada operación (equivale al FOR UPDATE).
  - Ordering alineado con Postgres: fecha_registro DESC, id DESC.
============================================================
"""

from __future__ import annotations

import copy
import itertools
from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Dict, List, Optional

from ....domain.entities import (
    EstadoChange,
    EstadoExpediente,
    Expediente,
    ExpedienteData,
    ExpedienteFilters,
    Indicio,
    IndicioData,
    UserRole,
)
from ....domain.errors import (
    EditForbiddenError,
    ExpedienteNotFoundError,
    IndicioNotFoundError,
)
from ....domain.expediente_workflow import (
    INITIAL_STATE,
    can_create,
    check_editable,
    check_transition,
)

RolesProvider = Callable[[int], frozenset[UserRole]]


class InMemoryExpedienteRepository:
    """Repositorio in-memory, thread-safe, de expedientes e indicios."""

    def __init__(self, roles_provider: RolesProvider) -> None:
        self._lock = Lock()
        self._roles_provider = roles_provider
        self._expedientes: Dict[int, Expediente] = {}
        self._indicios: Dict[int, Indicio] = {}
        self._expediente_ids = itertools.count(1)
        self._indicio_ids = itertools.count(1)
        self._numero_seq = itertools.count(1)

    # =========================================================
    # Helpers internos
    # =========================================================
    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def _active(self, expediente_id: int) -> Expediente:
        expediente = self._expedientes.get(expediente_id)
        if expediente is None or not expediente.activo:
            raise ExpedienteNotFoundError()
        return expediente

    def _active_indicio(self, indicio_id: int) -> Indicio:
        indicio = self._indicios.get(indicio_id)
        if indicio is None or not indicio.activo:
            raise IndicioNotFoundError()
        return indicio

    def _check_editable(self, expediente_id: int, actor_id: int) -> Expediente:
        expediente = self._active(expediente_id)
        check_editable(expediente.estado, self._roles_provider(actor_id))
        return expediente

    def _touch(self, expediente: Expediente, actor_id: int, **changes) -> None:
        self._expedientes[expediente.id] = replace(
            expediente,
            id_usuario_modificacion=actor_id,
            fecha_modificacion=self._now(),
            **changes,
        )

    # =========================================================
    # Lecturas
    # =========================================================
    def list_expedientes(self, filters: ExpedienteFilters) -> List[Expediente]:
        with self._lock:
            items = [
                e
                for e in self._expedientes.values()
                if e.activo
                and (filters.estado is None or e.estado == filters.estado)
                and (filters.fecha_inicio is None or e.fecha_hecho >= filters.fecha_inicio)
                and (filters.fecha_fin is None or e.fecha_hecho <= filters.fecha_fin)
            ]
            items.sort(key=lambda e: (e.fecha_registro, e.id), reverse=True)
            return [copy.copy(e) for e in items]

    def get_expediente(self, expediente_id: int) -> Optional[Expediente]:
        with self._lock:
            expediente = self._expedientes.get(expediente_id)
            if expediente is None or not expediente.activo:
                return None
            return copy.copy(expediente)

    def list_indicios(self, expediente_id: int) -> List[Indicio]:
        with self._lock:
            return [
                copy.copy(i)
                for i in sorted(self._indicios.values(), key=lambda i: i.id)
                if i.id_expediente == expediente_id and i.activo
            ]

    def get_indicio(self, indicio_id: int) -> Optional[Indicio]:
        with self._lock:
            indicio = self._indicios.get(indicio_id)
            if indicio is None or not indicio.activo:
                return None
            return copy.copy(indicio)

    # =========================================================
    # Expedientes
    # =========================================================
    def create_expediente(self, data: ExpedienteData, actor_id: int) -> Expediente:
        with self._lock:
            if not can_create(self._roles_provider(actor_id)):
                raise EditForbiddenError()
            now = self._now()
            expediente = Expediente(
                id=next(self._expediente_ids),
                numero=f"EXP-{now.year}-{next(self._numero_seq):06d}",
                descripcion=data.descripcion,
                id_fiscalia=data.id_fiscalia,
                fiscalia=data.fiscalia,
                id_tipo_caso=data.id_tipo_caso,
                tipo_caso=data.tipo_caso,
                fecha_hecho=data.fecha_hecho,
                estado=INITIAL_STATE,
                id_usuario_registro=actor_id,
                fecha_registro=now,
            )
            self._expedientes[expediente.id] = expediente
            return copy.copy(expediente)

    def update_expediente(
        self, expediente_id: int, data: ExpedienteData, actor_id: int
    ) -> None:
        with self._lock:
            expediente = self._check_editable(expediente_id, actor_id)
            self._touch(
                expediente,
                actor_id,
                descripcion=data.descripcion,
                id_fiscalia=data.id_fiscalia,
                fiscalia=data.fiscalia,
                id_tipo_caso=data.id_tipo_caso,
                tipo_caso=data.tipo_caso,
                fecha_hecho=data.fecha_hecho,
            )

    def change_estado(
        self,
        expediente_id: int,
        destino: EstadoExpediente,
        justificacion: Optional[str],
        actor_id: int,
    ) -> EstadoChange:
        with self._lock:
            expediente = self._active(expediente_id)
            origen = expediente.estado
            to_store = check_transition(
                origen, destino, self._roles_provider(actor_id), justificacion
            )
            self._touch(
                expediente, actor_id, estado=destino, justificacion_rechazo=to_store
            )
            return EstadoChange(
                id_expediente=expediente_id, origen=origen, destino=destino
            )

    def delete_expediente(self, expediente_id: int, actor_id: int) -> int:
        with self._lock:
            expediente = self._check_editable(expediente_id, actor_id)
            cascaded = 0
            for indicio in list(self._indicios.values()):
                if indicio.id_expediente == expediente_id and indicio.activo:
                    self._indicios[indicio.id] = replace(indicio, activo=False)
                    cascaded += 1
            self._touch(expediente, actor_id, activo=False)
            return cascaded

    # =========================================================
    # Indicios
    # =========================================================
    def create_indicio(
        self, expediente_id: int, data: IndicioData, actor_id: int
    ) -> int:
        with self._lock:
            self._check_editable(expediente_id, actor_id)
            indicio = Indicio(
                id=next(self._indicio_ids),
                id_expediente=expediente_id,
                nombre=data.nombre,
                descripcion=data.descripcion,
                color=data.color,
                tamano=data.tamano,
                peso=data.peso,
                ubicacion=data.ubicacion,
                id_usuario_registro=actor_id,
                fecha_registro=self._now(),
            )
            self._indicios[indicio.id] = indicio
            return indicio.id

    def update_indicio(self, indicio_id: int, data: IndicioData, actor_id: int) -> None:
        with self._lock:
            indicio = self._active_indicio(indicio_id)
            self._check_editable(indicio.id_expediente, actor_id)
            self._indicios[indicio_id] = replace(
                indicio,
                nombre=data.nombre,
                descripcion=data.descripcion,
                color=data.color,
                tamano=data.tamano,
                peso=data.peso,
                ubicacion=data.ubicacion,
            )

    def delete_indicio(self, indicio_id: int, actor_id: int) -> None:
        with self._lock:
            indicio = self._active_indicio(indicio_id)
            self._check_editable(indicio.id_expediente, actor_id)
            self._indicios[indicio_id] = replace(indicio, activo=False)
