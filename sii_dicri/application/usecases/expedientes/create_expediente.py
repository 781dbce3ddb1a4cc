"""
===============================================================================
USE CASE: Create Expediente
===============================================================================

Name:
    Create Expediente Use Case

Business Goal:
    Registrar un expediente nuevo en estado BORRADOR con un número legible
    (EXP-<año>-<secuencia>) asignado por la persistencia en el mismo INSERT.

Why (Context / Intención):
    - Los nombres de fiscalía y tipo de caso se copian al expediente al
      momento de escribir (snapshot), por eso se resuelven acá contra el
      catálogo y se rechazan entradas inexistentes o inactivas.
    - Crear es una acción de TECNICO/ADMIN; un COORDINADOR solo revisa.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateExpedienteUseCase

Responsibilities:
    - Validar obligatorios (descripción, fiscalía, tipo de caso, fecha).
    - Validar rol del actor antes de tocar la base.
    - Resolver snapshots de catálogo.
    - Persistir y devolver el expediente creado.

Collaborators:
    - ExpedienteRepository.create_expediente (re-chequea rol con la base)
    - CatalogRepository.get_fiscalia / get_tipo_caso
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ....crosscutting.logger import logger
from ....domain.entities import ExpedienteData
from ....domain.errors import (
    CatalogEntryNotFoundError,
    DomainRuleViolation,
    EditForbiddenError,
)
from ....domain.expediente_workflow import can_create
from ....domain.repositories import CatalogRepository, ExpedienteRepository
from ....identity.users import SessionIdentity
from .expediente_results import (
    CreateExpedienteResult,
    ExpedienteError,
    validation_error,
)

MSG_REQUIRED_FIELDS = "Todos los campos son obligatorios."


@dataclass(frozen=True)
class ExpedienteInput:
    """Campos núcleo tal como llegan del cliente (ids de catálogo)."""

    descripcion: Optional[str]
    id_fiscalia: Optional[int]
    id_tipo_caso: Optional[int]
    fecha_hecho: Optional[date]

    def missing_required(self) -> bool:
        return (
            not (self.descripcion or "").strip()
            or not self.id_fiscalia
            or not self.id_tipo_caso
            or self.fecha_hecho is None
        )


def resolve_expediente_data(
    data: ExpedienteInput, catalogs: CatalogRepository
) -> ExpedienteData:
    """
    Convierte ids de catálogo en snapshots de nombre.

    Raises:
        CatalogEntryNotFoundError: fiscalía o tipo inexistente / inactivo.
    """
    fiscalia = catalogs.get_fiscalia(int(data.id_fiscalia))
    if fiscalia is None or not fiscalia.activo:
        raise CatalogEntryNotFoundError(
            "La fiscalía seleccionada no existe o está inactiva."
        )
    tipo = catalogs.get_tipo_caso(int(data.id_tipo_caso))
    if tipo is None or not tipo.activo:
        raise CatalogEntryNotFoundError(
            "El tipo de caso seleccionado no existe o está inactivo."
        )
    return ExpedienteData(
        descripcion=(data.descripcion or "").strip(),
        id_fiscalia=fiscalia.id,
        fiscalia=fiscalia.nombre,
        id_tipo_caso=tipo.id,
        tipo_caso=tipo.nombre,
        fecha_hecho=data.fecha_hecho,
    )


class CreateExpedienteUseCase:
    def __init__(
        self,
        expediente_repository: ExpedienteRepository,
        catalog_repository: CatalogRepository,
    ) -> None:
        self._expedientes = expediente_repository
        self._catalogs = catalog_repository

    def execute(
        self, data: ExpedienteInput, actor: SessionIdentity
    ) -> CreateExpedienteResult:
        if data.missing_required():
            return CreateExpedienteResult(error=validation_error(MSG_REQUIRED_FIELDS))

        if not can_create(actor.roles):
            return CreateExpedienteResult(
                error=ExpedienteError.from_violation(EditForbiddenError())
            )

        try:
            resolved = resolve_expediente_data(data, self._catalogs)
            expediente = self._expedientes.create_expediente(resolved, actor.user_id)
        except DomainRuleViolation as exc:
            return CreateExpedienteResult(error=ExpedienteError.from_violation(exc))

        logger.info(
            "Expediente creado",
            extra={"expediente_id": expediente.id, "numero": expediente.numero},
        )
        return CreateExpedienteResult(expediente=expediente)
