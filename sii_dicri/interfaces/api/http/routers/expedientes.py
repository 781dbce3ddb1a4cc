"""
===============================================================================
TARJETA CRC — sii_dicri/interfaces/api/http/routers/expedientes.py
===============================================================================

Class/Module:
    Expedientes Router

Responsibilities:
    - Exponer endpoints HTTP del ciclo de vida de expedientes.
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir ExpedienteError -> {ok:false, mensaje} con el status correcto.
    - Pasar la identidad de sesión explícitamente a cada caso de uso.

Collaborators:
    - sii_dicri.application.usecases.expedientes
    - sii_dicri.container (factories DI)
    - schemas.expedientes (DTOs Pydantic)

Patterns:
    - Controller / Router
    - Adapter (HTTP -> UseCase)
===============================================================================
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from sii_dicri.application.usecases import (
    ChangeEstadoUseCase,
    CreateExpedienteUseCase,
    DeleteExpedienteUseCase,
    ExpedienteInput,
    GetExpedienteUseCase,
    ListExpedientesUseCase,
    UpdateExpedienteUseCase,
)
from sii_dicri.container import (
    get_change_estado_use_case,
    get_create_expediente_use_case,
    get_delete_expediente_use_case,
    get_get_expediente_use_case,
    get_list_expedientes_use_case,
    get_update_expediente_use_case,
)
from sii_dicri.identity.users import SessionIdentity

from ..dependencies import session_required, to_expediente_res, to_indicio_res
from ..error_mapping import raise_use_case_error
from ..schemas.common import OkRes
from ..schemas.expedientes import (
    CambioEstadoReq,
    ExpedienteCreatedRes,
    ExpedienteDetailRes,
    ExpedienteReq,
    ExpedientesListRes,
)

router = APIRouter(prefix="/expedientes", tags=["expedientes"])


def _to_input(req: ExpedienteReq) -> ExpedienteInput:
    return ExpedienteInput(
        descripcion=req.descripcion,
        id_fiscalia=req.id_fiscalia,
        id_tipo_caso=req.id_tipo_caso,
        fecha_hecho=req.fecha_hecho,
    )


@router.get("", response_model=ExpedientesListRes)
def list_expedientes(
    estado: str | None = Query(None),
    fecha_inicio: date | None = Query(None, alias="fechaInicio"),
    fecha_fin: date | None = Query(None, alias="fechaFin"),
    use_case: ListExpedientesUseCase = Depends(get_list_expedientes_use_case),
    _session: SessionIdentity = Depends(session_required),
):
    result = use_case.execute(
        estado=estado, fecha_inicio=fecha_inicio, fecha_fin=fecha_fin
    )
    if result.error is not None:
        raise_use_case_error(result.error)

    return ExpedientesListRes(
        expedientes=[to_expediente_res(e) for e in result.expedientes]
    )


@router.post("", response_model=ExpedienteCreatedRes, status_code=201)
def create_expediente(
    req: ExpedienteReq,
    use_case: CreateExpedienteUseCase = Depends(get_create_expediente_use_case),
    session: SessionIdentity = Depends(session_required),
):
    result = use_case.execute(_to_input(req), session)
    if result.error is not None:
        raise_use_case_error(result.error)

    return ExpedienteCreatedRes(
        mensaje="Expediente creado correctamente.",
        id_expediente=result.expediente.id,
        numero_expediente=result.expediente.numero,
    )


@router.get("/{expediente_id}", response_model=ExpedienteDetailRes)
def get_expediente(
    expediente_id: int,
    use_case: GetExpedienteUseCase = Depends(get_get_expediente_use_case),
    session: SessionIdentity = Depends(session_required),
):
    result = use_case.execute(expediente_id, session)
    if result.error is not None:
        raise_use_case_error(result.error)

    return ExpedienteDetailRes(
        expediente=to_expediente_res(result.expediente),
        indicios=[to_indicio_res(i) for i in result.indicios],
        acciones_permitidas=[a.value for a in result.acciones],
        editable=result.editable,
    )


@router.put("/{expediente_id}", response_model=OkRes)
def update_expediente(
    expediente_id: int,
    req: ExpedienteReq,
    use_case: UpdateExpedienteUseCase = Depends(get_update_expediente_use_case),
    session: SessionIdentity = Depends(session_required),
):
    result = use_case.execute(expediente_id, _to_input(req), session)
    if result.error is not None:
        raise_use_case_error(result.error)
    return OkRes(mensaje="Expediente actualizado correctamente.")


@router.put("/{expediente_id}/estado", response_model=OkRes)
def change_estado(
    expediente_id: int,
    req: CambioEstadoReq,
    use_case: ChangeEstadoUseCase = Depends(get_change_estado_use_case),
    session: SessionIdentity = Depends(session_required),
):
    result = use_case.execute(
        expediente_id, req.nuevo_estado, session, justificacion=req.justificacion
    )
    if result.error is not None:
        raise_use_case_error(result.error)
    return OkRes(mensaje="Estado actualizado correctamente.")


@router.delete("/{expediente_id}", response_model=OkRes)
def delete_expediente(
    expediente_id: int,
    use_case: DeleteExpedienteUseCase = Depends(get_delete_expediente_use_case),
    session: SessionIdentity = Depends(session_required),
):
    result = use_case.execute(expediente_id, session)
    if result.error is not None:
        raise_use_case_error(result.error)
    return OkRes(mensaje="Expediente eliminado correctamente.")
