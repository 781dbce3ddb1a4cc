"""
===============================================================================
TARJETA CRC — sii_dicri/interfaces/api/http/routers/indicios.py
===============================================================================

Responsibilities:
    - Endpoints de alta / modificación / baja lógica de indicios.
    - La ventana de edición es la del expediente padre (la aplican los casos
      de uso y el repositorio).

Collaborators:
    - sii_dicri.application.usecases.indicios
    - sii_dicri.container
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sii_dicri.application.usecases import (
    CreateIndicioUseCase,
    DeleteIndicioUseCase,
    IndicioInput,
    UpdateIndicioUseCase,
)
from sii_dicri.container import (
    get_create_indicio_use_case,
    get_delete_indicio_use_case,
    get_update_indicio_use_case,
)
from sii_dicri.identity.users import SessionIdentity

from ..dependencies import session_required
from ..error_mapping import raise_use_case_error
from ..schemas.common import OkRes
from ..schemas.indicios import IndicioCreatedRes, IndicioReq

router = APIRouter(prefix="/indicios", tags=["indicios"])


def _to_input(req: IndicioReq) -> IndicioInput:
    return IndicioInput(
        nombre=req.nombre,
        descripcion=req.descripcion,
        color=req.color,
        tamano=req.tamano,
        peso=req.peso,
        ubicacion=req.ubicacion,
    )


@router.post("", response_model=IndicioCreatedRes, status_code=201)
def create_indicio(
    req: IndicioReq,
    use_case: CreateIndicioUseCase = Depends(get_create_indicio_use_case),
    session: SessionIdentity = Depends(session_required),
):
    result = use_case.execute(req.id_expediente, _to_input(req), session)
    if result.error is not None:
        raise_use_case_error(result.error)
    return IndicioCreatedRes(mensaje="Indicio creado", id_indicio=result.indicio_id)


@router.put("/{indicio_id}", response_model=OkRes)
def update_indicio(
    indicio_id: int,
    req: IndicioReq,
    use_case: UpdateIndicioUseCase = Depends(get_update_indicio_use_case),
    session: SessionIdentity = Depends(session_required),
):
    result = use_case.execute(indicio_id, _to_input(req), session)
    if result.error is not None:
        raise_use_case_error(result.error)
    return OkRes(mensaje="Indicio actualizado")


@router.delete("/{indicio_id}", response_model=OkRes)
def delete_indicio(
    indicio_id: int,
    use_case: DeleteIndicioUseCase = Depends(get_delete_indicio_use_case),
    session: SessionIdentity = Depends(session_required),
):
    result = use_case.execute(indicio_id, session)
    if result.error is not None:
        raise_use_case_error(result.error)
    return OkRes(mensaje="Indicio eliminado")
