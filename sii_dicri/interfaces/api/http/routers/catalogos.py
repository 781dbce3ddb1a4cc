"""Router de catálogos de referencia (fiscalías, tipos de caso)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sii_dicri.application.usecases import ListFiscaliasUseCase, ListTiposCasoUseCase
from sii_dicri.container import (
    get_list_fiscalias_use_case,
    get_list_tipos_caso_use_case,
)
from sii_dicri.identity.users import SessionIdentity

from ..dependencies import session_required
from ..schemas.catalogos import (
    FiscaliaRes,
    FiscaliasListRes,
    TipoCasoRes,
    TiposCasoListRes,
)

router = APIRouter(prefix="/catalogos", tags=["catalogos"])


@router.get("/fiscalias", response_model=FiscaliasListRes)
def list_fiscalias(
    use_case: ListFiscaliasUseCase = Depends(get_list_fiscalias_use_case),
    _session: SessionIdentity = Depends(session_required),
):
    return FiscaliasListRes(
        fiscalias=[
            FiscaliaRes(id_fiscalia=f.id, nombre=f.nombre) for f in use_case.execute()
        ]
    )


@router.get("/tipos-caso", response_model=TiposCasoListRes)
def list_tipos_caso(
    use_case: ListTiposCasoUseCase = Depends(get_list_tipos_caso_use_case),
    _session: SessionIdentity = Depends(session_required),
):
    return TiposCasoListRes(
        tipos_caso=[
            TipoCasoRes(id_tipo_caso=t.id, nombre=t.nombre) for t in use_case.execute()
        ]
    )
