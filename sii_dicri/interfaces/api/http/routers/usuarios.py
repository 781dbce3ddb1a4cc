"""
===============================================================================
TARJETA CRC — sii_dicri/interfaces/api/http/routers/usuarios.py
===============================================================================

Responsibilities:
    - Administración de usuarios y roles (solo ADMIN).
    - Alta y modificación delegan en casos de uso transaccionales
      (usuario + roles, todo o nada).

Collaborators:
    - sii_dicri.application.usecases.users
    - sii_dicri.container
    - identity.auth_users.require_roles(ADMIN)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from sii_dicri.application.usecases import (
    CreateUserInput,
    CreateUserUseCase,
    ListRolesUseCase,
    ListUsersUseCase,
    UpdateUserInput,
    UpdateUserUseCase,
)
from sii_dicri.container import (
    get_create_user_use_case,
    get_list_roles_use_case,
    get_list_users_use_case,
    get_update_user_use_case,
)
from sii_dicri.identity.users import SessionIdentity

from ..dependencies import admin_required
from ..error_mapping import raise_use_case_error
from ..schemas.common import OkRes
from ..schemas.usuarios import (
    CreateUsuarioReq,
    RolesListRes,
    RolRes,
    UpdateUsuarioReq,
    UsuarioCreatedRes,
    UsuarioRes,
    UsuariosListRes,
)

router = APIRouter(prefix="/usuarios", tags=["usuarios"])


@router.get("", response_model=UsuariosListRes)
def list_usuarios(
    search: str | None = Query(None, max_length=200),
    estado: str | None = Query("Activos"),
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
    _admin: SessionIdentity = Depends(admin_required),
):
    result = use_case.execute(search=search, estado=estado)
    if result.error is not None:
        raise_use_case_error(result.error)

    return UsuariosListRes(
        usuarios=[
            UsuarioRes(
                id_usuario=u.id,
                usuario=u.usuario,
                primer_nombre=u.primer_nombre,
                segundo_nombre=u.segundo_nombre,
                primer_apellido=u.primer_apellido,
                segundo_apellido=u.segundo_apellido,
                email=u.email,
                activo=u.activo,
                roles=u.roles,
                ids_roles=u.role_ids,
            )
            for u in result.users
        ]
    )


@router.get("/roles", response_model=RolesListRes)
def list_roles(
    use_case: ListRolesUseCase = Depends(get_list_roles_use_case),
    _admin: SessionIdentity = Depends(admin_required),
):
    result = use_case.execute()
    return RolesListRes(
        roles=[RolRes(id_rol=r.id, nombre=r.nombre, activo=r.activo) for r in result.roles]
    )


@router.post("", response_model=UsuarioCreatedRes, status_code=201)
def create_usuario(
    req: CreateUsuarioReq,
    use_case: CreateUserUseCase = Depends(get_create_user_use_case),
    admin: SessionIdentity = Depends(admin_required),
):
    result = use_case.execute(
        CreateUserInput(
            usuario=req.usuario,
            primer_nombre=req.primer_nombre,
            segundo_nombre=req.segundo_nombre,
            primer_apellido=req.primer_apellido,
            segundo_apellido=req.segundo_apellido,
            email=req.email,
            contrasena=req.contrasena,
            roles=req.roles,
        ),
        acting_user_id=admin.user_id,
    )
    if result.error is not None:
        raise_use_case_error(result.error)
    return UsuarioCreatedRes(
        mensaje="Usuario creado correctamente", id_usuario=result.user_id
    )


@router.put("/{user_id}", response_model=OkRes)
def update_usuario(
    user_id: int,
    req: UpdateUsuarioReq,
    use_case: UpdateUserUseCase = Depends(get_update_user_use_case),
    admin: SessionIdentity = Depends(admin_required),
):
    result = use_case.execute(
        user_id,
        UpdateUserInput(
            primer_nombre=req.primer_nombre,
            segundo_nombre=req.segundo_nombre,
            primer_apellido=req.primer_apellido,
            segundo_apellido=req.segundo_apellido,
            email=req.email,
            activo=req.activo,
            roles=req.roles,
            contrasena=req.contrasena,
        ),
        acting_user_id=admin.user_id,
    )
    if result.error is not None:
        raise_use_case_error(result.error)
    return OkRes(mensaje="Usuario actualizado correctamente")
