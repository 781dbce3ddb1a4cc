"""
===============================================================================
TARJETA CRC — schemas/usuarios.py
===============================================================================

Módulo:
    Schemas HTTP para administración de usuarios (solo ADMIN)

Responsabilidades:
    - DTOs de alta/modificación de usuarios con su lista de roles (ids).
    - DTOs de listado de usuarios y del catálogo de roles.
    - Nunca exponer password_hash.
===============================================================================
"""

from __future__ import annotations

from pydantic import Field

from .common import CamelModel

# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class CreateUsuarioReq(CamelModel):
    usuario: str | None = Field(default=None, max_length=50)
    primer_nombre: str | None = Field(default=None, max_length=50)
    segundo_nombre: str | None = Field(default=None, max_length=50)
    primer_apellido: str | None = Field(default=None, max_length=50)
    segundo_apellido: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=150)
    contrasena: str | None = Field(default=None, max_length=128)
    roles: list[int] = Field(default_factory=list, max_length=20)


class UpdateUsuarioReq(CamelModel):
    primer_nombre: str | None = Field(default=None, max_length=50)
    segundo_nombre: str | None = Field(default=None, max_length=50)
    primer_apellido: str | None = Field(default=None, max_length=50)
    segundo_apellido: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=150)
    # Obligatorio: omitirlo no debe reactivar a un usuario dado de baja.
    activo: bool
    roles: list[int] = Field(default_factory=list, max_length=20)
    contrasena: str | None = Field(default=None, max_length=128)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


class UsuarioRes(CamelModel):
    id_usuario: int
    usuario: str
    primer_nombre: str
    segundo_nombre: str | None = None
    primer_apellido: str
    segundo_apellido: str | None = None
    email: str
    activo: bool
    roles: list[str]
    ids_roles: list[int]


class UsuariosListRes(CamelModel):
    ok: bool = True
    usuarios: list[UsuarioRes]


class RolRes(CamelModel):
    id_rol: int
    nombre: str
    activo: bool


class RolesListRes(CamelModel):
    ok: bool = True
    roles: list[RolRes]


class UsuarioCreatedRes(CamelModel):
    ok: bool = True
    mensaje: str
    id_usuario: int
