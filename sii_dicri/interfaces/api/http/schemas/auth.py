"""Schemas HTTP de autenticación (login / sesión actual)."""

from __future__ import annotations

from .common import CamelModel


class LoginReq(CamelModel):
    # Opcionales a propósito: la ausencia se informa con el mensaje de negocio.
    usuario: str | None = None
    contrasena: str | None = None


class SessionUserRes(CamelModel):
    sub: int
    usuario: str
    nombres: str
    roles: list[str]


class LoginRes(CamelModel):
    ok: bool = True
    token: str
    usuario: SessionUserRes


class MeRes(CamelModel):
    ok: bool = True
    usuario: SessionUserRes
