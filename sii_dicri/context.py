"""
===============================================================================
TARJETA CRC — sii_dicri/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Mantener contexto “request-scoped” usando ContextVars (async-safe).
  - Permitir correlación de logs/métricas sin pasar parámetros por todo el stack.
  - Proveer helpers mínimos: set_*(), get_context_dict(), clear_context().

Colaboradores:
  - sii_dicri.crosscutting.middleware: setea request_id/method/path al inicio.
  - sii_dicri.crosscutting.logger: enriquece logs leyendo get_context_dict().
  - sii_dicri.identity.auth_users: setea el usuario autenticado (solo para logs).

Restricciones:
  - Solo tipos primitivos (str) para serialización segura.
  - El usuario guardado acá es SOLO para logs; la identidad que autoriza
    operaciones viaja explícita (SessionIdentity) por la cadena de llamadas.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")
usuario_var: ContextVar[str] = ContextVar("usuario", default="")

_CTX_REQUEST_ID: Final[str] = "request_id"
_CTX_METHOD: Final[str] = "method"
_CTX_PATH: Final[str] = "path"
_CTX_USUARIO: Final[str] = "usuario"


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """
    Setea el contexto mínimo del request.

    Regla:
      - Strings vacíos significan “no disponible”.
    """
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def set_usuario_context(usuario: str) -> None:
    usuario_var.set(usuario or "")


def get_context_dict() -> dict[str, str]:
    """Devuelve el contexto actual como dict, omitiendo claves vacías."""
    ctx: dict[str, str] = {}

    if val := request_id_var.get():
        ctx[_CTX_REQUEST_ID] = val
    if val := http_method_var.get():
        ctx[_CTX_METHOD] = val
    if val := http_path_var.get():
        ctx[_CTX_PATH] = val
    if val := usuario_var.get():
        ctx[_CTX_USUARIO] = val

    return ctx


def clear_context() -> None:
    """Limpia el contexto al final del request."""
    request_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
    usuario_var.set("")
