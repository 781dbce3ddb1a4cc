"""
===============================================================================
TARJETA CRC — sii_dicri/api/auth_routes.py (Autenticación)
===============================================================================

Responsabilidades:
  - POST /auth/login: validar credenciales y emitir el JWT de sesión con los
    roles activos del usuario (normalizados).
  - GET /auth/me: devolver la identidad proyectada desde el token.

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP <-> identity.
  - Fail-safe security: cualquier falla de credenciales es el mismo 401
    (no distingue usuario inexistente, inactivo o contraseña incorrecta).

Colaboradores:
  - identity.auth_users: authenticate_user, issue_session, require_session
  - container.get_user_repository
  - crosscutting.metrics.record_login
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..container import get_user_repository
from ..crosscutting.error_responses import (
    OPENAPI_ERROR_RESPONSES,
    unauthorized,
    validation_error,
)
from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_login
from ..domain.repositories import UserRepository
from ..identity.auth_users import authenticate_user, issue_session, require_session
from ..identity.users import SessionIdentity
from ..interfaces.api.http.schemas.auth import LoginReq, LoginRes, MeRes, SessionUserRes

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

MSG_LOGIN_REQUIRED = "Usuario y contraseña son obligatorios."
MSG_INVALID_CREDENTIALS = "Credenciales inválidas"


def _to_session_user(identity: SessionIdentity) -> SessionUserRes:
    return SessionUserRes(**identity.to_public_dict())


@router.post("/auth/login", response_model=LoginRes, tags=["auth"])
def login(
    req: LoginReq,
    users: UserRepository = Depends(get_user_repository),
):
    """Inicia sesión y devuelve {ok, token, usuario}."""
    usuario = (req.usuario or "").strip()
    if not usuario or not req.contrasena:
        raise validation_error(MSG_LOGIN_REQUIRED)

    user = authenticate_user(usuario, req.contrasena, users)
    if user is None:
        record_login("fallido")
        raise unauthorized(MSG_INVALID_CREDENTIALS)

    token, identity = issue_session(user, users)
    record_login("ok")
    logger.info(
        "Login exitoso",
        extra={"user_id": identity.user_id, "roles": list(identity.role_names)},
    )
    return LoginRes(token=token, usuario=_to_session_user(identity))


@router.get("/auth/me", response_model=MeRes, tags=["auth"])
def me(session: SessionIdentity = Depends(require_session())):
    return MeRes(usuario=_to_session_user(session))
