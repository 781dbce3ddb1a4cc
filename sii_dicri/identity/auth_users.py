"""
===============================================================================
TARJETA CRC — identity/auth_users.py
===============================================================================

Módulo:
    Autenticación de Usuarios (JWT) y Guard de autorización

Responsabilidades:
    - Hashear/verificar contraseñas (Argon2) con compatibilidad legacy
      (registros en texto plano), controlada por configuración.
    - Emitir JWT de acceso con identidad + roles activos normalizados.
    - Decodificar y validar JWT (firma, exp, claims mínimos), distinguiendo
      expirado vs inválido en logs pero respondiendo lo mismo al cliente.
    - Exponer dependencias FastAPI (require_session, require_roles) que
      devuelven un SessionIdentity explícito.

Colaboradores:
    - crosscutting.config.get_settings: secreto, TTL, política legacy.
    - crosscutting.error_responses: unauthorized/forbidden estándar.
    - domain.repositories.UserRepository: búsqueda por usuario y roles.
    - identity.users: SessionIdentity / normalización de roles.

Decisiones de diseño:
    - La lógica criptográfica vive acá (borde de identidad), NO en dominio.
    - Un usuario inexistente o inactivo corta ANTES de comparar contraseñas.
    - Sin secreto de firma la API no arranca: ensure_signing_key() en el
      lifespan levanta SigningKeyMissingError.
    - No loguear secretos ni tokens.
===============================================================================
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi import Header

from ..context import set_usuario_context
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.exceptions import SigningKeyMissingError
from ..crosscutting.logger import logger
from ..domain.entities import User, UserRole
from ..domain.repositories import UserRepository
from .users import SessionIdentity, active_role_names

# ---------------------------------------------------------------------------
# Constantes (evitan strings mágicos)
# ---------------------------------------------------------------------------

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_USUARIO: str = "usuario"
CLAIM_NOMBRES: str = "nombres"
CLAIM_ROLES: str = "roles"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"

ARGON2_PREFIX: str = "$argon2"

# Un solo mensaje: el cliente no distingue token ausente, inválido o expirado.
SESSION_INVALID_MESSAGE = "Sesión no válida. Inicie sesión nuevamente."
ROLE_FORBIDDEN_MESSAGE = "No autorizado"

_password_hasher = PasswordHasher()


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """Settings de auth (snapshot)."""

    jwt_secret: str
    jwt_access_ttl_minutes: int
    allow_legacy_plaintext_passwords: bool


def get_auth_settings() -> AuthSettings:
    s = get_settings()
    return AuthSettings(
        jwt_secret=s.jwt_secret,
        jwt_access_ttl_minutes=s.jwt_access_ttl_minutes,
        allow_legacy_plaintext_passwords=s.allow_legacy_plaintext_passwords,
    )


def _signing_key(auth_settings: AuthSettings) -> str:
    secret = (auth_settings.jwt_secret or "").strip()
    if not secret:
        logger.critical("JWT_SECRET no configurado: no se pueden emitir sesiones")
        raise SigningKeyMissingError()
    return secret


def ensure_signing_key(settings: AuthSettings | None = None) -> None:
    """Chequeo de arranque: sin clave de firma la API no debe servir."""
    _signing_key(settings or get_auth_settings())


# ---------------------------------------------------------------------------
# Contraseñas (Argon2 + legacy)
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    """Hashea una contraseña usando Argon2."""
    return _password_hasher.hash(password)


def is_password_hash(stored: str | None) -> bool:
    """True si el valor almacenado tiene formato de hash reconocido."""
    return bool(stored) and stored.startswith(ARGON2_PREFIX)


def verify_password(
    password: str, stored: str | None, *, allow_legacy: bool = True
) -> bool:
    """
    Verifica contraseña contra el valor almacenado.

    - Hash reconocido: compara con Argon2. Un mismatch es definitivo.
    - Hash ilegible o valor no-hash: compara igualdad directa SOLO si la
      compatibilidad legacy está habilitada (y deja warning en logs).
    - Solo Argon2 cuenta como hash: otros formatos (bcrypt `$2b$`, etc.)
      nunca se verifican como hash.
    """
    if not stored or not password:
        return False

    if is_password_hash(stored):
        try:
            return _password_hasher.verify(stored, password)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError):
            logger.warning("Hash de contraseña ilegible; se evalúa como legacy")

    if not allow_legacy:
        return False

    matched = hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))
    if matched:
        logger.warning("Login con contraseña legacy en texto plano")
    return matched


def verify_credential(
    password: str, user: User | None, settings: AuthSettings | None = None
) -> bool:
    """False si el registro no existe o está inactivo (sin comparar nada)."""
    if user is None or not user.activo:
        return False
    auth_settings = settings or get_auth_settings()
    return verify_password(
        password,
        user.password_hash,
        allow_legacy=auth_settings.allow_legacy_plaintext_passwords,
    )


def authenticate_user(
    usuario: str,
    password: str,
    users: UserRepository,
    settings: AuthSettings | None = None,
) -> User | None:
    """
    Valida credenciales y retorna el usuario activo o None.

    No diferencia “no existe” / “inactivo” / “contraseña incorrecta”.
    """
    normalized = (usuario or "").strip()
    if not normalized:
        return None

    user = users.get_user_by_username(normalized)
    if not verify_credential(password, user, settings):
        logger.info("Auth falló: credenciales inválidas", extra={"usuario": normalized})
        return None
    return user


# ---------------------------------------------------------------------------
# Tokens JWT (emitir / decodificar)
# ---------------------------------------------------------------------------


def create_access_token(
    user: User, role_names: list[str], settings: AuthSettings | None = None
) -> tuple[str, SessionIdentity]:
    """
    Crea un JWT de acceso firmado.

    `role_names` ya debe venir filtrado a roles activos (active_role_names).

    Retorna:
        (token, identidad embebida)
    """
    auth_settings = settings or get_auth_settings()
    secret = _signing_key(auth_settings)

    identity = SessionIdentity.from_names(
        user_id=user.id,
        usuario=user.usuario,
        nombres=user.nombre_visible,
        role_names=role_names,
    )

    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=auth_settings.jwt_access_ttl_minutes)
    payload: dict[str, object] = {
        CLAIM_SUB: str(identity.user_id),
        CLAIM_USUARIO: identity.usuario,
        CLAIM_NOMBRES: identity.nombres,
        CLAIM_ROLES: list(identity.role_names),
        CLAIM_IAT: int(now.timestamp()),
        CLAIM_EXP: int(expires.timestamp()),
    }

    token = jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
    return token, identity


def issue_session(
    user: User, users: UserRepository, settings: AuthSettings | None = None
) -> tuple[str, SessionIdentity]:
    """Carga los roles del usuario y emite la sesión con los activos."""
    role_names = active_role_names(users.list_roles_for_user(user.id))
    return create_access_token(user, role_names, settings)


def decode_access_token(
    token: str, settings: AuthSettings | None = None
) -> SessionIdentity:
    """
    Decodifica y valida un JWT de acceso.

    Errores:
        - 401 (mismo mensaje) si expiró, la firma no valida o faltan claims.
    """
    auth_settings = settings or get_auth_settings()
    secret = _signing_key(auth_settings)

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": [CLAIM_SUB, CLAIM_USUARIO, CLAIM_ROLES, CLAIM_EXP]},
        )
    except jwt.ExpiredSignatureError as exc:
        logger.info("Token rechazado", extra={"motivo": "expirado"})
        raise unauthorized(SESSION_INVALID_MESSAGE) from exc
    except jwt.InvalidTokenError as exc:
        logger.warning("Token rechazado", extra={"motivo": "invalido", "error": str(exc)})
        raise unauthorized(SESSION_INVALID_MESSAGE) from exc

    roles = payload.get(CLAIM_ROLES)
    try:
        user_id = int(payload[CLAIM_SUB])
    except (TypeError, ValueError) as exc:
        logger.warning("Token rechazado", extra={"motivo": "sub_invalido"})
        raise unauthorized(SESSION_INVALID_MESSAGE) from exc

    if not isinstance(roles, list):
        logger.warning("Token rechazado", extra={"motivo": "roles_invalidos"})
        raise unauthorized(SESSION_INVALID_MESSAGE)

    return SessionIdentity.from_names(
        user_id=user_id,
        usuario=str(payload.get(CLAIM_USUARIO) or ""),
        nombres=str(payload.get(CLAIM_NOMBRES) or ""),
        role_names=[str(r) for r in roles],
    )


# ---------------------------------------------------------------------------
# Extracción de token
# ---------------------------------------------------------------------------


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def authenticate(authorization: str | None) -> SessionIdentity:
    token = _extract_bearer_token(authorization)
    if not token:
        logger.info("Token rechazado", extra={"motivo": "ausente"})
        raise unauthorized(SESSION_INVALID_MESSAGE)
    identity = decode_access_token(token)
    set_usuario_context(identity.usuario)
    return identity


# ---------------------------------------------------------------------------
# Dependencias FastAPI
# ---------------------------------------------------------------------------


def require_session() -> Callable:
    """Dependency FastAPI: requiere sesión válida; devuelve SessionIdentity."""

    async def dependency(
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> SessionIdentity:
        return authenticate(authorization)

    return dependency


def require_roles(*allowed: UserRole) -> Callable:
    """Dependency FastAPI: requiere al menos uno de los roles indicados."""
    allowed_roles = frozenset(UserRole(r) for r in allowed)

    async def dependency(
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> SessionIdentity:
        identity = authenticate(authorization)
        if not identity.has_any_role(allowed_roles):
            logger.warning(
                "Rol insuficiente",
                extra={
                    "requeridos": sorted(r.value for r in allowed_roles),
                    "roles": list(identity.role_names),
                },
            )
            raise forbidden(ROLE_FORBIDDEN_MESSAGE)
        return identity

    return dependency
