"""
Name: Admin Bootstrap Script

Responsibilities:
  - Crear el primer usuario ADMIN (idempotente por nombre de usuario)
  - Reutilizar el caso de uso transaccional de alta (hash Argon2 + roles)
  - Persistir en PostgreSQL según DATABASE_URL

Usage:
  DATABASE_URL=postgresql://... python scripts/create_admin.py --usuario admin
"""

from __future__ import annotations

import argparse
import getpass
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from sii_dicri.application.usecases import CreateUserInput  # noqa: E402
from sii_dicri.container import (  # noqa: E402
    close_db_pool,
    get_create_user_use_case,
    get_list_roles_use_case,
    get_user_repository,
)
from sii_dicri.domain.entities import UserRole  # noqa: E402


def _require_database_url() -> None:
    if not os.getenv("DATABASE_URL"):
        raise SystemExit("DATABASE_URL es obligatorio para crear un usuario.")


def _prompt(label: str) -> str:
    value = input(f"{label}: ").strip()
    if not value:
        raise SystemExit(f"{label} es obligatorio.")
    return value


def _prompt_password() -> str:
    password = getpass.getpass("Contraseña: ")
    if not password:
        raise SystemExit("La contraseña es obligatoria.")
    confirm = getpass.getpass("Confirmar contraseña: ")
    if password != confirm:
        raise SystemExit("Las contraseñas no coinciden.")
    return password


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    argv = sys.argv[1:] if argv is None else argv
    if argv and argv[0] == "--":
        argv = argv[1:]
    parser = argparse.ArgumentParser(
        description="Crea el primer usuario ADMIN (idempotente)."
    )
    parser.add_argument("--usuario", help="Nombre de usuario para el login")
    parser.add_argument("--email", help="Correo del usuario")
    parser.add_argument("--primer-nombre", default="Administrador")
    parser.add_argument("--primer-apellido", default="Sistema")
    parser.add_argument(
        "--password",
        help="Contraseña (omitir para ingresarla de forma segura)",
    )
    return parser.parse_args(argv)


def _admin_role_id() -> int:
    for role in get_list_roles_use_case().execute().roles:
        if role.nombre.strip().upper() == UserRole.ADMIN.value and role.activo:
            return role.id
    raise SystemExit("No existe el rol ADMIN activo. ¿Se ejecutó `alembic upgrade head`?")


def create_admin(
    *,
    usuario: str,
    email: str,
    password: str,
    primer_nombre: str,
    primer_apellido: str,
) -> int:
    """Devuelve el id del ADMIN (existente o recién creado)."""
    existing = get_user_repository().get_user_by_username(usuario)
    if existing is not None and existing.activo:
        print(f"El usuario ya existe: id={existing.id} usuario={existing.usuario}")
        return existing.id

    result = get_create_user_use_case().execute(
        CreateUserInput(
            usuario=usuario,
            primer_nombre=primer_nombre,
            primer_apellido=primer_apellido,
            email=email,
            contrasena=password,
            roles=[_admin_role_id()],
        ),
        acting_user_id=None,
    )
    if result.error is not None:
        raise SystemExit(result.error.message)

    print(f"Usuario creado: id={result.user_id} usuario={usuario} rol=ADMIN")
    return result.user_id


def main() -> None:
    args = _parse_args()
    _require_database_url()
    usuario = (args.usuario or "").strip() or _prompt("Usuario")
    email = (args.email or "").strip() or _prompt("Correo")
    password = args.password or _prompt_password()
    try:
        create_admin(
            usuario=usuario,
            email=email,
            password=password,
            primer_nombre=args.primer_nombre,
            primer_apellido=args.primer_apellido,
        )
    finally:
        close_db_pool()


if __name__ == "__main__":
    main()
