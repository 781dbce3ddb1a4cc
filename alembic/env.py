"""
============================================================
TARJETA CRC — alembic/env.py (Entorno de migraciones)
============================================================
Responsibilities:
  - Correr las migraciones del esquema DICRI (online / offline).
  - Resolver la URL de la base: `-x database_url=...` > DATABASE_URL >
    sqlalchemy.url de alembic.ini.
  - Acotar la espera por locks para no colgarse detrás de la API en uso.

Collaborators:
  - Alembic (context, config)
  - SQLAlchemy Engine, solo para migrar (la app usa psycopg directo)

Policy:
  - Sin ORM: target_metadata = None, autogenerate deshabilitado.
  - Una transacción por migración.
============================================================
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool, text

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = None

MIGRATION_LOCK_TIMEOUT = os.environ.get("MIGRATION_LOCK_TIMEOUT", "10s")


def _psycopg_dialect(raw_url: str) -> str:
    """SQLAlchemy necesita el dialecto explícito para psycopg 3."""
    for prefix in ("postgresql://", "postgres://"):
        if raw_url.startswith(prefix):
            return "postgresql+psycopg://" + raw_url[len(prefix):]
    return raw_url


def get_url() -> str:
    url = (
        context.get_x_argument(as_dictionary=True).get("database_url")
        or os.environ.get("DATABASE_URL")
        or config.get_main_option("sqlalchemy.url")
    )
    if not url:
        raise RuntimeError(
            "DATABASE_URL no configurada (o use: alembic -x database_url=... upgrade head)"
        )
    return _psycopg_dialect(url)


def run_migrations_offline() -> None:
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        transaction_per_migration=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        connection.execute(text(f"SET lock_timeout = '{MIGRATION_LOCK_TIMEOUT}'"))
        connection.commit()
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            transaction_per_migration=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
