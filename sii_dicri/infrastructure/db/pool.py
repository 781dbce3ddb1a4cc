"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Componente:
  DatabasePool (handle explícito del pool PostgreSQL)

Responsabilidades:
  - Abrir el psycopg_pool.ConnectionPool de forma perezosa (primer uso).
  - Configurar conexiones: statement_timeout (ninguna query queda colgada).
  - Resetear el pool (cerrar + olvidar) cuando se observa una falla de
    conectividad, para que el próximo uso lo reabra en vez de reutilizar
    un pool roto.
  - Proveer transaction(): commit si todo salió bien, rollback + release
    de la conexión en cualquier salida con excepción.

Colaboradores:
  - psycopg_pool.ConnectionPool
  - container.py (lo construye y lo comparte; no hay global oculto)
  - infrastructure/repositories/postgres/* (lo reciben por __init__)

Estados:
  cerrado-perezoso --(primer uso)--> abierto --(falla de conexión)--> cerrado-perezoso
  cualquiera --(close())--> cerrado definitivo (PoolClosedError)

Principios:
  - Sin reintentos automáticos: la falla se propaga y el cliente reintenta.
===============================================================================
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import psycopg
from psycopg_pool import ConnectionPool, PoolTimeout

from ...crosscutting.logger import logger
from .errors import DatabaseConnectionError, PoolClosedError

# Fallas que invalidan el pool completo (red, servidor caído, pool agotado).
_CONNECTIVITY_ERRORS = (psycopg.OperationalError, psycopg.InterfaceError, PoolTimeout)


class DatabasePool:
    """Pool compartido por proceso, inyectado desde el composition root."""

    def __init__(
        self,
        database_url: str,
        *,
        min_size: int = 1,
        max_size: int = 10,
        statement_timeout_ms: int = 15000,
        connect_timeout_seconds: float = 10.0,
        pool_factory: Optional[Callable[..., ConnectionPool]] = None,
    ):
        self._database_url = database_url
        self._min_size = min_size
        self._max_size = max_size
        self._statement_timeout_ms = statement_timeout_ms
        self._connect_timeout = connect_timeout_seconds
        self._pool_factory = pool_factory or ConnectionPool
        self._pool: Optional[ConnectionPool] = None
        self._closed = False
        self._lock = threading.Lock()

    # =========================================================
    # Ciclo de vida
    # =========================================================
    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def _configure_connection(self, conn) -> None:
        if self._statement_timeout_ms > 0:
            conn.execute(f"SET statement_timeout = {int(self._statement_timeout_ms)}")
            conn.commit()

    def _ensure_open(self) -> ConnectionPool:
        with self._lock:
            if self._closed:
                raise PoolClosedError("El pool de base de datos fue cerrado.")
            if self._pool is not None:
                return self._pool

            logger.info(
                "Inicializando pool DB",
                extra={"min_size": self._min_size, "max_size": self._max_size},
            )
            try:
                pool = self._pool_factory(
                    conninfo=self._database_url,
                    min_size=self._min_size,
                    max_size=self._max_size,
                    timeout=self._connect_timeout,
                    configure=self._configure_connection,
                    open=False,
                )
                pool.open(wait=True, timeout=self._connect_timeout)
            except _CONNECTIVITY_ERRORS as exc:
                logger.error("No se pudo abrir el pool DB", extra={"error": str(exc)})
                raise DatabaseConnectionError(
                    "No se pudo conectar a la base de datos.", original_error=exc
                ) from exc

            self._pool = pool
            return pool

    def reset(self) -> None:
        """Cierra y olvida el pool actual; el próximo uso lo reabre."""
        with self._lock:
            pool, self._pool = self._pool, None
        if pool is None:
            return
        logger.warning("Reseteando pool DB tras falla de conexión")
        try:
            pool.close()
        except Exception as exc:  # el pool ya estaba roto
            logger.warning("Error cerrando pool roto", extra={"error": str(exc)})

    def close(self) -> None:
        """Cierre definitivo (idempotente)."""
        with self._lock:
            self._closed = True
            pool, self._pool = self._pool, None
        if pool is not None:
            logger.info("Cerrando pool DB")
            pool.close()

    # =========================================================
    # Uso
    # =========================================================
    @contextmanager
    def connection(self) -> Iterator[psycopg.Connection]:
        pool = self._ensure_open()
        try:
            with pool.connection() as conn:
                yield conn
        except _CONNECTIVITY_ERRORS as exc:
            self.reset()
            raise DatabaseConnectionError(
                "Conexión a la base de datos perdida.", original_error=exc
            ) from exc

    @contextmanager
    def transaction(self) -> Iterator[psycopg.Connection]:
        """
        Transacción acotada.

        - Commit solo si el bloque termina sin excepción.
        - Rollback y devolución de la conexión al pool en todo otro caso.
        """
        with self.connection() as conn:
            with conn.transaction():
                yield conn

    def ping(self) -> bool:
        with self.connection() as conn:
            return conn.execute("SELECT 1").fetchone() is not None
