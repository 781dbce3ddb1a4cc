"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Usuario, Rol, Expediente, Indicio, catálogos)

Responsabilidades:
    - Definir estructuras centrales del negocio (sin infraestructura).
    - Brindar helpers mínimos para mantener invariantes simples.
    - Mantener tipos claros para casos de uso y repositorios.

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - domain.expediente_workflow: reglas de estado sobre Expediente.
    - interfaces/api: serializan estas entidades a DTOs camelCase.

Principios:
    - Sin dependencias a DB/FastAPI.
    - Los nombres de fiscalía y tipo de caso en Expediente son snapshots
      tomados al escribir, no referencias vivas al catálogo.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


class UserRole(str, Enum):
    """Roles que gobiernan transiciones y ediciones (set cerrado)."""

    TECNICO = "TECNICO"
    COORDINADOR = "COORDINADOR"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class Role:
    """Fila del catálogo de roles (puede contener roles sin efecto en permisos)."""

    id: int
    nombre: str
    activo: bool = True


# ---------------------------------------------------------------------------
# Usuarios
# ---------------------------------------------------------------------------


@dataclass
class User:
    """Usuario del sistema. `password_hash` puede ser legacy (texto plano)."""

    id: int
    usuario: str
    password_hash: str
    primer_nombre: str
    primer_apellido: str
    email: str
    segundo_nombre: Optional[str] = None
    segundo_apellido: Optional[str] = None
    activo: bool = True
    fecha_registro: Optional[datetime] = None

    @property
    def nombre_visible(self) -> str:
        """"PrimerNombre PrimerApellido" (lo que muestra el frontend)."""
        return f"{self.primer_nombre or ''} {self.primer_apellido or ''}".strip()


@dataclass
class UserSummary:
    """Fila de listado administrativo: usuario + nombres de sus roles activos."""

    id: int
    usuario: str
    primer_nombre: str
    primer_apellido: str
    email: str
    activo: bool
    segundo_nombre: Optional[str] = None
    segundo_apellido: Optional[str] = None
    roles: list[str] = field(default_factory=list)
    role_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class NewUser:
    usuario: str
    password_hash: str
    primer_nombre: str
    primer_apellido: str
    email: str
    segundo_nombre: Optional[str] = None
    segundo_apellido: Optional[str] = None


@dataclass(frozen=True)
class UserChanges:
    primer_nombre: str
    primer_apellido: str
    email: str
    activo: bool
    segundo_nombre: Optional[str] = None
    segundo_apellido: Optional[str] = None


# ---------------------------------------------------------------------------
# Catálogos
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CatalogEntry:
    """Fiscalía o tipo de caso."""

    id: int
    nombre: str
    activo: bool = True


# ---------------------------------------------------------------------------
# Expedientes
# ---------------------------------------------------------------------------


class EstadoExpediente(str, Enum):
    BORRADOR = "BORRADOR"
    REVISION = "REVISION"
    APROBADO = "APROBADO"
    RECHAZADO = "RECHAZADO"


@dataclass
class Expediente:
    id: int
    numero: str
    descripcion: str
    id_fiscalia: int
    fiscalia: str
    id_tipo_caso: int
    tipo_caso: str
    fecha_hecho: date
    estado: EstadoExpediente = EstadoExpediente.BORRADOR
    justificacion_rechazo: Optional[str] = None
    id_usuario_registro: Optional[int] = None
    usuario_registro: Optional[str] = None
    fecha_registro: Optional[datetime] = None
    id_usuario_modificacion: Optional[int] = None
    fecha_modificacion: Optional[datetime] = None
    activo: bool = True


@dataclass(frozen=True)
class ExpedienteData:
    """Campos núcleo editables (creación y actualización)."""

    descripcion: str
    id_fiscalia: int
    fiscalia: str
    id_tipo_caso: int
    tipo_caso: str
    fecha_hecho: date


@dataclass(frozen=True)
class ExpedienteFilters:
    estado: Optional[EstadoExpediente] = None
    fecha_inicio: Optional[date] = None
    fecha_fin: Optional[date] = None


@dataclass(frozen=True)
class EstadoChange:
    """Resultado persistido de una transición."""

    id_expediente: int
    origen: EstadoExpediente
    destino: EstadoExpediente


# ---------------------------------------------------------------------------
# Indicios
# ---------------------------------------------------------------------------


@dataclass
class Indicio:
    id: int
    id_expediente: int
    nombre: str
    descripcion: Optional[str] = None
    color: Optional[str] = None
    tamano: Optional[str] = None
    peso: Optional[Decimal] = None
    ubicacion: Optional[str] = None
    id_usuario_registro: Optional[int] = None
    fecha_registro: Optional[datetime] = None
    activo: bool = True


@dataclass(frozen=True)
class IndicioData:
    nombre: str
    descripcion: Optional[str] = None
    color: Optional[str] = None
    tamano: Optional[str] = None
    peso: Optional[Decimal] = None
    ubicacion: Optional[str] = None
