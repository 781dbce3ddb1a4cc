"""
===============================================================================
TARJETA CRC — dependencies.py (Dependencias y helpers comunes)
===============================================================================

Responsabilidades:
  - Centralizar dependencias de sesión reutilizadas por varios routers.
  - Mapear entidades de dominio -> DTOs HTTP (puro, sin IO).

Colaboradores:
  - identity.auth_users (require_session / require_roles)
  - domain.entities (Expediente, Indicio)
  - schemas.expedientes (ExpedienteRes, IndicioRes)
===============================================================================
"""

from __future__ import annotations

from sii_dicri.domain.entities import Expediente, Indicio, UserRole
from sii_dicri.identity.auth_users import require_roles, require_session

from .schemas.expedientes import ExpedienteRes, IndicioRes

# Cualquier sesión válida.
session_required = require_session()

# Administración de usuarios.
admin_required = require_roles(UserRole.ADMIN)


def to_expediente_res(expediente: Expediente) -> ExpedienteRes:
    return ExpedienteRes(
        id_expediente=expediente.id,
        numero_expediente=expediente.numero,
        descripcion=expediente.descripcion,
        id_fiscalia=expediente.id_fiscalia,
        fiscalia=expediente.fiscalia,
        id_tipo_caso=expediente.id_tipo_caso,
        tipo_caso=expediente.tipo_caso,
        fecha_hecho=expediente.fecha_hecho,
        estado=expediente.estado.value,
        justificacion_rechazo=expediente.justificacion_rechazo,
        id_usuario_registro=expediente.id_usuario_registro,
        usuario_registro=expediente.usuario_registro,
        fecha_registro=expediente.fecha_registro,
        fecha_modificacion=expediente.fecha_modificacion,
    )


def to_indicio_res(indicio: Indicio) -> IndicioRes:
    return IndicioRes(
        id_indicio=indicio.id,
        id_expediente=indicio.id_expediente,
        nombre=indicio.nombre,
        descripcion=indicio.descripcion,
        color=indicio.color,
        tamano=indicio.tamano,
        peso=float(indicio.peso) if indicio.peso is not None else None,
        ubicacion=indicio.ubicacion,
        id_usuario_registro=indicio.id_usuario_registro,
        fecha_registro=indicio.fecha_registro,
    )
