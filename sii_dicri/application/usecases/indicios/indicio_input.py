"""
Normalización de datos de indicio recibidos del cliente.

- Textos opcionales: strip; vacío -> None.
- Peso: acepta número o texto con coma decimal ("1,5"); se guarda con dos
  decimales (numeric(10,2)). Vacío -> None. Negativo o no numérico -> error.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from ....domain.entities import IndicioData

MSG_INVALID_PESO = "El peso debe ser un número mayor o igual a cero."

_PESO_QUANT = Decimal("0.01")
_PESO_MAX = Decimal("99999999.99")

PesoInput = Union[str, int, float, Decimal, None]


def _clean(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None


def parse_peso(raw: PesoInput) -> Optional[Decimal]:
    """Raises ValueError con MSG_INVALID_PESO si no es un peso válido."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(MSG_INVALID_PESO)

    text = str(raw).strip().replace(",", ".")
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(MSG_INVALID_PESO) from exc
    if not value.is_finite() or value < 0 or value > _PESO_MAX:
        raise ValueError(MSG_INVALID_PESO)
    return value.quantize(_PESO_QUANT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class IndicioInput:
    nombre: Optional[str]
    descripcion: Optional[str] = None
    color: Optional[str] = None
    tamano: Optional[str] = None
    peso: PesoInput = None
    ubicacion: Optional[str] = None

    def to_data(self) -> IndicioData:
        """Raises ValueError si el peso no es válido."""
        return IndicioData(
            nombre=(self.nombre or "").strip(),
            descripcion=_clean(self.descripcion),
            color=_clean(self.color),
            tamano=_clean(self.tamano),
            peso=parse_peso(self.peso),
            ubicacion=_clean(self.ubicacion),
        )
