"""
Política de complejidad de contraseñas.

Regla: longitud mínima (6 por defecto) + al menos una letra y un dígito.
Las letras acentuadas/ñ cuentan como letras; los dígitos son ASCII 0-9.
"""

from __future__ import annotations

import re
from typing import Optional

DEFAULT_MIN_LENGTH = 6

_LETTER = re.compile(r"[^\W\d_]")
_DIGIT = re.compile(r"[0-9]")


def password_policy_error(
    password: Optional[str], *, min_length: int = DEFAULT_MIN_LENGTH
) -> Optional[str]:
    """Devuelve el mensaje de error o None si la contraseña es válida."""
    value = password or ""
    if len(value) < min_length:
        return f"La contraseña debe tener al menos {min_length} caracteres."
    if not _LETTER.search(value) or not _DIGIT.search(value):
        return "La contraseña debe incluir al menos una letra y un número."
    return None
