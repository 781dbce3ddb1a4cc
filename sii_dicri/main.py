"""
Name: ASGI Entrypoint (sii_dicri.main)

Responsibilities:
  - Re-exportar la app FastAPI para uvicorn/gunicorn y tests

Notes:
  - Sin configuración ni IO: `uvicorn sii_dicri.main:app`
"""

from sii_dicri.api.main import app

__all__ = ["app"]
