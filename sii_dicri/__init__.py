"""SII DICRI: API de gestión de expedientes e indicios."""

__version__ = "0.1.0"
