"""Capa de aplicación: casos de uso y políticas sin dependencias de HTTP/DB."""
