"""Routers HTTP por contexto (expedientes, indicios, catálogos, usuarios)."""
