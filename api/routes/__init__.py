"""Rutas de la API."""

from . import diagrams, imports

__all__ = ["diagrams", "imports"]
