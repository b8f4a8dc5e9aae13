"""
Errores del import de workflows.

Taxonomía
---------
- `StructuralParseFailure`: el texto no tiene ningún marcador "step N". Fatal.
- `EmptyResultError`: había bloques, pero todos fueron descartados por no
  tener descripción. Fatal.
- `InvalidImportFile`: el archivo subido no es un documento de texto aceptable.

Un bloque sin descripción NO es una excepción: se loguea y se reporta como
`SkippedBlock` dentro de `ImportResult`, y el lote continúa.
"""

from __future__ import annotations

from typing import List, Sequence

from .domain_models import SkippedBlock


class WorkflowImportError(Exception):
    """Error base del import de texto a registros."""


class StructuralParseFailure(WorkflowImportError):
    """No se encontró ningún marcador de paso en el documento."""

    def __init__(self, message: str = "No se encontró ningún marcador 'step N' en el documento."):
        super().__init__(message)


class EmptyResultError(WorkflowImportError):
    """Todos los bloques fueron descartados: no hay registros para devolver."""

    def __init__(self, skipped: Sequence[SkippedBlock] = ()):
        self.skipped: List[SkippedBlock] = list(skipped)
        super().__init__(
            f"Ningún paso válido en el documento ({len(self.skipped)} bloques sin descripción)."
        )


class InvalidImportFile(ValueError):
    """El archivo a importar no pasa la validación de extensión o tamaño."""
