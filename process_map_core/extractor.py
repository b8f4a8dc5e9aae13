"""
Extractor de campos de un bloque de paso.

Implementa un escaneo ordenado de etiquetas: las seis etiquetas de la plantilla
del taller se buscan en orden, cada una a partir del final de la anterior que
se encontró. Cada campo va desde su etiqueta hasta la próxima etiqueta que
efectivamente aparece en el bloque (o el final del bloque).

Ejemplo: si falta "Che tool uso", la descripción corre hasta "Input necessario".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Tuple

from .domain_models import ExtractedFields

# (campo de ExtractedFields, etiqueta en el documento), en orden de plantilla.
FIELD_LABELS: Tuple[Tuple[str, str], ...] = (
    ("description", "Cosa faccio"),
    ("tools_text", "Che tool uso"),
    ("inputs_text", "Input necessario"),
    ("outputs_text", "Output prodotto"),
    ("duration_text", "Quanto tempo impiego"),
    ("pain_points_text", "Pain points"),
)

_LABEL_PATTERNS: Dict[str, "re.Pattern[str]"] = {
    name: re.compile(re.escape(label), re.IGNORECASE) for name, label in FIELD_LABELS
}

# Separadores entre la etiqueta y el valor ("Cosa faccio: ...", "Cosa faccio - ...").
_VALUE_LEADING = " \t\r\n:-"


@dataclass(frozen=True)
class _LabelHit:
    field: str
    start: int
    end: int


def _scan_labels(section: str) -> List[_LabelHit]:
    """Posiciones de las etiquetas presentes, en orden de plantilla."""
    hits: List[_LabelHit] = []
    cursor = 0
    for name, _label in FIELD_LABELS:
        match = _LABEL_PATTERNS[name].search(section, cursor)
        if match is None:
            continue
        hits.append(_LabelHit(field=name, start=match.start(), end=match.end()))
        cursor = match.end()
    return hits


def extract_fields(section: str) -> ExtractedFields:
    """
    Extrae los seis campos de un bloque.

    Un campo ausente queda como "". Los valores se recortan (separador inicial
    y espacios finales).
    """
    section = section or ""
    hits = _scan_labels(section)

    values: Dict[str, str] = {}
    for idx, hit in enumerate(hits):
        stop = hits[idx + 1].start if idx + 1 < len(hits) else len(section)
        values[hit.field] = section[hit.end:stop].lstrip(_VALUE_LEADING).rstrip()

    return ExtractedFields(**values)


def has_description(fields: ExtractedFields) -> bool:
    """Compuerta de completitud: sin descripción el bloque no genera registro."""
    return bool(fields.description.strip())
