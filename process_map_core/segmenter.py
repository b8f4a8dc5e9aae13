"""
Segmentador de documentos: texto normalizado → bloques por paso.

Un paso empieza en el marcador "step N" (sin distinguir mayúsculas) y termina
en el próximo marcador o al final del documento. El texto previo al primer
marcador (metadata del proceso) no pertenece a ningún bloque.
"""

from __future__ import annotations

import re
from typing import List

from .domain_models import ParsedStepBlock

# Patrón literal, sin cuantificadores anidados: una sola pasada con finditer.
STEP_MARKER = re.compile(r"\bstep\s+(\d+)", re.IGNORECASE)


def segment_document(text: str) -> List[ParsedStepBlock]:
    """
    Divide el documento en bloques, en orden de aparición.

    El `ordinal` de cada bloque es su posición (1..N); el número declarado
    se conserva solo para mostrarlo. Si no hay marcadores devuelve [] y es
    el llamador quien decide que eso es un error.
    """
    matches = list(STEP_MARKER.finditer(text or ""))

    blocks: List[ParsedStepBlock] = []
    for idx, match in enumerate(matches):
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(text)
        blocks.append(
            ParsedStepBlock(
                ordinal=idx + 1,
                declared_number=int(match.group(1)),
                raw_section=text[match.end():end],
            )
        )
    return blocks
