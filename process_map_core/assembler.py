"""
Ensamblador de registros: metadata del proceso + campos por bloque →
`WorkflowStepRecord`.

También expone `import_workflow_text`, el pipeline completo texto → registros
con la política de errores del import:

- sin marcadores de paso → `StructuralParseFailure`
- bloque sin descripción → se descarta, se loguea y sigue el lote
- ningún bloque válido → `EmptyResultError`
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .domain_models import (
    ImportResult,
    ParsedStepBlock,
    ProcessMetadata,
    SkippedBlock,
    WorkflowStepRecord,
)
from .durations import parse_duration_minutes
from .errors import EmptyResultError, StructuralParseFailure
from .extractor import extract_fields, has_description
from .ingest import normalize_text
from .segmenter import segment_document

logger = logging.getLogger(__name__)


# ============================================================
# Metadata del proceso
# ============================================================

NAME_LABEL = "Quale processo sto mappando?"
CATEGORY_LABEL = "Categoria:"
FREQUENCY_LABEL = "Frequenza:"

DEFAULT_PROCESS_NAME = "Workflow Importato"
DEFAULT_CATEGORY = "Generale"
DEFAULT_FREQUENCY = 12

# Vocabulario controlado (palabra → veces por mes). Trimestral va antes que
# mensual porque "trimestrale" contiene "mes".
FREQUENCY_VOCABULARY: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("trimestr", "quarter"), 4),
    (("giorn", "quotidian", "daily"), 365),
    (("settiman", "week"), 52),
    (("mensil", "mese", "mesi", "month"), 12),
    (("annual", "ann", "year"), 1),
)

NOT_AVAILABLE = "N/A"
TITLE_MAX_CHARS = 50
TITLE_ELLIPSIS = "..."
PROVENANCE_PREFIX = "Importato da Word"


def _value_after_label(text: str, label: str) -> Optional[str]:
    """
    Primera línea no vacía que sigue a la primera aparición de `label`.

    La respuesta puede estar en la misma línea o en la siguiente
    ("Categoria:\\nHR").
    """
    match = re.search(re.escape(label), text, re.IGNORECASE)
    if match is None:
        return None
    start = match.end()
    while start < len(text) and text[start].isspace():
        start += 1
    end = text.find("\n", start)
    value = text[start:] if end < 0 else text[start:end]
    return value.strip()


def parse_frequency(text: str) -> int:
    """
    Traduce una frecuencia escrita al vocabulario controlado.

    "settimanale" → 52, "giornaliero" → 365, "mensile" → 12,
    "annuale" → 1, "trimestrale" → 4. Sin coincidencia → 12.
    """
    lowered = (text or "").lower()
    for keywords, per_month in FREQUENCY_VOCABULARY:
        if any(k in lowered for k in keywords):
            return per_month
    return DEFAULT_FREQUENCY


def parse_process_metadata(text: str) -> ProcessMetadata:
    """Lee nombre, categoría y frecuencia del proceso (una vez por documento)."""
    name = _value_after_label(text, NAME_LABEL)
    category = _value_after_label(text, CATEGORY_LABEL)
    frequency = _value_after_label(text, FREQUENCY_LABEL)

    return ProcessMetadata(
        name=name or DEFAULT_PROCESS_NAME,
        category=category or DEFAULT_CATEGORY,
        frequency_per_month=parse_frequency(frequency) if frequency else DEFAULT_FREQUENCY,
    )


# ============================================================
# Campos de lista y título
# ============================================================

def split_list(text: str) -> List[str]:
    """Separa por comas, recorta y descarta vacíos."""
    return [item.strip() for item in (text or "").split(",") if item.strip()]


def apply_list_sentinel(values: Sequence[str]) -> List[str]:
    """
    Garantiza una lista no vacía para el store del host.

    Es el único lugar donde se introduce el centinela "N/A".
    """
    return list(values) if values else [NOT_AVAILABLE]


def build_title(ordinal: int, description: str) -> str:
    description = description.strip()
    head = description[:TITLE_MAX_CHARS]
    suffix = TITLE_ELLIPSIS if len(description) > TITLE_MAX_CHARS else ""
    return f"Step {ordinal}: {head}{suffix}"


# ============================================================
# Ensamblado
# ============================================================

def build_record(metadata: ProcessMetadata, block: ParsedStepBlock) -> Optional[WorkflowStepRecord]:
    """
    Construye el registro de un bloque, o None si no pasa la compuerta de
    completitud (descripción vacía).
    """
    fields = extract_fields(block.raw_section)
    if not has_description(fields):
        return None

    description = fields.description.strip()
    return WorkflowStepRecord(
        ordinal=block.ordinal,
        phase=metadata.name,
        title=build_title(block.ordinal, description),
        description=description,
        tools=apply_list_sentinel(split_list(fields.tools_text)),
        inputs=apply_list_sentinel(split_list(fields.inputs_text)),
        outputs=apply_list_sentinel(split_list(fields.outputs_text)),
        duration_minutes=parse_duration_minutes(fields.duration_text),
        frequency_per_month=metadata.frequency_per_month,
        pain_points=fields.pain_points_text.strip(),
        provenance_note=f"{PROVENANCE_PREFIX} - {metadata.category}",
    )


def assemble_records(
    metadata: ProcessMetadata,
    blocks: Iterable[ParsedStepBlock],
) -> Tuple[List[WorkflowStepRecord], List[SkippedBlock]]:
    """
    Ensambla los registros de todos los bloques, en orden de documento.

    Los bloques sin descripción se devuelven en la segunda lista.
    """
    records: List[WorkflowStepRecord] = []
    skipped: List[SkippedBlock] = []

    for block in blocks:
        record = build_record(metadata, block)
        if record is None:
            logger.warning(
                "Step %s (bloque %s) sin descripción, descartado",
                block.declared_number,
                block.ordinal,
            )
            skipped.append(
                SkippedBlock(
                    ordinal=block.ordinal,
                    declared_number=block.declared_number,
                    reason="missing_description",
                )
            )
            continue
        records.append(record)

    return records, skipped


def import_workflow_text(text: str) -> ImportResult:
    """
    Pipeline completo: texto del taller → registros canónicos.

    Raises
    ------
    StructuralParseFailure
        Si el documento no contiene ningún marcador "step N".
    EmptyResultError
        Si todos los bloques fueron descartados.
    """
    normalized = normalize_text(text)

    blocks = segment_document(normalized)
    if not blocks:
        raise StructuralParseFailure()

    metadata = parse_process_metadata(normalized)
    records, skipped = assemble_records(metadata, blocks)

    if not records:
        raise EmptyResultError(skipped)

    logger.info(
        "Import de '%s': %d pasos aceptados, %d descartados",
        metadata.name,
        len(records),
        len(skipped),
    )
    return ImportResult(
        metadata=metadata,
        records=records,
        skipped=skipped,
        blocks_found=len(blocks),
    )
