from __future__ import annotations

"""
process_map_core.engine
=======================

Orquestador de alto nivel del núcleo de traducción.

Expone una **API interna** estable para:

- importar texto de un taller → registros canónicos (`run_import_pipeline`)
- exportar registros → BPMN 2.0 (`run_diagram_export`)

sin preocuparse por HTTP, CLI ni persistencia. La CLI (`cli.py`) y la API
(`api/routes/`) llaman a este módulo; nunca directamente al segmentador o
al compilador.

NOTA: estas funciones NO escriben archivos en disco.
"""

import logging
from typing import List, Sequence, TypedDict

from .assembler import import_workflow_text
from .bpmn import compile_records, render_bpmn_xml
from .domain_models import DiagramDocument, ImportResult, WorkflowStepRecord

logger = logging.getLogger(__name__)


class ImportRunResult(TypedDict):
    """
    Resultado de un import completo (texto → registros → BPMN opcional).
    """

    result: ImportResult
    """Metadata, registros aceptados y bloques descartados."""

    bpmn_xml: str
    """BPMN de la cadena completa ("" si no se pidió)."""


class DiagramExportResult(TypedDict):
    """Resultado del export de registros a BPMN."""

    document: DiagramDocument
    """Modelo del diagrama (nodos, flujos, geometría)."""

    bpmn_xml: str
    """XML listo para descargar como `.bpmn`."""


def run_import_pipeline(text: str, *, with_bpmn: bool = True) -> ImportRunResult:
    """
    Ejecuta el import de un documento de texto.

    Flujo:
    ------
    1) Normalización + segmentación + extracción + ensamblado
       (`assembler.import_workflow_text`).
    2) Opcional: compilación de los registros aceptados a BPMN.

    Raises:
        StructuralParseFailure: el texto no tiene marcadores de paso.
        EmptyResultError: ningún bloque tenía descripción.
    """
    result = import_workflow_text(text)

    bpmn_xml = ""
    if with_bpmn:
        bpmn_xml = render_bpmn_xml(compile_records(result.records))

    return ImportRunResult(result=result, bpmn_xml=bpmn_xml)


def run_diagram_export(records: Sequence[WorkflowStepRecord]) -> DiagramExportResult:
    """
    Compila registros ya persistidos a BPMN.

    Una lista vacía no es un error: devuelve el diagrama vacío canónico.
    """
    records_list: List[WorkflowStepRecord] = list(records)
    if not records_list:
        logger.info("Export BPMN sin registros: se genera el diagrama vacío")

    document = compile_records(records_list)
    return DiagramExportResult(document=document, bpmn_xml=render_bpmn_xml(document))
