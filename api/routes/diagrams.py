"""
Endpoint de export BPMN.

- POST /api/v1/diagrams: registros → archivo `.bpmn` descargable
"""

import logging
import re

from fastapi import APIRouter
from fastapi.responses import Response

from process_map_core.bpmn import BPMN_EXTENSION, BPMN_MEDIA_TYPE
from process_map_core.engine import run_diagram_export
from process_map_core.serialization import record_from_dict

from ..models.requests import DiagramRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/diagrams", tags=["diagrams"])

_SAFE_FILENAME = re.compile(r"[^A-Za-z0-9_.\-]")


def _download_name(filename: str) -> str:
    """Nombre seguro para Content-Disposition, siempre con extensión .bpmn."""
    stem = _SAFE_FILENAME.sub("_", (filename or "").strip()) or "workflow"
    if stem.lower().endswith(BPMN_EXTENSION):
        stem = stem[: -len(BPMN_EXTENSION)] or "workflow"
    return f"{stem}{BPMN_EXTENSION}"


@router.post("")
async def export_diagram(request: DiagramRequest):
    """
    Genera el BPMN 2.0 de una cadena de registros.

    Una lista vacía devuelve el diagrama vacío canónico (no es un error).
    """
    records = [record_from_dict(r.model_dump()) for r in request.records]
    export = run_diagram_export(records)
    filename = _download_name(request.filename)

    logger.info(f"Export BPMN: {len(records)} registros → {filename}")
    return Response(
        content=export["bpmn_xml"],
        media_type=BPMN_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
