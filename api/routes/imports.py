"""
Endpoints de import de documentos de texto.

Este módulo maneja:
- POST /api/v1/imports: importa texto enviado como JSON
- POST /api/v1/imports/file: importa un archivo de texto (.txt / .md)
"""

import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from process_map_core.config import get_settings
from process_map_core.engine import run_import_pipeline
from process_map_core.errors import (
    EmptyResultError,
    InvalidImportFile,
    StructuralParseFailure,
    WorkflowImportError,
)
from process_map_core.ingest import decode_upload, validate_import_file

from ..models.requests import ImportResponse, ImportTextRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/imports", tags=["imports"])


def _run_import(text: str, include_bpmn: bool) -> ImportResponse:
    """
    Corre el pipeline de import y traduce los errores del core a HTTP.

    - StructuralParseFailure → 422 (el documento no tiene pasos)
    - EmptyResultError → 422 (ningún paso tiene descripción)
    """
    try:
        run = run_import_pipeline(text, with_bpmn=include_bpmn)
    except StructuralParseFailure as e:
        logger.warning(f"Import sin marcadores de paso: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except EmptyResultError as e:
        logger.warning(f"Import sin pasos válidos ({len(e.skipped)} descartados)")
        raise HTTPException(status_code=422, detail=str(e))
    except WorkflowImportError as e:
        logger.exception(f"Error inesperado en el import: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return ImportResponse.from_result(run["result"], bpmn_xml=run["bpmn_xml"])


@router.post("", response_model=ImportResponse)
async def import_text(request: ImportTextRequest):
    """
    Importa un documento de texto (extraído de Word o pegado por el usuario).

    Returns:
        ImportResponse con metadata, registros y bloques descartados.
    """
    return _run_import(request.text, request.include_bpmn)


@router.post("/file", response_model=ImportResponse)
async def import_file(
    file: UploadFile = File(...),
    include_bpmn: bool = Form(False),
):
    """
    Importa un archivo de texto subido por multipart/form-data.

    Valida extensión y tamaño antes de parsear (máx `settings.max_upload_bytes`).
    """
    settings = get_settings()
    max_bytes = settings.max_upload_bytes

    if file.size is not None and file.size > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"El archivo es demasiado grande (máx {max_bytes // (1024 * 1024)}MB)",
        )

    # Un byte más que el límite alcanza para detectar el exceso
    content = await file.read(max_bytes + 1)

    try:
        validate_import_file(file.filename or "", len(content), max_bytes=max_bytes)
    except InvalidImportFile as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Import de archivo {file.filename} ({len(content)} bytes)")
    return _run_import(decode_upload(content), include_bpmn)
