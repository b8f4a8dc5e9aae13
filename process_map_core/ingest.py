from __future__ import annotations

import re
from pathlib import Path
from typing import List

from .errors import InvalidImportFile

"""
process_map_core.ingest
=======================

Entrada de documentos de texto (archivo / upload → RawDocument normalizado).

Responsabilidad
----------------
- Validar archivos a importar (extensión y tamaño)
- Leer texto desde disco
- Normalizar el texto antes de segmentarlo

NO hace:
---------
- Extracción de texto desde .docx / PDF (colaborador externo)
- Segmentación ni parsing de campos (`segmenter`, `extractor`)

Diseño
------
- Determinista: mismo texto → mismo texto normalizado
- Las validaciones fallan con `InvalidImportFile`, nunca con None
"""

# ============================================================
# Extensiones y límites
# ============================================================

TEXT_EXT = {".txt", ".md"}
MAX_IMPORT_BYTES = 10 * 1024 * 1024  # 10MB

_BLANK_RUNS = re.compile(r"\n{3,}")


# ============================================================
# Normalización
# ============================================================

def normalize_text(text: str) -> str:
    """
    Normaliza el texto de un documento importado.

    Reglas:
    -------
    - CRLF / CR → LF
    - 3 o más saltos de línea seguidos → una sola línea en blanco
    - Se recortan espacios al inicio y al final del documento
    """
    text = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    return _BLANK_RUNS.sub("\n\n", text).strip()


# ============================================================
# Validación y lectura
# ============================================================

def validate_import_file(filename: str, size: int, max_bytes: int = MAX_IMPORT_BYTES) -> None:
    """
    Valida que un archivo sea un documento de texto importable.

    Raises
    ------
    InvalidImportFile
        Si la extensión no está soportada, si está vacío o si supera `max_bytes`.
    """
    ext = Path(filename or "").suffix.lower()
    if ext not in TEXT_EXT:
        allowed = ", ".join(sorted(TEXT_EXT))
        raise InvalidImportFile(f"El archivo debe ser de texto ({allowed}): {filename!r}")

    if size <= 0:
        raise InvalidImportFile(f"El archivo está vacío: {filename!r}")

    if size > max_bytes:
        raise InvalidImportFile(
            f"El archivo es demasiado grande (máx {max_bytes // (1024 * 1024)}MB): {filename!r}"
        )


def decode_upload(content: bytes) -> str:
    """
    Decodifica el contenido de un upload a texto.

    Se prueba UTF-8 (con o sin BOM) y, si falla, latin-1, que es lo que suelen
    producir los exports de Word en Windows.
    """
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def read_text_file(path: Path, max_bytes: int = MAX_IMPORT_BYTES) -> str:
    """
    Lee y normaliza un documento de texto desde disco.

    Raises
    ------
    FileNotFoundError
        Si el archivo no existe.
    InvalidImportFile
        Si no pasa `validate_import_file`.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"No se encontró el archivo: {path}")

    validate_import_file(path.name, path.stat().st_size, max_bytes=max_bytes)
    return normalize_text(decode_upload(path.read_bytes()))


def discover_text_documents(input_dir: Path) -> List[Path]:
    """
    Lista los documentos de texto importables dentro de `input_dir`.

    Orden estable (ordenado por ruta) para que las corridas sean reproducibles.
    """
    input_dir = Path(input_dir)
    if not input_dir.exists():
        return []

    return sorted(
        p for p in input_dir.rglob("*")
        if p.is_file() and p.suffix.lower() in TEXT_EXT
    )
