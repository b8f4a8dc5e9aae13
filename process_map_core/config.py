# process_map_core/config.py
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List
import os

from dotenv import load_dotenv

"""
process_map_core.config
=======================

Gestión centralizada de configuración de las capas externas (CLI y API HTTP).

Este módulo define:
- La estructura de configuración (`Settings`)
- El mecanismo para cargar variables desde entorno (.env)
- Un acceso único y cacheado a la configuración (`get_settings`)

Alcance
-------
El núcleo de traducción (segmenter, extractor, assembler, compilador BPMN)
NO lee configuración: son funciones puras. `Settings` solo lo consumen
`cli.py`, `ingest.py` (límites de upload) y `api/`.

Convenciones
------------
- Las variables de entorno se cargan desde un archivo `.env` si existe.
- Los defaults están pensados para desarrollo local.
"""

# Cargar variables de entorno desde .env (si existe)
load_dotenv()


@dataclass
class Settings:
    """
    Contenedor tipado de configuración.

    Attributes
    ----------
    input_dir:
        Directorio base donde la CLI busca documentos de texto.
    output_dir:
        Directorio donde la CLI escribe `<nombre>.json` y `<nombre>.bpmn`.
    log_level:
        Nivel de logging (DEBUG, INFO, WARNING...).
    max_upload_bytes:
        Tamaño máximo aceptado para un documento importado (10 MB por defecto).
    cors_origins:
        Orígenes permitidos por la API HTTP.
    """

    # I/O
    input_dir: str = "input"
    output_dir: str = "output"

    # Logging
    log_level: str = "INFO"

    # Import
    max_upload_bytes: int = 10 * 1024 * 1024

    # API
    cors_origins: List[str] = field(default_factory=list)


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Devuelve una instancia única y cacheada de `Settings`.

    Variables de entorno utilizadas
    -------------------------------
    - PROCESS_MAP_INPUT_DIR (default: "input")
    - PROCESS_MAP_OUTPUT_DIR (default: "output")
    - LOG_LEVEL (default: "INFO")
    - PROCESS_MAP_MAX_UPLOAD_BYTES (default: 10485760)
    - CORS_ORIGINS (default: "http://localhost:3000,http://localhost:3001")
    """
    return Settings(
        input_dir=os.getenv("PROCESS_MAP_INPUT_DIR", "input"),
        output_dir=os.getenv("PROCESS_MAP_OUTPUT_DIR", "output"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        max_upload_bytes=int(
            os.getenv("PROCESS_MAP_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))
        ),
        cors_origins=_split_origins(
            os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
        ),
    )
