"""
API HTTP principal para process-map-core.

Esta aplicación FastAPI expone endpoints REST que usan el core interno
(process_map_core.engine) para importar documentos de mapeo de procesos
y exportar registros a BPMN 2.0.

Uso:
    uvicorn api.main:app --reload --port 8000
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from process_map_core.config import get_settings

from .routes import diagrams, imports

settings = get_settings()

# Determinar ambiente
ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

# Configurar logging según ambiente
log_level = getattr(logging, settings.log_level, logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)
logger.info(f"🚀 Iniciando API en ambiente: {ENVIRONMENT}")

app = FastAPI(
    title="Process Map Core API",
    description="API para importar mapeos de procesos y exportarlos a BPMN 2.0",
    version="0.1.0",
)

logger.info(f"🌐 CORS origins configurados: {settings.cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Registrar rutas
app.include_router(imports.router)
app.include_router(diagrams.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "process-map-core-api"}


@app.get("/health")
async def health():
    """Health check detallado."""
    return {
        "status": "ok",
        "service": "process-map-core-api",
        "version": "0.1.0",
    }
