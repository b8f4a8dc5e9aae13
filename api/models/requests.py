"""
Modelos de request/response para la API.

Estos modelos definen la estructura esperada de los requests HTTP,
validando tipos y valores antes de pasarlos al core.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from process_map_core.domain_models import ImportResult, WorkflowStepRecord


class ImportTextRequest(BaseModel):
    """Request para importar un documento de texto ya extraído (o pegado)."""

    text: str = Field(..., min_length=1, description="Texto completo del documento del taller")
    include_bpmn: bool = Field(
        default=False,
        description="Si es true, la respuesta incluye el BPMN de la cadena de pasos",
    )


class ProcessMetadataModel(BaseModel):
    name: str
    category: str
    frequency_per_month: int


class WorkflowStepModel(BaseModel):
    """
    Registro canónico de un paso, tal como lo consume el store de workflows.

    `id` es opcional: lo asigna el host al persistir. El compilador BPMN lo
    usa como clave de los elementos si está presente.
    """

    id: Optional[str] = Field(default=None, description="Id externo asignado por el host")
    ordinal: int = Field(..., ge=0)
    phase: str = ""
    title: str = Field(..., description="Título del paso (se usa como nombre de la tarea)")
    description: str = Field(..., min_length=1)
    tools: List[str] = Field(default_factory=list)
    inputs: List[str] = Field(default_factory=list)
    outputs: List[str] = Field(default_factory=list)
    duration_minutes: int = Field(default=0, ge=0)
    frequency_per_month: int = Field(default=0, ge=0)
    pain_points: str = ""
    provenance_note: str = ""
    owner: str = ""
    pii: bool = False
    hitl: bool = False
    citations: bool = False
    total_minutes_per_month: Optional[int] = Field(
        default=None, description="Calculado: duración × frecuencia (solo lectura)"
    )

    @classmethod
    def from_record(cls, record: WorkflowStepRecord) -> "WorkflowStepModel":
        return cls(
            id=record.id,
            ordinal=record.ordinal,
            phase=record.phase,
            title=record.title,
            description=record.description,
            tools=list(record.tools),
            inputs=list(record.inputs),
            outputs=list(record.outputs),
            duration_minutes=record.duration_minutes,
            frequency_per_month=record.frequency_per_month,
            pain_points=record.pain_points,
            provenance_note=record.provenance_note,
            owner=record.owner,
            pii=record.pii,
            hitl=record.hitl,
            citations=record.citations,
            total_minutes_per_month=record.total_minutes_per_month,
        )


class SkippedBlockModel(BaseModel):
    ordinal: int
    declared_number: int
    reason: str


class ImportResponse(BaseModel):
    """
    Response de un import.

    Devuelve la metadata del proceso, los registros aceptados y los bloques
    descartados (para que la UI pueda avisar qué pasos faltan).
    """

    process: ProcessMetadataModel
    records: List[WorkflowStepModel]
    skipped: List[SkippedBlockModel] = Field(default_factory=list)
    blocks_found: int
    bpmn_xml: Optional[str] = Field(default=None, description="BPMN de la cadena (si se pidió)")

    @classmethod
    def from_result(cls, result: ImportResult, bpmn_xml: Optional[str] = None) -> "ImportResponse":
        return cls(
            process=ProcessMetadataModel(
                name=result.metadata.name,
                category=result.metadata.category,
                frequency_per_month=result.metadata.frequency_per_month,
            ),
            records=[WorkflowStepModel.from_record(r) for r in result.records],
            skipped=[
                SkippedBlockModel(
                    ordinal=s.ordinal,
                    declared_number=s.declared_number,
                    reason=s.reason,
                )
                for s in result.skipped
            ],
            blocks_found=result.blocks_found,
            bpmn_xml=bpmn_xml or None,
        )


class DiagramRequest(BaseModel):
    """Request para exportar registros (ya persistidos) a BPMN."""

    records: List[WorkflowStepModel] = Field(
        default_factory=list,
        description="Registros en el orden de la cadena. Lista vacía → diagrama vacío",
    )
    filename: str = Field(default="workflow.bpmn", description="Nombre del archivo descargado")
