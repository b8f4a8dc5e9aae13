from __future__ import annotations

"""
process_map_core.domain_models
==============================

Modelos de dominio (dataclasses) usados a lo largo del import y del
compilador BPMN.

Objetivo
--------
Este módulo define las estructuras de datos "neutras" del sistema:

- Bloques de texto por paso (`ParsedStepBlock`) y sus campos (`ExtractedFields`)
- Metadata del proceso (`ProcessMetadata`)
- El registro canónico por paso (`WorkflowStepRecord`)
- El resultado de un import (`ImportResult`, `SkippedBlock`)
- El modelo del diagrama (`DiagramElement`, `DiagramFlow`, `DiagramDocument`)

Principios de diseño
--------------------
- Dataclasses sin lógica pesada: este módulo NO hace parsing, IO ni XML.
- Tipado explícito para ayudar a linters, tests y lectura humana.
- Los nombres de campos son estables: la capa HTTP y el JSON de la CLI
  dependen de ellos.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional


# ============================================================
# Texto segmentado
# ============================================================

@dataclass(frozen=True)
class ParsedStepBlock:
    """
    Un bloque de texto crudo correspondiente a un paso del documento.

    Attributes:
        ordinal:
            Posición del bloque en el documento (1..N). Es la única numeración
            que se usa para ordenar y titular registros.

        declared_number:
            Número escrito después del marcador ("step 7"). Solo informativo:
            puede venir repetido, desordenado o con saltos.

        raw_section:
            Texto desde el final del marcador hasta el próximo marcador
            (o fin del documento).
    """
    ordinal: int
    declared_number: int
    raw_section: str


@dataclass(frozen=True)
class ExtractedFields:
    """
    Los seis campos libres que se leen de un bloque.

    Todos son strings; un campo ausente es "". Solo `description` es
    obligatorio para que el bloque produzca un registro.
    """
    description: str = ""
    tools_text: str = ""
    inputs_text: str = ""
    outputs_text: str = ""
    duration_text: str = ""
    pain_points_text: str = ""


@dataclass(frozen=True)
class ProcessMetadata:
    """
    Datos a nivel proceso, leídos una sola vez por documento.

    Attributes:
        name:
            Nombre del proceso ("Quale processo sto mappando?").
            Se copia como `phase` en cada registro.

        category:
            Categoría libre; default "Generale".

        frequency_per_month:
            Valor del vocabulario de frecuencias; default 12.
    """
    name: str = "Workflow Importato"
    category: str = "Generale"
    frequency_per_month: int = 12


# ============================================================
# Registro canónico
# ============================================================

@dataclass
class WorkflowStepRecord:
    """
    Registro canónico de un paso del proceso.

    Es lo que consume el store de workflows del host (que asigna `id` y
    timestamps) y lo que recibe el compilador BPMN.

    Attributes:
        ordinal:
            Posición del bloque de origen en el documento.

        phase:
            Nombre del proceso al que pertenece el paso.

        title:
            "Step {ordinal}: " + primeros 50 caracteres de la descripción.

        description:
            Descripción del paso. Nunca vacía.

        tools / inputs / outputs:
            Listas ordenadas y no vacías. ["N/A"] si el texto de origen no
            tenía elementos.

        duration_minutes:
            Tiempo medio del paso en minutos (>= 0).

        frequency_per_month:
            Veces por mes (copiado de `ProcessMetadata`).

        pain_points:
            Problemas reportados, texto libre ("" si no hay).

        provenance_note:
            Nota de procedencia, p.ej. "Importato da Word - Generale".

        owner / pii / hitl / citations:
            Campos que el host completa después; el import los deja en blanco.

        id:
            Identificador externo asignado por el host al persistir.
            Mientras sea None, el compilador usa `ordinal` como clave.
    """
    ordinal: int
    phase: str
    title: str
    description: str
    tools: List[str]
    inputs: List[str]
    outputs: List[str]
    duration_minutes: int
    frequency_per_month: int
    pain_points: str = ""
    provenance_note: str = ""
    owner: str = ""
    pii: bool = False
    hitl: bool = False
    citations: bool = False
    id: Optional[str] = None

    @property
    def total_minutes_per_month(self) -> int:
        """Carga mensual del paso: duración media × frecuencia."""
        return self.duration_minutes * self.frequency_per_month


@dataclass(frozen=True)
class SkippedBlock:
    """Bloque descartado por la compuerta de completitud."""
    ordinal: int
    declared_number: int
    reason: str


@dataclass
class ImportResult:
    """
    Resultado de un import de texto.

    Attributes:
        metadata:
            Metadata del proceso.
        records:
            Registros aceptados, en orden de documento.
        skipped:
            Bloques descartados (sin descripción).
        blocks_found:
            Cantidad total de bloques detectados por el segmentador.
    """
    metadata: ProcessMetadata
    records: List[WorkflowStepRecord]
    skipped: List[SkippedBlock] = field(default_factory=list)
    blocks_found: int = 0


# ============================================================
# Diagrama
# ============================================================

ElementKind = Literal["start", "task", "end"]


@dataclass(frozen=True)
class DiagramElement:
    """
    Nodo del diagrama con su geometría (coordenadas absolutas, en px).

    `documentation` solo se usa en tareas; los eventos la dejan vacía.
    """
    id: str
    kind: ElementKind
    label: str
    x: int
    y: int
    width: int
    height: int
    documentation: str = ""


@dataclass(frozen=True)
class DiagramFlow:
    """Arista `sequenceFlow` entre dos nodos."""
    id: str
    source_id: str
    target_id: str


@dataclass(frozen=True)
class DiagramDocument:
    """
    Documento de diagrama listo para serializar a BPMN 2.0.

    Se regenera completo cada vez: no se modifica in-place.
    """
    definitions_id: str
    process_id: str
    process_name: str
    elements: List[DiagramElement]
    flows: List[DiagramFlow]

    def element_by_id(self) -> Dict[str, DiagramElement]:
        return {e.id: e for e in self.elements}

    def check_integrity(self) -> None:
        """
        Verifica los invariantes estructurales del diagrama.

        Raises:
            ValueError: si hay ids repetidos, flujos con extremos inexistentes,
                o si no hay exactamente un inicio y un fin.
        """
        ids = [e.id for e in self.elements] + [f.id for f in self.flows]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Ids duplicados en el diagrama {self.process_id}")

        known = self.element_by_id()
        for flow in self.flows:
            if flow.source_id not in known or flow.target_id not in known:
                raise ValueError(
                    f"Flujo {flow.id} referencia nodos inexistentes "
                    f"({flow.source_id} -> {flow.target_id})"
                )

        starts = sum(1 for e in self.elements if e.kind == "start")
        ends = sum(1 for e in self.elements if e.kind == "end")
        if starts != 1 or ends != 1:
            raise ValueError(
                f"El diagrama debe tener un inicio y un fin (inicio={starts}, fin={ends})"
            )
