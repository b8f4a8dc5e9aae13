"""
Compilador de registros a `DiagramDocument`.

Topología soportada: solo cadenas lineales inicio → tareas → fin.

- 0 registros → diagrama vacío canónico (inicio enlazado directo al fin)
- 1 registro  → `compile_record`
- N registros → una tarea por registro, en el orden recibido, N+1 flujos

Los ids se derivan del id externo del registro (o de su ordinal si todavía
no fue persistido), nunca de un contador global: compilar dos veces el mismo
input produce exactamente el mismo documento.
"""

from __future__ import annotations

from typing import List, Sequence, Set

from ..domain_models import DiagramDocument, DiagramElement, DiagramFlow, WorkflowStepRecord
from .xml_utils import element_id, flow_id, sanitize_id_fragment

# ============================================================
# Geometría fija
# ============================================================

EVENT_SIZE = 36
TASK_WIDTH = 100
TASK_HEIGHT = 80

EVENT_Y = 100
TASK_Y = 78

# Diagrama de un solo registro
SINGLE_START_X = 160
SINGLE_TASK_X = 270
SINGLE_END_X = 450

# Cadena de N registros
CHAIN_START_X = 80
CHAIN_FIRST_TASK_X = 160
CHAIN_STEP_X = 150

# Diagrama vacío
EMPTY_START_X = 160
EMPTY_END_X = 300

START_LABEL = "Inizio"
END_LABEL = "Fine"
CHAIN_PROCESS_ID = "Process_MultiWorkflow"
CHAIN_PROCESS_NAME = "Workflow Sequence"


# ============================================================
# Helpers
# ============================================================

def record_key(record: WorkflowStepRecord) -> str:
    """Clave estable del registro: id externo, o el ordinal si no tiene id."""
    key = record.id if record.id not in (None, "") else record.ordinal
    return sanitize_id_fragment(key)


def task_documentation(record: WorkflowStepRecord) -> str:
    """
    Texto de documentación de la tarea (sin escapar).

    La línea de pain points se omite por completo si está vacía.
    """
    lines = [
        f"Fase: {record.phase}",
        f"Descrizione: {record.description}",
        f"Tempo medio: {record.duration_minutes} minuti",
        f"Frequenza: {record.frequency_per_month} volte/mese",
        f"Tools: {', '.join(record.tools)}",
        f"Input: {', '.join(record.inputs)}",
        f"Output: {', '.join(record.outputs)}",
    ]
    if record.pain_points.strip():
        lines.append(f"Pain Points: {record.pain_points.strip()}")
    return "\n".join(lines)


def _start(element: str, x: int) -> DiagramElement:
    return DiagramElement(element, "start", START_LABEL, x, EVENT_Y, EVENT_SIZE, EVENT_SIZE)


def _end(element: str, x: int) -> DiagramElement:
    return DiagramElement(element, "end", END_LABEL, x, EVENT_Y, EVENT_SIZE, EVENT_SIZE)


def _task(element: str, record: WorkflowStepRecord, x: int) -> DiagramElement:
    return DiagramElement(
        id=element,
        kind="task",
        label=record.title,
        x=x,
        y=TASK_Y,
        width=TASK_WIDTH,
        height=TASK_HEIGHT,
        documentation=task_documentation(record),
    )


def _dedupe(base: str, position: int, seen: Set[str]) -> str:
    """`base`, o `base_<posición>` (y siguientes) si ya fue usado."""
    candidate = base
    suffix = position
    while candidate in seen:
        candidate = f"{base}_{suffix}"
        suffix += 1
    seen.add(candidate)
    return candidate


def _chain_flows(elements: Sequence[DiagramElement]) -> List[DiagramFlow]:
    # "Flow_a_b" puede repetirse para pares distintos si los ids contienen "_"
    seen: Set[str] = set()
    return [
        DiagramFlow(_dedupe(flow_id(src.id, tgt.id), position, seen), src.id, tgt.id)
        for position, (src, tgt) in enumerate(zip(elements, elements[1:]), start=1)
    ]


def _unique_task_ids(records: Sequence[WorkflowStepRecord]) -> List[str]:
    """
    Ids de tarea para una cadena. Una clave repetida recibe el sufijo de su
    posición (1-based) para que los ids sigan siendo únicos y deterministas.
    """
    seen: Set[str] = set()
    return [
        _dedupe(element_id("Task", record_key(record)), position, seen)
        for position, record in enumerate(records, start=1)
    ]


# ============================================================
# API pública
# ============================================================

def compile_empty() -> DiagramDocument:
    """Diagrama vacío canónico: inicio → fin."""
    elements = [_start("StartEvent_1", EMPTY_START_X), _end("EndEvent_1", EMPTY_END_X)]
    return DiagramDocument(
        definitions_id="Definitions_Empty",
        process_id="Process_Empty",
        process_name="Empty Process",
        elements=elements,
        flows=_chain_flows(elements),
    )


def compile_record(record: WorkflowStepRecord) -> DiagramDocument:
    """Diagrama autocontenido de un registro: inicio → tarea → fin."""
    key = record_key(record)
    elements = [
        _start(element_id("StartEvent", key), SINGLE_START_X),
        _task(element_id("Task", key), record, SINGLE_TASK_X),
        _end(element_id("EndEvent", key), SINGLE_END_X),
    ]
    return DiagramDocument(
        definitions_id=element_id("Definitions", key),
        process_id=element_id("Process", key),
        process_name=record.title,
        elements=elements,
        flows=_chain_flows(elements),
    )


def compile_records(records: Sequence[WorkflowStepRecord]) -> DiagramDocument:
    """
    Compila una lista ordenada de registros a una cadena lineal.

    Layout: inicio en (80, 100); tarea i en x = 160 + i*150, y = 78;
    fin en x = 160 + N*150, y = 100. Sin detección de colisiones.
    """
    records = list(records)
    if not records:
        return compile_empty()
    if len(records) == 1:
        return compile_record(records[0])

    elements: List[DiagramElement] = [_start("StartEvent_1", CHAIN_START_X)]
    for index, (task_id, record) in enumerate(zip(_unique_task_ids(records), records)):
        elements.append(_task(task_id, record, CHAIN_FIRST_TASK_X + index * CHAIN_STEP_X))
    elements.append(_end("EndEvent_1", CHAIN_FIRST_TASK_X + len(records) * CHAIN_STEP_X))

    return DiagramDocument(
        definitions_id="Definitions_MultiWorkflow",
        process_id=CHAIN_PROCESS_ID,
        process_name=CHAIN_PROCESS_NAME,
        elements=elements,
        flows=_chain_flows(elements),
    )
