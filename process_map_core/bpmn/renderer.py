"""
Renderer BPMN 2.0: `DiagramDocument` → XML.

El XML se arma línea por línea con un orden fijo de elementos y atributos,
sin timestamps: el mismo documento produce siempre los mismos bytes.
Todo texto (nombres y documentación) pasa por `escape_xml`.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..domain_models import DiagramDocument, DiagramElement, DiagramFlow, WorkflowStepRecord
from .compiler import compile_record, compile_records
from .xml_utils import escape_xml

BPMN_MODEL_NS = "http://www.omg.org/spec/BPMN/20100524/MODEL"
BPMN_DI_NS = "http://www.omg.org/spec/BPMN/20100524/DI"
DC_NS = "http://www.omg.org/spec/DD/20100524/DC"
DI_NS = "http://www.omg.org/spec/DD/20100524/DI"
TARGET_NS = "http://bpmn.io/schema/bpmn"

BPMN_MEDIA_TYPE = "application/xml"
BPMN_EXTENSION = ".bpmn"

_TAGS = {"start": "startEvent", "task": "task", "end": "endEvent"}


# Blancos que un parser normaliza a espacio dentro de un atributo.
_ATTR_WHITESPACE = (("\t", "&#9;"), ("\n", "&#10;"), ("\r", "&#13;"))


def _attr(text: str) -> str:
    """Valor de atributo: escape + tab/LF/CR como referencias numéricas."""
    value = escape_xml(text)
    for raw, ref in _ATTR_WHITESPACE:
        value = value.replace(raw, ref)
    return value


def _waypoints(source: DiagramElement, target: DiagramElement) -> List[Tuple[int, int]]:
    """Del centro del borde derecho del origen al centro del borde izquierdo del destino."""
    return [
        (source.x + source.width, source.y + source.height // 2),
        (target.x, target.y + target.height // 2),
    ]


def _render_node(element: DiagramElement, incoming: Sequence[str], outgoing: Sequence[str]) -> List[str]:
    tag = _TAGS[element.kind]
    lines = [f'    <bpmn:{tag} id="{element.id}" name="{_attr(element.label)}">']
    if element.documentation:
        lines.append(f"      <bpmn:documentation>{escape_xml(element.documentation)}</bpmn:documentation>")
    for ref in incoming:
        lines.append(f"      <bpmn:incoming>{ref}</bpmn:incoming>")
    for ref in outgoing:
        lines.append(f"      <bpmn:outgoing>{ref}</bpmn:outgoing>")
    lines.append(f"    </bpmn:{tag}>")
    return lines


def _render_flow(flow: DiagramFlow) -> str:
    return (
        f'    <bpmn:sequenceFlow id="{flow.id}" '
        f'sourceRef="{flow.source_id}" targetRef="{flow.target_id}" />'
    )


def _render_shape(element: DiagramElement) -> List[str]:
    return [
        f'      <bpmndi:BPMNShape id="Shape_{element.id}" bpmnElement="{element.id}">',
        f'        <dc:Bounds x="{element.x}" y="{element.y}" '
        f'width="{element.width}" height="{element.height}" />',
        "      </bpmndi:BPMNShape>",
    ]


def _render_edge(flow: DiagramFlow, nodes: Dict[str, DiagramElement]) -> List[str]:
    lines = [f'      <bpmndi:BPMNEdge id="Edge_{flow.id}" bpmnElement="{flow.id}">']
    for x, y in _waypoints(nodes[flow.source_id], nodes[flow.target_id]):
        lines.append(f'        <di:waypoint x="{x}" y="{y}" />')
    lines.append("      </bpmndi:BPMNEdge>")
    return lines


def render_bpmn_xml(document: DiagramDocument) -> str:
    """
    Serializa el diagrama a un documento BPMN 2.0 completo.

    Raises:
        ValueError: si el documento no cumple sus invariantes (ver
            `DiagramDocument.check_integrity`).
    """
    document.check_integrity()
    nodes = document.element_by_id()

    incoming: Dict[str, List[str]] = {e.id: [] for e in document.elements}
    outgoing: Dict[str, List[str]] = {e.id: [] for e in document.elements}
    for flow in document.flows:
        outgoing[flow.source_id].append(flow.id)
        incoming[flow.target_id].append(flow.id)

    lines: List[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        f'<bpmn:definitions xmlns:bpmn="{BPMN_MODEL_NS}" '
        f'xmlns:bpmndi="{BPMN_DI_NS}" '
        f'xmlns:dc="{DC_NS}" '
        f'xmlns:di="{DI_NS}" '
        f'id="{document.definitions_id}" '
        f'targetNamespace="{TARGET_NS}">'
    )

    # Semántica del proceso
    lines.append(
        f'  <bpmn:process id="{document.process_id}" '
        f'name="{_attr(document.process_name)}" isExecutable="false">'
    )
    for element in document.elements:
        lines.extend(_render_node(element, incoming[element.id], outgoing[element.id]))
    for flow in document.flows:
        lines.append(_render_flow(flow))
    lines.append("  </bpmn:process>")

    # Layout (diagram interchange)
    lines.append('  <bpmndi:BPMNDiagram id="BPMNDiagram_1">')
    lines.append(f'    <bpmndi:BPMNPlane id="BPMNPlane_1" bpmnElement="{document.process_id}">')
    for element in document.elements:
        lines.extend(_render_shape(element))
    for flow in document.flows:
        lines.extend(_render_edge(flow, nodes))
    lines.append("    </bpmndi:BPMNPlane>")
    lines.append("  </bpmndi:BPMNDiagram>")
    lines.append("</bpmn:definitions>")

    return "\n".join(lines) + "\n"


def workflow_to_bpmn(record: WorkflowStepRecord) -> str:
    """BPMN de un solo registro (inicio → tarea → fin)."""
    return render_bpmn_xml(compile_record(record))


def workflows_to_bpmn(records: Sequence[WorkflowStepRecord]) -> str:
    """BPMN de una cadena de registros, en el orden recibido."""
    return render_bpmn_xml(compile_records(records))
