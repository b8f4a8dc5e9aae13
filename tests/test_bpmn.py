"""
Tests del export BPMN: ids deterministas, layout, escape y estructura XML.
"""

import pytest
from lxml import etree

from process_map_core.bpmn import (
    compile_empty,
    compile_record,
    compile_records,
    escape_xml,
    render_bpmn_xml,
    unescape_xml,
    workflow_to_bpmn,
    workflows_to_bpmn,
)
from process_map_core.domain_models import DiagramDocument, DiagramElement, DiagramFlow

NS = {
    "bpmn": "http://www.omg.org/spec/BPMN/20100524/MODEL",
    "bpmndi": "http://www.omg.org/spec/BPMN/20100524/DI",
    "dc": "http://www.omg.org/spec/DD/20100524/DC",
    "di": "http://www.omg.org/spec/DD/20100524/DI",
}


def _parse(xml: str):
    return etree.fromstring(xml.encode("utf-8"))


def _assert_chain_structure(root, n_tasks: int) -> None:
    process = root.find("bpmn:process", NS)
    assert process is not None
    assert len(process.findall("bpmn:startEvent", NS)) == 1
    assert len(process.findall("bpmn:endEvent", NS)) == 1
    assert len(process.findall("bpmn:task", NS)) == n_tasks

    flows = process.findall("bpmn:sequenceFlow", NS)
    assert len(flows) == n_tasks + 1

    node_ids = {el.get("id") for el in process if el.tag != f"{{{NS['bpmn']}}}sequenceFlow"}
    for flow in flows:
        assert flow.get("sourceRef") in node_ids
        assert flow.get("targetRef") in node_ids

    shapes = root.findall(".//bpmndi:BPMNShape", NS)
    assert {s.get("bpmnElement") for s in shapes} == node_ids
    for shape in shapes:
        bounds = shape.find("dc:Bounds", NS)
        assert all(bounds.get(attr) is not None for attr in ("x", "y", "width", "height"))

    edges = root.findall(".//bpmndi:BPMNEdge", NS)
    assert {e.get("bpmnElement") for e in edges} == {f.get("id") for f in flows}
    for edge in edges:
        assert len(edge.findall("di:waypoint", NS)) >= 2


# ============================================================
# Escape
# ============================================================

def test_escape_xml_escapes_ampersand_first():
    assert escape_xml("<") == "&lt;"
    assert escape_xml("a & b") == "a &amp; b"
    assert escape_xml("&lt;") == "&amp;lt;"
    assert escape_xml("\"'>") == "&quot;&apos;&gt;"
    assert escape_xml("") == ""


def test_escape_unescape_round_trip():
    title = 'Step 1: A < B & "C" \'d\' > e &amp;'
    assert unescape_xml(escape_xml(title)) == title


def test_control_characters_are_replaced_not_rejected():
    assert escape_xml("a\x01b\x0bc\td") == "a\ufffdb\ufffdc\td"


# ============================================================
# Compilador
# ============================================================

def test_empty_input_produces_canonical_empty_diagram():
    doc = compile_records([])
    assert doc.process_id == "Process_Empty"
    assert [e.kind for e in doc.elements] == ["start", "end"]
    assert [(f.source_id, f.target_id) for f in doc.flows] == [("StartEvent_1", "EndEvent_1")]

    root = _parse(workflows_to_bpmn([]))
    _assert_chain_structure(root, 0)


def test_single_record_ids_derive_from_external_id(record_factory):
    doc = compile_record(record_factory(record_id="W001"))

    assert [e.id for e in doc.elements] == ["StartEvent_W001", "Task_W001", "EndEvent_W001"]
    assert [f.id for f in doc.flows] == [
        "Flow_StartEvent_W001_Task_W001",
        "Flow_Task_W001_EndEvent_W001",
    ]
    assert doc.process_id == "Process_W001"
    assert doc.process_name == "Step 1: Raccolgo documenti"


def test_single_record_without_id_uses_ordinal(record_factory):
    doc = compile_records([record_factory(ordinal=4)])
    assert doc.element_by_id()["Task_4"].kind == "task"


def test_single_record_layout(record_factory):
    doc = compile_record(record_factory())
    start, task, end = doc.elements
    assert (start.x, start.y, start.width, start.height) == (160, 100, 36, 36)
    assert (task.x, task.y, task.width, task.height) == (270, 78, 100, 80)
    assert (end.x, end.y) == (450, 100)


def test_external_ids_are_sanitized(record_factory):
    doc = compile_record(record_factory(record_id="wf 1/ä"))
    assert doc.elements[1].id == "Task_wf_1__"
    _assert_chain_structure(_parse(render_bpmn_xml(doc)), 1)


def test_chain_structure_and_layout(record_factory):
    records = [record_factory(ordinal=i, record_id=f"W00{i}") for i in range(1, 4)]
    doc = compile_records(records)

    tasks = [e for e in doc.elements if e.kind == "task"]
    assert [t.id for t in tasks] == ["Task_W001", "Task_W002", "Task_W003"]
    assert [(t.x, t.y) for t in tasks] == [(160, 78), (310, 78), (460, 78)]
    assert (doc.elements[0].x, doc.elements[0].y) == (80, 100)
    assert (doc.elements[-1].x, doc.elements[-1].y) == (160 + 3 * 150, 100)

    assert [(f.source_id, f.target_id) for f in doc.flows] == [
        ("StartEvent_1", "Task_W001"),
        ("Task_W001", "Task_W002"),
        ("Task_W002", "Task_W003"),
        ("Task_W003", "EndEvent_1"),
    ]
    doc.check_integrity()


@pytest.mark.parametrize("n", [2, 5, 12])
def test_chain_xml_structure(record_factory, n):
    records = [record_factory(ordinal=i) for i in range(1, n + 1)]
    _assert_chain_structure(_parse(workflows_to_bpmn(records)), n)


def test_duplicate_keys_stay_unique(record_factory):
    records = [record_factory(record_id="X"), record_factory(record_id="X"), record_factory(record_id="X")]
    doc = compile_records(records)
    assert [e.id for e in doc.elements if e.kind == "task"] == ["Task_X", "Task_X_2", "Task_X_3"]
    doc.check_integrity()


def test_colliding_flow_ids_stay_unique(record_factory):
    # Task_a → Task_b_Task_c y Task_a_Task_b → Task_c darían el mismo "Flow_..."
    records = [record_factory(ordinal=i, record_id=key) for i, key in enumerate(["a", "b_Task_c", "a_Task_b", "c"], 1)]
    doc = compile_records(records)

    flow_ids = [f.id for f in doc.flows]
    assert len(set(flow_ids)) == 5
    assert flow_ids[1] == "Flow_Task_a_Task_b_Task_c"
    assert flow_ids[3] == "Flow_Task_a_Task_b_Task_c_4"
    _assert_chain_structure(_parse(workflows_to_bpmn(records)), 4)


def test_compilation_is_deterministic(record_factory):
    record = record_factory(record_id="W001", pain_points="Troppi passaggi")
    assert workflow_to_bpmn(record) == workflow_to_bpmn(record)

    records = [record_factory(ordinal=i) for i in range(1, 4)]
    assert workflows_to_bpmn(records) == workflows_to_bpmn(list(records))


def test_task_documentation_lines(record_factory):
    record = record_factory(tools=["Email", "Excel"], pain_points="Documenti <persi> & duplicati")
    root = _parse(workflow_to_bpmn(record))
    doc_text = root.find(".//bpmn:task/bpmn:documentation", NS).text

    assert doc_text.splitlines() == [
        "Fase: Onboarding",
        "Descrizione: Raccolgo documenti",
        "Tempo medio: 15 minuti",
        "Frequenza: 52 volte/mese",
        "Tools: Email, Excel",
        "Input: N/A",
        "Output: N/A",
        "Pain Points: Documenti <persi> & duplicati",
    ]


def test_pain_points_line_omitted_when_empty(record_factory):
    xml = workflow_to_bpmn(record_factory(pain_points=""))
    assert "Pain Points" not in xml


def test_special_characters_survive_in_names(record_factory):
    title = 'Step 1: A < B & "C"'
    root = _parse(workflow_to_bpmn(record_factory(title=title, tools=["R&D <lab>"])))

    assert root.find("bpmn:process", NS).get("name") == title
    assert root.find(".//bpmn:task", NS).get("name") == title
    assert "Tools: R&D <lab>" in root.find(".//bpmn:task/bpmn:documentation", NS).text


def test_whitespace_in_names_survives_parsing(record_factory):
    title = "Step 1: A\tB\nC\rD"
    xml = workflow_to_bpmn(record_factory(title=title))
    root = _parse(xml)

    assert "&#9;" in xml and "&#13;" in xml
    assert root.find("bpmn:process", NS).get("name") == title
    assert root.find(".//bpmn:task", NS).get("name") == title


def test_namespaces_and_diagram_section(record_factory):
    root = _parse(workflow_to_bpmn(record_factory()))
    assert root.tag == f"{{{NS['bpmn']}}}definitions"
    plane = root.find("bpmndi:BPMNDiagram/bpmndi:BPMNPlane", NS)
    assert plane.get("bpmnElement") == root.find("bpmn:process", NS).get("id")


def test_render_rejects_broken_document():
    start = DiagramElement("S", "start", "Inizio", 0, 0, 36, 36)
    end = DiagramElement("E", "end", "Fine", 100, 0, 36, 36)
    broken = DiagramDocument(
        definitions_id="D",
        process_id="P",
        process_name="Rotto",
        elements=[start, end],
        flows=[DiagramFlow("F", "S", "Missing")],
    )
    with pytest.raises(ValueError):
        render_bpmn_xml(broken)


def test_compile_empty_is_stable():
    assert render_bpmn_xml(compile_empty()) == render_bpmn_xml(compile_empty())
