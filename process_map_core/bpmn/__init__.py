"""
Export BPMN 2.0 de registros de workflow.

- `compiler`: registros → `DiagramDocument` (ids deterministas + layout fijo)
- `renderer`: `DiagramDocument` → XML
- `xml_utils`: escape de texto e ids
"""

from __future__ import annotations

from .compiler import compile_empty, compile_record, compile_records
from .renderer import BPMN_EXTENSION, BPMN_MEDIA_TYPE, render_bpmn_xml, workflow_to_bpmn, workflows_to_bpmn
from .xml_utils import escape_xml, unescape_xml

__all__ = [
    "BPMN_EXTENSION",
    "BPMN_MEDIA_TYPE",
    "compile_empty",
    "compile_record",
    "compile_records",
    "escape_xml",
    "render_bpmn_xml",
    "unescape_xml",
    "workflow_to_bpmn",
    "workflows_to_bpmn",
]
