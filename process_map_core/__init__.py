"""
Núcleo de traducción de procesos: texto de taller ↔ registros canónicos → BPMN 2.0.
"""

from .assembler import import_workflow_text
from .bpmn import workflow_to_bpmn, workflows_to_bpmn
from .domain_models import ImportResult, ProcessMetadata, WorkflowStepRecord
from .errors import EmptyResultError, StructuralParseFailure, WorkflowImportError

__all__ = [
    "EmptyResultError",
    "ImportResult",
    "ProcessMetadata",
    "StructuralParseFailure",
    "WorkflowImportError",
    "WorkflowStepRecord",
    "import_workflow_text",
    "workflow_to_bpmn",
    "workflows_to_bpmn",
]
