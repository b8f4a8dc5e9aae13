"""
Serialización JSON de registros.

- `records_to_json`: lo que escribe la CLI y consume el store del host.
- `parse_records_json`: lee registros ya persistidos (con `id`) para
  compilarlos a BPMN.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, List, Sequence

from .assembler import apply_list_sentinel
from .domain_models import ImportResult, WorkflowStepRecord


def record_to_dict(record: WorkflowStepRecord) -> Dict[str, Any]:
    data = asdict(record)
    data["total_minutes_per_month"] = record.total_minutes_per_month
    return data


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(v).strip() for v in value if str(v).strip()]


def record_from_dict(data: Dict[str, Any]) -> WorkflowStepRecord:
    """
    Construye un registro desde un dict (JSON del host o de la CLI).

    Tolerante como el parser de documentos: campos faltantes toman su default
    y las listas vacías reciben el centinela "N/A".
    """
    raw_id = data.get("id")
    return WorkflowStepRecord(
        ordinal=int(data.get("ordinal", 0) or 0),
        phase=str(data.get("phase", "")).strip(),
        title=str(data.get("title", "")).strip(),
        description=str(data.get("description", "")).strip(),
        tools=apply_list_sentinel(_as_list(data.get("tools"))),
        inputs=apply_list_sentinel(_as_list(data.get("inputs"))),
        outputs=apply_list_sentinel(_as_list(data.get("outputs"))),
        duration_minutes=max(0, int(data.get("duration_minutes", 0) or 0)),
        frequency_per_month=int(data.get("frequency_per_month", 0) or 0),
        pain_points=str(data.get("pain_points", "") or "").strip(),
        provenance_note=str(data.get("provenance_note", "") or "").strip(),
        owner=str(data.get("owner", "") or "").strip(),
        pii=bool(data.get("pii", False)),
        hitl=bool(data.get("hitl", False)),
        citations=bool(data.get("citations", False)),
        id=None if raw_id in (None, "") else str(raw_id),
    )


def records_to_json(records: Sequence[WorkflowStepRecord], indent: int = 2) -> str:
    return json.dumps(
        [record_to_dict(r) for r in records],
        ensure_ascii=False,
        indent=indent,
    )


def import_result_to_dict(result: ImportResult) -> Dict[str, Any]:
    return {
        "process": asdict(result.metadata),
        "records": [record_to_dict(r) for r in result.records],
        "skipped": [asdict(s) for s in result.skipped],
        "blocks_found": result.blocks_found,
    }


def parse_records_json(json_str: str) -> List[WorkflowStepRecord]:
    """
    Parsea una lista JSON de registros.

    Acepta tanto una lista como el objeto completo de un import
    (`{"records": [...]}`).

    Raises:
        ValueError: si el JSON no es una lista ni contiene "records", o si
            algún registro no es un objeto.
    """
    data = json.loads(json_str)
    if isinstance(data, dict):
        data = data.get("records")
    if not isinstance(data, list):
        raise ValueError("Se esperaba una lista de registros JSON.")
    for position, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"El registro {position} no es un objeto JSON: {item!r}")
    return [record_from_dict(item) for item in data]
