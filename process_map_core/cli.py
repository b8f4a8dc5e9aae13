"""
process_map_core.cli
====================

Punto de entrada de línea de comandos (`process-map`).

Subcomandos
-----------
- `import [archivo]`: lee un documento de texto del taller, genera los
  registros canónicos y (salvo `--no-bpmn`) el diagrama BPMN de la cadena.
  Escribe `<nombre>.json` y `<nombre>.bpmn` en `--output-dir`
  (default: `settings.output_dir`). Sin archivo importa todos los
  documentos de `settings.input_dir`.

- `diagram <registros.json>`: compila registros ya persistidos (lista JSON
  o el JSON de un import) a un `.bpmn`.

Este archivo está pensado para:
- demo local rápida,
- smoke tests manuales del import,
- generar BPMN desde un export del store de workflows.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import get_settings
from .engine import run_diagram_export, run_import_pipeline
from .errors import InvalidImportFile, WorkflowImportError
from .ingest import discover_text_documents, read_text_file
from .serialization import import_result_to_dict, parse_records_json

logger = logging.getLogger("process_map_core.cli")


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _import_one(source: Path, output_dir: Path, with_bpmn: bool, max_bytes: int) -> bool:
    try:
        text = read_text_file(source, max_bytes=max_bytes)
        run = run_import_pipeline(text, with_bpmn=with_bpmn)
    except (FileNotFoundError, InvalidImportFile, WorkflowImportError) as e:
        logger.error("Import fallido para %s: %s", source, e)
        print(f"❌ {source.name}: {e}")
        return False

    result = run["result"]
    output_dir.mkdir(parents=True, exist_ok=True)

    json_path = output_dir / f"{source.stem}.json"
    json_path.write_text(
        json.dumps(import_result_to_dict(result), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    print(f"✅ {len(result.records)} pasos importados de '{result.metadata.name}'")
    print(f"✅ JSON generado en: {json_path.resolve()}")

    for skipped in result.skipped:
        print(f"⚠️  Step {skipped.declared_number} (bloque {skipped.ordinal}) descartado: sin descripción")

    if with_bpmn:
        bpmn_path = output_dir / f"{source.stem}.bpmn"
        bpmn_path.write_text(run["bpmn_xml"], encoding="utf-8")
        print(f"📄 BPMN generado en: {bpmn_path.resolve()}")

    return True


def _cmd_import(args: argparse.Namespace) -> int:
    settings = get_settings()
    output_dir = Path(args.output_dir or settings.output_dir)

    if args.file:
        sources = [Path(args.file)]
    else:
        sources = discover_text_documents(Path(settings.input_dir))
        if not sources:
            print(f"❌ No se encontraron documentos .txt/.md en {settings.input_dir}/")
            return 1

    ok = [_import_one(s, output_dir, not args.no_bpmn, settings.max_upload_bytes) for s in sources]
    return 0 if all(ok) else 1


def _cmd_diagram(args: argparse.Namespace) -> int:
    source = Path(args.records)
    try:
        records = parse_records_json(source.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("No se pudieron leer registros de %s: %s", source, e)
        print(f"❌ {e}")
        return 1

    export = run_diagram_export(records)
    output = Path(args.output) if args.output else source.with_suffix(".bpmn")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(export["bpmn_xml"], encoding="utf-8")

    tasks = sum(1 for e in export["document"].elements if e.kind == "task")
    print(f"📄 BPMN con {tasks} tareas generado en: {output.resolve()}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="process-map",
        description="Importa documentos de mapeo de procesos y genera BPMN 2.0.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="Texto del taller → registros JSON (+ BPMN)")
    p_import.add_argument(
        "file", nargs="?", default=None,
        help="Documento de texto (.txt / .md). Sin argumento: todos los de settings.input_dir",
    )
    p_import.add_argument("--output-dir", default=None, help="Carpeta de salida")
    p_import.add_argument("--no-bpmn", action="store_true", help="No generar el .bpmn")
    p_import.set_defaults(func=_cmd_import)

    p_diagram = sub.add_parser("diagram", help="Registros JSON → BPMN")
    p_diagram.add_argument("records", help="JSON con la lista de registros")
    p_diagram.add_argument("-o", "--output", default=None, help="Ruta del .bpmn")
    p_diagram.set_defaults(func=_cmd_diagram)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(get_settings().log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
