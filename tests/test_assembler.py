import logging

import pytest

from process_map_core.assembler import (
    apply_list_sentinel,
    assemble_records,
    build_title,
    import_workflow_text,
    parse_frequency,
    parse_process_metadata,
    split_list,
)
from process_map_core.domain_models import ProcessMetadata
from process_map_core.errors import EmptyResultError, StructuralParseFailure
from process_map_core.segmenter import segment_document


@pytest.mark.parametrize(
    "text, expected",
    [
        ("settimanale", 52),
        ("giornaliero", 365),
        ("Daily", 365),
        ("mensile", 12),
        ("annuale", 1),
        ("trimestrale", 4),
        ("quarterly", 4),
        ("quando capita", 12),
        ("", 12),
    ],
)
def test_parse_frequency(text, expected):
    assert parse_frequency(text) == expected


def test_process_metadata_defaults():
    meta = parse_process_metadata("step 1\nCosa faccio: qualcosa")
    assert meta == ProcessMetadata(name="Workflow Importato", category="Generale", frequency_per_month=12)


def test_process_metadata_from_labels():
    meta = parse_process_metadata(
        "Quale processo sto mappando? Gestione ordini\n"
        "Categoria: Vendite\n"
        "Frequenza: una volta a settimana\n"
    )
    assert meta.name == "Gestione ordini"
    assert meta.category == "Vendite"
    assert meta.frequency_per_month == 52


def test_process_metadata_answers_on_next_line():
    meta = parse_process_metadata(
        "Quale processo sto mappando?\nOnboarding\n"
        "Categoria:\n\nHR\n"
        "Frequenza:\nsettimanale\n"
        "step 1\nCosa faccio: A"
    )
    assert meta == ProcessMetadata(name="Onboarding", category="HR", frequency_per_month=52)


def test_metadata_on_next_line_flows_into_records():
    result = import_workflow_text("Frequenza:\ngiornaliero\nstep 1\nCosa faccio: A")
    assert result.records[0].frequency_per_month == 365


def test_split_list_and_sentinel():
    assert split_list("Excel, , Word ,") == ["Excel", "Word"]
    assert split_list("") == []
    assert apply_list_sentinel(split_list(" , ,")) == ["N/A"]
    assert apply_list_sentinel(["SAP"]) == ["SAP"]


def test_build_title_truncates_at_50_chars():
    exact = "x" * 50
    assert build_title(1, exact) == f"Step 1: {exact}"

    long_text = "y" * 60
    assert build_title(2, long_text) == f"Step 2: {'y' * 50}..."


def test_assemble_records_builds_canonical_records():
    meta = ProcessMetadata(name="Onboarding", category="HR", frequency_per_month=52)
    blocks = segment_document(
        "step 1\nCosa faccio: Raccolgo documenti\nChe tool uso: Email, Drive\n"
        "Quanto tempo impiego: 2 ore\nPain points: Documenti persi"
    )

    records, skipped = assemble_records(meta, blocks)

    assert skipped == []
    record = records[0]
    assert record.ordinal == 1
    assert record.phase == "Onboarding"
    assert record.title == "Step 1: Raccolgo documenti"
    assert record.tools == ["Email", "Drive"]
    assert record.inputs == ["N/A"]
    assert record.outputs == ["N/A"]
    assert record.duration_minutes == 120
    assert record.frequency_per_month == 52
    assert record.total_minutes_per_month == 120 * 52
    assert record.pain_points == "Documenti persi"
    assert record.provenance_note == "Importato da Word - HR"
    assert record.id is None


def test_block_without_description_is_skipped_and_logged(caplog):
    text = (
        "step 1\nCosa faccio: Primo\n"
        "step 2\nChe tool uso: Excel\n"
        "step 3\nCosa faccio: Terzo\n"
    )
    with caplog.at_level(logging.WARNING, logger="process_map_core.assembler"):
        result = import_workflow_text(text)

    assert [r.ordinal for r in result.records] == [1, 3]
    assert [r.title for r in result.records] == ["Step 1: Primo", "Step 3: Terzo"]
    assert len(result.skipped) == 1
    assert result.skipped[0].declared_number == 2
    assert result.blocks_found == 3
    assert "sin descripción" in caplog.text


def test_records_count_equals_blocks_with_description():
    text = "\n".join(
        f"step {n}\nCosa faccio: passo {n}" if n % 2 else f"step {n}\nPain points: nessuno"
        for n in range(1, 8)
    )
    result = import_workflow_text(text)
    assert len(result.records) == 4
    assert len(result.skipped) == 3


def test_no_markers_raises_structural_parse_failure():
    with pytest.raises(StructuralParseFailure):
        import_workflow_text("Quale processo sto mappando? Niente\nCosa faccio: qualcosa")


def test_all_blocks_skipped_raises_empty_result():
    with pytest.raises(EmptyResultError) as exc:
        import_workflow_text("step 1\nChe tool uso: Excel\nstep 2\nQuanto tempo impiego: 5")
    assert len(exc.value.skipped) == 2


def test_declared_numbers_are_renumbered_by_position():
    result = import_workflow_text("step 5\nCosa faccio: A\nstep 5\nCosa faccio: B")
    assert [r.ordinal for r in result.records] == [1, 2]


def test_import_normalizes_windows_newlines():
    result = import_workflow_text("step 1\r\nCosa faccio: A\r\n\r\n\r\n\r\nChe tool uso: Excel\r\n")
    assert result.records[0].description == "A"
    assert result.records[0].tools == ["Excel"]
