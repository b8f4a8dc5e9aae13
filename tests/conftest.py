import pytest

from process_map_core.domain_models import WorkflowStepRecord


ONBOARDING_TEXT = (
    "Quale processo sto mappando? Onboarding\n"
    "Frequenza: settimanale\n"
    "step 1\n"
    "Cosa faccio: Raccolgo documenti\n"
    "Che tool uso: Email\n"
    "Quanto tempo impiego: 15 minuti\n"
    "step 2\n"
    "Cosa faccio: Archivio documenti\n"
    "Quanto tempo impiego: 10 minuti"
)


@pytest.fixture
def onboarding_text() -> str:
    """Documento mínimo de un taller con dos pasos."""
    return ONBOARDING_TEXT


def make_record(ordinal: int = 1, record_id=None, **overrides) -> WorkflowStepRecord:
    data = dict(
        ordinal=ordinal,
        phase="Onboarding",
        title=f"Step {ordinal}: Raccolgo documenti",
        description="Raccolgo documenti",
        tools=["Email"],
        inputs=["N/A"],
        outputs=["N/A"],
        duration_minutes=15,
        frequency_per_month=52,
        pain_points="",
        provenance_note="Importato da Word - Generale",
        id=record_id,
    )
    data.update(overrides)
    return WorkflowStepRecord(**data)


@pytest.fixture
def record_factory():
    """Fábrica de registros canónicos para tests del compilador."""
    return make_record
