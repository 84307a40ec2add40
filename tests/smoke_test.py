from __future__ import annotations

import pytest

from core.layer_config import ICEBERG_LAYERS
from core.wizard_state import STEP_INTRO, STEP_RESULTS, STEP_SCORING, WizardController
from modules.cost_model import summarise
from modules.iceberg import build_iceberg_chart
from modules.narrative import NARRATIVE_HIGH, NARRATIVE_MEDIUM, select_narrative
from modules.report import create_excel_bytes, create_pdf_bytes


def test_full_wizard_smoke() -> None:
    wizard = WizardController()

    wizard.start()
    wizard.set_org_input("team_size", "120")
    wizard.set_org_input("avg_salary", "64000")
    wizard.set_org_input("turnover_rate", "22")
    assert wizard.confirm_inputs() is True

    severities = [5, 4, 4, 2, 1, 3, 2]
    for severity in severities:
        wizard.set_severity(wizard.current_layer.layer_id, severity)
        wizard.advance_layer()

    assert wizard.step == STEP_RESULTS

    summary = summarise(wizard.snapshot())
    expected_total = sum(
        64000.0 * layer.default_multiplier * s / 3 for layer, s in zip(ICEBERG_LAYERS, severities)
    )
    assert summary.total_hidden_cost == pytest.approx(expected_total)
    assert summary.visible_cost == pytest.approx(64000.0 * 0.5 * 5 / 3)
    assert summary.multiplier == pytest.approx(expected_total / summary.visible_cost)
    assert summary.departures_per_year == 26
    assert summary.annual_exposure == pytest.approx(expected_total * 120 * 0.22)
    assert select_narrative(summary).tier == NARRATIVE_MEDIUM

    chart = build_iceberg_chart(summary)
    assert chart.above is not None

    assert create_pdf_bytes(summary).startswith(b"%PDF")
    assert len(create_excel_bytes(summary)) > 0

    wizard.adjust_scores()
    assert wizard.step == STEP_SCORING
    wizard.set_severity(wizard.current_layer.layer_id, 5)
    for _ in ICEBERG_LAYERS[:-1]:
        wizard.retreat_layer()
    wizard.set_severity("replacement", 1)
    for _ in ICEBERG_LAYERS:
        wizard.advance_layer()
    assert wizard.step == STEP_RESULTS
    assert select_narrative(summarise(wizard.snapshot())).tier == NARRATIVE_HIGH

    wizard.start_over()
    assert wizard.step == STEP_INTRO
    assert dict(wizard.snapshot().scores) == {}
