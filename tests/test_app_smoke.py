from __future__ import annotations

from pathlib import Path

from streamlit.testing.v1 import AppTest

from core.layer_config import ICEBERG_LAYERS, CostLayer
from core.wizard_state import WizardController


APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


def _assert_no_app_exceptions(at: AppTest) -> None:
    assert len(at.exception) == 0


def test_app_initial_run_shows_intro():
    at = AppTest.from_file(APP_PATH)
    at.run(timeout=60)
    _assert_no_app_exceptions(at)
    assert at.session_state["wizard"].step == "intro"


def test_app_walkthrough_to_results_and_back():
    at = AppTest.from_file(APP_PATH)
    at.run(timeout=60)

    at.button(key="start").click().run(timeout=60)
    _assert_no_app_exceptions(at)
    assert at.session_state["wizard"].step == "inputs"

    at.button(key="confirm_inputs").click().run(timeout=60)
    _assert_no_app_exceptions(at)
    assert at.session_state["wizard"].step == "inputs"
    assert len(at.warning) == 1

    at.text_input(key="org_input_team_size").set_value("50")
    at.text_input(key="org_input_avg_salary").set_value("85000")
    at.text_input(key="org_input_turnover_rate").set_value("15")
    at.button(key="confirm_inputs").click().run(timeout=60)
    _assert_no_app_exceptions(at)
    assert at.session_state["wizard"].step == "scoring"

    for _ in ICEBERG_LAYERS:
        at.button(key="layer_next").click().run(timeout=60)
        _assert_no_app_exceptions(at)

    assert at.session_state["wizard"].step == "results"
    headers = [h.value for h in at.header]
    assert "You're seeing $43K" in headers
    assert "You're losing $255K" in headers

    at.button(key="start_over").click().run(timeout=60)
    _assert_no_app_exceptions(at)
    assert at.session_state["wizard"].step == "intro"
    assert dict(at.session_state["wizard"].snapshot().scores) == {}


def test_results_page_uses_the_session_layer_table():
    layers = (
        CostLayer("fees", "Agency Fees", "", "", True, 0.4, "#94B4C1", "▲"),
        CostLayer("ramp", "Ramp-up", "", "", False, 0.6, "#5B8A9A", "◆"),
    )
    wizard = WizardController(layers=layers)
    wizard.start()
    wizard.set_org_input("team_size", "10")
    wizard.set_org_input("avg_salary", "60000")
    wizard.set_org_input("turnover_rate", "10")
    wizard.confirm_inputs()
    for _ in layers:
        wizard.advance_layer()

    at = AppTest.from_file(APP_PATH)
    at.session_state["wizard"] = wizard
    at.run(timeout=60)
    _assert_no_app_exceptions(at)

    headers = [h.value for h in at.header]
    assert "You're seeing $24K" in headers
    assert "You're losing $60K" in headers
