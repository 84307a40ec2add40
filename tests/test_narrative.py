from core.layer_config import LAYERS_BY_ID
from modules.cost_model import CostSummary, LayerBreakdown, summarise
from core.wizard_state import WizardController
from modules.narrative import (
    NARRATIVE_HIGH,
    NARRATIVE_LOW,
    NARRATIVE_MEDIUM,
    exposure_lines,
    format_currency,
    headline_lines,
    layer_caption,
    multiplier_caption,
    narrative_tier,
    select_narrative,
    to_fixed,
)


def _summary(**overrides) -> CostSummary:
    values = dict(
        baseline=100000.0,
        team_size=20,
        turnover_rate_percent=20.0,
        turnover_rate_fraction=0.2,
        visible_cost=50000.0,
        total_hidden_cost=150000.0,
        multiplier=3.0,
        annual_exposure=600000.0,
        departures_per_year=4,
    )
    values.update(overrides)
    return CostSummary(**values)


def test_format_currency_bands():
    assert format_currency(1912500) == "$1.9M"
    assert format_currency(1250000) == "$1.3M"
    assert format_currency(255000) == "$255K"
    assert format_currency(42500) == "$43K"
    assert format_currency(999) == "$999"
    assert format_currency(0) == "$0"


def test_to_fixed_rounds_halves_up():
    assert to_fixed(2.5, 0) == "3"
    assert to_fixed(6.0, 1) == "6.0"
    assert to_fixed(3.125, 2) == "3.13"


def test_tier_thresholds():
    assert narrative_tier(4.0) == NARRATIVE_HIGH
    assert narrative_tier(6.2) == NARRATIVE_HIGH
    assert narrative_tier(3.99) == NARRATIVE_MEDIUM
    assert narrative_tier(2.5) == NARRATIVE_MEDIUM
    assert narrative_tier(2.49) == NARRATIVE_LOW
    assert narrative_tier(0.0) == NARRATIVE_LOW


def test_high_narrative_quotes_savings_per_point():
    n = select_narrative(_summary(multiplier=5.0, annual_exposure=600000.0, turnover_rate_fraction=0.2))
    assert n.tier == NARRATIVE_HIGH
    assert n.text.startswith("At a 5.0× multiplier")
    assert "approximately $30K" in n.text
    assert n.text.endswith("it's a P&L argument.")


def test_high_narrative_with_zero_turnover_quotes_zero():
    n = select_narrative(_summary(multiplier=4.5, turnover_rate_fraction=0.0, turnover_rate_percent=0.0))
    assert "approximately $0." in n.text


def test_medium_narrative_quotes_one_point_reduction():
    n = select_narrative(_summary(multiplier=3.0, baseline=100000.0, departures_per_year=4))
    assert n.tier == NARRATIVE_MEDIUM
    assert n.text.startswith("Your 3.0× multiplier reveals significant hidden costs")
    assert "would save $100K annually." in n.text


def test_low_narrative_is_fixed_text():
    n = select_narrative(_summary(multiplier=2.0))
    assert n.tier == NARRATIVE_LOW
    assert n.text == (
        "Your 2.0× multiplier suggests your visible and hidden costs are relatively balanced. "
        "Maintain focus on preventing hidden layers from deepening, especially in morale contagion "
        "and knowledge drain."
    )


def test_default_scenario_is_high_tier():
    summary = summarise(WizardController().snapshot())
    n = select_narrative(summary)
    assert n.tier == NARRATIVE_HIGH
    assert n.text.startswith("At a 6.0× multiplier")


def test_headline_and_caption_text():
    summary = summarise(WizardController().snapshot())
    assert headline_lines(summary) == ("You're seeing $43K", "You're losing $255K")
    assert multiplier_caption(summary) == (
        "For every $1 you budget for replacement, you're actually losing $6.00 in total organizational cost."
    )


def test_exposure_lines():
    summary = summarise(WizardController().snapshot())
    assert exposure_lines(summary) == [
        "50 people × 15% turnover",
        "= ~8 departures/year",
        "× $255K true cost each",
    ]


def test_layer_caption():
    row = LayerBreakdown(layer=LAYERS_BY_ID["culture"], severity=4, cost=22666.0, percent_of_total=8.5)
    assert layer_caption(row) == "Severity: 4/5 · 9% of total"
