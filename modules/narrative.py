from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Tuple

from core.settings import SETTINGS, CalculatorSettings
from modules.cost_model import CostSummary, LayerBreakdown


NARRATIVE_HIGH = "high"
NARRATIVE_MEDIUM = "medium"
NARRATIVE_LOW = "low"


METHODOLOGY_NOTES: Tuple[str, ...] = (
    "Layer multipliers are derived from published research by SHRM (6–9 months salary replacement cost), "
    "Gallup (50–200% of salary by seniority), and Josh Bersin / Deloitte (1.5–2× total cost). "
    "Hidden cost proportion from Edie Goldberg via SHRM (60–70% indirect).",
    "Productivity ramp data from HR Morning and Gallup (16–20 week ramp, 25%→50%→75% capacity). "
    "Manager time tax from Employment Policy Foundation (~50 hrs/event).",
    "Turnover contagion from Felps et al., 2009 (Academy of Management Journal) and Visier, 2022 "
    "(9.1% increased resignation probability; 25% on teams of two).",
    "Severity scores are self-assessed. This model is a diagnostic framework, not an audit. "
    "Outputs represent estimated exposure ranges to support strategic conversation, "
    "not precise financial projections.",
)


@dataclass
class Narrative:
    tier: str
    text: str


def to_fixed(value: Any, decimals: int) -> str:
    """Fixed-point text with halves rounded away from zero."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        v = 0.0
    if v != v or v in (float("inf"), float("-inf")):
        v = 0.0
    quant = Decimal(1).scaleb(-decimals)
    return str(Decimal(v).quantize(quant, rounding=ROUND_HALF_UP))


def format_currency(value: Any) -> str:
    try:
        v = float(value)
    except (TypeError, ValueError):
        v = 0.0
    if v >= 1_000_000:
        return f"${to_fixed(v / 1_000_000, 1)}M"
    if v >= 1000:
        return f"${to_fixed(v / 1000, 0)}K"
    return f"${to_fixed(v, 0)}"


def narrative_tier(multiplier: float, settings: CalculatorSettings = SETTINGS) -> str:
    if multiplier >= settings.high_multiplier_threshold:
        return NARRATIVE_HIGH
    if multiplier >= settings.medium_multiplier_threshold:
        return NARRATIVE_MEDIUM
    return NARRATIVE_LOW


def select_narrative(summary: CostSummary, settings: CalculatorSettings = SETTINGS) -> Narrative:
    m = to_fixed(summary.multiplier, 1)
    tier = narrative_tier(summary.multiplier, settings)

    if tier == NARRATIVE_HIGH:
        frac = summary.turnover_rate_fraction
        savings = summary.annual_exposure * 0.01 / frac if frac else 0.0
        text = (
            f"At a {m}× multiplier, every percentage point reduction in turnover saves your organization "
            f"approximately {format_currency(savings)}. The business case for retention investment isn't "
            f"just an HR argument — it's a P&L argument."
        )
    elif tier == NARRATIVE_MEDIUM:
        savings = summary.baseline * 0.25 * summary.departures_per_year
        text = (
            f"Your {m}× multiplier reveals significant hidden costs below the waterline. Focus on your "
            f"highest-severity layers first — even a 1-point severity reduction in your top cost driver "
            f"would save {format_currency(savings)} annually."
        )
    else:
        text = (
            f"Your {m}× multiplier suggests your visible and hidden costs are relatively balanced. "
            f"Maintain focus on preventing hidden layers from deepening, especially in morale contagion "
            f"and knowledge drain."
        )

    return Narrative(tier=tier, text=text)


def headline_lines(summary: CostSummary) -> Tuple[str, str]:
    return (
        f"You're seeing {format_currency(summary.visible_cost)}",
        f"You're losing {format_currency(summary.total_hidden_cost)}",
    )


def multiplier_caption(summary: CostSummary) -> str:
    return (
        f"For every $1 you budget for replacement, you're actually losing "
        f"${to_fixed(summary.multiplier, 2)} in total organizational cost."
    )


def _plain_number(v: float) -> str:
    if float(v).is_integer():
        return str(int(v))
    return repr(float(v))


def exposure_lines(summary: CostSummary) -> List[str]:
    return [
        f"{summary.team_size} people × {_plain_number(summary.turnover_rate_percent)}% turnover",
        f"= ~{summary.departures_per_year} departures/year",
        f"× {format_currency(summary.total_hidden_cost)} true cost each",
    ]


def layer_caption(row: LayerBreakdown) -> str:
    return f"Severity: {row.severity}/5 · {to_fixed(row.percent_of_total, 0)}% of total"
