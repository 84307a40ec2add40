from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from core.layer_config import ICEBERG_LAYERS, CostLayer, waterline_layer
from core.settings import SETTINGS, CalculatorSettings
from core.wizard_state import OrgInputs


_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


@dataclass
class LayerBreakdown:
    layer: CostLayer
    severity: int
    cost: float
    percent_of_total: float


@dataclass
class CostSummary:
    baseline: float
    team_size: int
    turnover_rate_percent: float
    turnover_rate_fraction: float
    visible_cost: float
    total_hidden_cost: float
    multiplier: float
    annual_exposure: float
    departures_per_year: int
    layers: List[LayerBreakdown] = field(default_factory=list)


def _parse_float(raw: Any) -> Optional[float]:
    m = _FLOAT_PREFIX.match(str(raw or ""))
    if not m:
        return None
    try:
        v = float(m.group(0))
    except ValueError:
        return None
    if v != v or v in (float("inf"), float("-inf")):
        return None
    return v


def _parse_int(raw: Any) -> Optional[int]:
    m = _INT_PREFIX.match(str(raw or ""))
    if not m:
        return None
    return int(m.group(0))


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def resolve_baseline(org_inputs: OrgInputs, settings: CalculatorSettings = SETTINGS) -> float:
    v = _parse_float(org_inputs.avg_salary)
    return settings.default_avg_salary if v is None else v


def resolve_team_size(org_inputs: OrgInputs, settings: CalculatorSettings = SETTINGS) -> int:
    v = _parse_int(org_inputs.team_size)
    return settings.default_team_size if v is None else v


def resolve_turnover_rate(org_inputs: OrgInputs, settings: CalculatorSettings = SETTINGS) -> float:
    v = _parse_float(org_inputs.turnover_rate)
    return settings.default_turnover_rate if v is None else v


def resolve_turnover_fraction(org_inputs: OrgInputs, settings: CalculatorSettings = SETTINGS) -> float:
    return resolve_turnover_rate(org_inputs, settings) / 100.0


def _severity(scores: Mapping[str, int], layer: CostLayer, settings: CalculatorSettings) -> int:
    s = scores.get(layer.layer_id)
    return settings.neutral_severity if not s else int(s)


def layer_cost(
    layer: CostLayer,
    severity: Optional[int],
    baseline: float,
    settings: CalculatorSettings = SETTINGS,
) -> float:
    s = settings.neutral_severity if not severity else severity
    return baseline * layer.default_multiplier * (s / 3.0)


def visible_cost(
    scores: Mapping[str, int],
    baseline: float,
    layers: Sequence[CostLayer] = ICEBERG_LAYERS,
    settings: CalculatorSettings = SETTINGS,
) -> float:
    layer = waterline_layer(layers)
    return layer_cost(layer, _severity(scores, layer, settings), baseline, settings)


def total_hidden_cost(
    scores: Mapping[str, int],
    baseline: float,
    layers: Sequence[CostLayer] = ICEBERG_LAYERS,
    settings: CalculatorSettings = SETTINGS,
) -> float:
    return sum(layer_cost(layer, _severity(scores, layer, settings), baseline, settings) for layer in layers)


def multiplier(total_hidden: float, visible: float) -> float:
    if visible > 0:
        return total_hidden / visible
    return 0.0


def annual_exposure(total_hidden: float, team_size: int, turnover_rate_fraction: float) -> float:
    return total_hidden * team_size * turnover_rate_fraction


def departures_per_year(team_size: int, turnover_rate_percent: float) -> int:
    return round_half_up(team_size * turnover_rate_percent / 100.0)


def percent_of_total(cost: float, total: float) -> float:
    if total > 0:
        return 100.0 * cost / total
    return 0.0


def summarise(
    state: Any,
    layers: Sequence[CostLayer] = ICEBERG_LAYERS,
    settings: CalculatorSettings = SETTINGS,
) -> CostSummary:
    """Compute every results figure from a wizard state or snapshot.

    Nothing is cached; callers are expected to call this on every render.
    """
    org_inputs: OrgInputs = state.org_inputs
    scores: Mapping[str, int] = state.scores

    baseline = resolve_baseline(org_inputs, settings)
    team_size = resolve_team_size(org_inputs, settings)
    turnover_pct = resolve_turnover_rate(org_inputs, settings)
    turnover_frac = turnover_pct / 100.0

    visible = visible_cost(scores, baseline, layers, settings)
    total = total_hidden_cost(scores, baseline, layers, settings)

    rows: List[LayerBreakdown] = []
    for layer in layers:
        severity = _severity(scores, layer, settings)
        cost = layer_cost(layer, severity, baseline, settings)
        rows.append(
            LayerBreakdown(
                layer=layer,
                severity=severity,
                cost=cost,
                percent_of_total=percent_of_total(cost, total),
            )
        )

    return CostSummary(
        baseline=baseline,
        team_size=team_size,
        turnover_rate_percent=turnover_pct,
        turnover_rate_fraction=turnover_frac,
        visible_cost=visible,
        total_hidden_cost=total,
        multiplier=multiplier(total, visible),
        annual_exposure=annual_exposure(total, team_size, turnover_frac),
        departures_per_year=departures_per_year(team_size, turnover_pct),
        layers=rows,
    )
