from dataclasses import dataclass
from typing import Dict, Sequence, Tuple


@dataclass(frozen=True)
class CostLayer:
    layer_id: str
    label: str
    description: str
    source: str
    above_waterline: bool
    default_multiplier: float
    color: str
    icon: str


LAYER_REPLACEMENT = "replacement"
LAYER_PRODUCTIVITY = "productivity"
LAYER_KNOWLEDGE = "knowledge"
LAYER_MORALE = "morale"
LAYER_CLIENT = "client"
LAYER_MANAGER = "manager"
LAYER_CULTURE = "culture"


ICEBERG_LAYERS: Tuple[CostLayer, ...] = (
    CostLayer(
        layer_id=LAYER_REPLACEMENT,
        label="Direct Replacement Cost",
        description="Recruiting fees, job ads, signing bonuses, onboarding admin",
        source="SHRM: 6–9 months of salary. Gallup: 50–200% depending on seniority.",
        above_waterline=True,
        default_multiplier=0.5,
        color="#94B4C1",
        icon="▲",
    ),
    CostLayer(
        layer_id=LAYER_PRODUCTIVITY,
        label="Productivity Void",
        description=(
            "New hires take 16–20 weeks to reach full productivity, operating at ~25% "
            "for the first month and ~50% through week 12."
        ),
        source="HR Morning; Gallup. New hire ramp at 25%→50%→75% output over 16–20 weeks.",
        above_waterline=False,
        default_multiplier=0.75,
        color="#5B8A9A",
        icon="◆",
    ),
    CostLayer(
        layer_id=LAYER_KNOWLEDGE,
        label="Institutional Knowledge Drain",
        description=(
            "Undocumented processes, client history, tribal knowledge. ~70% of organizations "
            "report losing data or IP when employees leave."
        ),
        source="Perceptyx. Josh Bersin: employees are 'appreciating assets' whose value compounds with tenure.",
        above_waterline=False,
        default_multiplier=0.5,
        color="#3D7A8A",
        icon="◈",
    ),
    CostLayer(
        layer_id=LAYER_MORALE,
        label="Team Morale Contagion",
        description=(
            "Turnover is literally contagious. Teammates are 9.1% more likely to resign after "
            "a peer departure, spiking to 25% on teams of two."
        ),
        source=(
            "Felps et al., 2009 (Academy of Management Journal). Visier, 2022 research. "
            "Gallup: disengaged employees cost 18% of salary."
        ),
        above_waterline=False,
        default_multiplier=0.4,
        color="#2A6270",
        icon="◇",
    ),
    CostLayer(
        layer_id=LAYER_CLIENT,
        label="Client & Revenue Erosion",
        description=(
            "Relationship discontinuity, service quality dips during transition, competitor "
            "poaching risk on key accounts."
        ),
        source="Industry-dependent. Highest in financial services, consulting, and relationship-driven roles.",
        above_waterline=False,
        default_multiplier=0.35,
        color="#1B4D5A",
        icon="○",
    ),
    CostLayer(
        layer_id=LAYER_MANAGER,
        label="Manager Time Tax",
        description=(
            "~50 hours of management time per turnover event: interviewing, re-onboarding, "
            "performance restart, emotional labor."
        ),
        source="Employment Policy Foundation. At manager salary rates plus opportunity cost of diverted strategic time.",
        above_waterline=False,
        default_multiplier=0.3,
        color="#0F3842",
        icon="□",
    ),
    CostLayer(
        layer_id=LAYER_CULTURE,
        label="Culture Debt",
        description=(
            "Diluted values through rapid re-hiring, broken team dynamics, loss of "
            "high-performance norms, employer brand damage."
        ),
        source=(
            "Edie Goldberg via SHRM: 60–70% of turnover cost is hidden/indirect. "
            "Culture debt is the least quantified layer."
        ),
        above_waterline=False,
        default_multiplier=0.2,
        color="#092830",
        icon="△",
    ),
)

LAYERS_BY_ID: Dict[str, CostLayer] = {layer.layer_id: layer for layer in ICEBERG_LAYERS}


def waterline_layer(layers: Sequence[CostLayer] = ()) -> CostLayer:
    above = [layer for layer in (layers or ICEBERG_LAYERS) if layer.above_waterline]
    if len(above) != 1:
        raise ValueError(f"Exactly one layer must sit above the waterline, found {len(above)}.")
    return above[0]


SEVERITY_LABELS: Dict[int, str] = {
    1: "Minimal",
    2: "Low",
    3: "Moderate",
    4: "Significant",
    5: "Severe",
}

ALLOWED_SEVERITIES = tuple(SEVERITY_LABELS.keys())


FIELD_TEAM_SIZE = "team_size"
FIELD_AVG_SALARY = "avg_salary"
FIELD_TURNOVER_RATE = "turnover_rate"

INPUT_FIELDS: Tuple[Dict[str, str], ...] = (
    {
        "key": FIELD_TEAM_SIZE,
        "label": "Team / Department Size",
        "placeholder": "e.g. 50",
        "unit": "people",
        "hint": "The team or org unit you're analyzing",
    },
    {
        "key": FIELD_AVG_SALARY,
        "label": "Average Annual Salary",
        "placeholder": "e.g. 85000",
        "unit": "CAD",
        "hint": "Blended average across the team",
    },
    {
        "key": FIELD_TURNOVER_RATE,
        "label": "Annual Turnover Rate",
        "placeholder": "e.g. 15",
        "unit": "%",
        "hint": "Voluntary turnover in the last 12 months",
    },
)

ALLOWED_INPUT_FIELDS = tuple(f["key"] for f in INPUT_FIELDS)
