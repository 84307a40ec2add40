from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Set, Tuple

from core.layer_config import (
    ALLOWED_INPUT_FIELDS,
    ALLOWED_SEVERITIES,
    ICEBERG_LAYERS,
    CostLayer,
)
from core.settings import SETTINGS, CalculatorSettings


logger = logging.getLogger(__name__)


STEP_INTRO = "intro"
STEP_INPUTS = "inputs"
STEP_SCORING = "scoring"
STEP_RESULTS = "results"

ALLOWED_STEPS: Tuple[str, ...] = (STEP_INTRO, STEP_INPUTS, STEP_SCORING, STEP_RESULTS)

ALLOWED_TRANSITIONS: Set[Tuple[str, str]] = {
    (STEP_INTRO, STEP_INPUTS),
    (STEP_INPUTS, STEP_INTRO),
    (STEP_INPUTS, STEP_SCORING),
    (STEP_SCORING, STEP_INPUTS),
    (STEP_SCORING, STEP_RESULTS),
    (STEP_RESULTS, STEP_SCORING),
    (STEP_RESULTS, STEP_INTRO),
}


class FlowStateError(Exception):
    pass


@dataclass
class OrgInputs:
    team_size: str = ""
    avg_salary: str = ""
    turnover_rate: str = ""


@dataclass
class WizardState:
    step: str = STEP_INTRO
    current_layer_index: int = 0
    org_inputs: OrgInputs = field(default_factory=OrgInputs)
    scores: Dict[str, int] = field(default_factory=dict)

    def reset(self) -> None:
        self.__init__()


@dataclass(frozen=True)
class WizardSnapshot:
    """Read-only copy of the wizard state handed to presentation code."""

    step: str
    current_layer_index: int
    org_inputs: OrgInputs
    scores: Mapping[str, int]


class WizardController:
    """Single owner of a WizardState.

    Every mutation of the wizard goes through this class. Views read the
    state through ``snapshot()`` and never hold the mutable object.
    """

    def __init__(
        self,
        layers: Sequence[CostLayer] = ICEBERG_LAYERS,
        settings: CalculatorSettings = SETTINGS,
    ) -> None:
        if not layers:
            raise ValueError("At least one cost layer is required.")
        self._layers: Tuple[CostLayer, ...] = tuple(layers)
        self._layer_ids = {layer.layer_id for layer in self._layers}
        self._settings = settings
        self._state = WizardState()

    @property
    def layers(self) -> Tuple[CostLayer, ...]:
        return self._layers

    @property
    def step(self) -> str:
        return self._state.step

    @property
    def current_layer_index(self) -> int:
        return self._state.current_layer_index

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    @property
    def current_layer(self) -> CostLayer:
        return self._layers[self._state.current_layer_index]

    @property
    def is_last_layer(self) -> bool:
        return self._state.current_layer_index == len(self._layers) - 1

    @property
    def progress_percent(self) -> int:
        return int(math.floor((self._state.current_layer_index + 1) / float(len(self._layers)) * 100.0 + 0.5))

    def snapshot(self) -> WizardSnapshot:
        return WizardSnapshot(
            step=self._state.step,
            current_layer_index=self._state.current_layer_index,
            org_inputs=replace(self._state.org_inputs),
            scores=MappingProxyType(dict(self._state.scores)),
        )

    def score_for(self, layer_id: str) -> Optional[int]:
        return self._state.scores.get(layer_id)

    def _ensure_step(self, expected_step: str) -> None:
        if self._state.step != expected_step:
            raise FlowStateError(
                f"Invalid flow: step={self._state.step!r}, expected={expected_step!r}."
            )

    def go_to_step(self, step: str) -> None:
        if step not in ALLOWED_STEPS:
            raise ValueError(f"Unknown wizard step: {step!r}")
        current = self._state.step
        if (current, step) not in ALLOWED_TRANSITIONS:
            logger.warning("Rejected wizard transition %s -> %s", current, step)
            raise FlowStateError(f"Transition from {current!r} to {step!r} is not permitted.")
        if (current, step) == (STEP_RESULTS, STEP_INTRO):
            self.reset()
            return
        if (current, step) == (STEP_INPUTS, STEP_SCORING):
            if not self.can_advance_from_inputs():
                logger.warning("Rejected wizard transition %s -> %s: inputs incomplete", current, step)
                raise FlowStateError("All three organization inputs are required before scoring.")
            self._state.current_layer_index = 0
        self._state.step = step
        logger.debug("Wizard transition %s -> %s", current, step)

    def set_org_input(self, field_name: str, raw_text: Optional[str]) -> None:
        if field_name not in ALLOWED_INPUT_FIELDS:
            raise ValueError(f"Unknown organization input: {field_name!r}")
        setattr(self._state.org_inputs, field_name, "" if raw_text is None else str(raw_text))

    def can_advance_from_inputs(self) -> bool:
        org = self._state.org_inputs
        return all(bool(getattr(org, name)) for name in ALLOWED_INPUT_FIELDS)

    def set_severity(self, layer_id: str, value: int) -> None:
        if layer_id not in self._layer_ids:
            raise ValueError(f"Unknown cost layer: {layer_id!r}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Severity must be an integer, got {value!r}.")
        if value not in ALLOWED_SEVERITIES:
            raise ValueError(f"Severity must be between 1 and 5, got {value!r}.")
        self._state.scores[layer_id] = value

    def start(self) -> None:
        self.go_to_step(STEP_INPUTS)

    def back_to_intro(self) -> None:
        self.go_to_step(STEP_INTRO)

    def confirm_inputs(self) -> bool:
        self._ensure_step(STEP_INPUTS)
        if not self.can_advance_from_inputs():
            return False
        self.go_to_step(STEP_SCORING)
        return True

    def advance_layer(self) -> None:
        self._ensure_step(STEP_SCORING)
        layer = self.current_layer
        if layer.layer_id not in self._state.scores:
            self._state.scores[layer.layer_id] = self._settings.neutral_severity
        if self.is_last_layer:
            self.go_to_step(STEP_RESULTS)
        else:
            self._state.current_layer_index += 1

    def retreat_layer(self) -> None:
        self._ensure_step(STEP_SCORING)
        if self._state.current_layer_index > 0:
            self._state.current_layer_index -= 1
        else:
            self.go_to_step(STEP_INPUTS)

    def adjust_scores(self) -> None:
        self._ensure_step(STEP_RESULTS)
        self.go_to_step(STEP_SCORING)

    def reset(self) -> None:
        self._state.reset()
        logger.info("Wizard reset to intro")

    def start_over(self) -> None:
        self.reset()
