"""
Compatibility wrapper so that `import wizard_state` works
both locally and on Streamlit Cloud.

The real implementation lives in core/wizard_state.py
"""

from core.wizard_state import (
    WizardController,
    WizardSnapshot,
    WizardState,
    OrgInputs,
    FlowStateError,
    STEP_INTRO,
    STEP_INPUTS,
    STEP_SCORING,
    STEP_RESULTS,
    ALLOWED_STEPS,
)

__all__ = [
    "WizardController",
    "WizardSnapshot",
    "WizardState",
    "OrgInputs",
    "FlowStateError",
    "STEP_INTRO",
    "STEP_INPUTS",
    "STEP_SCORING",
    "STEP_RESULTS",
    "ALLOWED_STEPS",
]
