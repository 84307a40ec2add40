from __future__ import annotations

import logging
import time
from typing import Any, Dict, List

import pandas as pd
import streamlit as st

from core.layer_config import INPUT_FIELDS, SEVERITY_LABELS
from core.settings import SETTINGS
from core.wizard_state import (
    STEP_INPUTS,
    STEP_INTRO,
    STEP_RESULTS,
    STEP_SCORING,
    FlowStateError,
    WizardController,
)
from modules.animation import counter_frames
from modules.cost_model import CostSummary, layer_cost, resolve_baseline, summarise
from modules.iceberg import build_iceberg_chart, render_iceberg_html
from modules.narrative import (
    METHODOLOGY_NOTES,
    format_currency,
    exposure_lines,
    headline_lines,
    layer_caption,
    multiplier_caption,
    select_narrative,
    to_fixed,
)
from modules.report import build_breakdown_df, create_excel_bytes, create_pdf_bytes, money


logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, SETTINGS.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def safe_rerun() -> None:
    if hasattr(st, "rerun"):
        st.rerun()
        return
    if hasattr(st, "experimental_rerun"):
        st.experimental_rerun()  # type: ignore[attr-defined]


def initialise_state() -> None:
    if "wizard" not in st.session_state:
        st.session_state["wizard"] = WizardController()
        logger.debug("Created wizard controller for new session")


def _input_widget_key(field_key: str) -> str:
    return f"org_input_{field_key}"


def reset_state(wizard: WizardController) -> None:
    wizard.start_over()
    for f in INPUT_FIELDS:
        st.session_state.pop(_input_widget_key(f["key"]), None)
    for k in [k for k in st.session_state.keys() if str(k).startswith("counter_prev_")]:
        st.session_state.pop(k, None)
    safe_rerun()


def _run_action(action: Any, *args: Any) -> bool:
    try:
        action(*args)
    except (FlowStateError, ValueError) as exc:
        logger.warning("Wizard action %s failed: %s", getattr(action, "__name__", action), exc)
        st.error("That step is not available right now. Please try again.")
        return False
    return True


def animated_number(slot_key: str, value: float, fmt: Any) -> None:
    placeholder = st.empty()
    prev_key = f"counter_prev_{slot_key}"
    start = float(st.session_state.get(prev_key, 0.0))
    st.session_state[prev_key] = float(value)

    if not SETTINGS.animate_counters or start == value:
        placeholder.markdown(fmt(value))
        return

    for frame in counter_frames(start, value, SETTINGS.counter_duration_ms, SETTINGS.counter_frame_ms):
        placeholder.markdown(fmt(frame))
        time.sleep(SETTINGS.counter_frame_ms / 1000.0)


def intro_ui(wizard: WizardController) -> None:
    st.caption("A Framework for People Leaders")
    st.title("The Retention Cost Iceberg")
    st.markdown(
        "You're budgeting for replacement cost.  \n"
        "Your actual exposure is 3–5× higher.  \n"
        "**Here's the math.**"
    )

    if st.button("Score Your Organization →", key="start"):
        if _run_action(wizard.start):
            safe_rerun()


def _sync_org_inputs(wizard: WizardController) -> None:
    for f in INPUT_FIELDS:
        wizard.set_org_input(f["key"], st.session_state.get(_input_widget_key(f["key"]), ""))


def inputs_ui(wizard: WizardController) -> None:
    st.caption("Step 1 of 2")
    st.header("Your Organization")
    st.write("Three data points to calculate your true retention exposure.")

    org = wizard.snapshot().org_inputs
    with st.form("org_inputs_form"):
        for f in INPUT_FIELDS:
            widget_key = _input_widget_key(f["key"])
            if widget_key not in st.session_state:
                st.session_state[widget_key] = getattr(org, f["key"])
            st.text_input(
                f"{f['label']} ({f['unit']})",
                placeholder=f["placeholder"],
                help=f["hint"],
                key=widget_key,
            )
        submitted = st.form_submit_button("Score the Hidden Layers →", key="confirm_inputs")

    if submitted:
        _sync_org_inputs(wizard)
        try:
            moved = wizard.confirm_inputs()
        except FlowStateError as exc:
            logger.warning("Could not confirm inputs: %s", exc)
            st.error("Please review your inputs and try again.")
            return
        if moved:
            safe_rerun()
            return
        st.warning("Fill in all three fields to score the hidden layers.")

    if st.button("← Back", key="inputs_back"):
        if _run_action(wizard.back_to_intro):
            safe_rerun()


def scoring_ui(wizard: WizardController) -> None:
    layer = wizard.current_layer
    snapshot = wizard.snapshot()

    st.caption(f"Step 2 of 2 — Layer {wizard.current_layer_index + 1} of {wizard.layer_count}")
    st.progress(wizard.progress_percent / 100.0, text=f"{wizard.progress_percent}%")

    st.caption("Above the waterline" if layer.above_waterline else "Hidden cost layer")
    st.subheader(f"{layer.icon} {layer.label}")
    st.write(layer.description)
    if layer.source:
        st.caption(f"📎 {layer.source}")

    st.markdown("How severely does this affect your organization?")
    selected = wizard.score_for(layer.layer_id)
    cols = st.columns(len(SEVERITY_LABELS))
    for col, (val, label) in zip(cols, SEVERITY_LABELS.items()):
        with col:
            if st.button(
                f"{val} · {label}",
                key=f"severity_{layer.layer_id}_{val}",
                type="primary" if selected == val else "secondary",
                use_container_width=True,
            ):
                if _run_action(wizard.set_severity, layer.layer_id, val):
                    safe_rerun()

    if selected:
        baseline = resolve_baseline(snapshot.org_inputs)
        st.metric("Estimated cost per departure", format_currency(layer_cost(layer, selected, baseline)))

    c1, c2 = st.columns(2)
    with c1:
        if st.button("←", key="layer_back"):
            if _run_action(wizard.retreat_layer):
                safe_rerun()
    with c2:
        label = "Reveal Your Iceberg →" if wizard.is_last_layer else "Next Layer →"
        if st.button(label, key="layer_next"):
            if _run_action(wizard.advance_layer):
                safe_rerun()


def _breakdown_display_df(summary: CostSummary) -> pd.DataFrame:
    df = build_breakdown_df(summary)
    if df.empty:
        return df
    show = df.copy()
    show["Severity"] = show["Severity"].apply(lambda s: f"{int(s)}/5")
    show["Cost per Departure"] = show["Cost per Departure"].apply(format_currency)
    show["Share of Total (%)"] = show["Share of Total (%)"].apply(lambda x: to_fixed(x, 0))
    return show


def results_ui(wizard: WizardController) -> None:
    summary = summarise(wizard.snapshot(), wizard.layers)

    st.caption("Your Retention Cost Iceberg")
    seeing, losing = headline_lines(summary)
    st.header(seeing)
    st.header(losing)
    st.write("Per departure · Based on your severity scores")

    st.subheader("Your True Cost Multiplier")
    animated_number("multiplier", summary.multiplier, lambda v: f"## {to_fixed(v, 1)}×")
    st.write(multiplier_caption(summary))

    st.markdown(render_iceberg_html(build_iceberg_chart(summary)), unsafe_allow_html=True)

    st.subheader("Annual Exposure")
    c1, c2 = st.columns(2)
    with c1:
        animated_number("exposure", summary.annual_exposure, lambda v: f"## ${to_fixed(v, 0)}")
    with c2:
        for line in exposure_lines(summary):
            st.caption(line)

    st.subheader("Layer Breakdown")
    for row in summary.layers:
        st.markdown(f"**{row.layer.label}** · {format_currency(row.cost)}")
        st.caption(layer_caption(row))

    show = _breakdown_display_df(summary)
    if not show.empty:
        st.dataframe(show, use_container_width=True, hide_index=True)

        chart_rows: List[Dict[str, Any]] = [
            {"Layer": row.layer.label, "Cost per Departure": float(row.cost)} for row in summary.layers
        ]
        st.subheader("Chart: cost per departure by layer")
        st.bar_chart(pd.DataFrame(chart_rows).set_index("Layer")[["Cost per Departure"]])

    st.subheader("The Strategic Takeaway")
    st.info(select_narrative(summary).text)

    c1, c2 = st.columns(2)
    with c1:
        if st.button("← Adjust Scores", key="adjust_scores"):
            if _run_action(wizard.adjust_scores):
                safe_rerun()
    with c2:
        if st.button("Start Over", key="start_over"):
            reset_state(wizard)
            return

    st.subheader("Downloads")
    st.download_button(
        label="Download PDF",
        data=create_pdf_bytes(summary),
        file_name="retention_cost_iceberg.pdf",
        mime="application/pdf",
        key="download_pdf",
    )
    st.download_button(
        label="Download Excel",
        data=create_excel_bytes(summary),
        file_name="retention_cost_iceberg.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        key="download_excel",
    )
    st.caption(f"Annual exposure in {SETTINGS.currency_unit}: {money(summary.annual_exposure)}")

    with st.expander("Methodology & Sources"):
        for note in METHODOLOGY_NOTES:
            st.write(note)

    st.caption("The Retention Cost Iceberg™ Framework. Built for People Leaders who think in business outcomes.")


def main() -> None:
    st.set_page_config(page_title=SETTINGS.page_title, layout="centered")
    configure_logging()
    initialise_state()

    wizard: WizardController = st.session_state["wizard"]
    if wizard.step == STEP_INTRO:
        intro_ui(wizard)
        return
    if wizard.step == STEP_INPUTS:
        inputs_ui(wizard)
        return
    if wizard.step == STEP_SCORING:
        scoring_ui(wizard)
        return
    if wizard.step == STEP_RESULTS:
        results_ui(wizard)
        return

    logger.error("Unknown wizard step %r, resetting", wizard.step)
    reset_state(wizard)


if __name__ == "__main__":
    main()
