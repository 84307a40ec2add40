import io

import pandas as pd
import pytest

from core.wizard_state import WizardController
from modules.cost_model import summarise
from modules.report import build_breakdown_df, build_headline_df, create_excel_bytes, create_pdf_bytes


def _default_summary():
    return summarise(WizardController().snapshot())


def test_breakdown_table_has_one_row_per_layer():
    df = build_breakdown_df(_default_summary())
    assert len(df) == 7
    assert list(df["Waterline"]).count("Above") == 1
    assert df["Share of Total (%)"].sum() == pytest.approx(100.0)


def test_headline_table_values():
    df = build_headline_df(_default_summary()).set_index("Metric")
    assert df.loc["True cost multiplier", "Value"] == pytest.approx(6.0)
    assert df.loc["Annual exposure", "Value"] == pytest.approx(1912500.0)
    assert df.loc["Departures per year", "Value"] == 8.0


def test_pdf_export_produces_pdf_bytes():
    data = create_pdf_bytes(_default_summary())
    assert data.startswith(b"%PDF")
    assert len(data) > 1000


def test_excel_export_round_trips_through_pandas():
    data = create_excel_bytes(_default_summary())
    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None)

    assert set(sheets) == {"Inputs", "Summary", "Layers", "Takeaway"}
    assert len(sheets["Layers"]) == 7
    assert sheets["Takeaway"]["Takeaway"].iloc[0].startswith("At a 6.0× multiplier")
