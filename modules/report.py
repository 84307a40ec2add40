from __future__ import annotations

import io
import logging
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib import colors  # type: ignore
from reportlab.lib.pagesizes import letter  # type: ignore
from reportlab.lib.styles import getSampleStyleSheet  # type: ignore
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle  # type: ignore

from core.layer_config import SEVERITY_LABELS
from core.settings import SETTINGS, CalculatorSettings
from modules.cost_model import CostSummary
from modules.narrative import METHODOLOGY_NOTES, format_currency, select_narrative


logger = logging.getLogger(__name__)


def money(x: Any) -> str:
    try:
        v = float(x)
    except Exception:
        return "$0"
    return f"${v:,.0f}"


def number(x: Any, decimals: int = 2) -> str:
    try:
        v = float(x)
    except Exception:
        v = 0.0
    fmt = f"{{:,.{decimals}f}}"
    return fmt.format(v)


def build_inputs_df(summary: CostSummary, settings: CalculatorSettings = SETTINGS) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = [
        {"Input": "Team size", "Value": float(summary.team_size), "Unit": "people"},
        {"Input": "Average annual salary", "Value": float(summary.baseline), "Unit": settings.currency_unit},
        {"Input": "Annual turnover rate", "Value": float(summary.turnover_rate_percent), "Unit": "%"},
    ]
    return pd.DataFrame(rows)


def build_headline_df(summary: CostSummary) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = [
        {"Metric": "Visible cost per departure", "Value": float(summary.visible_cost)},
        {"Metric": "Total cost per departure", "Value": float(summary.total_hidden_cost)},
        {"Metric": "True cost multiplier", "Value": float(summary.multiplier)},
        {"Metric": "Departures per year", "Value": float(summary.departures_per_year)},
        {"Metric": "Annual exposure", "Value": float(summary.annual_exposure)},
    ]
    return pd.DataFrame(rows)


def build_breakdown_df(summary: CostSummary) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = []
    for row in summary.layers:
        rows.append(
            {
                "Layer": row.layer.label,
                "Waterline": "Above" if row.layer.above_waterline else "Below",
                "Severity": int(row.severity),
                "Severity Label": SEVERITY_LABELS.get(int(row.severity), ""),
                "Cost per Departure": float(row.cost),
                "Share of Total (%)": float(row.percent_of_total),
            }
        )
    return pd.DataFrame(rows)


def _df_to_table_data(df: pd.DataFrame, money_columns: Optional[List[str]] = None) -> List[List[str]]:
    money_columns = money_columns or []
    cols = list(df.columns)
    out: List[List[str]] = [cols]
    for _, row in df.iterrows():
        r: List[str] = []
        for c in cols:
            v = row[c]
            if c in money_columns:
                r.append(money(v))
            elif isinstance(v, (int, float)):
                r.append(number(v, 2))
            else:
                r.append(str(v))
        out.append(r)
    return out


def _table(data: List[List[str]]) -> Table:
    t = Table(data)
    t.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ]
        )
    )
    return t


def create_pdf_bytes(summary: CostSummary, settings: CalculatorSettings = SETTINGS) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter)
    styles = getSampleStyleSheet()
    story: List[Any] = []

    story.append(Paragraph("Your Retention Cost Iceberg", styles["Title"]))
    story.append(Spacer(1, 6))
    story.append(
        Paragraph(
            f"You're seeing {format_currency(summary.visible_cost)}. "
            f"You're losing {format_currency(summary.total_hidden_cost)} per departure.",
            styles["BodyText"],
        )
    )
    story.append(Spacer(1, 12))

    story.append(Paragraph("Organization inputs", styles["Heading2"]))
    story.append(Spacer(1, 6))
    story.append(_table(_df_to_table_data(build_inputs_df(summary, settings))))
    story.append(Spacer(1, 10))

    story.append(Paragraph("Headline figures", styles["Heading2"]))
    story.append(Spacer(1, 6))
    headline = build_headline_df(summary)
    data = [list(headline.columns)]
    for _, row in headline.iterrows():
        if row["Metric"] == "True cost multiplier":
            data.append([row["Metric"], f"{number(row['Value'], 1)}×"])
        elif row["Metric"] == "Departures per year":
            data.append([row["Metric"], number(row["Value"], 0)])
        else:
            data.append([row["Metric"], money(row["Value"])])
    story.append(_table(data))
    story.append(Spacer(1, 10))

    breakdown = build_breakdown_df(summary)
    if not breakdown.empty:
        story.append(Paragraph("Layer breakdown", styles["Heading2"]))
        story.append(Spacer(1, 6))
        show = breakdown.copy()
        show["Severity"] = show["Severity"].apply(lambda s: f"{int(s)}/5")
        show["Share of Total (%)"] = show["Share of Total (%)"].apply(lambda x: number(x, 0))
        story.append(_table(_df_to_table_data(show, money_columns=["Cost per Departure"])))
        story.append(Spacer(1, 10))

    story.append(Paragraph("The strategic takeaway", styles["Heading2"]))
    story.append(Spacer(1, 6))
    story.append(Paragraph(escape(select_narrative(summary, settings).text), styles["BodyText"]))
    story.append(Spacer(1, 10))

    story.append(Paragraph("Methodology and sources", styles["Heading3"]))
    for note in METHODOLOGY_NOTES:
        story.append(Paragraph(escape(note), styles["BodyText"]))
        story.append(Spacer(1, 4))

    doc.build(story)
    buffer.seek(0)
    logger.info("Built PDF report (%d layers)", len(summary.layers))
    return buffer.getvalue()


def create_excel_bytes(summary: CostSummary, settings: CalculatorSettings = SETTINGS) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        build_inputs_df(summary, settings).to_excel(writer, sheet_name="Inputs", index=False)
        build_headline_df(summary).to_excel(writer, sheet_name="Summary", index=False)
        build_breakdown_df(summary).to_excel(writer, sheet_name="Layers", index=False)
        pd.DataFrame([{"Takeaway": select_narrative(summary, settings).text}]).to_excel(
            writer, sheet_name="Takeaway", index=False
        )
    buffer.seek(0)
    logger.info("Built Excel report (%d layers)", len(summary.layers))
    return buffer.getvalue()
