from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from modules.cost_model import CostSummary
from modules.narrative import format_currency


MAX_BAR_WIDTH = 280.0
MIN_ABOVE_WIDTH = 40.0
MIN_BELOW_WIDTH = 30.0


@dataclass
class IcebergBar:
    layer_id: str
    label: str
    color: str
    cost: float
    cost_label: str
    width: float
    above_waterline: bool
    is_keel: bool = False


@dataclass
class IcebergChart:
    above: Optional[IcebergBar]
    below: List[IcebergBar]
    total_cost: float


def _width(cost: float, total: float, minimum: float) -> float:
    if total <= 0:
        return minimum
    return max(minimum, cost / total * MAX_BAR_WIDTH)


def build_iceberg_chart(summary: CostSummary) -> IcebergChart:
    total = summary.total_hidden_cost

    above: Optional[IcebergBar] = None
    below: List[IcebergBar] = []
    for row in summary.layers:
        layer = row.layer
        bar = IcebergBar(
            layer_id=layer.layer_id,
            label=layer.label,
            color=layer.color,
            cost=row.cost,
            cost_label=format_currency(row.cost),
            width=_width(row.cost, total, MIN_ABOVE_WIDTH if layer.above_waterline else MIN_BELOW_WIDTH),
            above_waterline=layer.above_waterline,
        )
        if layer.above_waterline:
            above = bar
        else:
            below.append(bar)

    if below:
        below[-1].is_keel = True

    return IcebergChart(above=above, below=below, total_cost=total)


def render_iceberg_html(chart: IcebergChart) -> str:
    parts: List[str] = ['<div style="padding:20px 0;text-align:center;">']

    if chart.above is not None:
        a = chart.above
        parts.append(
            f'<div style="margin:0 auto;width:{a.width:.0f}px;height:48px;background:{a.color};'
            f'border-radius:8px 8px 2px 2px;display:flex;align-items:center;justify-content:center;">'
            f'<span style="font-size:12px;font-weight:700;color:#0A1A20;">{a.cost_label}</span></div>'
        )
        parts.append(
            '<div style="margin-top:6px;font-size:11px;font-weight:600;letter-spacing:0.06em;'
            'text-transform:uppercase;color:rgba(148,180,193,0.7);">What you budget for</div>'
        )

    parts.append(
        '<div style="margin:14px 0;font-size:10px;font-weight:700;letter-spacing:0.12em;'
        'text-transform:uppercase;color:rgba(148,180,193,0.5);'
        'border-top:1px dashed rgba(148,180,193,0.4);padding-top:6px;">● ● ● waterline ● ● ●</div>'
    )

    for b in chart.below:
        radius = "2px 2px 8px 8px" if b.is_keel else "2px"
        parts.append(
            f'<div style="margin:0 auto 6px auto;width:{b.width:.0f}px;height:32px;background:{b.color};'
            f'border-radius:{radius};display:flex;align-items:center;justify-content:center;">'
            f'<span style="font-size:10px;font-weight:700;color:rgba(255,255,255,0.85);">{b.cost_label}</span></div>'
        )

    parts.append(
        '<div style="margin-top:10px;font-size:11px;font-weight:600;letter-spacing:0.06em;'
        'text-transform:uppercase;color:rgba(224,122,95,0.8);">What\'s actually costing you</div>'
    )
    parts.append("</div>")
    return "".join(parts)
