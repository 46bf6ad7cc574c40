from __future__ import annotations

import tempfile
from typing import Any

import numpy as np
import plotly.graph_objects as go
import plotly.io as pio

from spendly.categories import category_color
from spendly.currency import PREFIX_SYMBOLS, currency_symbol
from spendly.db.models import CategorySummary, PeriodBucket

THEME: dict[str, Any] = {
    "colors": {
        "primary": "#4C72B0",
        "secondary": "#55A868",
        "trend_line": "#C44E52",
        "grid": "#E5E5E5",
        "background": "#FAFAFA",
        "text": "#2D3436",
        "muted": "#636E72",
    },
    "font": {
        "family": "Inter, sans-serif",
        "size": 13,
        "title_size": 16,
    },
    "size": {
        "width": 800,
        "height": 500,
        "scale": 2,
    },
    "margin": {"l": 60, "r": 30, "t": 60, "b": 50},
}

PERIOD_TITLES = {
    "daily": "Daily Spending",
    "weekly": "Weekly Spending",
    "monthly": "Monthly Spending",
}

TREND_MIN_POINTS = 3

_custom_template = pio.templates["plotly_white"]
_custom_template.layout.font = dict(
    family=THEME["font"]["family"],
    size=THEME["font"]["size"],
    color=THEME["colors"]["text"],
)
_custom_template.layout.title = dict(
    font=dict(size=THEME["font"]["title_size"], color=THEME["colors"]["text"]),
    x=0.5,
    xanchor="center",
)
_custom_template.layout.plot_bgcolor = THEME["colors"]["background"]
_custom_template.layout.xaxis = dict(gridcolor=THEME["colors"]["grid"])
_custom_template.layout.yaxis = dict(gridcolor=THEME["colors"]["grid"])
pio.templates["spendly"] = _custom_template
pio.templates.default = "spendly"


def _fmt_amount(value: float, cur: str | None = None) -> str:
    sym = currency_symbol(cur)
    if value >= 1000:
        number = f"{value:,.0f}"
    else:
        number = f"{value:.0f}" if value == int(value) else f"{value:.2f}"
    return f"{sym}{number}" if sym in PREFIX_SYMBOLS else f"{number} {sym}"


def _base_layout() -> dict[str, Any]:
    return {
        "margin": THEME["margin"],
        "width": THEME["size"]["width"],
        "height": THEME["size"]["height"],
    }


def _save(fig: go.Figure) -> str:
    tmp = tempfile.NamedTemporaryFile(suffix=".png", delete=False)  # noqa: SIM115
    tmp.close()
    fig.write_image(tmp.name, scale=THEME["size"]["scale"])
    return tmp.name


def report_figure(buckets: list[PeriodBucket], period: str, cur: str | None = None) -> go.Figure | None:
    if not buckets:
        return None

    # Buckets arrive newest first; charts read left to right.
    ordered = list(reversed(buckets))
    keys = [b.period_key for b in ordered]
    totals: list[float] = [b.total for b in ordered]

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=keys,
            y=totals,
            marker_color=THEME["colors"]["primary"],
            text=[_fmt_amount(v, cur) for v in totals],
            textposition="outside",
            hovertemplate="%{x}: %{y:,.2f}<extra></extra>",
            name="Total",
        )
    )

    if len(totals) >= TREND_MIN_POINTS:
        x_idx = list(range(len(totals)))
        z = np.polyfit(x_idx, totals, 1)
        trend = np.polyval(z, x_idx)
        fig.add_trace(
            go.Scatter(
                x=keys,
                y=trend.tolist(),
                mode="lines",
                line=dict(color=THEME["colors"]["trend_line"], width=2, dash="dash"),
                name="Trend",
                hoverinfo="skip",
            )
        )

    fig.update_layout(
        **_base_layout(),
        title=PERIOD_TITLES.get(period, "Spending"),
        xaxis_type="category",
        showlegend=len(totals) >= TREND_MIN_POINTS,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def category_figure(categories: list[CategorySummary], cur: str | None = None) -> go.Figure | None:
    if not categories:
        return None

    names = [c.name for c in categories]
    totals = [c.total for c in categories]
    if sum(totals) <= 0:
        return None

    fig = go.Figure(
        go.Pie(
            labels=names,
            values=totals,
            marker=dict(colors=[category_color(n) for n in names]),
            textinfo="label+percent",
            texttemplate="%{label}<br>%{percent:.0%}",
            hovertemplate="%{label}: %{value:,.2f}<extra></extra>",
            hole=0.35,
            sort=False,
        )
    )
    fig.update_layout(
        **_base_layout(),
        title="Spending by Category",
        showlegend=False,
    )
    fig.add_annotation(
        text=_fmt_amount(sum(totals), cur),
        x=0.5,
        y=0.5,
        showarrow=False,
        font=dict(size=18, color=THEME["colors"]["text"]),
    )
    return fig


async def report_chart(buckets: list[PeriodBucket], period: str, cur: str | None = None) -> str | None:
    fig = report_figure(buckets, period, cur)
    return _save(fig) if fig is not None else None


async def category_chart(categories: list[CategorySummary], cur: str | None = None) -> str | None:
    fig = category_figure(categories, cur)
    return _save(fig) if fig is not None else None
