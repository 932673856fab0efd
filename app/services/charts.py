# app/services/charts.py
# -----------------------------------------------------------------------------
# 플랫폼별 예상 이동 시간 가로 막대 차트 (plotly)
# - 10분 기준선(빨간 점선), 찾은 매장이 없으면 차트 없음
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import List, Optional

import plotly.graph_objects as go

from app.core.platforms import PROMISE_MINUTES
from app.schemas.estimate import DeliveryEstimate


def build_travel_time_chart(estimates: List[DeliveryEstimate]) -> Optional[go.Figure]:
    found = [e for e in estimates if e.found]
    if not found:
        return None

    fig = go.Figure(
        go.Bar(
            x=[e.estimated_travel_time_min for e in found],
            y=[e.platform for e in found],
            orientation="h",
            marker_color=[e.color for e in found],
            customdata=[[e.distance_km, e.feasibility] for e in found],
            hovertemplate=(
                "<b>%{y}</b><br>Est. Time: %{x} min"
                "<br>Distance: %{customdata[0]} km"
                "<br>%{customdata[1]}<extra></extra>"
            ),
            name="Estimated Time (min)",
            width=0.5,
        )
    )
    fig.add_vline(
        x=PROMISE_MINUTES,
        line_dash="dash",
        line_color="red",
        annotation_text=f"{PROMISE_MINUTES} min limit",
        annotation_position="top",
        annotation_font_color="red",
    )
    longest = max(e.estimated_travel_time_min for e in found)
    fig.update_layout(
        title="Estimated Travel Time vs. 10m Promise",
        template="plotly_white",
        height=300,
        margin=dict(l=0, r=30, t=50, b=10),
        xaxis=dict(range=[0, max(longest, PROMISE_MINUTES) + 10], visible=False),
        yaxis=dict(autorange="reversed"),
        showlegend=False,
    )
    return fig


def chart_html(fig: Optional[go.Figure]) -> str:
    if fig is None:
        return ""
    return fig.to_html(full_html=False, include_plotlyjs="cdn")
