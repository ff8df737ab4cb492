from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from config import THEME
from data.models import Post


@dataclass(frozen=True)
class Kpi:
    label: str
    value: str
    help: Optional[str] = None


def render_kpi_row(kpis: list[Kpi]) -> None:
    cols = st.columns(len(kpis))
    for c, k in zip(cols, kpis):
        with c:
            st.markdown(
                f"""
<div class="metric-card" title="{k.help or ''}">
  <div class="metric-label">{k.label}</div>
  <div class="metric-value">{k.value}</div>
</div>
                """,
                unsafe_allow_html=True,
            )


def engagement_frame(posts: Sequence[Post]) -> pd.DataFrame:
    rows = [
        {
            "title": p.title,
            "category": p.category.name if p.category else "Uncategorized",
            "published": p.published,
            "published_at": p.published_at,
            "views": p.views,
            "likes": p.likes,
        }
        for p in posts
    ]
    df = pd.DataFrame(rows, columns=["title", "category", "published", "published_at", "views", "likes"])
    if df.empty:
        return df
    df["like_rate"] = (df["likes"] / df["views"].where(df["views"] > 0)).fillna(0.0).round(3)
    return df.sort_values("views", ascending=False).reset_index(drop=True)


def engagement_kpis(df: pd.DataFrame) -> list[Kpi]:
    published = int(df["published"].sum()) if not df.empty else 0
    views = int(df["views"].sum()) if not df.empty else 0
    likes = int(df["likes"].sum()) if not df.empty else 0
    return [
        Kpi("Posts", f"{len(df)}", help=f"{published} published"),
        Kpi("Views", f"{views:,}"),
        Kpi("Likes", f"{likes:,}"),
        Kpi("Likes / view", f"{(likes / views):.1%}" if views else "–"),
    ]


def apply_plotly_theme(fig: go.Figure, x_title: str, y_title: str) -> go.Figure:
    fig.update_layout(
        margin=dict(l=10, r=10, t=44, b=10),
        font=dict(family="Inter, system-ui, sans-serif", color=THEME["text_primary"]),
        paper_bgcolor=THEME["bg_card"],
        plot_bgcolor=THEME["bg_card"],
        colorway=[THEME["navy_900"], THEME["like"], THEME["navy_800"], "#6B7280"],
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0),
    )
    fig.update_xaxes(title_text=x_title, gridcolor=THEME["grid"], zeroline=False)
    fig.update_yaxes(title_text=y_title, gridcolor=THEME["grid"], zeroline=False)
    return fig


def engagement_chart(df: pd.DataFrame, top_n: int = 10) -> None:
    if df.empty:
        st.info("No posts to chart.")
        return
    top = df.head(top_n).melt(id_vars=["title"], value_vars=["views", "likes"], var_name="metric", value_name="count")
    fig = px.bar(top, x="count", y="title", color="metric", orientation="h", barmode="group", title="Top posts by views")
    fig = apply_plotly_theme(fig, x_title="count", y_title="")
    fig.update_yaxes(autorange="reversed")
    st.plotly_chart(fig, use_container_width=True)
