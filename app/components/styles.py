from __future__ import annotations

import streamlit as st

from config import THEME


APP_TITLE = "Notebook"


def apply_theme(site_name: str = APP_TITLE) -> None:
    st.set_page_config(
        page_title=site_name,
        page_icon="📝",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    # Theme tokens (config.py) -> CSS variables
    radius = int(THEME["radius_px"])
    css = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&family=Merriweather:wght@400;700&display=swap');

:root{
  --ink-900: __INK_900__;
  --ink-700: __INK_700__;
  --navy-900: __NAVY_900__;
  --navy-800: __NAVY_800__;

  --bg-primary: __BG_PRIMARY__;
  --bg-secondary: __BG_SECONDARY__;
  --card-bg: __CARD_BG__;
  --card-border: __CARD_BORDER__;

  --text-primary: __TEXT_PRIMARY__;
  --text-secondary: __TEXT_SECONDARY__;
  --shadow: __SHADOW__;
  --radius: __RADIUS_PX__px;
  --like: __LIKE__;
}

#MainMenu { visibility: hidden; }
footer { visibility: hidden; }

html, body, [data-testid="stAppViewContainer"]{
  background: var(--bg-primary) !important;
  font-family: "Inter", system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif !important;
  color: var(--text-primary) !important;
}
[data-testid="stSidebar"]{
  background: var(--bg-secondary) !important;
  border-right: 1px solid var(--card-border) !important;
}

.block-container{
  padding-top: 0.75rem !important;
  padding-bottom: 2rem !important;
  max-width: 1100px;
}

/* Site header */
.blog-header{
  display:flex;
  align-items:center;
  justify-content:space-between;
  gap: 12px;
  background: var(--bg-secondary);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 12px 16px;
  margin: 0 0 16px 0;
}
.blog-title{
  font-family: "Merriweather", Georgia, serif;
  font-size: 22px;
  font-weight: 700;
  color: var(--ink-900);
}
.blog-subtitle{
  font-size: 14px;
  color: var(--text-secondary);
}
.pill{
  display:inline-flex;
  align-items:center;
  gap:6px;
  background: white;
  border: 1px solid var(--card-border);
  border-radius: 999px;
  padding: 6px 10px;
  font-size: 13px;
  font-weight: 600;
  color: var(--navy-800);
}
.pill .dot{
  width:8px;
  height:8px;
  border-radius:999px;
  display:inline-block;
}
.pill .dot.live{ background: __SUCCESS__; }
.pill .dot.fallback{ background: __WARNING__; }

/* Post cards */
.post-card{
  background: var(--card-bg);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  overflow: hidden;
  margin-bottom: 8px;
}
.post-card img{
  width: 100%;
  height: 180px;
  object-fit: cover;
  display: block;
}
.post-card-body{ padding: 12px 14px; }
.post-card-title{
  font-family: "Merriweather", Georgia, serif;
  font-size: 18px;
  font-weight: 700;
  color: var(--ink-900);
  margin: 6px 0;
}
.post-card-excerpt{
  font-size: 14px;
  color: var(--text-secondary);
  line-height: 1.5;
}
.post-meta{
  font-size: 13px;
  color: var(--text-secondary);
  margin-top: 8px;
}

.badge{
  display:inline-block;
  border-radius: 999px;
  padding: 2px 10px;
  font-size: 12px;
  font-weight: 600;
  color: white;
}

/* Article */
.cover{
  width: 100%;
  max-height: 380px;
  object-fit: cover;
  border-radius: var(--radius);
  margin-bottom: 16px;
}
.article-title{
  font-family: "Merriweather", Georgia, serif;
  font-size: 36px;
  font-weight: 700;
  color: var(--ink-900);
  line-height: 1.15;
  margin: 8px 0;
}
.like-count{ color: var(--like); font-weight: 700; }

.section-title{
  font-size: 22px;
  font-weight: 600;
  color: var(--navy-900);
  margin: 18px 0 10px 0;
}

/* Metric cards (admin) */
.metric-card{
  background: var(--card-bg);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 12px 14px;
}
.metric-label{
  font-size: 14px;
  font-weight: 500;
  color: var(--text-secondary);
  margin-bottom: 6px;
}
.metric-value{
  font-size: 24px;
  font-weight: 700;
  color: var(--text-primary);
}

div.stButton > button{
  border-radius: 10px !important;
  font-weight: 600 !important;
}

/* Callouts: not-found / error states */
.callout{
  background: #FFFFFF;
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 14px 16px;
  margin: 10px 0;
}
.callout-title{
  font-size: 16px;
  font-weight: 700;
  color: var(--navy-900);
  margin-bottom: 6px;
}
.callout-body{
  font-size: 14px;
  color: var(--text-secondary);
  line-height: 1.5;
}
.callout-error{ border-left: 4px solid __DANGER__; }
.callout-info{ border-left: 4px solid var(--navy-800); }

div[data-testid="stPlotlyChart"]{
  background: var(--card-bg);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  padding: 8px 10px;
}
</style>
"""

    tokens = {
        "__INK_900__": str(THEME["accent_primary"]),
        "__INK_700__": str(THEME["accent_secondary"]),
        "__NAVY_900__": str(THEME["navy_900"]),
        "__NAVY_800__": str(THEME["navy_800"]),
        "__BG_PRIMARY__": str(THEME["bg_primary"]),
        "__BG_SECONDARY__": str(THEME["bg_secondary"]),
        "__CARD_BG__": str(THEME["bg_card"]),
        "__CARD_BORDER__": str(THEME["border_color"]),
        "__TEXT_PRIMARY__": str(THEME["text_primary"]),
        "__TEXT_SECONDARY__": str(THEME["text_secondary"]),
        "__SHADOW__": str(THEME["shadow"]),
        "__RADIUS_PX__": str(radius),
        "__SUCCESS__": str(THEME["success"]),
        "__WARNING__": str(THEME["warning"]),
        "__DANGER__": str(THEME["danger"]),
        "__LIKE__": str(THEME["like"]),
    }
    for k, v in tokens.items():
        css = css.replace(k, v)

    st.markdown(css, unsafe_allow_html=True)
