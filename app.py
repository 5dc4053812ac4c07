#!/usr/bin/env python3
"""
Airdrop Analytics Dashboard - Streamlit App

Run with: streamlit run app.py
"""

import streamlit as st
import plotly.express as px
import pandas as pd

from airdrop_analytics.core.config import get_config
from airdrop_analytics.core.exceptions import AirdropAnalyticsError
from airdrop_analytics.core.types import AmountRange
from airdrop_analytics.leaderboard import filter_allocations, page_window, paginate, shorten_address
from airdrop_analytics.orchestrator import AirdropAnalyticsOrchestrator
from airdrop_analytics.output.formatters import format_compact, format_optional

PURPLE_GRADIENT = [
    "#9333ea",
    "#7c3aed",
    "#6d28d9",
    "#5b21b6",
    "#4c1d95",
    "#3b0764",
    "#2d1b4e",
]

config = get_config()
SYMBOL = config.token_symbol

# Page config
st.set_page_config(
    page_title=f"{SYMBOL} - Airdrop Analytics Dashboard",
    page_icon="🪂",
    layout="wide"
)


# One fetch per session; reload the page to recompute
@st.cache_data(show_spinner="Loading airdrop data...")
def load_analysis(source: str):
    return AirdropAnalyticsOrchestrator(source_url=source).analyze()


try:
    result = load_analysis(config.source_url)
except AirdropAnalyticsError:
    st.error("Failed to load airdrop data")
    st.stop()

summary = result.summary

# ============================================================================
# HEADER
# ============================================================================

st.title(f"{SYMBOL} Airdrop")
st.caption("Allocation Analytics")

if result.quality_flags:
    with st.expander(f"Data quality ({len(result.quality_flags)} flags)"):
        for flag in result.quality_flags:
            st.markdown(f"- **{flag.field}** ({flag.severity}): {flag.issue}")

# ============================================================================
# SECTION 1: STATS
# ============================================================================

col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric(f"Total {SYMBOL} Allocated", f"{summary.total_amount / 1_000_000_000:.2f}B")
    st.caption(f"{summary.total_amount:,} {SYMBOL}")
with col2:
    st.metric("Eligible Wallets", f"{summary.wallet_count:,}")
    st.caption("Unique addresses")
with col3:
    st.metric("Average Allocation", format_optional(summary.average_allocation))
    st.caption(f"{SYMBOL} per wallet")
with col4:
    st.metric("Median Allocation", format_optional(summary.median_allocation))
    st.caption("Middle value")

st.markdown("---")

# ============================================================================
# SECTION 2: WALLET LOOKUP
# ============================================================================

st.subheader("Check Your Allocation")

with st.form("wallet_lookup"):
    address = st.text_input("Wallet address", placeholder="Enter wallet address (0x...)")
    submitted = st.form_submit_button("Search")

if submitted:
    amount = summary.lookup(address)
    if amount is not None:
        st.success(f"✓ Allocation Found: **{amount:,} {SYMBOL}**")
    else:
        st.error("✗ Not Eligible - this address is not in the airdrop list")

st.markdown("---")

# ============================================================================
# SECTION 3: DISTRIBUTION CHARTS
# ============================================================================

dist_df = pd.DataFrame([
    {"Range": b.label, "Wallets": b.count, "Total Amount": b.total_amount}
    for b in summary.distribution
])

chart_col1, chart_col2 = st.columns(2)

with chart_col1:
    st.subheader("Allocation Distribution")
    chart_type = st.radio("Chart type", ["Bar", "Pie"], horizontal=True, label_visibility="collapsed")

    if chart_type == "Bar":
        fig = px.bar(
            dist_df,
            x="Range",
            y="Wallets",
            color="Range",
            color_discrete_sequence=PURPLE_GRADIENT,
        )
        fig.update_layout(showlegend=False, height=360)
    else:
        # Empty slices are hidden on the pie, kept on the bar chart
        pie_df = dist_df[dist_df["Wallets"] > 0]
        fig = px.pie(
            pie_df,
            names="Range",
            values="Wallets",
            color_discrete_sequence=PURPLE_GRADIENT,
        )
        fig.update_traces(textposition="outside", textinfo="label+percent")
        fig.update_layout(height=360)
    st.plotly_chart(fig, use_container_width=True)

with chart_col2:
    st.subheader(f"Total {SYMBOL} by Range")
    fig = px.area(dist_df, x="Range", y="Total Amount", line_shape="spline")
    fig.update_traces(line_color="#7c3aed")
    tick_values = dist_df["Total Amount"].tolist()
    fig.update_layout(
        height=400,
        yaxis=dict(
            tickmode="array",
            tickvals=tick_values,
            ticktext=[format_compact(v) for v in tick_values],
        ),
    )
    st.plotly_chart(fig, use_container_width=True)

st.markdown("---")

# ============================================================================
# SECTION 4: LEADERBOARD
# ============================================================================

st.subheader("Leaderboard")

filter_col1, filter_col2 = st.columns([3, 1])
with filter_col1:
    search_term = st.text_input("Search by address...", key="leaderboard_search")
with filter_col2:
    amount_range = st.selectbox(
        "Amount range",
        options=list(AmountRange),
        format_func=lambda r: r.display_name if r is AmountRange.ALL else f"{r.display_name} {SYMBOL}",
    )

entries = filter_allocations(summary.ranked, search_term, amount_range)
st.caption(f"{len(entries):,} wallets")

# Filters changed: go back to the first page
filter_key = (search_term, amount_range)
if st.session_state.get("leaderboard_filter") != filter_key:
    st.session_state["leaderboard_filter"] = filter_key
    st.session_state["leaderboard_page"] = 1

total_pages = max(1, -(-len(entries) // config.page_size))
current_page = min(st.session_state.get("leaderboard_page", 1), total_pages)
page = paginate(entries, page=current_page, per_page=config.page_size)

if page.entries:
    table_df = pd.DataFrame([
        {
            "Rank": e.rank,
            "Address": shorten_address(e.address),
            f"Amount ({SYMBOL})": f"{e.amount:,}",
        }
        for e in page.entries
    ])
    st.dataframe(table_df, use_container_width=True, hide_index=True)
else:
    st.info("No wallets match the current filters")

if page.total_pages > 1:
    st.caption(f"Showing {page.start_index + 1}-{page.end_index} of {page.total_items:,}")
    window = page_window(page.page, page.total_pages)
    nav_cols = st.columns(len(window) + 2)
    if nav_cols[0].button("‹", disabled=not page.has_previous):
        st.session_state["leaderboard_page"] = page.page - 1
        st.rerun()
    for col, number in zip(nav_cols[1:-1], window):
        if col.button(str(number), type="primary" if number == page.page else "secondary"):
            st.session_state["leaderboard_page"] = number
            st.rerun()
    if nav_cols[-1].button("›", disabled=not page.has_next):
        st.session_state["leaderboard_page"] = page.page + 1
        st.rerun()

# ============================================================================
# FOOTER
# ============================================================================

st.markdown("---")
st.markdown(f"[Data Source]({config.source_url})")
