import plotly.express as px
import streamlit as st

from teamtracker.runtime import get_clock, get_store
from teamtracker.summary import growth_stats, member_share, monthly_trend
from teamtracker.theme import set_theme
from teamtracker.utils import error_message, format_currency

set_theme(page_title="Analytics", page_icon="📊")

_PLOTLY_TEMPLATE = "plotly_white"

# "All time" is capped at two years of monthly buckets.
PERIODS = {"6 months": 6, "1 year": 12, "All time": 24}


def _style_fig(fig, *, height: int = 340):
    fig.update_layout(
        template=_PLOTLY_TEMPLATE,
        height=height,
        margin=dict(l=10, r=10, t=55, b=10),
        title=dict(x=0.02, xanchor="left", font=dict(size=16)),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0.0),
    )
    fig.update_xaxes(showgrid=False, zeroline=False)
    fig.update_yaxes(showgrid=True, gridcolor="rgba(15,23,42,0.08)", zeroline=False)
    return fig


clock = get_clock()
store = get_store()

st.title("Analytics")

try:
    tasks = store.list_tasks()
    members = store.list_members()
    goals = store.list_goals()
except Exception as exc:  # store unreachable
    st.error(f"Could not load analytics: {error_message(exc)}")
    if st.button("Retry"):
        st.rerun()
    st.stop()

period = st.radio("Period", list(PERIODS), horizontal=True)
trend = monthly_trend(tasks, goals, PERIODS[period], clock)

growth = growth_stats(tasks, clock)
k1, k2, k3 = st.columns(3)
k1.metric(
    "This month",
    format_currency(growth.this_month_amount),
    delta=f"{growth.growth_pct:+.1f}%" if growth.last_month_amount else None,
)
k2.metric("Avg. per task", format_currency(int(growth.avg_task_amount)))
k3.metric("Completed tasks", growth.completed_count)

fig = px.area(trend, x="month", y="amount", labels={"month": "Month", "amount": "Revenue"}, title="Revenue trend")
if trend["target"].any():
    fig.add_scatter(x=trend["month"], y=trend["target"], mode="lines", name="Target", line=dict(dash="dash"))
st.plotly_chart(_style_fig(fig), use_container_width=True)

left, right = st.columns(2)
with left:
    fig_points = px.bar(trend, x="month", y="points", labels={"month": "Month", "points": "Points"}, title="Points per month")
    st.plotly_chart(_style_fig(fig_points), use_container_width=True)

with right:
    share = member_share(tasks, members)
    if share.empty:
        st.info("No completed tasks yet.")
    else:
        fig_share = px.pie(share, names="name", values="amount", title="Revenue share", hole=0.5)
        fig_share.update_traces(marker=dict(colors=list(share["color"])))
        st.plotly_chart(_style_fig(fig_share), use_container_width=True)
