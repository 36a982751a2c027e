import html

import pandas as pd
import streamlit as st

from teamtracker import dates
from teamtracker.clock import to_local_date
from teamtracker.config import get_config
from teamtracker.models import ReportingWindow
from teamtracker.runtime import get_clock, get_store, seed_sample_data
from teamtracker.summary import analyst_insight, percentage, recent_activity, summarize
from teamtracker.theme import set_theme
from teamtracker.utils import error_message, format_currency, format_number

set_theme(page_title="Team Tracker", page_icon="📈")

config = get_config()
clock = get_clock()
store = get_store()
seed_sample_data(store)


def meter(label: str, completed: int, pending: int, target: int, fmt) -> None:
    done_pct = percentage(completed, target)
    outlook_pct = percentage(completed + pending, target)
    st.markdown(
        f"""
        <div class='tt-kpi-box'>
          <div class='tt-kpi-label'>{label}</div>
          <div class='tt-kpi-value'>{fmt(completed)}</div>
          <div class='tt-meter'>
            <div class='tt-meter-pending' style='width:{outlook_pct}%'></div>
            <div class='tt-meter-done' style='width:{done_pct}%'></div>
          </div>
          <div style='display:flex;justify-content:space-between;font-size:.75rem;color:#51658a;margin-top:6px'>
            <span>{done_pct}% done &middot; {outlook_pct}% with pending</span>
            <span>target {fmt(target)}</span>
          </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


today = clock.today()
window = ReportingWindow.for_month(today.year, today.month)
month = dates.format_month(today)

st.title("Team Tracker")
st.caption(f"{today.strftime('%B %Y')} overview")

try:
    tasks = store.list_tasks(window=window)
    all_tasks = store.list_tasks()
    members = store.list_members()
    goal = store.get_goal(month)
except Exception as exc:  # store unreachable; keep the page alive
    st.error(f"Could not load data: {error_message(exc)}")
    if st.button("Retry"):
        st.rerun()
    st.stop()

target_amount = goal.target_amount if goal else config.default_target_amount
target_points = goal.target_points if goal else config.default_target_points
summary = summarize(tasks, window)

c1, c2 = st.columns(2)
with c1:
    meter("Revenue", summary.completed_amount, summary.pending_amount, target_amount, format_currency)
with c2:
    meter(
        "Points",
        summary.completed_points,
        summary.pending_points,
        target_points,
        lambda n: f"{format_number(n)}pt",
    )

st.markdown("<h3 class='section-title'>Insight</h3>", unsafe_allow_html=True)
st.markdown(
    f"<div class='tt-insight'>{analyst_insight(summary, target_amount, target_points, clock, members)}</div>",
    unsafe_allow_html=True,
)

left, right = st.columns([3, 2])
with left:
    st.markdown("<h3 class='section-title'>By member</h3>", unsafe_allow_html=True)
    names = {m.id: m.name for m in members}
    member_rows = [
        {
            "Member": names.get(ms.member_id, ms.member_id),
            "Completed": ms.completed_amount,
            "Pending": ms.pending_amount,
            "Points (done)": ms.completed_points,
            "Points (pending)": ms.pending_points,
        }
        for ms in sorted(summary.per_member, key=lambda m: m.completed_amount, reverse=True)
    ]
    if member_rows:
        st.dataframe(pd.DataFrame(member_rows), hide_index=True, use_container_width=True)
    else:
        st.info("Nothing scheduled this month yet.")

with right:
    st.markdown("<h3 class='section-title'>Recent activity</h3>", unsafe_allow_html=True)
    recent = recent_activity(all_tasks, limit=config.recent_activity_limit)
    if not recent:
        st.write("No completed tasks yet.")
    for task in recent:
        done_day = to_local_date(task.completed_at, clock.tz)
        st.markdown(
            f"**{html.escape(task.title)}** &middot; {format_currency(task.amount)}  \n"
            f"<span style='color:#8395a7;font-size:.8rem'>{dates.format_date_long(done_day)}</span>",
            unsafe_allow_html=True,
        )
