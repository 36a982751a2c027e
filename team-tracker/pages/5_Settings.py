import html

import pandas as pd
import streamlit as st

from teamtracker import dates
from teamtracker.config import get_config
from teamtracker.runtime import get_clock, get_store
from teamtracker.theme import MEMBER_COLORS, set_theme
from teamtracker.utils import error_message, format_currency

set_theme(page_title="Settings", page_icon="⚙️")

config = get_config()
clock = get_clock()
store = get_store()

st.title("Settings")

goals_tab, members_tab = st.tabs(["Monthly goals", "Members"])

with goals_tab:
    today = clock.today()
    month_options = [
        f"{y:04d}-{m:02d}"
        for y, m in (dates.shift_month(today.year, today.month, offset) for offset in range(-1, 4))
    ]
    month = st.selectbox("Month", month_options, index=1)
    goal = store.get_goal(month)

    with st.form("goal_form"):
        target_amount = st.number_input(
            "Revenue target (¥)",
            min_value=0,
            step=100_000,
            value=goal.target_amount if goal else config.default_target_amount,
        )
        target_points = st.number_input(
            "Points target",
            min_value=0,
            step=10,
            value=goal.target_points if goal else config.default_target_points,
        )
        if st.form_submit_button("Save goal"):
            try:
                saved = store.upsert_goal(month, int(target_amount), int(target_points))
            except Exception as exc:  # surface store errors on the page
                st.error(error_message(exc))
            else:
                st.success(f"{saved.month}: {format_currency(saved.target_amount)} / {saved.target_points}pt")

    goals = store.list_goals()
    if goals:
        st.dataframe(
            pd.DataFrame(
                [{"Month": g.month, "Revenue": g.target_amount, "Points": g.target_points} for g in goals]
            ),
            hide_index=True,
            use_container_width=True,
        )

with members_tab:
    members = store.list_members()
    for m in members:
        st.markdown(f"<span class='cal-swatch' style='background:{m.color}'></span>{html.escape(m.name)}", unsafe_allow_html=True)

    with st.form("member_form", clear_on_submit=True):
        name = st.text_input("Name")
        color = st.color_picker("Color", value=MEMBER_COLORS[len(members) % len(MEMBER_COLORS)])
        if st.form_submit_button("Add member"):
            if not name.strip():
                st.error("Name is required.")
            else:
                store.create_member(name.strip(), color)
                st.rerun()
