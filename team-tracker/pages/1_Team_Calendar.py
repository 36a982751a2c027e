import html

import streamlit as st

from teamtracker import dates
from teamtracker.config import get_config
from teamtracker.errors import InvalidTransitionError, MutationFailedError
from teamtracker.models import ReportingWindow
from teamtracker.runtime import get_clock, get_store
from teamtracker.team_calendar import CalendarBoard, build_day_axis, calendar_html, can_complete_on
from teamtracker.theme import set_theme
from teamtracker.utils import error_message, format_currency

set_theme(page_title="Team Calendar", page_icon="📅")

config = get_config()
clock = get_clock()
store = get_store()

# ----- Initialize session state -----
if "calendar_month" not in st.session_state:
    today = clock.today()
    st.session_state.calendar_month = (today.year, today.month)

year, month = st.session_state.calendar_month

if "calendar_board" not in st.session_state:
    st.session_state.calendar_board = CalendarBoard(store, clock, ReportingWindow.for_month(year, month))
    st.session_state.calendar_loaded = False

board: CalendarBoard = st.session_state.calendar_board


def load_month() -> bool:
    try:
        board.show_month(year, month)
    except Exception as exc:  # store unreachable
        st.error(f"Could not load the calendar: {error_message(exc)}")
        if st.button("Retry"):
            st.rerun()
        return False
    st.session_state.calendar_loaded = True
    return True


if not st.session_state.calendar_loaded or board.window != ReportingWindow.for_month(year, month):
    if not load_month():
        st.stop()

# ----- Header: month paging + member filter -----
st.title("Team Calendar")

nav1, nav2, nav3, nav4 = st.columns([0.5, 2, 0.5, 2])
with nav1:
    if st.button("◀", help="Previous month"):
        st.session_state.calendar_month = dates.shift_month(year, month, -1)
        st.rerun()
with nav2:
    st.markdown(f"<h3 class='section-title' style='text-align:center'>{dates.month_dates(year, month)[0].strftime('%B %Y')}</h3>", unsafe_allow_html=True)
with nav3:
    if st.button("▶", help="Next month"):
        st.session_state.calendar_month = dates.shift_month(year, month, 1)
        st.rerun()
with nav4:
    members = board.members
    member_names = {m.id: m.name for m in members}
    selected_member = st.selectbox(
        "Member",
        options=[None] + [m.id for m in members],
        format_func=lambda mid: "Everyone" if mid is None else member_names.get(mid, mid),
    )

days = build_day_axis(year, month, clock)
layout = board.layout(
    days,
    row_height=config.row_height,
    lane_width=config.lane_width,
    max_column_width=config.lane_width * 3,
    selected_member_id=selected_member,
)
st.markdown(calendar_html(layout), unsafe_allow_html=True)

# ----- Close-out: completion control lives on each task's final day -----
st.markdown("<h3 class='section-title'>Close out a day</h3>", unsafe_allow_html=True)
visible_days = [row.day for row in days]
today = clock.today()
default_day = today if today in visible_days else visible_days[-1]
day = st.selectbox(
    "Day",
    options=visible_days,
    index=visible_days.index(default_day),
    format_func=lambda d: f"{dates.format_date_long(d)} ({dates.day_of_week(d)})",
)

closing = [
    b for b in layout.blocks
    if can_complete_on(b.task, day) or (b.completed and b.completion_row == visible_days.index(day))
]
if not closing:
    st.caption("No task ends on this day.")

for block in closing:
    task = block.task
    c1, c2 = st.columns([4, 1])
    with c1:
        st.markdown(
            f"<span class='cal-swatch' style='background:{block.background}'></span>"
            f"**{html.escape(task.title)}** &middot; {html.escape(block.member.name)} &middot; {format_currency(task.amount)}",
            unsafe_allow_html=True,
        )
    with c2:
        label = "Reopen" if block.completed else "Complete"
        if st.button(label, key=f"toggle-{task.id}"):
            try:
                if block.completed:
                    board.reopen(task.id)
                else:
                    board.complete(task.id)
                    st.toast(f"Completed: {task.title}", icon="🎉")
            except MutationFailedError as exc:
                st.session_state.calendar_loaded = False
                st.error(f"Update failed, the calendar will reload from the store. {error_message(exc)}")
                if st.button("Retry", key=f"retry-{task.id}"):
                    st.rerun()
            except InvalidTransitionError as exc:
                st.warning(error_message(exc))
            else:
                st.rerun()

with st.sidebar:
    if st.button("Refresh"):
        load_month()
        st.rerun()
    st.markdown("**Legend**")
    for m in board.members:
        st.markdown(
            f"<span class='cal-swatch' style='background:{m.color}'></span>{html.escape(m.name)}",
            unsafe_allow_html=True,
        )
