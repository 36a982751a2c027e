import html
from datetime import date

import streamlit as st

from teamtracker import dates
from teamtracker.errors import InvalidTransitionError, MutationFailedError
from teamtracker.models import TaskStatus, visible_tasks
from teamtracker.runtime import get_clock, get_store
from teamtracker.status import can_transition, commit_transition
from teamtracker.summary import pending_queue
from teamtracker.theme import contrast_color, set_theme
from teamtracker.utils import error_message, format_currency

set_theme(page_title="Pending Tasks", page_icon="⏳")

clock = get_clock()
store = get_store()

# closed tasks listed under the queue
CLOSED_LIMIT = 20

ACTIONS = (
    ("Complete", TaskStatus.COMPLETED),
    ("Reopen", TaskStatus.PENDING),
    ("Cancel", TaskStatus.CANCELLED),
    ("Delete", TaskStatus.DELETED),
)

st.title("Pending Tasks")

try:
    tasks = store.list_tasks()
    members = {m.id: m for m in store.list_members()}
except Exception as exc:  # store unreachable
    st.error(f"Could not load tasks: {error_message(exc)}")
    if st.button("Retry"):
        st.rerun()
    st.stop()


def task_row(task, flag: str = "") -> None:
    member = members.get(task.member_id)
    color = member.color if member else "#dfe6e9"
    owner = html.escape(member.name) if member else "Unassigned"
    span = task.span
    when = "No date"
    if span:
        start, end = span
        when = dates.format_date_long(start) if start == end else f"{dates.format_date_long(start)} → {dates.format_date_long(end)}"

    actions = [(label, status) for label, status in ACTIONS if can_transition(task.status, status)]
    cols = st.columns([5] + [1] * len(actions))
    with cols[0]:
        st.markdown(
            f"<span style='background:{color};color:{contrast_color(color)};border-radius:8px;padding:1px 8px;font-size:.75rem'>"
            f"{owner}</span> **{html.escape(task.title)}** &middot; {format_currency(task.amount)} &middot; "
            f"{task.points}pt  \n<span style='font-size:.8rem;color:#8395a7'>{when}</span>{flag}",
            unsafe_allow_html=True,
        )
    for col, (label, status) in zip(cols[1:], actions):
        with col:
            if st.button(label, key=f"{status.value}-{task.id}"):
                try:
                    commit_transition(store, task, status, clock)
                except (MutationFailedError, InvalidTransitionError) as exc:
                    st.error(error_message(exc))
                else:
                    st.rerun()


queue = pending_queue(tasks, clock)
if not queue:
    st.success("Nothing pending. 🎉")

for item in queue:
    flag = ""
    if item.is_overdue:
        flag = " <span class='tt-overdue'>overdue</span>"
    elif item.is_due_today:
        flag = " <span class='tt-due-today'>due today</span>"
    task_row(item.task, flag)

closed = [t for t in visible_tasks(tasks) if t.status in (TaskStatus.COMPLETED, TaskStatus.CANCELLED)]
closed.sort(key=lambda t: t.end_date or t.start_date or date.min, reverse=True)
if closed:
    st.markdown("<h3 class='section-title'>Completed and cancelled</h3>", unsafe_allow_html=True)
    for task in closed[:CLOSED_LIMIT]:
        task_row(task)
