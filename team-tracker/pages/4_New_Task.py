import streamlit as st

from teamtracker.errors import MalformedTaskError
from teamtracker.runtime import get_clock, get_store
from teamtracker.theme import set_theme
from teamtracker.utils import error_message, format_currency, new_task

set_theme(page_title="New Task", page_icon="➕")

clock = get_clock()
store = get_store()

st.title("New Task")

members = store.list_members()
if not members:
    st.warning("Add a team member in Settings first.")
    st.stop()

names = {m.id: m.name for m in members}

with st.form("new_task_form", clear_on_submit=True):
    title = st.text_input("Title", placeholder="What needs doing?")
    member_id = st.selectbox("Assignee", options=list(names), format_func=lambda mid: names[mid])
    c1, c2 = st.columns(2)
    with c1:
        start = st.date_input("Start", value=clock.today())
    with c2:
        end = st.date_input("End", value=clock.today())
    c3, c4 = st.columns(2)
    with c3:
        amount = st.number_input("Amount (¥)", min_value=0, step=10_000, value=0)
    with c4:
        points = st.number_input("Points", min_value=0, step=1, value=0)
    notes = st.text_area("Notes", height=80)
    submitted = st.form_submit_button("Create task")

if submitted:
    if not title.strip():
        st.error("Title is required.")
    else:
        try:
            task = store.create_task(
                new_task(title, member_id, start, end, amount=amount, points=points, notes=notes),
                by=names[member_id],
            )
        except MalformedTaskError as exc:
            st.error(error_message(exc))
        else:
            st.success(f"Created '{task.title}' for {names[member_id]} ({format_currency(task.amount)}).")
