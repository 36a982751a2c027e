"""Per-process wiring shared by the Streamlit pages."""
from __future__ import annotations

import logging

import streamlit as st

from teamtracker.clock import SystemClock
from teamtracker.config import TrackerConfig, get_config
from teamtracker.store import SqlTaskStore
from teamtracker.theme import member_color
from teamtracker.utils import new_task

_logging_configured = False


def configure_logging(config: TrackerConfig) -> None:
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _logging_configured = True


@st.cache_resource
def get_store() -> SqlTaskStore:
    config = get_config()
    configure_logging(config)
    return SqlTaskStore(config.database_url)


def get_clock() -> SystemClock:
    return SystemClock.for_zone(get_config().timezone)


def seed_sample_data(store: SqlTaskStore) -> None:
    """Add a small team and a few tasks when the store is empty."""
    if store.list_members():
        return
    clock = get_clock()
    today = clock.today()
    members = [store.create_member(name, member_color(i)) for i, name in enumerate(["Aiko", "Ben", "Chiara"])]
    samples = [
        ("Website redesign", members[0].id, 0, 4, 450_000, 40),
        ("Quarterly report", members[1].id, 1, 1, 120_000, 10),
        ("Client onboarding", members[0].id, 2, 6, 300_000, 25),
        ("Newsletter", members[2].id, -1, 2, 80_000, 8),
    ]
    for title, member_id, start_offset, length, amount, points in samples:
        start = today.fromordinal(today.toordinal() + start_offset)
        end = start.fromordinal(start.toordinal() + length)
        store.create_task(new_task(title, member_id, start, end, amount=amount, points=points))
