import os

import streamlit as st
from streamlit.errors import StreamlitAPIException

# Pastel palette handed out to members in creation order.
MEMBER_COLORS = [
    "#FFB3BA",  # pink
    "#BAFFC9",  # green
    "#BAE1FF",  # blue
    "#FFFFBA",  # yellow
    "#FFDFBA",  # orange
    "#E0BBE4",  # purple
    "#957DAD",  # lavender
    "#D4A5A5",  # dusty rose
]

DARK_TEXT = "#1e293b"
LIGHT_TEXT = "#f8fafc"


def member_color(index: int) -> str:
    return MEMBER_COLORS[index % len(MEMBER_COLORS)]


def contrast_color(hex_color: str) -> str:
    """Foreground colour readable on ``hex_color`` (dark on light, light on dark)."""
    raw = hex_color.lstrip("#")
    if len(raw) == 3:
        raw = "".join(c * 2 for c in raw)
    try:
        r, g, b = int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16)
    except ValueError:
        return DARK_TEXT
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return DARK_TEXT if luminance > 0.5 else LIGHT_TEXT


def set_theme(
    page_title: str = "Team Tracker",
    page_icon: str = "📅",
    layout: str = "wide",
    initial_sidebar_state: str = "expanded",
):
    """Configure the Streamlit page and inject the shared tracker CSS.

    Safe to call once at the top of each page. Later calls are ignored by
    Streamlit for page_config but the CSS is injected again.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except StreamlitAPIException:
        # set_page_config may only run once per page
        pass

    theme_file = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "assets", "tracker_theme.css")
    try:
        with open(theme_file, "r", encoding="utf-8") as f:
            st.markdown(f"<style>{f.read()}</style>", unsafe_allow_html=True)
    except FileNotFoundError:
        st.error(f"Theme file not found at {theme_file}. Please check the file path.")
