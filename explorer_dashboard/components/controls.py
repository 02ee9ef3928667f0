"""Tab, page-size and layout controls."""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence

import streamlit as st


def render_tab_selector(
    tabs: List[str],
    labels: Dict[str, str],
    active_tab: str,
    on_switch: Callable[[str], None],
    key: str = "tab_selector",
) -> None:
    """Render mutually exclusive view tabs and report switches."""
    st.session_state[key] = active_tab
    st.radio(
        "View",
        options=tabs,
        format_func=lambda tab: labels.get(tab, tab),
        key=key,
        horizontal=True,
        label_visibility="collapsed",
        on_change=lambda: on_switch(st.session_state[key]),
    )


def render_page_size_selector(
    options: Sequence[int],
    current_rows: int,
    on_change: Callable[[int], None],
    key: str = "page_size_selector",
) -> None:
    """Render the rows-per-page selector."""
    options = list(options)
    if current_rows not in options:
        options = sorted({*options, current_rows})
    st.session_state[key] = current_rows
    st.selectbox(
        "Rows per page",
        options=options,
        key=key,
        on_change=lambda: on_change(int(st.session_state[key])),
    )


def render_viewport_width_input(
    current_width: float,
    on_resize: Callable[[float], None],
    key: str = "viewport_width",
) -> None:
    """Render the sidebar control for the width the pagination bar lays out in."""
    st.session_state.setdefault(key, int(current_width))
    st.sidebar.number_input(
        "Pagination width (px)",
        min_value=0,
        step=50,
        key=key,
        on_change=lambda: on_resize(float(st.session_state[key])),
    )
