"""Top navigation bar component."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import streamlit as st

from utils.helpers import minify_hash, render_int


def render_navbar(tip_height: Optional[int] = None, address: Optional[str] = None) -> None:
    """Render explorer header with chain tip, current address and timestamp."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    context = f"Address: {minify_hash(address)}" if address else "Blocks"
    tip = f"Tip: {render_int(tip_height)}" if tip_height is not None else "Tip: unknown"
    st.markdown(
        f"""
        <div class="navbar">
            <div class="navbar-title">Block Explorer</div>
            <div class="navbar-meta">{context} | {tip} | {timestamp}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )
