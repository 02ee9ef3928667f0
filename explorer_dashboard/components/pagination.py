"""Pagination bar component."""

from __future__ import annotations

from typing import Callable, Optional

import streamlit as st

from utils.slots import SlotPlan


class PaginationBar:
    """Renders the latest slot plan as one button per page number.

    The orchestrator hands every recomputed plan to :meth:`update`; the page
    script paints it once per run with :meth:`draw`.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        self.plan: Optional[SlotPlan] = None
        self.render_count = 0

    def update(self, plan: SlotPlan) -> None:
        self.plan = plan
        self.render_count += 1

    __call__ = update

    def draw(self, on_select: Callable[[int], None]) -> None:
        """Draw the bar; the current page is shown but not clickable."""
        if self.plan is None or len(self.plan.page_array) <= 1:
            return

        columns = st.columns(len(self.plan.page_array))
        for column, page_number in zip(columns, self.plan.page_array):
            is_current = page_number == self.plan.current_page
            with column:
                st.button(
                    str(page_number),
                    key=f"{self.key}_page_{page_number}",
                    type="primary" if is_current else "secondary",
                    disabled=is_current,
                    on_click=on_select,
                    args=(page_number,),
                )
