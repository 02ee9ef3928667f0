"""Single coordinator of URL state, table bindings and the pagination bar."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from config import DEFAULT_PAGE, DEFAULT_VIEWPORT_WIDTH
from services.parameter_store import PaginationParameters, ParameterStore
from services.table_bindings import TableBinding
from utils.pagination import DataWindow, compute_total_pages, compute_window
from utils.slots import SlotPlan, build_slot_plan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InitialLoad:
    pass


@dataclass(frozen=True)
class PageSelected:
    page: int


@dataclass(frozen=True)
class PageSizeChanged:
    rows: int


@dataclass(frozen=True)
class TabSwitched:
    tab: str


@dataclass(frozen=True)
class ViewportResized:
    width: float


Event = Union[InitialLoad, PageSelected, PageSizeChanged, TabSwitched, ViewportResized]


@dataclass
class TabView:
    """One mutually exclusive view: its table and how many records it pages over."""

    name: str
    binding: TableBinding
    total_records: Callable[[], int]
    window_based: bool = False


class RenderOrchestrator:
    """Turns UI events into parameter merges, table loads and pagination redraws.

    Only the active view's binding is ever loaded. Resizes recompute the slot
    plan without touching any table.
    """

    def __init__(
        self,
        store: ParameterStore,
        views: Sequence[TabView],
        render_pagination: Callable[[SlotPlan], None],
        viewport_width: float = DEFAULT_VIEWPORT_WIDTH,
    ) -> None:
        if not views:
            raise ValueError("At least one view is required.")
        self.store = store
        self.views = {view.name: view for view in views}
        self.default_tab = views[0].name
        self.render_pagination = render_pagination
        self.viewport_width = viewport_width
        self.slot_plan: Optional[SlotPlan] = None
        self.last_window: Optional[DataWindow] = None

    @property
    def parameters(self) -> PaginationParameters:
        return self.store.read(self.active_view.name)

    @property
    def active_view(self) -> TabView:
        tab = self.store.read().current_tab
        return self.views.get(tab or "", self.views[self.default_tab])

    def handle_event(self, event: Event) -> None:
        """Apply one UI event; the only entry point that changes pagination state."""
        logger.debug("Handling %s", event)

        if isinstance(event, ViewportResized):
            self.viewport_width = event.width
            self._render_slots()
            return

        if isinstance(event, InitialLoad):
            if self.store.read().current_tab not in self.views:
                self.store.merge({"currentTab": self.default_tab})
        elif isinstance(event, PageSelected):
            self.store.merge({"page": max(int(event.page), DEFAULT_PAGE)})
        elif isinstance(event, PageSizeChanged):
            self.store.merge({"rows": int(event.rows), "page": DEFAULT_PAGE})
        elif isinstance(event, TabSwitched):
            if event.tab not in self.views:
                logger.warning("Ignoring switch to unknown tab %s", event.tab)
                return
            if event.tab == self.active_view.name:
                self._render_slots()
                return
            self.store.merge({"currentTab": event.tab, "page": DEFAULT_PAGE})
        else:
            raise TypeError(f"Unsupported event: {event!r}")

        self._load_active_table()
        self._render_slots()

    def set_upper_bound(self, value: int) -> bool:
        """Adopt the latest known upper bound; True when it changed.

        The next load and slot plan are computed from the new bound.
        """
        if value == self.store.upper_bound:
            return False
        logger.info("Upper bound moved from %s to %s", self.store.upper_bound, value)
        self.store.set_upper_bound(value)
        return True

    def total_pages(self) -> int:
        view = self.active_view
        total = view.binding.total_records
        if total is None:
            total = view.total_records()
        return compute_total_pages(total, self.parameters.rows)

    def _load_active_table(self) -> None:
        view = self.active_view
        parameters = self.parameters

        window = None
        if view.window_based:
            window = compute_window(parameters, self.store.upper_bound)
        self.last_window = window

        view.binding.set_page_length(parameters.rows)
        view.binding.load(parameters, window)

    def _render_slots(self) -> None:
        last_page = self.total_pages()
        current_page = self.parameters.human_page
        self.slot_plan = build_slot_plan(current_page, last_page, self.viewport_width)
        logger.debug(
            "Pagination for page %s of %s at %spx: %s",
            current_page,
            last_page,
            self.viewport_width,
            self.slot_plan.page_array,
        )
        self.render_pagination(self.slot_plan)
