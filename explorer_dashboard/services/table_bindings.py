"""Uniform handles over the dashboard's table widgets.

Two shapes of table exist on the explorer pages. An endpoint-bound table is
pointed at an API URL and refetches whenever it is rebound. An explicit table
is fed records the caller fetched for a computed block window, or fetches its
whole record list once and pages through it locally.

Every binding numbers its requests. Only the response to the latest request
is applied, so a slow response never overwrites a newer page.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlencode

from utils.pagination import DataWindow, page_slice

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
LoadListener = Callable[["TableBinding"], None]


class TableBinding:
    """Loading, page-length and record state of one table."""

    def __init__(self, binding_id: str) -> None:
        self.binding_id = binding_id
        self.page_length: Optional[int] = None
        self.page = 0
        self.order = "desc"
        self.loading = False
        self.records: List[Record] = []
        self.load_count = 0
        self._issued_sequence = 0
        self._listeners: List[LoadListener] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.binding_id!r})"

    @property
    def total_records(self) -> Optional[int]:
        """Total record count when the binding knows it, otherwise None."""
        return None

    @property
    def visible_records(self) -> List[Record]:
        if self.order == "asc":
            return list(reversed(self.records))
        return list(self.records)

    def on_load_complete(self, listener: LoadListener) -> None:
        """Call ``listener`` with this binding after every applied response."""
        self._listeners.append(listener)

    def set_page_length(self, length: int) -> None:
        """Set how many rows one page of the table shows."""
        self.page_length = max(int(length), 1)

    def show_loading(self, status: bool) -> None:
        """Toggle the table's loading indicator."""
        self.loading = bool(status)

    def begin_request(self) -> int:
        """Issue a new request number and enter the loading state."""
        self._issued_sequence += 1
        self.load_count += 1
        self.show_loading(True)
        return self._issued_sequence

    def is_current(self, sequence: int) -> bool:
        return sequence == self._issued_sequence

    def apply_response(self, sequence: int, records: List[Record]) -> bool:
        """Redraw with ``records`` if ``sequence`` is the latest request issued."""
        if not self.is_current(sequence):
            logger.debug(
                "Discarding stale response %s for %s (latest %s)",
                sequence,
                self.binding_id,
                self._issued_sequence,
            )
            return False

        self.records = list(records)
        self.show_loading(False)
        for listener in self._listeners:
            listener(self)
        return True

    def load(self, parameters, window: Optional[DataWindow] = None) -> None:
        raise NotImplementedError

    def _track(self, parameters) -> None:
        self.page = parameters.page
        self.order = parameters.order


class EndpointBoundBinding(TableBinding):
    """A table bound to an API endpoint; rebinding the URL refetches it."""

    def __init__(self, binding_id: str, endpoint: str, fetch_url: Callable[[str], List[Record]]) -> None:
        super().__init__(binding_id)
        self.endpoint = endpoint
        self.url: Optional[str] = None
        self._fetch_url = fetch_url

    def bind(self, url: str) -> None:
        """Point the table at ``url`` and redraw it with the response."""
        self.url = url
        sequence = self.begin_request()
        logger.info("Loading %s from %s", self.binding_id, url)
        self.apply_response(sequence, self._fetch_url(url))

    def load(self, parameters, window: Optional[DataWindow] = None) -> None:
        self._track(parameters)
        query = urlencode({"page": parameters.page, "take": parameters.rows})
        self.bind(f"{self.endpoint}?{query}")


class ExplicitFetchBinding(TableBinding):
    """A table redrawn from records handed to it after an explicit fetch.

    With ``fetch_window`` each load requests the records of the computed
    window. With ``fetch_all`` the full record list is fetched on first load
    and later pages are drawn from it without another request.
    """

    def __init__(
        self,
        binding_id: str,
        fetch_window: Optional[Callable[[DataWindow], List[Record]]] = None,
        fetch_all: Optional[Callable[[], List[Record]]] = None,
    ) -> None:
        if (fetch_window is None) == (fetch_all is None):
            raise ValueError("Provide exactly one of fetch_window or fetch_all.")
        super().__init__(binding_id)
        self._fetch_window = fetch_window
        self._fetch_all = fetch_all
        self._fetched_all = False

    @property
    def pages_locally(self) -> bool:
        return self._fetch_all is not None

    @property
    def total_records(self) -> Optional[int]:
        if self.pages_locally and self._fetched_all:
            return len(self.records)
        return None

    @property
    def visible_records(self) -> List[Record]:
        if not self.pages_locally:
            return super().visible_records
        start, end = page_slice(self.page, self.page_length or len(self.records) or 1)
        rows = self.records[start:end]
        return list(reversed(rows)) if self.order == "asc" else rows

    def parse(self, records: List[Record], sequence: Optional[int] = None) -> bool:
        """Redraw with ``records``; without a sequence they answer the latest request."""
        if sequence is None:
            sequence = self._issued_sequence
        return self.apply_response(sequence, records)

    def load(self, parameters, window: Optional[DataWindow] = None) -> None:
        self._track(parameters)

        if self.pages_locally:
            if self._fetched_all:
                logger.debug("Drawing page %s of %s locally", parameters.human_page, self.binding_id)
                return
            sequence = self.begin_request()
            logger.info("Loading all records for %s", self.binding_id)
            records = self._fetch_all()
            self._fetched_all = self.parse(records, sequence)
            return

        if window is None:
            raise ValueError(f"{self.binding_id} needs a data window to load.")
        sequence = self.begin_request()
        logger.info(
            "Loading %s window %s..%s",
            self.binding_id,
            window.start_position,
            window.end_position,
        )
        self.parse(self._fetch_window(window), sequence)

    def invalidate(self) -> None:
        """Forget locally paged records so the next load fetches them again."""
        self._fetched_all = False
