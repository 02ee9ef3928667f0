"""Pagination parameters backed by the page URL query string."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, MutableMapping, Optional, Sequence

from config import DEFAULT_ORDER, DEFAULT_PAGE, DEFAULT_ROWS_PER_PAGE, ORDER_OPTIONS, PAGE_SIZE_OPTIONS
from utils.helpers import normalize_text
from utils.pagination import parse_leading_int, validate_pagination_ints

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaginationParameters:
    """Canonical pagination state; ``page`` is zero-based."""

    page: int
    rows: int
    order: str
    start: int
    end: int
    current_tab: Optional[str] = None

    @property
    def human_page(self) -> int:
        return self.page + 1


def _parse_bound(value: object, fallback: int) -> int:
    """Parse a range bound; missing, malformed or zero values use the fallback."""
    parsed = parse_leading_int(value)
    if not parsed:
        return fallback
    return max(parsed, 0)


class ParameterStore:
    """Owns the pagination parameters and writes them through to the URL.

    ``query_params`` is any mutable mapping of strings: ``st.query_params``
    in the app, a plain dict in tests. The store keeps its own copy of the raw
    values, reloaded on navigation with :meth:`load`, so reads never race a
    partially written URL.
    """

    def __init__(
        self,
        query_params: MutableMapping[str, str],
        upper_bound: int = 0,
        default_rows: int = DEFAULT_ROWS_PER_PAGE,
        page_size_options: Optional[Mapping[str, Sequence[int]]] = None,
    ) -> None:
        self._query_params = query_params
        self._upper_bound = upper_bound
        self._default_rows = default_rows
        self._page_size_options = dict(PAGE_SIZE_OPTIONS if page_size_options is None else page_size_options)
        self._raw: Dict[str, str] = {}
        self.load()

    @property
    def upper_bound(self) -> int:
        return self._upper_bound

    def set_upper_bound(self, value: int) -> None:
        """Update the bound ``end`` defaults to, e.g. the current chain tip height."""
        self._upper_bound = max(int(value), 0)

    def load(self) -> None:
        """Re-read raw parameter values from the URL."""
        self._raw = {str(key): normalize_text(value) for key, value in self._query_params.items()}

    def page_size_options(self, scope: Optional[str]) -> Sequence[int]:
        """The rows-per-page values ``scope`` accepts; empty when any size is allowed."""
        return self._page_size_options.get(scope or "", [])

    def read(self, scope: Optional[str] = None) -> PaginationParameters:
        """Parse the current parameters; ``scope`` names the tab whose page sizes apply."""
        page = validate_pagination_ints(self._raw.get("page"), DEFAULT_PAGE) - 1
        rows = validate_pagination_ints(self._raw.get("rows"), self._default_rows)

        tab = normalize_text(self._raw.get("currentTab")) or None
        allowed_rows = self.page_size_options(scope or tab)
        if allowed_rows and rows not in allowed_rows:
            rows = self._default_rows

        order = normalize_text(self._raw.get("order")).lower()
        if order not in ORDER_OPTIONS:
            order = DEFAULT_ORDER

        return PaginationParameters(
            page=page,
            rows=rows,
            order=order,
            start=_parse_bound(self._raw.get("start"), 0),
            end=_parse_bound(self._raw.get("end"), self._upper_bound),
            current_tab=tab,
        )

    get_parameters = read

    def merge(self, patch: Mapping[str, object]) -> PaginationParameters:
        """Merge ``patch`` into the parameters and write the result to the URL.

        Keys absent from ``patch`` are preserved; a ``None`` value removes the
        key. ``page`` in ``patch`` is 1-based, as it appears in the URL.
        """
        merged = dict(self._raw)
        for key, value in patch.items():
            if value is None:
                merged.pop(key, None)
            else:
                merged[key] = normalize_text(value)

        self._raw = merged
        self._write_through(patch)
        logger.debug("Merged pagination parameters %s -> %s", dict(patch), merged)
        return self.read()

    update_parameters = merge

    def _write_through(self, patch: Mapping[str, object]) -> None:
        for key in patch:
            if key in self._raw:
                self._query_params[key] = self._raw[key]
            elif key in self._query_params:
                del self._query_params[key]
