"""Pagination helpers for URL parameters and block-height windows."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional, Tuple

LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(value: object) -> Optional[int]:
    """Parse the leading integer of a value the way URL parameters are read.

    ``"12"``, ``" 12 "``, ``"12abc"`` and ``"12.9"`` all parse to 12. Values
    without a leading integer return None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)

    match = LEADING_INT_PATTERN.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def validate_pagination_ints(value: object, fallback: int) -> int:
    """Return the parsed value floored at 1, or the fallback when unparseable."""
    parsed = parse_leading_int(value)
    if parsed is None:
        return fallback
    return max(parsed, 1)


@dataclass(frozen=True)
class DataWindow:
    """Block heights to request for one page, newest height first."""

    start_position: int
    end_position: int

    @property
    def is_empty(self) -> bool:
        return self.start_position <= self.end_position or self.start_position < 0

    @property
    def size(self) -> int:
        if self.is_empty:
            return 0
        return self.start_position - self.end_position


def compute_window(parameters, upper_bound: Optional[int] = None) -> DataWindow:
    """Compute the data window for the current page.

    Records are ordered descending from ``end`` down to ``start``. A page past
    the lower bound yields a degenerate window whose ``is_empty`` is true.
    """
    end = parameters.end if parameters.end else (upper_bound or 0)
    start_position = end - (parameters.page * parameters.rows)
    end_position = max(start_position - parameters.rows, parameters.start)
    return DataWindow(start_position, end_position)


def compute_total_pages(total_rows: int, page_size: int) -> int:
    """Compute the total number of pages for the provided page size."""
    if page_size <= 0:
        return 1
    return max(1, math.ceil(total_rows / page_size))


def page_slice(page_number: int, page_size: int) -> Tuple[int, int]:
    """Return start/end row offsets for a zero-based page."""
    start = max(page_number, 0) * page_size
    end = start + page_size
    return start, end
