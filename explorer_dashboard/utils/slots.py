"""Page-number slot allocation for the pagination bar."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple

from config import PAGINATION_SLOT_LETTER_WIDTH, PAGINATION_SLOT_PADDING

SMALL_INCREMENTS = (1, 100, 500, 1000, 2000, 4000)
MEDIUM_INCREMENTS = (1, 10, 50, 100, 500, 1000, 2000, 4000)
LARGE_INCREMENTS = (1, 2, 10, 20, 50, 100, 500, 1000, 2000, 4000)


@dataclass(frozen=True)
class SlotPlan:
    """Page numbers to render as links, with the current page marked."""

    current_page: int
    page_array: Tuple[int, ...] = field(default_factory=tuple)


def slot_width(
    last_page: int,
    padding: int = PAGINATION_SLOT_PADDING,
    letter: int = PAGINATION_SLOT_LETTER_WIDTH,
) -> int:
    """Estimate the pixel width of one page button sized for ``last_page``."""
    digits = len(str(max(last_page, 1)))
    return padding + digits * letter


def allocate_slots(
    current_page: int,
    last_page: int,
    available_width: float,
    padding: int = PAGINATION_SLOT_PADDING,
    letter: int = PAGINATION_SLOT_LETTER_WIDTH,
) -> int:
    """Return how many dynamic page slots fit next to the first and last page."""
    del current_page
    first_slot = slot_width(1, padding, letter)
    predicted_slot = slot_width(last_page, padding, letter)

    remaining_width = available_width - first_slot - predicted_slot
    slot_count = math.floor(remaining_width / predicted_slot + 0.5)
    return max(slot_count, 0)


def increments_for(slot_count: int) -> Tuple[int, ...]:
    """Pick the back-loaded step sequence for the available slot count."""
    if slot_count <= 6:
        return SMALL_INCREMENTS
    if slot_count <= 10:
        return MEDIUM_INCREMENTS
    return LARGE_INCREMENTS


def round_to_leading_precision(value: int) -> int:
    """Round to one significant digit less than the value has (847 -> 850).

    Dropping a single significant digit always rounds the units away, half up.
    Single-digit values are returned unchanged.
    """
    if abs(value) < 10:
        return value
    rounded = (abs(value) + 5) // 10 * 10
    return rounded if value >= 0 else -rounded


def _neighbour(value: int, increment: int) -> int:
    if increment >= 10:
        return round_to_leading_precision(value)
    return value


def generate_page_array(current_page: int, last_page: int, slot_count: int) -> List[int]:
    """Walk backward then forward from the current page filling the slots."""
    if slot_count <= 0:
        return []

    increments = increments_for(slot_count)
    page_array: List[int] = []

    for index in range(slot_count // 2):
        if index >= len(increments) or current_page - increments[index] <= 1:
            break
        increment = increments[index]
        page_array.append(_neighbour(current_page - increment, increment))

    page_array.reverse()
    if current_page != 1:
        page_array.append(current_page)

    remaining_slots = slot_count - len(page_array)
    for index in range(remaining_slots):
        if index >= len(increments) or current_page + increments[index] > last_page:
            break
        increment = increments[index]
        page_array.append(_neighbour(current_page + increment, increment))

    if current_page == last_page and page_array:
        page_array.pop()
    return page_array


def build_slots(current_page: int, last_page: int, slot_count: int) -> List[int]:
    """Return the ordered page numbers for the bar, always with 1 and ``last_page``."""
    last_page = max(last_page, 1)
    pages = [1, *generate_page_array(current_page, last_page, slot_count), last_page]
    return sorted({page for page in pages if 1 <= page <= last_page})


def build_slot_plan(current_page: int, last_page: int, available_width: float) -> SlotPlan:
    """Size the bar for ``available_width`` and compute its page numbers."""
    slot_count = allocate_slots(current_page, last_page, available_width)
    return SlotPlan(current_page, tuple(build_slots(current_page, last_page, slot_count)))
