"""Helper utilities for logging setup and explorer cell formatting."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

import pandas as pd
from dateutil.relativedelta import relativedelta

from config import DATE_FORMAT, SATS_PER_XEC

MEMPOOL_LABEL = "Mempool"
COINBASE_LABEL = "Coinbase"
HASHRATE_UNITS = ((1e12, 1e9, "GH/s"), (1e15, 1e12, "TH/s"), (1e18, 1e15, "PH/s"))


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once per process."""
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def normalize_text(value: object) -> str:
    """Normalize a value into a stripped string, or empty string for nulls."""
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value).strip()


def render_int(number: float) -> str:
    """Format an integer with thousands separators."""
    return f"{int(number):,}"


def format_byte_size(size: int) -> str:
    """Format a byte count as B, kB or MB."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1000:.2f} kB"
    return f"{size / 1000000:.2f} MB"


def estimate_hashrate(difficulty: float) -> str:
    """Estimate network hashrate from block difficulty, assuming 10 minute blocks."""
    hashrate = difficulty * 0xFFFFFFFF / 600
    for limit, divisor, unit in HASHRATE_UNITS:
        if hashrate < limit:
            return f"{hashrate / divisor:.2f} {unit}"
    return f"{hashrate / 1e18:.2f} EH/s"


def _as_datetime(timestamp: int) -> datetime:
    return datetime.fromtimestamp(int(timestamp), tz=timezone.utc)


def render_age(timestamp: int, now: Optional[datetime] = None) -> str:
    """Render a unix timestamp relative to now, e.g. ``3 hours ago``."""
    if not timestamp:
        return MEMPOOL_LABEL

    now = now or datetime.now(timezone.utc)
    then = _as_datetime(timestamp)
    in_future = then > now
    delta = relativedelta(then, now) if in_future else relativedelta(now, then)

    for amount, unit in (
        (delta.years, "year"),
        (delta.months, "month"),
        (delta.days, "day"),
        (delta.hours, "hour"),
        (delta.minutes, "minute"),
    ):
        if amount == 1:
            label = "an hour" if unit == "hour" else f"a {unit}"
        elif amount:
            label = f"{amount} {unit}s"
        else:
            continue
        return f"in {label}" if in_future else f"{label} ago"

    return "in a few seconds" if in_future else "a few seconds ago"


def render_timestamp(timestamp: int) -> str:
    """Render a unix timestamp as an absolute UTC date."""
    if not timestamp:
        return MEMPOOL_LABEL
    return _as_datetime(timestamp).strftime(DATE_FORMAT)


def minify_hash(value: str, keep: int = 8) -> str:
    """Shorten a hex hash to its first and last ``keep`` characters."""
    if len(value) <= keep * 2:
        return value
    return f"{value[:keep]}...{value[-keep:]}"


def render_amount(amount: float, decimals: int) -> str:
    """Render a base-unit amount with the given number of decimal places."""
    decimals = max(int(decimals or 0), 0)
    return f"{amount / 10 ** decimals:,.{decimals}f}"


def render_sats(sats: int) -> str:
    """Render satoshis as an XEC amount."""
    return f"{sats / SATS_PER_XEC:,.2f}"


def render_fee(is_coinbase: bool, sats_input: int, sats_output: int, size: int) -> str:
    """Render a transaction fee in sats with its fee rate per kB."""
    if is_coinbase:
        return COINBASE_LABEL
    fee = sats_input - sats_output
    if size <= 0:
        return render_int(fee)
    fee_per_kb = round(fee / size * 1000)
    return f"{render_int(fee)} ({render_int(fee_per_kb)}/kB)"

