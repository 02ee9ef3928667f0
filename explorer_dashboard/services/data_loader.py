"""Turn explorer API records into display dataframes."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from config import BLOCK_COLUMNS, OUTPOINT_COLUMNS, TOKEN_OUTPOINT_COLUMNS, TRANSACTION_COLUMNS, XEC_TICKER
from utils.helpers import (
    COINBASE_LABEL,
    MEMPOOL_LABEL,
    estimate_hashrate,
    format_byte_size,
    minify_hash,
    render_age,
    render_amount,
    render_fee,
    render_int,
    render_sats,
    render_timestamp,
)

Record = Dict[str, Any]


def blocks_to_frame(records: List[Record], now: Optional[datetime] = None) -> pd.DataFrame:
    """Build the block listing table."""
    rows = [
        {
            "age": render_age(record.get("timestamp", 0), now),
            "height": render_int(record.get("height", 0)),
            "numTxs": render_int(record.get("numTxs", 0)),
            "hash": minify_hash(str(record.get("hash", ""))),
            "size": format_byte_size(int(record.get("size", 0))),
            "hashrate": estimate_hashrate(float(record.get("difficulty", 0))),
            "timestamp": render_timestamp(record.get("timestamp", 0)),
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=BLOCK_COLUMNS)


def _render_token(record: Record) -> str:
    token = record.get("token")
    if not token:
        return ""
    stats = record.get("stats") or {}
    amount = render_amount(stats.get("deltaTokens", 0), token.get("decimals", 0))
    return f"{amount} {token.get('tokenTicker', '')}".strip()


def transactions_to_frame(records: List[Record], now: Optional[datetime] = None) -> pd.DataFrame:
    """Build the address transaction history table."""
    rows = []
    for record in records:
        stats = record.get("stats") or {}
        timestamp = record.get("timestamp", 0)
        rows.append(
            {
                "age": render_age(timestamp, now),
                "timestamp": render_timestamp(timestamp),
                "txHash": str(record.get("txHash", "")),
                "blockHeight": render_int(record.get("blockHeight", 0)) if timestamp else MEMPOOL_LABEL,
                "size": format_byte_size(int(record.get("size", 0))),
                "fee": render_fee(
                    bool(record.get("isCoinbase")),
                    int(stats.get("satsInput", 0)),
                    int(stats.get("satsOutput", 0)),
                    int(record.get("size", 0)),
                ),
                "numInputs": int(record.get("numInputs", 0)),
                "numOutputs": int(record.get("numOutputs", 0)),
                "deltaXec": f"{render_sats(stats.get('deltaSats', 0))} {XEC_TICKER}",
                "token": _render_token(record),
            }
        )
    return pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)


def _render_outpoint(record: Record) -> str:
    outpoint = f"{record.get('txHash', '')}:{record.get('outIdx', 0)}"
    if record.get("isCoinbase"):
        outpoint = f"{outpoint} {COINBASE_LABEL}"
    return outpoint


def outpoints_to_frame(records: List[Record]) -> pd.DataFrame:
    """Build the unspent output table."""
    rows = [
        {
            "outpoint": _render_outpoint(record),
            "blockHeight": render_int(record.get("blockHeight", 0)),
            "xec": f"{render_sats(record.get('satsAmount', 0))} {XEC_TICKER}",
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=OUTPOINT_COLUMNS)


def token_balances(balances: Dict[str, Record]) -> Dict[str, Record]:
    """Balances held in tokens, keyed by token id; the ``main`` XEC balance is left out."""
    return {token_id: balance for token_id, balance in balances.items() if token_id != "main" and balance}


def token_label(token_id: str, balance: Record) -> str:
    token = balance.get("token") or {}
    return token.get("tokenTicker") or minify_hash(token_id)


def token_outpoints_to_frame(records: List[Record], token: Optional[Record] = None) -> pd.DataFrame:
    """Build the unspent output table of one token, amounts in the token's decimals."""
    token = token or {}
    ticker = token.get("tokenTicker", "")
    decimals = token.get("decimals", 0)
    rows = [
        {
            "outpoint": _render_outpoint(record),
            "blockHeight": render_int(record.get("blockHeight", 0)),
            "tokenAmount": f"{render_amount(record.get('tokenAmount', 0), decimals)} {ticker}".strip(),
            "xec": f"{render_sats(record.get('satsAmount', 0))} {XEC_TICKER}",
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=TOKEN_OUTPOINT_COLUMNS)
