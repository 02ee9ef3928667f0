"""Read-only table component for explorer records."""

from __future__ import annotations

from typing import Callable, Dict, List

import pandas as pd
import streamlit as st

from services.table_bindings import TableBinding

FrameBuilder = Callable[[List[dict]], pd.DataFrame]

COLUMN_LABELS: Dict[str, str] = {
    "age": "Age",
    "height": "Height",
    "numTxs": "Transactions",
    "hash": "Block Hash",
    "size": "Size",
    "hashrate": "Est. Hashrate",
    "timestamp": "Date (UTC)",
    "txHash": "Transaction ID",
    "blockHeight": "Block Height",
    "fee": "Fee [sats]",
    "numInputs": "Inputs",
    "numOutputs": "Outputs",
    "deltaXec": "Amount XEC",
    "token": "Amount Token",
    "outpoint": "Outpoint",
    "tokenAmount": "Token amount",
    "xec": "XEC amount",
}


def render_table(binding: TableBinding, build_frame: FrameBuilder) -> None:
    """Render the binding's visible page, or its loading state."""
    if binding.loading:
        st.caption("Loading...")
        return

    page_df = build_frame(binding.visible_records)
    if page_df.empty:
        st.info("No rows available.")
        return

    st.dataframe(
        page_df,
        key=f"{binding.binding_id}_table",
        hide_index=True,
        width="stretch",
        column_config={
            column: st.column_config.Column(COLUMN_LABELS.get(column, column))
            for column in page_df.columns
        },
    )
