"""Application configuration constants."""

import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
ASSETS_DIR = ROOT_DIR / "assets"

API_BASE_URL = os.getenv("EXPLORER_API_URL", "http://localhost:3035").rstrip("/")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("EXPLORER_REQUEST_TIMEOUT", "10"))
LOG_LEVEL = os.getenv("EXPLORER_LOG_LEVEL", "INFO")

# Route answering {"data": {"tipHeight": ...}}; the HTML server embeds the tip in its pages instead.
TIP_HEIGHT_PATH = os.getenv("EXPLORER_TIP_HEIGHT_PATH", "/api/blockchain-info")
TIP_HEIGHT_TTL_SECONDS = float(os.getenv("EXPLORER_TIP_TTL", "30"))

DATE_FORMAT = "%b %d, %Y, %H:%M:%S"
XEC_TICKER = "XEC"
SATS_PER_XEC = 100

DEFAULT_PAGE = 1
DEFAULT_ROWS_PER_PAGE = 100
DEFAULT_ORDER = "desc"
ORDER_OPTIONS = ("asc", "desc")

BLOCKS_TAB = "blocks"
TRANSACTIONS_TAB = "transactions"
OUTPOINTS_TAB = "outpoints"
TOKEN_TAB_PREFIX = "token-"
TAB_LABELS = {
    BLOCKS_TAB: "Blocks",
    TRANSACTIONS_TAB: "Transactions",
    OUTPOINTS_TAB: "Outpoints",
}

PAGE_SIZE_OPTIONS = {
    BLOCKS_TAB: [50, 100, 200],
    TRANSACTIONS_TAB: [50, 100, 200],
    OUTPOINTS_TAB: [50, 100, 250, 500, 1000],
}

# Width of the container the pagination bar is laid out in (Semantic UI container).
DEFAULT_VIEWPORT_WIDTH = int(os.getenv("EXPLORER_VIEWPORT_WIDTH", "1127"))
PAGINATION_SLOT_PADDING = 2 * 16
PAGINATION_SLOT_LETTER_WIDTH = 8

BLOCK_COLUMNS = ["age", "height", "numTxs", "hash", "size", "hashrate", "timestamp"]

TRANSACTION_COLUMNS = [
    "age",
    "timestamp",
    "txHash",
    "blockHeight",
    "size",
    "fee",
    "numInputs",
    "numOutputs",
    "deltaXec",
    "token",
]

OUTPOINT_COLUMNS = ["outpoint", "blockHeight", "xec"]
TOKEN_OUTPOINT_COLUMNS = ["outpoint", "blockHeight", "tokenAmount", "xec"]
