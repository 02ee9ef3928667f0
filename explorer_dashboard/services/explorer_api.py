"""HTTP client for the explorer JSON API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlencode

import requests

from config import API_BASE_URL, REQUEST_TIMEOUT_SECONDS, TIP_HEIGHT_PATH
from utils.pagination import DataWindow

logger = logging.getLogger(__name__)


class ExplorerApiError(RuntimeError):
    """Raised when the API answers with an unexpected payload."""


class ExplorerApiClient:
    """Thin wrapper over the explorer's ``/api`` routes.

    HTTP failures surface as ``requests`` exceptions; callers decide how to
    present them.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get_json(self, url: str) -> Dict[str, Any]:
        logger.debug("GET %s", url)
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict) or "data" not in payload:
            raise ExplorerApiError(f"Response from {url} has no data envelope.")
        return payload

    def fetch_url(self, url: str) -> List[Dict[str, Any]]:
        """Fetch the record list behind an endpoint-bound table URL."""
        data = self._get_json(url)["data"]
        if not isinstance(data, list):
            raise ExplorerApiError(f"Expected a record list from {url}.")
        return data

    def fetch_blocks(self, window: DataWindow) -> List[Dict[str, Any]]:
        """Fetch the blocks of ``window``, newest first; empty windows cost no request."""
        if window.is_empty:
            logger.debug("Skipping fetch for empty window %s", window)
            return []
        return self.fetch_url(self.url_for(f"/api/blocks/{window.end_position}/{window.start_position}"))

    def address_transactions_endpoint(self, address: str) -> str:
        return self.url_for(f"/api/address/{quote(address)}/transactions")

    def fetch_address_balances(self, address: str) -> Dict[str, Dict[str, Any]]:
        """Fetch the balances of ``address`` keyed by token id, ``"main"`` for XEC.

        Each balance carries ``satsAmount``, ``tokenAmount`` and its ``utxos``.
        """
        balances = self._get_json(self.url_for(f"/api/address/{quote(address)}/balances"))["data"]
        if not isinstance(balances, dict):
            raise ExplorerApiError(f"Balances for {address} are not keyed by token.")
        return balances

    def fetch_address_utxos(self, address: str) -> List[Dict[str, Any]]:
        """Fetch every unspent output of ``address`` in its native coin."""
        try:
            return list(self.fetch_address_balances(address)["main"]["utxos"])
        except (KeyError, TypeError) as exc:
            raise ExplorerApiError(f"Balances for {address} have no main utxos.") from exc

    def fetch_address_tx_count(self, address: str) -> int:
        """Count an address's transactions.

        The history route only returns the requested page, so with a page size
        of one the ``page`` index addresses a single transaction. The count is
        the first index with no transaction, found by doubling then bisecting.
        """
        endpoint = self.address_transactions_endpoint(address)

        def has_tx(index: int) -> bool:
            return bool(self.fetch_url(f"{endpoint}?{urlencode({'page': index, 'take': 1})}"))

        if not has_tx(0):
            return 0
        low, high = 0, 1
        while has_tx(high):
            low, high = high, high * 2
        while high - low > 1:
            middle = (low + high) // 2
            if has_tx(middle):
                low = middle
            else:
                high = middle
        logger.debug("Address %s has %s transactions", address, low + 1)
        return low + 1

    def fetch_tip_height(self) -> int:
        """Return the height of the current chain tip."""
        payload = self._get_json(self.url_for(TIP_HEIGHT_PATH))
        try:
            return int(payload["data"]["tipHeight"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ExplorerApiError("Blockchain info has no tip height.") from exc
