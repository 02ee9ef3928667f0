"""Streamlit app entrypoint for the Block Explorer."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, List, Tuple

import requests
import streamlit as st

from components.controls import render_page_size_selector, render_tab_selector, render_viewport_width_input
from components.navbar import render_navbar
from components.pagination import PaginationBar
from components.table import FrameBuilder, render_table
from config import (
    ASSETS_DIR,
    BLOCKS_TAB,
    DEFAULT_VIEWPORT_WIDTH,
    LOG_LEVEL,
    OUTPOINTS_TAB,
    PAGE_SIZE_OPTIONS,
    TAB_LABELS,
    TIP_HEIGHT_TTL_SECONDS,
    TOKEN_TAB_PREFIX,
    TRANSACTIONS_TAB,
)
from services.data_loader import (
    blocks_to_frame,
    outpoints_to_frame,
    token_balances,
    token_label,
    token_outpoints_to_frame,
    transactions_to_frame,
)
from services.explorer_api import ExplorerApiClient, ExplorerApiError
from services.orchestrator import (
    Event,
    InitialLoad,
    PageSelected,
    PageSizeChanged,
    RenderOrchestrator,
    TabSwitched,
    TabView,
    ViewportResized,
)
from services.parameter_store import ParameterStore
from services.table_bindings import EndpointBoundBinding, ExplicitFetchBinding
from utils.helpers import configure_logging, normalize_text


st.set_page_config(page_title="Block Explorer", layout="wide")


@dataclass
class ExplorerPage:
    """Per-page state kept across reruns of the script."""

    key: str
    store: ParameterStore
    orchestrator: RenderOrchestrator
    pagination_bar: PaginationBar
    frame_builders: Dict[str, FrameBuilder] = field(default_factory=dict)
    tab_labels: Dict[str, str] = field(default_factory=dict)
    tip_height: int = 0
    address: str = ""


def load_css() -> None:
    """Load app-level CSS styling from the assets directory."""
    css_path = ASSETS_DIR / "styles.css"
    if css_path.exists():
        with css_path.open("r", encoding="utf-8") as css_file:
            st.markdown(f"<style>{css_file.read()}</style>", unsafe_allow_html=True)


def init_session_state() -> None:
    """Initialize required session-state variables."""
    st.session_state.setdefault("pending_events", [])
    st.session_state.setdefault("pages", {})


def queue_event(event: Event) -> None:
    """Queue a UI event for dispatch on the next render pass."""
    st.session_state["pending_events"].append(event)


def drain_events() -> List[Event]:
    """Take the queued UI events, leaving the queue empty."""
    events: List[Event] = st.session_state.get("pending_events", [])
    st.session_state["pending_events"] = []
    return events


def open_address() -> None:
    """Navigate to the address typed in the sidebar, dropping old pagination."""
    address = normalize_text(st.session_state.get("address_search"))
    st.query_params.clear()
    if address:
        st.query_params["address"] = address


def open_blocks() -> None:
    """Navigate back to the block listing."""
    st.session_state["address_search"] = ""
    st.query_params.clear()


@st.cache_resource(show_spinner=False)
def get_api_client() -> ExplorerApiClient:
    """Shared API client, one HTTP session per server process."""
    return ExplorerApiClient()


@st.cache_data(ttl=TIP_HEIGHT_TTL_SECONDS, show_spinner=False)
def get_tip_height(_api: ExplorerApiClient) -> int:
    """Latest chain tip height, asked for again once the cached value expires."""
    return _api.fetch_tip_height()


def build_blocks_page(api: ExplorerApiClient) -> ExplorerPage:
    """Block listing: one window-based table over heights below the chain tip."""
    tip_height = get_tip_height(api)
    store = ParameterStore(st.query_params, upper_bound=tip_height)
    pagination_bar = PaginationBar(key=BLOCKS_TAB)
    blocks_view = TabView(
        name=BLOCKS_TAB,
        binding=ExplicitFetchBinding("blocks-table", fetch_window=api.fetch_blocks),
        total_records=lambda: store.upper_bound,
        window_based=True,
    )
    orchestrator = RenderOrchestrator(
        store,
        [blocks_view],
        pagination_bar,
        viewport_width=st.session_state.get("viewport_width", DEFAULT_VIEWPORT_WIDTH),
    )
    return ExplorerPage(
        key=BLOCKS_TAB,
        store=store,
        orchestrator=orchestrator,
        pagination_bar=pagination_bar,
        frame_builders={BLOCKS_TAB: blocks_to_frame},
        tab_labels={BLOCKS_TAB: TAB_LABELS[BLOCKS_TAB]},
        tip_height=tip_height,
    )


def build_token_view(token_id: str, balance: Dict[str, Any]) -> TabView:
    """Outpoints of one token balance, drawn the first time its tab is opened."""
    utxos = list(balance.get("utxos") or [])
    return TabView(
        name=f"{TOKEN_TAB_PREFIX}{token_id}",
        binding=ExplicitFetchBinding(f"tokens-coins-table-{token_id}", fetch_all=lambda: utxos),
        total_records=lambda: len(utxos),
    )


def build_address_page(api: ExplorerApiClient, address: str) -> ExplorerPage:
    """Address page: transaction history, unspent outputs and one tab per token held."""
    tx_count = api.fetch_address_tx_count(address)
    tokens = token_balances(api.fetch_address_balances(address))

    views = [
        TabView(
            name=TRANSACTIONS_TAB,
            binding=EndpointBoundBinding(
                "address-txs-table",
                api.address_transactions_endpoint(address),
                fetch_url=api.fetch_url,
            ),
            total_records=lambda: tx_count,
        ),
        TabView(
            name=OUTPOINTS_TAB,
            binding=ExplicitFetchBinding(
                "outpoints-table",
                fetch_all=lambda: api.fetch_address_utxos(address),
            ),
            total_records=lambda: 0,
        ),
    ]
    page_size_options = dict(PAGE_SIZE_OPTIONS)
    tab_labels = {name: TAB_LABELS[name] for name in (TRANSACTIONS_TAB, OUTPOINTS_TAB)}
    frame_builders: Dict[str, FrameBuilder] = {
        TRANSACTIONS_TAB: transactions_to_frame,
        OUTPOINTS_TAB: outpoints_to_frame,
    }
    for token_id, balance in tokens.items():
        view = build_token_view(token_id, balance)
        views.append(view)
        page_size_options[view.name] = PAGE_SIZE_OPTIONS[OUTPOINTS_TAB]
        tab_labels[view.name] = f"{token_label(token_id, balance)} coins"
        frame_builders[view.name] = partial(token_outpoints_to_frame, token=balance.get("token"))

    store = ParameterStore(st.query_params, page_size_options=page_size_options)
    pagination_bar = PaginationBar(key=f"address_{address}")
    orchestrator = RenderOrchestrator(
        store,
        views,
        pagination_bar,
        viewport_width=st.session_state.get("viewport_width", DEFAULT_VIEWPORT_WIDTH),
    )
    return ExplorerPage(
        key=f"address:{address}",
        store=store,
        orchestrator=orchestrator,
        pagination_bar=pagination_bar,
        frame_builders=frame_builders,
        tab_labels=tab_labels,
        address=address,
    )


def get_page(key: str, factory: Callable[[], ExplorerPage]) -> Tuple[ExplorerPage, bool]:
    """Return the cached page for ``key``, building it on first visit."""
    pages: Dict[str, ExplorerPage] = st.session_state["pages"]
    if key in pages:
        return pages[key], False
    page = factory()
    pages[key] = page
    return page, True


def render_sidebar(address: str) -> None:
    """Render address search, navigation back to blocks and the layout width."""
    st.sidebar.markdown("## Search")
    st.session_state.setdefault("address_search", address)
    st.sidebar.text_input("Address", key="address_search", on_change=open_address)
    if address:
        st.sidebar.button("Back to blocks", on_click=open_blocks)
    render_viewport_width_input(
        DEFAULT_VIEWPORT_WIDTH,
        on_resize=lambda width: queue_event(ViewportResized(width)),
    )


def main() -> None:
    """Render and run the Block Explorer."""
    configure_logging(LOG_LEVEL)
    load_css()
    init_session_state()

    address = normalize_text(st.query_params.get("address"))
    render_sidebar(address)
    api = get_api_client()

    try:
        if address:
            page, is_new = get_page(f"address:{address}", lambda: build_address_page(api, address))
        else:
            page, is_new = get_page(BLOCKS_TAB, lambda: build_blocks_page(api))

        page.store.load()
        events = drain_events()
        if is_new or st.session_state.get("current_page") != page.key:
            st.session_state["current_page"] = page.key
            events.insert(0, InitialLoad())
        if not address:
            page.tip_height = get_tip_height(api)
            if page.orchestrator.set_upper_bound(page.tip_height) and not events:
                events.append(InitialLoad())
        for event in events:
            page.orchestrator.handle_event(event)
    except (requests.RequestException, ExplorerApiError) as exc:
        st.error(f"Explorer API request failed: {exc}")
        st.stop()

    orchestrator = page.orchestrator
    view = orchestrator.active_view
    parameters = orchestrator.parameters

    render_navbar(page.tip_height or None, page.address or None)

    if len(orchestrator.views) > 1:
        render_tab_selector(
            list(orchestrator.views),
            page.tab_labels,
            view.name,
            on_switch=lambda tab: queue_event(TabSwitched(tab)),
        )

    st.markdown(f"### {page.tab_labels.get(view.name, view.name)}")
    render_page_size_selector(
        page.store.page_size_options(view.name),
        parameters.rows,
        on_change=lambda rows: queue_event(PageSizeChanged(rows)),
        key=f"{view.name}_page_size",
    )
    render_table(view.binding, page.frame_builders[view.name])
    page.pagination_bar.draw(on_select=lambda number: queue_event(PageSelected(number)))


if __name__ == "__main__":
    main()
