"""Tests for event handling across the URL, tables and pagination bar."""

from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlsplit

import pytest

from services.explorer_api import ExplorerApiClient
from services.orchestrator import (
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
from utils.pagination import DataWindow


@pytest.fixture
def blocks_page():
    query = {}
    store = ParameterStore(query, upper_bound=1000)
    fetch_window = MagicMock(return_value=[{"height": 1000}])
    rendered = []
    view = TabView(
        name="blocks",
        binding=ExplicitFetchBinding("blocks-table", fetch_window=fetch_window),
        total_records=lambda: store.upper_bound,
        window_based=True,
    )
    orchestrator = RenderOrchestrator(store, [view], rendered.append, viewport_width=1127)
    return orchestrator, query, fetch_window, rendered


@pytest.fixture
def address_page():
    query = {"address": "ecash:qq"}
    store = ParameterStore(query)
    fetch_url = MagicMock(return_value=[{"txHash": "aa"}])
    fetch_all = MagicMock(return_value=[{"outIdx": index} for index in range(250)])
    rendered = []
    views = [
        TabView(
            name="transactions",
            binding=EndpointBoundBinding("address-txs-table", "http://api/txs", fetch_url),
            total_records=lambda: 420,
        ),
        TabView(
            name="outpoints",
            binding=ExplicitFetchBinding("outpoints-table", fetch_all=fetch_all),
            total_records=lambda: 0,
        ),
    ]
    orchestrator = RenderOrchestrator(store, views, rendered.append, viewport_width=1127)
    return orchestrator, query, fetch_url, fetch_all, rendered


def test_initial_load_fetches_first_window(blocks_page):
    orchestrator, query, fetch_window, rendered = blocks_page

    orchestrator.handle_event(InitialLoad())

    fetch_window.assert_called_once_with(DataWindow(1000, 900))
    assert query["currentTab"] == "blocks"
    assert orchestrator.total_pages() == 10
    assert rendered[-1].current_page == 1
    assert rendered[-1].page_array[0] == 1
    assert rendered[-1].page_array[-1] == 10


def test_page_selected_updates_url_and_window(blocks_page):
    orchestrator, query, fetch_window, rendered = blocks_page
    orchestrator.handle_event(InitialLoad())

    orchestrator.handle_event(PageSelected(3))

    assert query["page"] == "3"
    fetch_window.assert_called_with(DataWindow(800, 700))
    assert orchestrator.last_window == DataWindow(800, 700)
    assert rendered[-1].current_page == 3
    assert 3 in rendered[-1].page_array


def test_page_size_change_resets_page(blocks_page):
    orchestrator, query, fetch_window, rendered = blocks_page
    orchestrator.handle_event(PageSelected(4))

    orchestrator.handle_event(PageSizeChanged(200))

    assert query["rows"] == "200"
    assert query["page"] == "1"
    fetch_window.assert_called_with(DataWindow(1000, 800))
    assert orchestrator.active_view.binding.page_length == 200
    assert orchestrator.total_pages() == 5


def test_resize_recomputes_slots_without_fetching(blocks_page):
    orchestrator, _query, fetch_window, rendered = blocks_page
    orchestrator.handle_event(InitialLoad())
    wide_plan = rendered[-1]

    orchestrator.handle_event(ViewportResized(100))

    assert fetch_window.call_count == 1
    assert len(rendered) == 2
    assert rendered[-1].page_array == (1, 10)
    assert len(wide_plan.page_array) > len(rendered[-1].page_array)


def test_page_past_end_renders_empty_table(blocks_page):
    orchestrator, _query, fetch_window, _rendered = blocks_page

    orchestrator.handle_event(PageSelected(16))

    fetch_window.assert_called_once_with(DataWindow(-500, 0))
    assert orchestrator.last_window.is_empty


def test_initial_load_defaults_to_first_tab(address_page):
    orchestrator, query, fetch_url, fetch_all, _rendered = address_page

    orchestrator.handle_event(InitialLoad())

    assert query["currentTab"] == "transactions"
    assert query["address"] == "ecash:qq"
    fetch_url.assert_called_once_with("http://api/txs?page=0&take=100")
    fetch_all.assert_not_called()
    assert orchestrator.total_pages() == 5


def test_tab_switch_then_resize_does_not_refetch(address_page):
    orchestrator, query, fetch_url, fetch_all, rendered = address_page
    orchestrator.handle_event(InitialLoad())

    orchestrator.handle_event(TabSwitched("outpoints"))
    orchestrator.handle_event(ViewportResized(800))

    assert query["currentTab"] == "outpoints"
    assert fetch_url.call_count == 1
    assert fetch_all.call_count == 1
    assert orchestrator.total_pages() == 3
    assert rendered[-1].page_array[-1] == 3


def test_paging_outpoints_draws_locally(address_page):
    orchestrator, query, fetch_url, fetch_all, _rendered = address_page
    orchestrator.handle_event(InitialLoad())
    orchestrator.handle_event(TabSwitched("outpoints"))

    orchestrator.handle_event(PageSelected(2))

    binding = orchestrator.active_view.binding
    assert query["page"] == "2"
    assert binding.visible_records[0] == {"outIdx": 100}
    assert fetch_all.call_count == 1
    assert fetch_url.call_count == 1


def test_switching_back_reloads_transactions(address_page):
    orchestrator, query, fetch_url, _fetch_all, _rendered = address_page
    orchestrator.handle_event(InitialLoad())
    orchestrator.handle_event(PageSelected(3))
    orchestrator.handle_event(TabSwitched("outpoints"))

    orchestrator.handle_event(TabSwitched("transactions"))

    assert query["page"] == "1"
    assert fetch_url.call_count == 3
    fetch_url.assert_called_with("http://api/txs?page=0&take=100")


def test_switch_to_active_tab_only_redraws_pagination(address_page):
    orchestrator, _query, fetch_url, _fetch_all, rendered = address_page
    orchestrator.handle_event(InitialLoad())

    orchestrator.handle_event(TabSwitched("transactions"))

    assert fetch_url.call_count == 1
    assert len(rendered) == 2


def test_unknown_tab_is_ignored(address_page):
    orchestrator, query, fetch_url, fetch_all, _rendered = address_page
    orchestrator.handle_event(InitialLoad())

    orchestrator.handle_event(TabSwitched("tokens"))

    assert query["currentTab"] == "transactions"
    assert fetch_url.call_count == 1
    fetch_all.assert_not_called()


def test_unknown_tab_in_url_falls_back_to_default(address_page):
    orchestrator, query, fetch_url, _fetch_all, _rendered = address_page
    query["currentTab"] = "tokens"
    orchestrator.store.load()

    orchestrator.handle_event(InitialLoad())

    assert query["currentTab"] == "transactions"
    assert orchestrator.active_view.name == "transactions"
    assert fetch_url.call_count == 1


def test_rows_persist_across_reload(address_page):
    orchestrator, query, fetch_url, _fetch_all, _rendered = address_page
    orchestrator.handle_event(InitialLoad())
    orchestrator.handle_event(PageSizeChanged(50))

    orchestrator.store.load()
    orchestrator.handle_event(InitialLoad())

    assert query["rows"] == "50"
    fetch_url.assert_called_with("http://api/txs?page=0&take=50")


def test_orchestrator_needs_views():
    with pytest.raises(ValueError):
        RenderOrchestrator(ParameterStore({}), [], lambda plan: None)


def test_unsupported_event_raises(blocks_page):
    orchestrator = blocks_page[0]
    with pytest.raises(TypeError):
        orchestrator.handle_event(object())


def test_new_tip_moves_window_and_page_count(blocks_page):
    orchestrator, _query, fetch_window, rendered = blocks_page
    orchestrator.handle_event(InitialLoad())

    assert orchestrator.set_upper_bound(1200) is True
    orchestrator.handle_event(PageSelected(2))

    fetch_window.assert_called_with(DataWindow(1100, 1000))
    assert orchestrator.total_pages() == 12
    assert rendered[-1].page_array[-1] == 12


def test_unchanged_tip_is_not_a_change(blocks_page):
    orchestrator = blocks_page[0]
    assert orchestrator.set_upper_bound(1000) is False


def test_token_outpoints_load_only_when_opened():
    query = {}
    token_utxos = MagicMock(return_value=[{"outIdx": index, "tokenAmount": 5} for index in range(120)])
    views = [
        TabView(
            name="transactions",
            binding=EndpointBoundBinding("address-txs-table", "http://api/txs", MagicMock(return_value=[])),
            total_records=lambda: 0,
        ),
        TabView(
            name="token-abc",
            binding=ExplicitFetchBinding("tokens-coins-table-abc", fetch_all=token_utxos),
            total_records=lambda: 120,
        ),
    ]
    store = ParameterStore(query, page_size_options={"token-abc": [50, 100, 250]})
    orchestrator = RenderOrchestrator(store, views, lambda plan: None, viewport_width=1127)
    orchestrator.handle_event(InitialLoad())
    token_utxos.assert_not_called()

    orchestrator.handle_event(TabSwitched("token-abc"))
    orchestrator.handle_event(PageSizeChanged(50))
    orchestrator.handle_event(PageSelected(3))

    binding = orchestrator.active_view.binding
    assert token_utxos.call_count == 1
    assert orchestrator.total_pages() == 3
    assert binding.visible_records[0]["outIdx"] == 100
    assert len(binding.visible_records) == 20


def test_counted_transactions_reach_the_pagination_bar():
    history = list(range(420))

    def get(url, timeout):
        query = parse_qs(urlsplit(url).query)
        page, take = int(query["page"][0]), int(query["take"][0])
        response = MagicMock()
        response.json.return_value = {
            "data": [{"txHash": f"{index:064x}"} for index in history[page * take:(page + 1) * take]]
        }
        return response

    session = MagicMock()
    session.get.side_effect = get
    tx_count = ExplorerApiClient("http://api", session=session).fetch_address_tx_count("ecash:qq")

    rendered = []
    view = TabView(
        name="transactions",
        binding=EndpointBoundBinding("address-txs-table", "http://api/txs", fetch_url=lambda url: []),
        total_records=lambda: tx_count,
    )
    orchestrator = RenderOrchestrator(ParameterStore({}), [view], rendered.append, viewport_width=1127)
    orchestrator.handle_event(InitialLoad())

    assert tx_count == 420
    assert rendered[-1].page_array[0] == 1
    assert rendered[-1].page_array[-1] == 5
