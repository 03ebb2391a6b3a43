"""Tests for page sources (static, file, Chrome DevTools)."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from glimpse_bridge.core.dom.html_document import HtmlDocument
from glimpse_bridge.core.page.sources import ChromeTabPage, HtmlFilePage, StaticHtmlPage
from glimpse_bridge.errors import PageAccessError
from glimpse_bridge.protocols import PageProtocol

WS_URL = "ws://127.0.0.1:9222/devtools/page/T1"

TARGETS = [
    {"type": "service_worker", "url": "https://workflowy.com/sw.js"},
    {"type": "page", "url": "https://example.com/", "webSocketDebuggerUrl": "ws://other"},
    {"type": "page", "url": "https://workflowy.com/#/abc", "webSocketDebuggerUrl": WS_URL},
]


def _response(data: Any) -> MagicMock:
    response = MagicMock()
    response.json.return_value = data
    return response


@pytest.fixture
def chrome_page() -> tuple[ChromeTabPage, MagicMock]:
    """Create a ChromeTabPage with a mocked requests.Session."""
    with patch("glimpse_bridge.core.page.sources.requests.Session") as mock_session_cls:
        mock_session = MagicMock()
        mock_session_cls.return_value = mock_session
        page = ChromeTabPage(port=9333)
    return page, mock_session


def test_pages_satisfy_protocol(tmp_path: Path) -> None:
    assert isinstance(StaticHtmlPage(""), PageProtocol)
    assert isinstance(HtmlFilePage(tmp_path / "x.html"), PageProtocol)


def test_static_page_snapshot(workflowy_html: str) -> None:
    document = StaticHtmlPage(workflowy_html).snapshot()
    assert document.find_node("A") is not None


def test_file_page_rereads_file(workflowy_file: Path) -> None:
    page = HtmlFilePage(workflowy_file)
    assert page.snapshot().find_node("A") is not None

    workflowy_file.write_text("<div projectid='Z'></div>", encoding="utf-8")
    document = page.snapshot()
    assert document.find_node("A") is None
    assert document.find_node("Z") is not None


def test_file_page_missing_file_means_no_target(tmp_path: Path) -> None:
    assert HtmlFilePage(tmp_path / "missing.html").snapshot() is None


def test_find_tab_picks_first_matching_page(chrome_page: tuple[ChromeTabPage, MagicMock]) -> None:
    page, session = chrome_page
    session.get.return_value = _response(TARGETS)

    tab = page.find_tab()

    assert tab is not None
    assert tab["webSocketDebuggerUrl"] == WS_URL
    assert session.get.call_args.args[0] == "http://127.0.0.1:9333/json"


def test_no_matching_tab_means_no_target(chrome_page: tuple[ChromeTabPage, MagicMock]) -> None:
    page, session = chrome_page
    session.get.return_value = _response(TARGETS[:2])

    assert page.snapshot() is None


def test_devtools_unreachable_raises_page_access_error(
    chrome_page: tuple[ChromeTabPage, MagicMock],
) -> None:
    page, session = chrome_page
    session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(PageAccessError, match="unavailable"):
        page.snapshot()


def test_tab_attached_elsewhere_raises(chrome_page: tuple[ChromeTabPage, MagicMock]) -> None:
    page, session = chrome_page
    session.get.return_value = _response([{"type": "page", "url": "https://workflowy.com/"}])

    with pytest.raises(PageAccessError, match="already attached"):
        page.find_tab()


def test_snapshot_captures_outer_html(
    chrome_page: tuple[ChromeTabPage, MagicMock], workflowy_html: str
) -> None:
    page, session = chrome_page
    session.get.return_value = _response(TARGETS)
    ws = MagicMock()
    ws.recv.side_effect = [
        json.dumps({"method": "Runtime.consoleAPICalled", "params": {}}),
        json.dumps({"id": 1, "result": {"result": {"type": "string", "value": workflowy_html}}}),
    ]

    with patch(
        "glimpse_bridge.core.page.sources.websocket.create_connection", return_value=ws
    ) as create:
        document = page.snapshot()

    assert isinstance(document, HtmlDocument)
    assert document.find_node("D1a") is not None
    create.assert_called_once_with(WS_URL, timeout=page.timeout)
    sent = json.loads(ws.send.call_args.args[0])
    assert sent["method"] == "Runtime.evaluate"
    assert sent["params"]["expression"] == "document.documentElement.outerHTML"
    ws.close.assert_called_once()


def test_snapshot_devtools_error_response(chrome_page: tuple[ChromeTabPage, MagicMock]) -> None:
    page, session = chrome_page
    session.get.return_value = _response(TARGETS)
    ws = MagicMock()
    ws.recv.return_value = json.dumps({"id": 1, "error": {"code": -32000, "message": "nope"}})

    with (
        patch("glimpse_bridge.core.page.sources.websocket.create_connection", return_value=ws),
        pytest.raises(PageAccessError, match="nope"),
    ):
        page.snapshot()
    ws.close.assert_called_once()
