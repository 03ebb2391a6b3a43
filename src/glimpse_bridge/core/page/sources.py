"""Page sources: where the bridge gets the live document from."""

import itertools
import json
from pathlib import Path
from typing import Any

import requests
import websocket  # websocket-client
from loguru import logger

from glimpse_bridge.config import (
    DEVTOOLS_HOST,
    DEVTOOLS_PORT,
    DEVTOOLS_TIMEOUT,
    TARGET_URL_PATTERN,
)
from glimpse_bridge.core.dom.html_document import HtmlDocument
from glimpse_bridge.errors import PageAccessError

_OUTER_HTML_EXPRESSION = "document.documentElement.outerHTML"


class StaticHtmlPage:
    """A page whose HTML never changes."""

    def __init__(self, html: str) -> None:
        self.html = html

    def snapshot(self) -> HtmlDocument:
        return HtmlDocument(self.html)


class HtmlFilePage:
    """A page saved to disk, re-read on every snapshot."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def snapshot(self) -> HtmlDocument | None:
        try:
            html = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Page file not found: {}", self.path)
            return None
        return HtmlDocument(html)


class ChromeTabPage:
    """The first matching tab of a Chromium browser, via DevTools.

    The browser must run with ``--remote-debugging-port``. Each snapshot
    captures the tab's current outerHTML.
    """

    def __init__(
        self,
        *,
        host: str = DEVTOOLS_HOST,
        port: int = DEVTOOLS_PORT,
        url_pattern: str = TARGET_URL_PATTERN,
        timeout: float = DEVTOOLS_TIMEOUT,
    ) -> None:
        self.host = host
        self.port = port
        self.url_pattern = url_pattern
        self.timeout = timeout
        self.sess = requests.Session()
        self._msg_ids = itertools.count(1)

    def snapshot(self) -> HtmlDocument | None:
        tab = self.find_tab()
        if tab is None:
            return None
        return HtmlDocument(self._capture_html(tab["webSocketDebuggerUrl"]))

    def find_tab(self) -> dict[str, Any] | None:
        """Return the first page target whose URL matches, or None."""
        try:
            r = self.sess.get(f"http://{self.host}:{self.port}/json", timeout=self.timeout)
            r.raise_for_status()
            targets: list[dict[str, Any]] = r.json()
        except requests.RequestException as e:
            msg = f"DevTools endpoint {self.host}:{self.port} unavailable: {e}"
            raise PageAccessError(msg) from e

        for target in targets:
            if target.get("type") == "page" and self.url_pattern in target.get("url", ""):
                if "webSocketDebuggerUrl" not in target:
                    msg = f"Tab {target.get('url')!r} is already attached to another debugger"
                    raise PageAccessError(msg)
                logger.debug("Using tab {}", target.get("url"))
                return target
        return None

    def _capture_html(self, ws_url: str) -> str:
        try:
            ws = websocket.create_connection(ws_url, timeout=self.timeout)
        except (websocket.WebSocketException, OSError) as e:
            msg = f"Cannot attach to tab: {e}"
            raise PageAccessError(msg) from e

        try:
            resp = self._send(
                ws,
                "Runtime.evaluate",
                {"expression": _OUTER_HTML_EXPRESSION, "returnByValue": True},
            )
        except (websocket.WebSocketException, OSError) as e:
            msg = f"DevTools request failed: {e}"
            raise PageAccessError(msg) from e
        finally:
            ws.close()

        result = resp.get("result", {})
        if "exceptionDetails" in result:
            msg = f"Page script failed: {result['exceptionDetails'].get('text')!r}"
            raise PageAccessError(msg)
        value = result.get("result", {}).get("value")
        if not isinstance(value, str):
            msg = "DevTools returned no page HTML"
            raise PageAccessError(msg)
        return value

    def _send(self, ws: websocket.WebSocket, method: str, params: dict[str, Any]) -> dict[str, Any]:
        """Send a DevTools command and wait for its response, skipping events."""
        msg_id = next(self._msg_ids)
        ws.send(json.dumps({"id": msg_id, "method": method, "params": params}))
        while True:
            resp: dict[str, Any] = json.loads(ws.recv())
            if resp.get("id") != msg_id:
                continue
            if "error" in resp:
                err = resp["error"]
                msg = f"DevTools error {err.get('code')}: {err.get('message')}"
                raise PageAccessError(msg)
            return resp
