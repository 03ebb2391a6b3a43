"""Configuration constants for the GLIMPSE bridge."""

# Request source: the GLIMPSE MCP server's WebSocket endpoint.
WS_URL: str = "ws://localhost:8765"

# Seconds between reconnect attempts. Fixed cadence, retried forever.
RECONNECT_DELAY: float = 3.0

# Human name of the target application, used in "No <target> tab open".
TARGET_NAME: str = "Workflowy"

# Substring of a browser tab URL that marks it as a target page.
TARGET_URL_PATTERN: str = "workflowy.com"

# Name reported for nodes without a name region.
UNTITLED: str = "Untitled"

# Chrome DevTools endpoint (browser started with --remote-debugging-port).
DEVTOOLS_HOST: str = "127.0.0.1"
DEVTOOLS_PORT: int = 9222
DEVTOOLS_TIMEOUT: float = 5.0
