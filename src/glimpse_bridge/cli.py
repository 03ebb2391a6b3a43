"""CLI for the GLIMPSE bridge (run the bridge, extract from a saved page)."""

import json
import time
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from glimpse_bridge.config import DEVTOOLS_PORT
from glimpse_bridge.connection.manager import ConnectionManager
from glimpse_bridge.core.page.sources import ChromeTabPage, HtmlFilePage
from glimpse_bridge.core.tree.extractor import extract
from glimpse_bridge.core.tree.outline import render_outline
from glimpse_bridge.logging_config import configure_logging
from glimpse_bridge.models.node import ExtractionSuccess
from glimpse_bridge.protocols import PageProtocol

app = typer.Typer(help="GLIMPSE bridge: serve Workflowy subtrees to the GLIMPSE MCP server.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _build_page(html: Path | None, devtools_port: int) -> PageProtocol:
    if html is not None:
        return HtmlFilePage(html)
    return ChromeTabPage(port=devtools_port)


@app.command()
def run(
    html: Annotated[
        Path | None,
        typer.Option("--html", help="Serve a saved page instead of a live browser tab"),
    ] = None,
    devtools_port: Annotated[
        int,
        typer.Option("--devtools-port", help="Chrome remote debugging port"),
    ] = DEVTOOLS_PORT,
) -> None:
    """Connect to the GLIMPSE server and answer extraction requests."""
    manager = ConnectionManager(_build_page(html, devtools_port))
    manager.connect()
    try:
        while True:
            time.sleep(1.0)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        manager.close()


@app.command(name="extract")
def extract_cmd(
    node_id: Annotated[str, typer.Argument(help="projectid of the root node")],
    html: Annotated[Path, typer.Option("--html", help="Saved Workflowy page")],
    outline: bool = typer.Option(False, "--outline", help="Print an outline instead of JSON"),
) -> None:
    """Extract a subtree from a saved page and print it."""
    document = HtmlFilePage(html).snapshot()
    if document is None:
        logger.error("Page file not found: {}", html)
        raise typer.Exit(1)

    result = extract(document, node_id)
    if not isinstance(result, ExtractionSuccess):
        typer.echo(json.dumps(result.to_dict(), indent=2))
        raise typer.Exit(1)

    if outline:
        typer.echo(f"{result.root.name}\n{render_outline(result.children)}", nl=False)
    else:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
