"""Shared test fixtures."""

from pathlib import Path

import pytest

from glimpse_bridge.core.dom.html_document import HtmlDocument


def _node(
    node_id: str, name: str | None, *, note: str | None = None, children: str | None = None
) -> str:
    """Render one Workflowy outline item the way the web app does."""
    parts = [f'<div class="project" projectid="{node_id}">']
    if name is not None:
        parts.append(
            '<div class="name"><div class="content">'
            f'<span class="innerContentContainer">{name}</span></div></div>'
        )
    if note is not None:
        parts.append(
            '<div class="notes"><div class="content">'
            f'<span class="innerContentContainer">{note}</span></div></div>'
        )
    if children is not None:
        parts.append(f'<div class="children">{children}</div>')
    parts.append("</div>")
    return "".join(parts)


# top
#   A                 (scenario root)
#     B  note "hi", empty children region
#     C  no children region
#   D  note "  multi line\n"
#     D1
#       D1a  name with markup
#     D2  whitespace-only note, whitespace-only children region
#     (no name region)
WORKFLOWY_HTML = (
    "<html><body><div class='pageContainer'>"
    + _node(
        "top",
        "Top",
        children=(
            _node(
                "A",
                "  Alpha  ",
                children=_node("B", "Beta", note="hi", children="") + _node("C", "Gamma"),
            )
            + _node(
                "D",
                "Delta",
                note="  multi line\n",
                children=(
                    _node("D1", "Delta one", children=_node("D1a", "Buy <b>milk</b>"))
                    + _node("D2", "Delta two", note="   ", children="  \n  ")
                    + _node("D3", None)
                ),
            )
        ),
    )
    + "</div></body></html>"
)


@pytest.fixture
def workflowy_html() -> str:
    return WORKFLOWY_HTML


@pytest.fixture
def workflowy_document() -> HtmlDocument:
    return HtmlDocument(WORKFLOWY_HTML)


@pytest.fixture
def workflowy_file(tmp_path: Path) -> Path:
    """Return a saved copy of the sample page."""
    path = tmp_path / "workflowy.html"
    path.write_text(WORKFLOWY_HTML, encoding="utf-8")
    return path
