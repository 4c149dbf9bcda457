"""Render the HTML proposal body into a Word document."""

import io

from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag
from docx import Document
from docx.document import Document as DocxDocument
from docx.text.paragraph import Paragraph

HEADING_TAGS = {f"h{level}": level for level in range(1, 7)}
CONTAINER_TAGS = {"html", "body", "div", "section", "article", "main", "header", "footer"}
BOLD_TAGS = {"strong", "b", "th"}
ITALIC_TAGS = {"em", "i"}


def _add_runs(
    paragraph: Paragraph,
    node: Tag | NavigableString,
    bold: bool = False,
    italic: bool = False,
) -> None:
    """Append inline content of ``node`` to ``paragraph`` keeping bold/italic."""
    if isinstance(node, (Comment, Doctype)):
        return
    if isinstance(node, NavigableString):
        text = str(node)
        if text:
            run = paragraph.add_run(text)
            run.bold = bold or None
            run.italic = italic or None
        return

    if node.name == "br":
        paragraph.add_run().add_break()
        return

    for child in node.children:
        if isinstance(child, (Tag, NavigableString)):
            _add_runs(
                paragraph,
                child,
                bold=bold or node.name in BOLD_TAGS,
                italic=italic or node.name in ITALIC_TAGS,
            )


def _add_list(document: DocxDocument, node: Tag, depth: int = 1) -> None:
    base_style = "List Number" if node.name == "ol" else "List Bullet"
    style = base_style if depth == 1 else f"{base_style} {min(depth, 3)}"

    for item in node.find_all("li", recursive=False):
        paragraph = document.add_paragraph(style=style)
        nested: list[Tag] = []
        for child in item.children:
            if isinstance(child, Tag) and child.name in ("ul", "ol"):
                nested.append(child)
            elif isinstance(child, (Tag, NavigableString)):
                _add_runs(paragraph, child)
        for sublist in nested:
            _add_list(document, sublist, depth + 1)


def _add_table(document: DocxDocument, node: Tag) -> None:
    rows = node.find_all("tr")
    if not rows:
        return
    columns = max(len(row.find_all(["td", "th"], recursive=False)) for row in rows)
    if columns == 0:
        return

    table = document.add_table(rows=0, cols=columns)
    table.style = "Table Grid"
    for row in rows:
        cells = table.add_row().cells
        for index, cell_node in enumerate(row.find_all(["td", "th"], recursive=False)):
            paragraph = cells[index].paragraphs[0]
            _add_runs(paragraph, cell_node, bold=cell_node.name == "th")


def _add_block(document: DocxDocument, node: Tag | NavigableString) -> None:
    if isinstance(node, (Comment, Doctype)):
        return
    if isinstance(node, NavigableString):
        text = str(node).strip()
        if text:
            document.add_paragraph(text)
        return

    name = node.name
    if name in HEADING_TAGS:
        document.add_heading(node.get_text(" ", strip=True), level=HEADING_TAGS[name])
    elif name in ("ul", "ol"):
        _add_list(document, node)
    elif name == "table":
        _add_table(document, node)
    elif name in CONTAINER_TAGS:
        for child in node.children:
            if isinstance(child, (Tag, NavigableString)):
                _add_block(document, child)
    else:
        paragraph = document.add_paragraph()
        _add_runs(paragraph, node)


def html_to_docx(html: str) -> bytes:
    """Convert an HTML fragment into ``.docx`` bytes.

    Headings, paragraphs, lists and tables map to their Word equivalents;
    unknown tags become plain paragraphs.
    """
    document = Document()
    soup = BeautifulSoup(html, "html.parser")

    for node in soup.children:
        if isinstance(node, (Tag, NavigableString)):
            _add_block(document, node)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
