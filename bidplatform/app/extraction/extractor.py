"""Plain-text extraction for uploaded RFQ files.

Dispatches on the declared media type (exact match) and always removes the
temporary upload once extraction has been reached.
"""

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

from docx import Document as DocxDocument
from docx.document import Document as WordDocument
from docx.table import Table, _Cell
from pypdf import PdfReader

from bidplatform.app.errors import UnsupportedFileType

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MEDIA_TYPE = "text/plain"


def parse_pdf(path: Path) -> str:
    """Extract text from every page of a PDF."""
    reader = PdfReader(path)
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _block_texts(container: WordDocument | _Cell) -> Iterator[str]:
    """Yield paragraph text in document order, descending into table cells."""
    for block in container.iter_inner_content():
        if isinstance(block, Table):
            for row in block.rows:
                # Merged cells repeat across the row
                seen: set[int] = set()
                for cell in row.cells:
                    if id(cell._tc) in seen:
                        continue
                    seen.add(id(cell._tc))
                    yield from _block_texts(cell)
        else:
            yield block.text


def parse_docx(path: Path) -> str:
    """Extract raw text from a Word document, including table cells."""
    document = DocxDocument(str(path))
    return "\n".join(_block_texts(document))


def parse_text(path: Path) -> str:
    """Read a plain-text file as UTF-8; undecodable bytes become U+FFFD."""
    return path.read_bytes().decode("utf-8", errors="replace")


PARSERS: dict[str, Callable[[Path], str]] = {
    PDF_MEDIA_TYPE: parse_pdf,
    DOCX_MEDIA_TYPE: parse_docx,
    TEXT_MEDIA_TYPE: parse_text,
}


def is_supported(media_type: str | None) -> bool:
    """Whether a media type has a registered parser."""
    return media_type in PARSERS


def extract_text(file_path: str | os.PathLike[str], media_type: str | None) -> str:
    """Extract text from an uploaded file and delete the file afterwards.

    Args:
        file_path: Path of the temporary upload
        media_type: Declared media type of the upload

    Returns:
        Extracted plain text

    Raises:
        UnsupportedFileType: If no parser handles ``media_type``
    """
    path = Path(file_path)
    try:
        if not is_supported(media_type):
            raise UnsupportedFileType(media_type)
        text = PARSERS[media_type](path)  # type: ignore[index]
        logger.info("Extracted %d characters from %s upload", len(text), media_type)
        return text
    finally:
        path.unlink(missing_ok=True)


def derive_project_name(filename: str) -> str:
    """Strip the last extension segment from an uploaded filename.

    ``"RFQ.final.docx"`` becomes ``"RFQ.final"``; names without an extension
    are returned unchanged.
    """
    stem, dot, extension = filename.rpartition(".")
    if not dot or not extension or "/" in extension:
        return filename
    return stem
