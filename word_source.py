from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Iterator

from docx import Document
from docx.table import Table
from docx.text.paragraph import Paragraph

log = logging.getLogger(__name__)


def _open_document(source: Path | bytes | BinaryIO):
    if isinstance(source, (bytes, bytearray)):
        return Document(io.BytesIO(source))
    if isinstance(source, (str, Path)):
        path = Path(source)
        if path.suffix.lower() == ".doc":
            raise ValueError("Only .docx files are supported; save the .doc file as .docx first")
        return Document(str(path))
    return Document(source)


def _table_lines(table: Table) -> Iterator[str]:
    for row in table.rows:
        seen: set[int] = set()
        for cell in row.cells:
            # merged cells are repeated by python-docx
            if id(cell._tc) in seen:
                continue
            seen.add(id(cell._tc))
            for paragraph in cell.paragraphs:
                yield from paragraph.text.splitlines()
            for nested in cell.tables:
                yield from _table_lines(nested)


def iter_docx_lines(source: Path | bytes | BinaryIO) -> Iterator[str]:
    """
    Yields text lines of a .docx in body order.
    Tables are flattened row by row, cell by cell.
    """
    doc = _open_document(source)
    body = doc.element.body
    for block in body.iterchildren():
        tag = block.tag
        if tag.endswith("}p"):
            yield from Paragraph(block, doc).text.splitlines()
        elif tag.endswith("}tbl"):
            yield from _table_lines(Table(block, doc))


def extract_docx_text(source: Path | bytes | BinaryIO) -> str:
    lines = [line.strip() for line in iter_docx_lines(source)]
    text = "\n".join(line for line in lines if line)
    log.info("Extracted %d text lines from Word document", text.count("\n") + 1 if text else 0)
    return text
