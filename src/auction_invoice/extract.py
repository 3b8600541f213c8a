"""
Document-to-text extraction, kept behind a small protocol so the parsing core
only ever sees a string. pdfplumber supplies native PDF text plus table rows;
plain .txt files (already-extracted text) are read as-is.
"""
from __future__ import annotations

from pathlib import Path
from typing import Protocol

import pdfplumber
from loguru import logger

from .errors import NoExtractableText
from .normalize import normalize, split_lines

SUPPORTED_SUFFIXES = (".pdf", ".txt")


class TextExtractor(Protocol):
    def extract(self, path: Path) -> str:
        ...


def _table_lines(tables: list) -> list[str]:
    """
    One line per table row, cells joined by two spaces so a lot table row reads
    like its page-text form ("101  2001  Forklift ..."). Cells wrapped over
    several lines are joined back into one.
    """
    lines: list[str] = []
    for table in tables or []:
        for row in table or []:
            cells = [normalize(str(cell)) for cell in row or [] if cell is not None]
            cells = [c for c in cells if c]
            if cells:
                lines.append("  ".join(cells))
    return lines


def _merge_tables(page_text: str, tables: list) -> str:
    """Page text followed by the table rows it does not already contain."""
    seen = {normalize(line) for line in split_lines(page_text)}
    missing = [line for line in _table_lines(tables) if normalize(line) not in seen]
    return "\n".join(part for part in [page_text, *missing] if part)


class PdfPlumberExtractor:
    """Native PDF text per page, with table rows pdfplumber found only as tables."""

    def __init__(self, include_tables: bool = True) -> None:
        self.include_tables = include_tables

    def extract(self, path: Path) -> str:
        pages: list[str] = []
        try:
            with pdfplumber.open(path) as pdf:
                for page in pdf.pages:
                    text = page.extract_text() or ""
                    if self.include_tables:
                        text = _merge_tables(text, page.extract_tables())
                    if text.strip():
                        pages.append(text)
        except Exception as e:
            logger.warning("pdfplumber could not read document", path=str(path), error=str(e))
            return ""
        return "\n\n".join(pages)


class PlainTextExtractor:
    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def extract(self, path: Path) -> str:
        return path.read_text(encoding=self.encoding, errors="replace")


def extractor_for(path: str | Path) -> TextExtractor:
    suffix = Path(path).suffix.lower()
    if suffix == ".pdf":
        return PdfPlumberExtractor()
    if suffix == ".txt":
        return PlainTextExtractor()
    raise ValueError(f"Unsupported document type: {suffix or path}")


def extract_text(path: str | Path, extractor: TextExtractor | None = None) -> str:
    """Text for one document; raises NoExtractableText when nothing usable comes back."""
    path = Path(path)
    text = (extractor or extractor_for(path)).extract(path)
    if not text or not text.strip():
        raise NoExtractableText(path)
    return text
