"""
keysplit Text Backend - Plain text documents paged by form feeds.

A page is everything up to the next form feed character (\\f), which is how
pdftotext and most line printers mark page breaks.

Example:
    from keysplit.document.formats.text import TextReader

    with TextReader("report.txt") as reader:
        for page in range(1, reader.page_count + 1):
            print(reader.page_text(page)[:40])
"""

from pathlib import Path
from typing import List, Optional, Union

from keysplit.exceptions import InputFormatError, InputNotFoundError, OutputError
from keysplit.document.backend import (
    BaseDocumentReader,
    BaseDocumentWriter,
    DocumentBackend,
    PageGeometry,
)


PAGE_BREAK = "\f"


class TextReader(BaseDocumentReader):
    """
    Plain text source document.

    Reads .txt files with encoding detection and splits them on form feeds.
    A single trailing form feed does not start an extra page.
    """

    def __init__(self, path: Union[str, Path], encoding: str = None):
        super().__init__(path)
        if not self.path.exists():
            raise InputNotFoundError(f"File not found: {self.path}")

        text = self._read(encoding)
        if text.endswith(PAGE_BREAK):
            text = text[:-1]
        self._pages: List[str] = text.split(PAGE_BREAK) if text else []

    def _read(self, encoding: Optional[str]) -> str:
        # Try encodings in order
        encodings = [encoding] if encoding else ["utf-8", "utf-8-sig", "latin-1", "cp1252"]

        for enc in encodings:
            try:
                with open(self.path, "r", encoding=enc, newline="") as f:
                    return f.read()
            except UnicodeDecodeError:
                continue

        raise InputFormatError(f"Could not decode {self.path} with any supported encoding")

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def page_text(self, page: int) -> str:
        self.check_page(page)
        return self._pages[page - 1]

    def page_geometry(self, page: int) -> PageGeometry:
        self.check_page(page)
        return PageGeometry(width=0, height=0, rotation=0)


class TextWriter(BaseDocumentWriter):
    """Joins copied pages with form feeds."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._pages: Optional[List[str]] = None

    def create_document(self, geometry: PageGeometry) -> None:
        self._pages = []

    def copy_page(self, reader: BaseDocumentReader, page: int) -> None:
        if self._pages is None:
            raise OutputError("copy_page() called before create_document()")
        self._pages.append(reader.page_text(page))

    def finalize(self, path: Union[str, Path]) -> None:
        if self._pages is None:
            raise OutputError("finalize() called before create_document()")
        try:
            with open(path, "w", encoding=self.encoding, newline="") as f:
                f.write(PAGE_BREAK.join(self._pages))
        except OSError as e:
            raise OutputError(f"Failed to write {path}: {e}")
        finally:
            self._pages = None

    def abort(self) -> None:
        self._pages = None


class TextBackend(DocumentBackend):
    """Form-feed paged plain text."""

    name = "text"
    extension = ".txt"
    supported_formats = [".txt", ".text"]

    def open_reader(self, path: Union[str, Path], encoding: str = None, **kwargs) -> TextReader:
        return TextReader(path, encoding=encoding)

    def new_writer(self) -> TextWriter:
        return TextWriter()
