"""
keysplit PDF Backend - Read and split PDF documents with PyMuPDF.

Text extraction methods:
- pymupdf: Fast text extraction using PyMuPDF/fitz (default)
- pdfplumber: Alternative text extraction, better on some column layouts

Page copying always goes through PyMuPDF, which carries each page's
media box and rotation into the output document.

Example:
    from keysplit.document.formats.pdf import PDFReader, PDFWriter

    with PDFReader("bundle.pdf") as reader:
        writer = PDFWriter()
        writer.create_document(reader.page_geometry(3))
        for page in range(3, 6):
            writer.copy_page(reader, page)
        writer.finalize("out/ACME.pdf")
"""

import logging
from pathlib import Path
from typing import Optional, Union

import fitz  # PyMuPDF

from keysplit.exceptions import (
    ConfigurationError,
    InputError,
    InputFormatError,
    InputNotFoundError,
    OutputError,
)
from keysplit.document.backend import (
    BaseDocumentReader,
    BaseDocumentWriter,
    DocumentBackend,
    PageGeometry,
)


logger = logging.getLogger(__name__)


class PDFReader(BaseDocumentReader):
    """
    PDF source document opened with PyMuPDF.

    Methods:
    - pymupdf: page.get_text()
    - pdfplumber: page.extract_text()
    """

    def __init__(self, path: Union[str, Path], method: str = "pymupdf"):
        super().__init__(path)
        if method not in ("pymupdf", "pdfplumber"):
            raise ConfigurationError(f"Unknown PDF method: {method}")
        if not self.path.exists():
            raise InputNotFoundError(f"File not found: {self.path}")

        self.method = method
        self._plumber = None

        try:
            self.document = fitz.open(str(self.path))
        except Exception as e:
            raise InputFormatError(f"Not a valid PDF: {self.path}: {e}")

        if not self.document.is_pdf:
            self.document.close()
            raise InputFormatError(f"Not a PDF file: {self.path}")
        if self.document.needs_pass:
            self.document.close()
            raise InputFormatError(f"PDF is encrypted: {self.path}")

        if method == "pdfplumber":
            self._plumber = self._open_pdfplumber()

    def _open_pdfplumber(self):
        """Open the same file with pdfplumber for text extraction."""
        try:
            import pdfplumber
        except ImportError:
            self.document.close()
            raise ConfigurationError(
                "pdfplumber not installed. Install with: pip install pdfplumber"
            )

        try:
            return pdfplumber.open(str(self.path))
        except Exception as e:
            self.document.close()
            raise InputFormatError(f"pdfplumber could not open {self.path}: {e}")

    @property
    def page_count(self) -> int:
        return self.document.page_count

    def page_text(self, page: int) -> str:
        self.check_page(page)
        try:
            if self._plumber is not None:
                return self._plumber.pages[page - 1].extract_text() or ""
            return self.document[page - 1].get_text()
        except Exception as e:
            raise InputError(f"Text extraction failed on page {page} of {self.path}: {e}")

    def page_geometry(self, page: int) -> PageGeometry:
        self.check_page(page)
        pdf_page = self.document[page - 1]
        # page.rect already has the rotation applied
        return PageGeometry(
            width=pdf_page.rect.width,
            height=pdf_page.rect.height,
            rotation=pdf_page.rotation,
        )

    def _close(self) -> None:
        if self._plumber is not None:
            self._plumber.close()
        self.document.close()


class PDFWriter(BaseDocumentWriter):
    """
    Assembles an output PDF from pages of a PDFReader.

    The geometry passed to create_document() is only logged: insert_pdf()
    copies each page with its own media box and rotation, so the output
    pages already match the source pages.
    """

    def __init__(self):
        self._document: Optional[fitz.Document] = None

    def create_document(self, geometry: PageGeometry) -> None:
        logger.debug(
            "New PDF %.0fx%.0f pt, rotation %d",
            geometry.width, geometry.height, geometry.rotation
        )
        self._document = fitz.open()

    def copy_page(self, reader: BaseDocumentReader, page: int) -> None:
        if self._document is None:
            raise OutputError("copy_page() called before create_document()")
        if not isinstance(reader, PDFReader):
            raise OutputError(
                f"PDF writer cannot copy pages from {type(reader).__name__}"
            )
        reader.check_page(page)
        self._document.insert_pdf(
            reader.document, from_page=page - 1, to_page=page - 1
        )

    def finalize(self, path: Union[str, Path]) -> None:
        if self._document is None:
            raise OutputError("finalize() called before create_document()")
        try:
            self._document.save(str(path), garbage=3, deflate=True)
        except Exception as e:
            raise OutputError(f"Failed to write {path}: {e}")
        finally:
            self.abort()

    def abort(self) -> None:
        if self._document is not None:
            self._document.close()
            self._document = None


class PDFBackend(DocumentBackend):
    """PDF documents via PyMuPDF."""

    name = "pdf"
    extension = ".pdf"
    supported_formats = [".pdf"]

    def open_reader(self, path: Union[str, Path], method: str = "pymupdf", **kwargs) -> PDFReader:
        return PDFReader(path, method=method)

    def new_writer(self) -> PDFWriter:
        return PDFWriter()
