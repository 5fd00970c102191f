"""
keysplit Document Reader - Open source documents with format auto-detection.

Example:
    from keysplit.document.reader import open_document

    with open_document("bundle.pdf") as reader:
        print(f"{reader.page_count} pages")

    # pdfplumber text extraction instead of PyMuPDF
    with open_document("bundle.pdf", method="pdfplumber") as reader:
        print(reader.page_text(1))
"""

from pathlib import Path
from typing import Union

from keysplit.exceptions import InputNotFoundError
from keysplit.document.backend import BaseDocumentReader, backend_for_path


def open_document(
    path: Union[str, Path],
    method: str = "pymupdf",
    encoding: str = None
) -> BaseDocumentReader:
    """
    Open a document for page-by-page reading.

    Args:
        path: Path to document file
        method: For PDFs - "pymupdf" (default) or "pdfplumber"
        encoding: For text files - specific encoding (default: auto-detect)

    Returns:
        Reader for the document; use it as a context manager

    Raises:
        InputNotFoundError: If the file does not exist
        InputFormatError: If the format is unsupported or the file is invalid
    """
    path = Path(path)
    if not path.exists():
        raise InputNotFoundError(f"File not found: {path}")

    backend = backend_for_path(path)
    return backend.open_reader(path, method=method, encoding=encoding)


def read_pages(path: Union[str, Path], method: str = "pymupdf") -> list:
    """
    Read the text of every page of a document.

    Returns:
        List of page texts, one string per page (index 0 is page 1)
    """
    with open_document(path, method=method) as reader:
        return [reader.page_text(page) for page in range(1, reader.page_count + 1)]
