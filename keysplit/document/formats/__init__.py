"""
keysplit Document Formats - Format-specific backends.

- PDFBackend: PDF files via PyMuPDF (pdfplumber for text, optionally)
- TextBackend: Form-feed paged plain text files
"""

from keysplit.document.backend import register_backend
from keysplit.document.formats.pdf import PDFBackend, PDFReader, PDFWriter
from keysplit.document.formats.text import TextBackend, TextReader, TextWriter

register_backend("pdf", PDFBackend)
register_backend("text", TextBackend)

__all__ = [
    "PDFBackend",
    "PDFReader",
    "PDFWriter",
    "TextBackend",
    "TextReader",
    "TextWriter",
]
