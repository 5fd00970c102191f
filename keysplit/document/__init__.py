"""
keysplit Document - Document backends, key segmentation and page extraction.

Main entry points:
- open_document(): Open any supported document for page-by-page reading
- segment_pages(): Split page texts into key-based segments
- Extractor: Write a segment's pages to a new document

Backend interface:
- DocumentBackend: Abstract base for custom formats
- register_backend(): Register a custom backend
- get_backend() / backend_for_path(): Look a backend up

Example:
    from keysplit.document import open_document, read_pages, segment_pages, KeyMatcher

    pages = read_pages("bundle.pdf")
    for seg in segment_pages(pages, KeyMatcher(r"^Account: (\\d+)")):
        print(f"[{seg.start}-{seg.end}] {seg.key}")
"""

from keysplit.document.backend import (
    PageGeometry,
    BaseDocumentReader,
    BaseDocumentWriter,
    DocumentBackend,
    register_backend,
    get_backend,
    list_backends,
    backend_for_path,
)

# Registers the built-in backends
from keysplit.document import formats

from keysplit.document.reader import (
    open_document,
    read_pages,
)

from keysplit.document.segmenter import (
    KeyMatcher,
    OutputNamer,
    Segmenter,
    SegmenterState,
    Segment,
    PageRange,
    NoMatchPolicy,
    CollisionPolicy,
    name_for,
    segment_pages,
    build_toc,
)

from keysplit.document.extractor import Extractor

__all__ = [
    # Main functions
    "open_document",
    "read_pages",
    "segment_pages",
    "name_for",
    "build_toc",
    # Classes
    "KeyMatcher",
    "OutputNamer",
    "Segmenter",
    "SegmenterState",
    "Segment",
    "PageRange",
    "NoMatchPolicy",
    "CollisionPolicy",
    "Extractor",
    "PageGeometry",
    # Backend interface
    "BaseDocumentReader",
    "BaseDocumentWriter",
    "DocumentBackend",
    "register_backend",
    "get_backend",
    "list_backends",
    "backend_for_path",
]
