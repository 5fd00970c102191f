"""
keysplit Document Backend - Abstract reader/writer services for paged documents.

A backend pairs a reader (page count, page text, page geometry) with a writer
(create a document, copy pages into it, finalize). New formats are added by
registering a DocumentBackend subclass.

Example:
    backend = get_backend("pdf")
    with backend.open_reader("bundle.pdf") as reader:
        print(reader.page_count, reader.page_text(1))

    writer = backend.new_writer()
    writer.create_document(reader.page_geometry(1))
    writer.copy_page(reader, 1)
    writer.finalize("first-page.pdf")
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Type, Optional, Union

from pydantic import BaseModel, Field

from keysplit.exceptions import ConfigurationError, InputError, InputFormatError


class PageGeometry(BaseModel):
    """Size of a page as displayed (rotation applied) plus its rotation."""
    width: float = Field(..., ge=0, description="Displayed page width in points")
    height: float = Field(..., ge=0, description="Displayed page height in points")
    rotation: int = Field(default=0, description="Page rotation in degrees")


class BaseDocumentReader(ABC):
    """
    Read-only handle on a source document.

    Page numbers are 1-indexed. Readers are context managers and are
    closed exactly once.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._closed = False

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages in the document."""
        pass

    @abstractmethod
    def page_text(self, page: int) -> str:
        """
        Extract the plain text of one page.

        Raises:
            InputError: If the page is out of range or extraction fails
        """
        pass

    @abstractmethod
    def page_geometry(self, page: int) -> PageGeometry:
        """Return size and rotation of one page."""
        pass

    def _close(self) -> None:
        """Release backend resources."""
        pass

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._close()

    def check_page(self, page: int) -> None:
        """Raise InputError unless 1 <= page <= page_count."""
        if not 1 <= page <= self.page_count:
            raise InputError(
                f"Page {page} out of range: {self.path} has {self.page_count} pages"
            )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class BaseDocumentWriter(ABC):
    """
    Builds one output document from pages copied out of a reader.

    Lifecycle: create_document() -> copy_page()* -> finalize() or abort().
    """

    @abstractmethod
    def create_document(self, geometry: PageGeometry) -> None:
        """Start a new, empty output document for pages of this geometry."""
        pass

    @abstractmethod
    def copy_page(self, reader: BaseDocumentReader, page: int) -> None:
        """Append page `page` of `reader` to the output document."""
        pass

    @abstractmethod
    def finalize(self, path: Union[str, Path]) -> None:
        """Write the output document to `path` and release it."""
        pass

    @abstractmethod
    def abort(self) -> None:
        """Discard the output document without writing anything."""
        pass


class DocumentBackend(ABC):
    """
    A document format: which files it handles and how to read and write them.

    Example:
        class TiffBackend(DocumentBackend):
            name = "tiff"
            extension = ".tif"
            supported_formats = [".tif", ".tiff"]

            def open_reader(self, path, **kwargs):
                ...

            def new_writer(self):
                ...

        register_backend("tiff", TiffBackend)
    """

    name: str = "unknown"

    # Extension given to output documents
    extension: str = ""

    # Extensions accepted as input
    supported_formats: list = []

    @abstractmethod
    def open_reader(self, path: Union[str, Path], **kwargs) -> BaseDocumentReader:
        """
        Open a source document.

        Raises:
            InputNotFoundError: If the file does not exist
            InputFormatError: If the file is not a valid document
        """
        pass

    @abstractmethod
    def new_writer(self) -> BaseDocumentWriter:
        """Return a fresh writer for one output document."""
        pass

    def supports(self, path: Union[str, Path]) -> bool:
        """Check if this backend handles the given file."""
        return Path(path).suffix.lower() in self.supported_formats


# Registry of available backends
_backends: Dict[str, Type[DocumentBackend]] = {}


def register_backend(name: str, backend_class: Type[DocumentBackend]) -> None:
    """Register a document backend under `name`."""
    _backends[name] = backend_class


def get_backend(name: str) -> DocumentBackend:
    """
    Get a backend instance by name.

    Raises:
        ConfigurationError: If no backend is registered under `name`
    """
    if name not in _backends:
        available = ", ".join(_backends.keys())
        raise ConfigurationError(f"Unknown backend: {name}. Available: {available}")
    return _backends[name]()


def list_backends() -> list:
    """List all registered backend names."""
    return list(_backends.keys())


def backend_for_path(path: Union[str, Path]) -> DocumentBackend:
    """
    Pick the backend for a file by its extension.

    Raises:
        InputFormatError: If no backend supports the extension
    """
    for backend_class in _backends.values():
        backend = backend_class()
        if backend.supports(path):
            return backend

    supported = []
    for backend_class in _backends.values():
        supported.extend(backend_class.supported_formats)
    raise InputFormatError(
        f"Unsupported file format: {Path(path).suffix or '(none)'}. "
        f"Supported: {', '.join(supported)}"
    )
