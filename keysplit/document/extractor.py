"""
keysplit Extractor - Materialize a segment's page range as a new document.

Output is written to a temporary ".partial" file next to the target and
renamed into place only after the writer has finalized it, so a failed
segment never leaves a truncated file behind under its real name.

Example:
    from keysplit.document.extractor import Extractor

    extractor = Extractor(get_backend("pdf"))
    with open_document("bundle.pdf") as reader:
        path = extractor.materialize(segment, reader, "out/")
"""

import logging
import os
from pathlib import Path
from typing import Union

from keysplit.exceptions import OutputDirectoryError, OutputError
from keysplit.document.backend import BaseDocumentReader, DocumentBackend
from keysplit.document.segmenter import Segment


logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".partial"


class Extractor:
    """Copies segments out of a source document through a backend's writer."""

    def __init__(self, backend: DocumentBackend):
        self.backend = backend

    def materialize(
        self,
        segment: Segment,
        source: BaseDocumentReader,
        output_dir: Union[str, Path]
    ) -> Path:
        """
        Write pages segment.start..segment.end of `source` to a new document.

        The new document takes the geometry (size and rotation) of the
        segment's first page.

        Args:
            segment: Segment to write
            source: Open source document
            output_dir: Existing directory for the output file

        Returns:
            Path of the written document

        Raises:
            InputError: If the segment reaches past the end of the source
            OutputError: If the output cannot be written
        """
        output_dir = Path(output_dir)
        if not output_dir.is_dir():
            raise OutputDirectoryError(f"Output directory not found: {output_dir}")

        target = output_dir / segment.output_name
        partial = target.with_name(target.name + PARTIAL_SUFFIX)

        if target.resolve() == source.path.resolve():
            raise OutputError(f"Refusing to overwrite the source document {source.path}")

        # Range check before anything touches the disk
        source.check_page(segment.start)
        source.check_page(segment.end)

        writer = self.backend.new_writer()
        try:
            writer.create_document(source.page_geometry(segment.start))
            for page in range(segment.start, segment.end + 1):
                writer.copy_page(source, page)
            writer.finalize(partial)
            os.replace(partial, target)
        except OSError as e:
            writer.abort()
            _remove_partial(partial)
            raise OutputError(f"Failed to write {target}: {e}")
        except Exception:
            writer.abort()
            _remove_partial(partial)
            raise

        logger.debug(
            "Wrote pages %d-%d to %s", segment.start, segment.end, target
        )
        return target


def _remove_partial(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to remove incomplete output {path}: {e}")
