"""
keysplit Splitter - Main engine tying segmentation to extraction.

The splitter:
- Compiles the pattern (before the source is opened)
- Opens the source document once
- Pulls page text in order and feeds the segmenter
- Writes each completed segment before reading the next page
- Flushes and writes the final segment
"""

import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import Union

from keysplit.config import SplitConfig
from keysplit.exceptions import InputNotFoundError, OutputDirectoryError
from keysplit.types import SplitResult, WrittenSegment
from keysplit.document.backend import backend_for_path
from keysplit.document.extractor import Extractor
from keysplit.document.reader import open_document
from keysplit.document.segmenter import KeyMatcher, OutputNamer, Segment, Segmenter


logger = logging.getLogger(__name__)


class KeySplitter:
    """
    Splits documents wherever the key captured from a page changes.

    Example:
        splitter = KeySplitter(SplitConfig(pattern=r"^Member ID: (\\d+)", dated=True))
        result = splitter.split("statements.pdf", "out/")
        for written in result.segments:
            print(written.segment.start, written.segment.end, written.path)
    """

    def __init__(self, config: SplitConfig = None, **overrides):
        """
        Initialize splitter.

        Args:
            config: Full configuration object (default: from environment)
            **overrides: Individual SplitConfig fields to override

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        config = config or SplitConfig.from_env()
        self.config = replace(config, **{
            name: value for name, value in overrides.items() if value is not None
        })
        self.config.validate()

        # Fail on a bad pattern before any document is touched
        self.matcher = KeyMatcher(self.config.pattern, self.config.key_group)

    def split(self, input_path: Union[str, Path], output_dir: Union[str, Path]) -> SplitResult:
        """
        Split one document into per-key output documents.

        Args:
            input_path: Source document (PDF or form-feed paged text)
            output_dir: Existing directory to write outputs to

        Returns:
            SplitResult listing every written segment

        Raises:
            InputError: If the source is missing, invalid or unreadable
            OutputError: If an output cannot be written
        """
        input_path = Path(input_path)
        output_dir = Path(output_dir)
        started = time.monotonic()

        if not input_path.exists():
            raise InputNotFoundError(f"File not found: {input_path}")
        backend = backend_for_path(input_path)
        if not output_dir.is_dir():
            raise OutputDirectoryError(f"Output directory not found: {output_dir}")

        namer = OutputNamer(
            extension=backend.extension,
            dated=self.config.dated,
            date_format=self.config.date_format,
            fallback=input_path.stem,
            on_collision=self.config.on_collision,
        )
        if output_dir.resolve() == input_path.resolve().parent:
            namer.reserve(input_path.name)
        segmenter = Segmenter(self.matcher, namer, no_match=self.config.no_match)
        extractor = Extractor(backend)
        result = SplitResult(source=str(input_path), output_dir=str(output_dir))

        logger.info("Splitting %s on %r", input_path, self.matcher.pattern)

        with open_document(input_path, method=self.config.pdf_method) as reader:
            result.total_pages = reader.page_count
            logger.info("%d pages", reader.page_count)

            for page in range(1, reader.page_count + 1):
                completed = segmenter.process_page(page, reader.page_text(page))
                if completed is not None:
                    self._write(completed, reader, extractor, output_dir, result)

            last = segmenter.finish()
            if last is not None:
                self._write(last, reader, extractor, output_dir, result)

        result.duration_seconds = time.monotonic() - started
        logger.info(
            "Wrote %d document(s) in %.2fs", len(result.segments), result.duration_seconds
        )
        return result

    def _write(self, segment: Segment, reader, extractor: Extractor, output_dir: Path, result: SplitResult) -> None:
        path = extractor.materialize(segment, reader, output_dir)
        result.segments.append(WrittenSegment(segment=segment, path=str(path)))
        logger.info("Pages %d-%d -> %s", segment.start, segment.end, path.name)
