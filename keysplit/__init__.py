"""
keysplit - Split multi-page documents wherever a regex-captured key changes.

Basic Usage:
    import keysplit

    # Every page carrying "Account: 1234" goes to 1234.pdf, and so on
    result = keysplit.split("statements.pdf", "out/", pattern=r"^Account: (\\d+)")
    for written in result.segments:
        print(written.segment.start, written.segment.end, written.path)

Advanced Usage:
    from keysplit import KeySplitter, SplitConfig

    splitter = KeySplitter(SplitConfig(
        pattern=r"Policy (?P<policy>[A-Z]{2}\\d{6})",
        key_group="policy",
        dated=True,
        on_collision="fail"
    ))
    result = splitter.split("policies.pdf", "out/")
"""

__version__ = "0.1.0"

from pathlib import Path
from typing import Union

from keysplit.config import SplitConfig, get_config, set_config
from keysplit.exceptions import (
    KeySplitError,
    ConfigurationError,
    NoSplitModeError,
    InputError,
    InputNotFoundError,
    InputFormatError,
    OutputError,
    OutputDirectoryError,
)
from keysplit.types import SplitResult, WrittenSegment
from keysplit.splitter import KeySplitter
from keysplit.document.segmenter import Segment


def split(
    document: Union[str, Path],
    output_dir: Union[str, Path],
    pattern: str = None,
    *,
    key_group: Union[int, str] = None,
    dated: bool = None,
    on_collision: str = None,
    no_match: str = None,
    pdf_method: str = None
) -> SplitResult:
    """
    Split a document into one output document per run of equal keys.

    Args:
        document: Path to the document (PDF or form-feed paged text)
        output_dir: Existing directory for the output documents
        pattern: Regex with at least one capture group
        key_group: Capture group index or name holding the key (default: 1)
        dated: Prefix output names with today's date as YYYYMMDD_
        on_collision: "suffix" (default), "fail" or "overwrite"
        no_match: "carry_forward" (default) or "fail"
        pdf_method: "pymupdf" (default) or "pdfplumber"

    Returns:
        SplitResult with every written segment

    Example:
        import keysplit

        result = keysplit.split("bundle.pdf", "out/", pattern=r"Invoice #(\\d+)", dated=True)
        print(f"Wrote {len(result.segments)} files")
    """
    splitter = KeySplitter(
        get_config(),
        pattern=pattern,
        key_group=key_group,
        dated=dated,
        on_collision=on_collision,
        no_match=no_match,
        pdf_method=pdf_method,
    )
    return splitter.split(document, output_dir)


__all__ = [
    # Functions
    "split",
    "get_config",
    "set_config",
    # Classes
    "KeySplitter",
    "SplitConfig",
    # Result types
    "SplitResult",
    "WrittenSegment",
    "Segment",
    # Exceptions
    "KeySplitError",
    "ConfigurationError",
    "NoSplitModeError",
    "InputError",
    "InputNotFoundError",
    "InputFormatError",
    "OutputError",
    "OutputDirectoryError",
    # Version
    "__version__",
]
