"""
keysplit Types - Pydantic models for split results.

These types are returned by the public API.
"""

from typing import List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field

from keysplit.document.segmenter import Segment


class WrittenSegment(BaseModel):
    """
    A segment that has been written to disk.

    Attributes:
        segment: The page range, key and output name
        path: Where the output document was written
    """
    segment: Segment
    path: str = Field(..., description="Path of the output document")


class SplitResult(BaseModel):
    """
    Summary of a completed split run.

    Attributes:
        source: Path of the input document
        output_dir: Directory the outputs were written to
        total_pages: Number of pages in the input
        segments: Written segments, in page order
        started_at: When the run started
        duration_seconds: Wall-clock time of the run
    """
    source: str
    output_dir: str
    total_pages: int = 0
    segments: List[WrittenSegment] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.now)
    duration_seconds: float = 0.0

    @property
    def paths(self) -> List[str]:
        return [written.path for written in self.segments]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "output_dir": self.output_dir,
            "total_pages": self.total_pages,
            "segments": [
                {**written.segment.to_dict(), "path": written.path}
                for written in self.segments
            ],
            "started_at": self.started_at.isoformat(),
            "duration_seconds": self.duration_seconds,
        }
