"""
keysplit Document Segmenter - Split a page stream into key-based segments.

Each page's text is matched against a pattern; the chosen capture group is the
page's key. Consecutive pages with the same key form one segment, and a page
with a different key starts the next one. Pages without a key stay in the
current segment.

Example:
    from keysplit.document.segmenter import KeyMatcher, OutputNamer, segment_pages

    matcher = KeyMatcher(r"^Invoice No: (\\w+)$")
    namer = OutputNamer(extension=".pdf")
    pages = ["Invoice No: A1\\n...", "...", "Invoice No: B7\\n..."]

    for seg in segment_pages(pages, matcher, namer):
        print(f"[{seg.start}-{seg.end}] {seg.output_name}")
    # [1-2] A1.pdf
    # [3-3] B7.pdf
"""

import logging
import re
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from keysplit.exceptions import ConfigurationError, InputError, NoSplitModeError, OutputError


logger = logging.getLogger(__name__)
match_logger = logging.getLogger("keysplit.matches")

# Characters that cannot appear in a file name on common filesystems
_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class PageRange(BaseModel):
    """Page range for a document segment."""
    start: int = Field(..., ge=1, description="Starting page number (1-indexed)")
    end: int = Field(..., ge=1, description="Ending page number (1-indexed, inclusive)")


class Segment(BaseModel):
    """A contiguous run of pages destined for one output document."""
    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=1, description="First page (1-indexed)")
    end: int = Field(..., ge=1, description="Last page (inclusive)")
    key: Optional[str] = Field(default=None, description="Segment key, None before the first match")
    output_name: str = Field(..., description="File name of the output document")

    @model_validator(mode="after")
    def _check_order(self) -> "Segment":
        if self.end < self.start:
            raise ValueError(f"Segment ends before it starts: {self.start}-{self.end}")
        return self

    @property
    def page_range(self) -> PageRange:
        return PageRange(start=self.start, end=self.end)

    @property
    def page_count(self) -> int:
        return self.end - self.start + 1

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "output_name": self.output_name,
            "page_range": {"start": self.start, "end": self.end},
        }


class NoMatchPolicy(str, Enum):
    """What to do with a page whose text yields no key."""
    CARRY_FORWARD = "carry_forward"
    FAIL = "fail"


class CollisionPolicy(str, Enum):
    """What to do when two segments of one run want the same output name."""
    SUFFIX = "suffix"
    FAIL = "fail"
    OVERWRITE = "overwrite"


class KeyMatcher:
    """
    Compiled split pattern plus the capture group that holds the key.

    The pattern is compiled once with re.MULTILINE, so ^ and $ anchor to
    lines within the page text. Only the first match on a page counts.
    """

    def __init__(self, pattern: Optional[str], key_group: Union[int, str] = 1):
        if not pattern:
            raise NoSplitModeError("No split pattern given")

        try:
            self.regex = re.compile(pattern, re.MULTILINE)
        except re.error as e:
            raise ConfigurationError(f"Invalid pattern {pattern!r}: {e}")

        if self.regex.groups == 0:
            raise ConfigurationError(f"Pattern {pattern!r} has no capture group")

        if isinstance(key_group, int):
            if not 1 <= key_group <= self.regex.groups:
                raise ConfigurationError(
                    f"Key group {key_group} does not exist; "
                    f"pattern has {self.regex.groups} group(s)"
                )
        elif key_group not in self.regex.groupindex:
            raise ConfigurationError(f"Pattern has no group named {key_group!r}")

        self.pattern = pattern
        self.key_group = key_group

    def key_for(self, text: str, page: Optional[int] = None) -> Optional[str]:
        """
        Return the key found in `text`, or None.

        A missing match, a key group that did not take part in the match,
        and an empty capture all count as no key.
        """
        match = self.regex.search(text)

        if match_logger.isEnabledFor(logging.DEBUG):
            self._log_match(match, page)

        if match is None:
            return None
        return match.group(self.key_group) or None

    def _log_match(self, match: Optional[re.Match], page: Optional[int]) -> None:
        if match is None:
            match_logger.debug("Page %s: no match", page)
            return
        match_logger.debug("Page %s: match %r at %d", page, match.group(0), match.start())
        for index in range(1, self.regex.groups + 1):
            match_logger.debug(
                "  Group %d = %r, position=%d", index, match.group(index), match.start(index)
            )


def sanitize_stem(key: str) -> str:
    """Make a key usable as a file name stem."""
    return _UNSAFE_CHARS.sub("_", key).strip()


def name_for(
    key: Optional[str],
    extension: str = ".pdf",
    dated: bool = False,
    today: Optional[date] = None,
    date_format: str = "%Y%m%d",
    fallback: str = "unmatched"
) -> str:
    """
    Build the output file name for a segment key.

    Pure given its arguments: (YYYYMMDD_ if dated) + key stem + extension.
    A missing or unusable key falls back to `fallback`.

    Example:
        name_for("ACME", dated=True, today=date(2024, 3, 1))
        # '20240301_ACME.pdf'
    """
    stem = sanitize_stem(key) if key else ""
    if not stem:
        stem = fallback
    prefix = ""
    if dated:
        prefix = (today or date.today()).strftime(date_format) + "_"
    return f"{prefix}{stem}{extension}"


class OutputNamer:
    """
    Names output documents for one run and resolves name collisions.

    The date is fixed when the namer is created, so every name in a run
    carries the same prefix.
    """

    def __init__(
        self,
        extension: str = ".pdf",
        dated: bool = False,
        today: Optional[date] = None,
        date_format: str = "%Y%m%d",
        fallback: str = "unmatched",
        on_collision: Union[CollisionPolicy, str] = CollisionPolicy.SUFFIX
    ):
        self.extension = extension
        self.dated = dated
        self.today = today or date.today()
        self.date_format = date_format
        self.fallback = sanitize_stem(fallback) or "unmatched"
        try:
            self.on_collision = CollisionPolicy(on_collision)
        except ValueError:
            raise ConfigurationError(f"Unknown collision policy: {on_collision}")
        self._claimed: Dict[str, int] = {}
        self._reserved: Set[str] = set()

    def name_for(self, key: Optional[str]) -> str:
        return name_for(
            key,
            extension=self.extension,
            dated=self.dated,
            today=self.today,
            date_format=self.date_format,
            fallback=self.fallback,
        )

    def reserve(self, name: str) -> None:
        """
        Keep `name` away from every segment, such as the source document
        when splitting into its own directory.

        Even the "overwrite" policy never hands out a reserved name;
        it gets a numeric suffix instead.
        """
        self._reserved.add(name)
        self._claimed.setdefault(name, 1)

    def claim(self, name: str) -> str:
        """
        Reserve `name` for a segment and return the name to actually use.

        Raises:
            OutputError: If the name is taken and the policy is "fail"
        """
        overwrite = self.on_collision == CollisionPolicy.OVERWRITE and name not in self._reserved
        if name not in self._claimed or overwrite:
            self._claimed[name] = self._claimed.get(name, 0) + 1
            return name

        if self.on_collision == CollisionPolicy.FAIL:
            if name in self._reserved:
                raise OutputError(f"Output name {name} would overwrite the source document")
            raise OutputError(f"Output name {name} already used earlier in this run")

        path = Path(name)
        stem, suffix = path.stem, path.suffix
        count = self._claimed[name]
        while True:
            count += 1
            candidate = f"{stem}_{count}{suffix}"
            if candidate not in self._claimed:
                break
        self._claimed[name] = count
        self._claimed[candidate] = 1
        logger.info("Name %s already used, writing %s instead", name, candidate)
        return candidate


class SegmenterState(str, Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    FINISHED = "finished"


class Segmenter:
    """
    Single-pass state machine that turns page texts into segments.

    Feed pages 1..N in order to process_page(); it returns a completed
    Segment whenever a page starts a new key. Call finish() after the last
    page to flush the segment still open.

    Example:
        segmenter = Segmenter(KeyMatcher(r"Account (\\d+)"), OutputNamer())
        for number, text in enumerate(pages, 1):
            done = segmenter.process_page(number, text)
            if done:
                write(done)
        last = segmenter.finish()
        if last:
            write(last)
    """

    def __init__(
        self,
        matcher: KeyMatcher,
        namer: OutputNamer,
        no_match: Union[NoMatchPolicy, str] = NoMatchPolicy.CARRY_FORWARD
    ):
        self.matcher = matcher
        self.namer = namer
        try:
            self.no_match = NoMatchPolicy(no_match)
        except ValueError:
            raise ConfigurationError(f"Unknown no-match policy: {no_match}")

        self.state = SegmenterState.IDLE
        self.current_key: Optional[str] = None
        self.segment_start = 0
        self.pending_name = ""
        self.last_page = 0

    def process_page(self, page: int, text: str) -> Optional[Segment]:
        """
        Consume one page.

        Returns:
            The segment completed by this page, or None

        Raises:
            ValueError: If pages arrive out of order or after finish()
            InputError: If the page has no key under the "fail" policy
        """
        if self.state == SegmenterState.FINISHED:
            raise ValueError("Segmenter already finished")
        if page != self.last_page + 1:
            raise ValueError(f"Expected page {self.last_page + 1}, got page {page}")

        key = self.matcher.key_for(text, page)
        self.last_page = page

        if key is None and self.no_match == NoMatchPolicy.FAIL:
            raise InputError(f"No key found on page {page}")

        if self.state == SegmenterState.IDLE:
            self._start(key, page)
            self.state = SegmenterState.ACCUMULATING
            return None

        if key is None or key == self.current_key:
            return None

        completed = self._emit(end=page - 1)
        self._start(key, page)
        return completed

    def finish(self) -> Optional[Segment]:
        """
        Flush the open segment after the last page.

        Returns:
            The final segment, or None if no page was processed
        """
        state, self.state = self.state, SegmenterState.FINISHED
        if state != SegmenterState.ACCUMULATING:
            return None
        return self._emit(end=self.last_page)

    def _start(self, key: Optional[str], page: int) -> None:
        self.current_key = key
        self.segment_start = page
        self.pending_name = self.namer.name_for(key)
        logger.debug("New segment at page %d (key=%r)", page, key)

    def _emit(self, end: int) -> Segment:
        return Segment(
            start=self.segment_start,
            end=end,
            key=self.current_key,
            output_name=self.namer.claim(self.pending_name),
        )


def segment_pages(
    pages: Iterable[str],
    matcher: KeyMatcher,
    namer: OutputNamer = None,
    no_match: Union[NoMatchPolicy, str] = NoMatchPolicy.CARRY_FORWARD
) -> Iterator[Segment]:
    """
    Lazily segment an iterable of page texts (page 1 first).

    Yields each segment as soon as the page after it is seen, and the final
    segment once the iterable is exhausted.
    """
    segmenter = Segmenter(matcher, namer or OutputNamer(), no_match=no_match)
    for page, text in enumerate(pages, 1):
        completed = segmenter.process_page(page, text)
        if completed is not None:
            yield completed
    last = segmenter.finish()
    if last is not None:
        yield last


def build_toc(segments: Iterable[Segment]) -> str:
    """
    Build a table of contents string from segments.

    Example:
        print(build_toc(segments))
        # [1-2] A.pdf
        # [3-5] B.pdf
    """
    return "\n".join(
        f"[{seg.start}-{seg.end}] {seg.output_name}" for seg in segments
    )
