"""Text-level normalization of converted Markdown."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from itertools import groupby

from ..errors import EmptyExtractionError, InsufficientExtractionError

logger = logging.getLogger(__name__)

EXCESS_NEWLINES_PATTERN = re.compile(r"\n{3,}")
FENCE_PATTERN = re.compile(r"^[ \t]*(`{3,})(.*)$")
ADJACENT_LINKS_PATTERN = re.compile(r"(\[[^\]]*\]\([^\)]*\))\s*\n\s*(?=\[[^\]]*\]\([^\)]*\))")
TABLE_ROW_BREAK_PATTERN = re.compile(r"\|\s*\n\s*\|")


@dataclass(frozen=True)
class PostProcessPass:
    """A named, independent text rewrite."""

    name: str
    apply: Callable[[str], str]

    def __call__(self, text: str) -> str:
        return self.apply(text)


def collapse_blank_lines(text: str) -> str:
    return EXCESS_NEWLINES_PATTERN.sub("\n\n", text)


def code_line_flags(lines: list[str]) -> list[bool]:
    """Flag the lines that belong to a fenced code block, fences included."""
    flags: list[bool] = []
    open_fence: str | None = None

    for line in lines:
        match = FENCE_PATTERN.match(line)
        if open_fence is None:
            if match is not None and "`" not in match.group(2):
                open_fence = match.group(1)
                flags.append(True)
            else:
                flags.append(False)
            continue

        flags.append(True)
        if match is not None and len(match.group(1)) >= len(open_fence) and not match.group(2).strip():
            open_fence = None

    return flags


def tighten_code_fences(text: str) -> str:
    """Drop the blank line directly after an opening code fence."""
    lines = text.split("\n")
    result: list[str] = []
    open_fence: str | None = None
    after_opening = False

    for line in lines:
        if after_opening:
            after_opening = False
            if line == "":
                continue

        match = FENCE_PATTERN.match(line)
        if match is None:
            result.append(line)
            continue

        fence, rest = match.groups()
        if open_fence is None:
            if "`" not in rest:
                open_fence = fence
                after_opening = True
        elif len(fence) >= len(open_fence) and not rest.strip():
            open_fence = None
        result.append(line)

    return "\n".join(result)


def normalize_spacing(text: str) -> str:
    return text.replace("\n\n\n", "\n\n")


def join_adjacent_links(text: str) -> str:
    """
    Put a link that starts the next line onto the line of the previous link.

    Aimed at link-only lines left over from navigation. It cannot tell those
    apart from prose, so two paragraphs that each consist of one link end up
    on a single line too. Code blocks are left untouched.
    """
    lines = text.split("\n")
    chunks = []
    for in_code, group in groupby(zip(code_line_flags(lines), lines), key=lambda pair: pair[0]):
        chunk = "\n".join(line for _, line in group)
        chunks.append(chunk if in_code else ADJACENT_LINKS_PATTERN.sub(r"\1 ", chunk))
    return "\n".join(chunks)


def fix_table_rows(text: str) -> str:
    return TABLE_ROW_BREAK_PATTERN.sub("|\n|", text)


def trim(text: str) -> str:
    return text.strip()


DEFAULT_PASSES: tuple[PostProcessPass, ...] = (
    PostProcessPass("collapse_blank_lines", collapse_blank_lines),
    PostProcessPass("tighten_code_fences", tighten_code_fences),
    PostProcessPass("normalize_spacing", normalize_spacing),
    PostProcessPass("join_adjacent_links", join_adjacent_links),
    PostProcessPass("fix_table_rows", fix_table_rows),
    PostProcessPass("trim", trim),
)


class PostProcessor:
    """
    Runs the ordered normalization passes and validates the result.

    The fence pass has to run after blank lines are collapsed, and the
    second spacing pass cleans up whatever the first two leave behind, so
    the order of ``passes`` matters.

    Example:
        post = PostProcessor(min_length=100)
        markdown = post.validate(post.process(raw_markdown))
    """

    def __init__(
        self,
        passes: Iterable[PostProcessPass] | None = None,
        min_length: int = 100,
    ) -> None:
        self._passes = tuple(passes) if passes is not None else DEFAULT_PASSES
        self._min_length = min_length

    @property
    def passes(self) -> tuple[PostProcessPass, ...]:
        return self._passes

    def process(self, markdown: str) -> str:
        for post_pass in self._passes:
            markdown = post_pass(markdown)
        return markdown

    def validate(self, markdown: str) -> str:
        """
        Reject output that signals a failed extraction.

        Raises:
            EmptyExtractionError: If nothing but whitespace is left
            InsufficientExtractionError: If shorter than the minimum length
        """
        if not markdown.strip():
            raise EmptyExtractionError()
        if len(markdown) < self._min_length:
            logger.debug(f"Extracted {len(markdown)} characters, need at least {self._min_length}")
            raise InsufficientExtractionError(len(markdown), self._min_length)
        return markdown

    def run(self, markdown: str) -> str:
        return self.validate(self.process(markdown))
