"""HTML to Markdown conversion."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from urllib.parse import urljoin

import html2text
from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from .rules import DEFAULT_RULES, ConversionRule

logger = logging.getLogger(__name__)

# Elements rendered as blocks when no rule claims them
BLOCK_ELEMENTS = frozenset(
    {
        "address",
        "article",
        "aside",
        "audio",
        "blockquote",
        "body",
        "canvas",
        "center",
        "dd",
        "details",
        "dir",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "hr",
        "html",
        "li",
        "main",
        "menu",
        "nav",
        "ol",
        "output",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
        "video",
    }
)

SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)

WHITESPACE_PATTERN = re.compile(r"[ \t\r\n\f]+")
INLINE_ESCAPE_PATTERN = re.compile(r"([\\*`\[\]_])")
LEADING_ESCAPE_PATTERNS = (
    re.compile(r"^(-)"),
    re.compile(r"^(\+ )"),
    re.compile(r"^(=+)"),
    re.compile(r"^(#{1,6} )"),
    re.compile(r"^(~~~)"),
    re.compile(r"^(>)"),
)
ORDERED_LIST_ESCAPE_PATTERN = re.compile(r"^(\d+)\. ")


def escape_markdown(text: str) -> str:
    """Backslash-escape characters that would otherwise become Markdown syntax."""
    text = INLINE_ESCAPE_PATTERN.sub(r"\\\1", text)
    for pattern in LEADING_ESCAPE_PATTERNS:
        text = pattern.sub(r"\\\1", text)
    return ORDERED_LIST_ESCAPE_PATTERN.sub(r"\1\\. ", text)


def join_fragments(output: str, fragment: str) -> str:
    """
    Append a fragment, merging the newlines at the seam.

    The longer newline run of the two sides is kept (at most one blank
    line), and spaces dangling at a line boundary are dropped. Leading
    spaces of the first fragment are left alone; callers decide whether
    their container may drop them.
    """
    if fragment.startswith("\n"):
        output = output.rstrip(" \t")
    if output.endswith("\n"):
        fragment = fragment.lstrip(" \t")
    if not fragment:
        return output

    head = output.rstrip("\n")
    tail = fragment.lstrip("\n")
    newlines = min(2, max(len(output) - len(head), len(fragment) - len(tail)))
    return head + "\n" * newlines + tail


class MarkdownRenderer:
    """
    Walks one element tree and renders it with an ordered rule list.

    A renderer lives for a single conversion; rules call back into it to
    convert a node's children or resolve a URL against the page address.
    """

    def __init__(
        self,
        rules: Iterable[ConversionRule],
        base_url: str,
        escape: bool = True,
    ) -> None:
        self.rules = tuple(rules)
        self.base_url = base_url
        self.escape = escape

    def resolve_url(self, href: str) -> str:
        """Make ``href`` absolute against the page URL."""
        if href.startswith(("http://", "https://")) or not self.base_url:
            return href
        return urljoin(self.base_url, href)

    def rule_for(self, node: Tag) -> ConversionRule | None:
        for rule in self.rules:
            if rule.matches(node):
                return rule
        return None

    def render_text(self, text: str) -> str:
        text = WHITESPACE_PATTERN.sub(" ", text)
        return escape_markdown(text) if self.escape else text

    def render_node(self, node: object) -> str:
        if isinstance(node, SKIPPED_STRINGS):
            return ""
        if isinstance(node, NavigableString):
            return self.render_text(str(node))
        if not isinstance(node, Tag):
            return ""

        rule = self.rule_for(node)
        if rule is not None:
            return rule.replacement(self, node)

        content = self.convert_children(node)
        if node.name in BLOCK_ELEMENTS:
            return "\n\n" + content.strip() + "\n\n"
        return content

    def convert_children(self, node: Tag) -> str:
        # Inline elements keep edge whitespace for the rule to move outside its markers
        block = node.name in BLOCK_ELEMENTS or isinstance(node, BeautifulSoup)
        output = ""
        for child in node.children:
            fragment = self.render_node(child)
            if block and not output:
                fragment = fragment.lstrip(" \t")
            output = join_fragments(output, fragment)
        return output


class RuleBasedConverter:
    """
    Converts an element's content to Markdown with ordered conversion rules.

    Custom rules for code blocks, tables, links and definition lists are
    checked first, then the generic rules for headings, paragraphs, lists,
    emphasis and so on. Elements no rule claims are rendered as plain
    blocks or inline runs.

    Example:
        converter = RuleBasedConverter()
        markdown = converter.convert(main_content, "https://docs.example.com/api")
    """

    def __init__(
        self,
        rules: Iterable[ConversionRule] | None = None,
        escape_markdown: bool = True,
    ) -> None:
        """
        Initialize the converter.

        Args:
            rules: Ordered rules, first match wins (defaults to the built-in set)
            escape_markdown: Escape Markdown metacharacters found in text
        """
        self._rules = tuple(rules) if rules is not None else DEFAULT_RULES
        self._escape_markdown = escape_markdown

    @property
    def rules(self) -> tuple[ConversionRule, ...]:
        return self._rules

    def convert(self, element: Tag, url: str) -> str:
        """
        Convert the children of ``element`` to Markdown.

        Args:
            element: Located, cleaned main-content element
            url: Page URL used to resolve relative links

        Returns:
            Markdown string (not yet post-processed)
        """
        renderer = MarkdownRenderer(self._rules, url, escape=self._escape_markdown)
        markdown = renderer.convert_children(element)
        logger.debug(f"Rendered {len(markdown)} characters of Markdown from <{element.name}>")
        return markdown


class Html2TextConverter:
    """
    Converts HTML content to Markdown with html2text.

    Alternative engine for pages the rule set handles poorly. Produces
    output in the same conventions where html2text allows it (ATX headings,
    inline links, fenced code marks).

    Example:
        converter = Html2TextConverter()
        markdown = converter.convert(main_content, "https://docs.example.com/page")
    """

    def __init__(
        self,
        body_width: int = 0,
        ignore_images: bool = False,
        escape_snob: bool = False,
    ):
        """
        Initialize the html2text converter.

        Args:
            body_width: Max line width (0 = no wrapping)
            ignore_images: Skip image conversion
            escape_snob: Escape all special Markdown chars
        """
        self._converter = html2text.HTML2Text()

        # Line width (0 = no wrapping for consistent output)
        self._converter.body_width = body_width

        # Link handling
        self._converter.inline_links = True
        self._converter.wrap_links = False
        # Angle-bracketed URLs would defeat _fix_relative_links
        self._converter.protect_links = False

        # Content handling
        self._converter.ignore_images = ignore_images
        self._converter.ignore_tables = False
        self._converter.unicode_snob = True
        self._converter.escape_snob = escape_snob
        self._converter.mark_code = True
        self._converter.ul_item_mark = "-"
        self._converter.emphasis_mark = "_"
        self._converter.strong_mark = "**"
        self._converter.default_image_alt = ""
        self._converter.single_line_break = False

    def _fix_relative_links(self, markdown: str, base_url: str) -> str:
        """Ensure all links are absolute."""

        def replace_link(match: re.Match[str]) -> str:
            text = match.group(1)
            url = match.group(2)

            # Skip anchors and already absolute URLs
            if url.startswith(("#", "http://", "https://", "mailto:", "tel:")):
                result: str = match.group(0)
                return result

            return f"[{text}]({urljoin(base_url, url)})"

        return re.sub(r"\[([^\]]+)\]\(([^)]+)\)", replace_link, markdown)

    def _fence_code_marks(self, markdown: str) -> str:
        """Turn html2text's [code]...[/code] marks into fenced blocks."""
        markdown = re.sub(r"^[ \t]*\[code\][ \t]*$", "```", markdown, flags=re.MULTILINE)
        return re.sub(r"^[ \t]*\[/code\][ \t]*$", "```", markdown, flags=re.MULTILINE)

    def convert(self, element: Tag, url: str) -> str:
        """
        Convert the children of ``element`` to Markdown.

        Args:
            element: Located, cleaned main-content element
            url: Page URL used to resolve relative links

        Returns:
            Markdown string (not yet post-processed)
        """
        self._converter.baseurl = url
        markdown = self._converter.handle(element.decode_contents())
        markdown = self._fence_code_marks(markdown)
        return self._fix_relative_links(markdown, url)
