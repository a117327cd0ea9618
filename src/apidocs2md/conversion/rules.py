"""
Conversion rules for the rule-based HTML to Markdown converter.

A rule pairs a node filter with a replacement function. The converter walks
the tree and, for every element, applies the first rule whose filter
matches. Custom rules (code, tables, links, definition lists) come before
the generic ones so that, for example, a table is never flattened into a
paragraph.

Replacement functions receive the renderer and the node and must return a
self-contained fragment: block fragments are surrounded by newlines, inline
fragments are not.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from bs4 import Comment, NavigableString, Tag

from .normalizers import class_string

if TYPE_CHECKING:
    from .markdown import MarkdownRenderer

NodeFilter = Union[tuple[str, ...], Callable[[Tag], bool]]
Replacement = Callable[["MarkdownRenderer", Tag], str]

CODE_LANGUAGE_PATTERN = re.compile(r"(?:language|lang)-(\w+)")
BACKTICK_RUN_PATTERN = re.compile(r"`+")
BLANK_LINES_PATTERN = re.compile(r"\n[ \t]*(?:\n[ \t]*)+\n")
LEADING_BLANK_LINES_PATTERN = re.compile(r"^(?:[ \t]*\n)+")
ALIGNMENT_MARKER = ":---:"


@dataclass(frozen=True)
class ConversionRule:
    """
    A (filter, replacement) pair.

    Attributes:
        name: Identifier used in logs and tests
        filter: Tag names the rule applies to, or a predicate over the node
        replacement: Produces the Markdown fragment for a matching node
    """

    name: str
    filter: NodeFilter
    replacement: Replacement

    def matches(self, node: Tag) -> bool:
        if isinstance(self.filter, tuple):
            return node.name in self.filter
        return self.filter(node)


def flanking_whitespace(content: str) -> tuple[str, str, str]:
    """Split ``content`` into (leading whitespace, inner text, trailing whitespace)."""
    inner = content.strip()
    if not inner:
        return content, "", ""
    leading = content[: len(content) - len(content.lstrip())]
    trailing = content[len(content.rstrip()) :]
    return leading, inner, trailing


def longest_backtick_run(text: str) -> int:
    return max((len(run) for run in BACKTICK_RUN_PATTERN.findall(text)), default=0)


def own_rows(table: Tag) -> list[Tag]:
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def row_cells(row: Tag) -> list[str]:
    """Plain-text cells of a table row, ready to sit between pipes."""
    cells = []
    for cell in row.find_all(["td", "th"], recursive=False):
        text = " ".join(cell.get_text().split()).replace("|", "\\|")
        cells.append(text or " ")
    return cells


def pipe_row(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


# --- custom rules ---------------------------------------------------------


def is_code_block(node: Tag) -> bool:
    if node.name == "pre":
        return True
    # A multi-line <code> outside <pre> is still a block of code
    return node.name == "code" and node.find_parent("pre") is None and "\n" in node.get_text().strip()


def code_language(node: Tag) -> str:
    """Language hint from ``language-*``/``lang-*`` classes or ``data-language``."""
    candidates = [node]
    code = node.find("code")
    if isinstance(code, Tag):
        candidates.append(code)

    for element in candidates:
        match = CODE_LANGUAGE_PATTERN.search(class_string(element))
        if match:
            return match.group(1)
    for element in candidates:
        data_language = element.get("data-language")
        if isinstance(data_language, str) and data_language.strip():
            return data_language.strip()
    return ""


def code_text(node: Tag) -> str:
    """Raw text of a code element, with ``<br>`` read as a newline."""
    parts = []
    for descendant in node.descendants:
        if isinstance(descendant, Tag):
            if descendant.name == "br":
                parts.append("\n")
        elif isinstance(descendant, NavigableString) and not isinstance(descendant, Comment):
            parts.append(str(descendant))
    return "".join(parts)


def clean_code(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = LEADING_BLANK_LINES_PATTERN.sub("", text)
    text = text.rstrip()
    return BLANK_LINES_PATTERN.sub("\n\n", text)


def replace_code_block(renderer: MarkdownRenderer, node: Tag) -> str:
    body = clean_code(code_text(node))
    fence = "`" * max(3, longest_backtick_run(body) + 1)
    return f"\n{fence}{code_language(node)}\n{body}\n{fence}\n"


def replace_table(renderer: MarkdownRenderer, node: Tag) -> str:
    rows = own_rows(node)
    header_row = next((row for row in rows if row.parent is not None and row.parent.name == "thead"), None)

    headers = row_cells(header_row) if header_row is not None else []
    body_rows = [row_cells(row) for row in rows if row is not header_row]
    body_rows = [cells for cells in body_rows if cells]

    width = max([len(headers)] + [len(cells) for cells in body_rows])
    if width == 0:
        return ""

    if headers:
        headers += [" "] * (width - len(headers))
    else:
        headers = [f"Column {i + 1}" for i in range(width)]

    lines = [pipe_row(headers), pipe_row([ALIGNMENT_MARKER] * width)]
    for cells in body_rows:
        lines.append(pipe_row(cells + [" "] * (width - len(cells))))

    return "\n" + "\n".join(lines) + "\n\n"


def replace_link(renderer: MarkdownRenderer, node: Tag) -> str:
    content = renderer.convert_children(node)
    href = node.get("href")
    if not isinstance(href, str) or not href.strip():
        return content

    leading, label, trailing = flanking_whitespace(content.replace("\n", " "))
    url = renderer.resolve_url(href.strip()).replace("(", "\\(").replace(")", "\\)")

    title = node.get("title")
    title_part = ""
    if isinstance(title, str) and title:
        safe_title = title.replace('"', '\\"')
        title_part = f' "{safe_title}"'

    return f"{leading}[{label}]({url}{title_part}){trailing}"


def replace_definition_list(renderer: MarkdownRenderer, node: Tag) -> str:
    return "\n" + renderer.convert_children(node) + "\n"


def replace_definition_term(renderer: MarkdownRenderer, node: Tag) -> str:
    return "\n**" + renderer.convert_children(node).strip() + "**\n"


def replace_definition_description(renderer: MarkdownRenderer, node: Tag) -> str:
    return renderer.convert_children(node).strip() + "\n"


CUSTOM_RULES: tuple[ConversionRule, ...] = (
    ConversionRule("codeBlocks", is_code_block, replace_code_block),
    ConversionRule("tables", ("table",), replace_table),
    ConversionRule("links", ("a",), replace_link),
    ConversionRule("definitionList", ("dl",), replace_definition_list),
    ConversionRule("definitionTerm", ("dt",), replace_definition_term),
    ConversionRule("definitionDescription", ("dd",), replace_definition_description),
)


# --- generic rules --------------------------------------------------------


def replace_nothing(renderer: MarkdownRenderer, node: Tag) -> str:
    return ""


def replace_paragraph(renderer: MarkdownRenderer, node: Tag) -> str:
    return "\n\n" + renderer.convert_children(node).strip() + "\n\n"


def replace_line_break(renderer: MarkdownRenderer, node: Tag) -> str:
    return "  \n"


def replace_heading(renderer: MarkdownRenderer, node: Tag) -> str:
    level = int(node.name[1])
    text = " ".join(renderer.convert_children(node).split())
    return f"\n\n{'#' * level} {text}\n\n"


def replace_blockquote(renderer: MarkdownRenderer, node: Tag) -> str:
    content = renderer.convert_children(node).strip()
    if not content:
        return ""
    quoted = "\n".join(f"> {line}" if line.strip() else ">" for line in content.split("\n"))
    return f"\n\n{quoted}\n\n"


def replace_list(renderer: MarkdownRenderer, node: Tag) -> str:
    content = renderer.convert_children(node)
    parent = node.parent
    if parent is not None and parent.name == "li" and parent.find_all(True, recursive=False)[-1] is node:
        return "\n" + content
    return "\n\n" + content + "\n\n"


def replace_list_item(renderer: MarkdownRenderer, node: Tag) -> str:
    content = renderer.convert_children(node).strip()
    content = content.replace("\n", "\n    ")
    content = "\n".join(line.rstrip() for line in content.split("\n"))

    prefix = "- "
    parent = node.parent
    if parent is not None and parent.name == "ol":
        start = parent.get("start")
        first = int(start) if isinstance(start, str) and start.isdigit() else 1
        # Tag equality is structural; identical items need an identity lookup
        items = parent.find_all("li", recursive=False)
        index = next(i for i, item in enumerate(items) if item is node)
        prefix = f"{first + index}. "

    return prefix + content + "\n"


def replace_horizontal_rule(renderer: MarkdownRenderer, node: Tag) -> str:
    return "\n\n---\n\n"


def replace_inline_code(renderer: MarkdownRenderer, node: Tag) -> str:
    code = node.get_text().replace("\n", " ")
    if not code:
        return ""
    delimiter = "`" * (longest_backtick_run(code) + 1)
    padding = " " if code.startswith("`") or code.endswith("`") else ""
    return f"{delimiter}{padding}{code}{padding}{delimiter}"


def _wrap_inline(renderer: MarkdownRenderer, node: Tag, delimiter: str) -> str:
    leading, inner, trailing = flanking_whitespace(renderer.convert_children(node))
    if not inner:
        return leading
    return f"{leading}{delimiter}{inner}{delimiter}{trailing}"


def replace_strong(renderer: MarkdownRenderer, node: Tag) -> str:
    return _wrap_inline(renderer, node, "**")


def replace_emphasis(renderer: MarkdownRenderer, node: Tag) -> str:
    return _wrap_inline(renderer, node, "_")


def replace_image(renderer: MarkdownRenderer, node: Tag) -> str:
    src = node.get("src")
    if not isinstance(src, str) or not src.strip():
        return ""
    alt = node.get("alt") or ""
    title = node.get("title")
    title_part = f' "{title}"' if isinstance(title, str) and title else ""
    return f"![{alt}]({renderer.resolve_url(src.strip())}{title_part})"


GENERIC_RULES: tuple[ConversionRule, ...] = (
    ConversionRule(
        "remove",
        ("head", "title", "meta", "link", "template", "noscript", "svg", "button", "input", "select", "textarea"),
        replace_nothing,
    ),
    ConversionRule("paragraph", ("p",), replace_paragraph),
    ConversionRule("lineBreak", ("br",), replace_line_break),
    ConversionRule("heading", ("h1", "h2", "h3", "h4", "h5", "h6"), replace_heading),
    ConversionRule("blockquote", ("blockquote",), replace_blockquote),
    ConversionRule("list", ("ul", "ol"), replace_list),
    ConversionRule("listItem", ("li",), replace_list_item),
    ConversionRule("horizontalRule", ("hr",), replace_horizontal_rule),
    ConversionRule("inlineCode", ("code", "kbd", "samp", "tt"), replace_inline_code),
    ConversionRule("strong", ("strong", "b"), replace_strong),
    ConversionRule("emphasis", ("em", "i"), replace_emphasis),
    ConversionRule("image", ("img",), replace_image),
)

DEFAULT_RULES: tuple[ConversionRule, ...] = CUSTOM_RULES + GENERIC_RULES
