"""Structural normalization of tables and code blocks before conversion."""

from __future__ import annotations

import html
import logging
import re

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

LANGUAGE_CLASS_PATTERN = re.compile(r"language-(\w+)")


def class_string(element: Tag) -> str:
    """Return an element's class attribute as one space-separated string."""
    classes = element.get("class")
    if not classes:
        return ""
    if isinstance(classes, str):
        return classes
    return " ".join(classes)


def _new_tag(element: Tag, name: str) -> Tag:
    """Create a tag owned by the same document as ``element``."""
    root = element
    while root.parent is not None:
        root = root.parent
    if not isinstance(root, BeautifulSoup):
        raise ValueError("Element is not attached to a parsed document")
    return root.new_tag(name)


def _own_rows(table: Tag) -> list[Tag]:
    """Rows belonging to ``table`` itself, excluding rows of nested tables."""
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def _own_section(table: Tag, name: str) -> Tag | None:
    for section in table.find_all(name):
        if section.find_parent("table") is table:
            return section
    return None


class TableNormalizer:
    """
    Rewrites table markup into a canonical ``thead``/``tbody`` shape.

    * A table without ``tbody`` gets one wrapped around its body rows
      (rows outside ``thead`` and ``tfoot``).
    * When the first row holds only header cells and there is no ``thead``,
      that row is moved into a new ``thead`` ahead of the body.
    """

    def normalize(self, content: Tag) -> Tag:
        for table in content.find_all("table"):
            rows = _own_rows(table)
            if not rows:
                continue

            body_rows = [row for row in rows if row.parent is None or row.parent.name not in ("thead", "tfoot")]
            if body_rows and _own_section(table, "tbody") is None:
                tbody = _new_tag(table, "tbody")
                body_rows[0].insert_before(tbody)
                for row in body_rows:
                    tbody.append(row.extract())

            first = rows[0]
            if _own_section(table, "thead") is None and self._is_header_row(first):
                thead = _new_tag(table, "thead")
                container = first.parent
                if container is not None and container is not table and container.name in ("tbody", "tfoot"):
                    container.insert_before(thead)
                else:
                    first.insert_before(thead)
                thead.append(first.extract())

        return content

    @staticmethod
    def _is_header_row(row: Tag) -> bool:
        cells = row.find_all(["td", "th"], recursive=False)
        return bool(cells) and all(cell.name == "th" for cell in cells)


class CodeBlockNormalizer:
    """
    Prepares ``pre > code`` blocks for fenced output.

    Syntax-highlighting ``span`` tokens are unwrapped and ``<br>`` becomes a
    newline. Any other markup left inside the code is escaped so it reaches
    the output as literal text rather than being converted as structure.
    A ``language-<token>`` class found on the code element is copied onto
    the enclosing ``pre``.
    """

    def normalize(self, content: Tag) -> Tag:
        blocks = 0
        for code in content.select("pre > code"):
            pre = code.parent
            language = self.detect_language(code)

            for br in code.find_all("br"):
                br.replace_with("\n")
            for span in code.find_all("span"):
                span.unwrap()

            if code.find(True) is not None:
                self._escape_markup(code)

            if language and pre is not None:
                pre["class"] = f"language-{language}"
            blocks += 1

        logger.debug(f"Normalized {blocks} code blocks")
        return content

    @staticmethod
    def detect_language(element: Tag) -> str:
        match = LANGUAGE_CLASS_PATTERN.search(class_string(element))
        return match.group(1) if match else ""

    @staticmethod
    def _escape_markup(code: Tag) -> None:
        markup = code.decode_contents()
        escaped = markup.replace("<", "&lt;").replace(">", "&gt;")
        code.clear()
        code.append(html.unescape(escaped))
