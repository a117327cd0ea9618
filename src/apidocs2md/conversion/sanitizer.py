"""Removal of boilerplate markup and non-essential attributes."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bs4 import Tag

from ..models.config import DEFAULT_PRESERVED_ATTRIBUTES, DEFAULT_REMOVE_SELECTORS

logger = logging.getLogger(__name__)

# Elements that carry meaning without carrying text
KEEP_WHEN_EMPTY = frozenset({"img", "br", "hr", "td", "th"})


class MarkupSanitizer:
    """
    Strips navigation, ads and other non-content markup from a parsed page.

    Two passes are offered:

    * ``sanitize`` prunes whole subtrees matching the removal selectors and
      runs on the full document before the main content is located.
    * ``clean`` runs on the located content only: it drops elements with no
      text (unless they hold an image) and removes every attribute outside the
      preserved set, so later passes only see ``class``/``href``/``src``/
      ``alt``/``title``.

    Example:
        sanitizer = MarkupSanitizer()
        sanitizer.sanitize(soup)
        sanitizer.clean(main_content)
    """

    def __init__(
        self,
        remove_selectors: Iterable[str] | None = None,
        preserved_attributes: Iterable[str] | None = None,
    ) -> None:
        """
        Initialize the sanitizer.

        Args:
            remove_selectors: CSS selectors to remove (extends defaults)
            preserved_attributes: Attributes kept by ``clean`` (replaces defaults)
        """
        self._remove_selectors = list(DEFAULT_REMOVE_SELECTORS)
        if remove_selectors:
            self._remove_selectors.extend(s for s in remove_selectors if s not in self._remove_selectors)
        self._preserved_attributes = frozenset(
            preserved_attributes if preserved_attributes is not None else DEFAULT_PRESERVED_ATTRIBUTES
        )

    @property
    def remove_selectors(self) -> list[str]:
        return list(self._remove_selectors)

    def sanitize(self, root: Tag) -> Tag:
        """
        Remove every node matching the removal selectors.

        Args:
            root: Document (or subtree) to prune in place

        Returns:
            The same root, pruned
        """
        removed = 0
        for selector in self._remove_selectors:
            for element in root.select(selector):
                # Already gone with an ancestor matched earlier
                if element.decomposed:
                    continue
                element.decompose()
                removed += 1

        logger.debug(f"Removed {removed} boilerplate elements")
        return root

    def clean(self, content: Tag) -> Tag:
        """
        Drop empty elements and strip non-essential attributes.

        Empty ``br``, ``hr``, ``td`` and ``th`` elements are kept on purpose,
        unlike other text-less elements: dropping them would merge lines and
        shift table cells out of their columns.

        Args:
            content: Located main-content element, modified in place

        Returns:
            The same element
        """
        for element in content.find_all(True):
            if element.decomposed:
                continue

            if element.name not in KEEP_WHEN_EMPTY and self._is_empty(element):
                element.decompose()
                continue

            self._strip_attributes(element)

        return content

    @staticmethod
    def _is_empty(element: Tag) -> bool:
        # Whitespace inside preformatted code is content
        if element.find_parent("pre") is not None:
            return False
        return not element.get_text().strip() and element.find("img") is None

    def _strip_attributes(self, element: Tag) -> None:
        # Collect first; attrs can't change size during iteration
        attrs_to_remove = [attr for attr in element.attrs if attr not in self._preserved_attributes]
        for attr in attrs_to_remove:
            del element[attr]
