"""Tests for ContentLocator."""

from bs4 import BeautifulSoup

from apidocs2md.conversion import ContentCandidate, ContentLocator

LONG = "Documentation text that is long enough to count as content. " * 3


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestSelectorMatching:
    """Tests for the prioritized selector list."""

    def test_main_beats_article(self):
        """Test that main is preferred over article."""
        soup = parse(f"<body><article>{LONG}article</article><main>{LONG}main</main></body>")

        assert ContentLocator().locate(soup).name == "main"

    def test_short_match_is_skipped(self):
        """Test that a selector match with too little text is passed over."""
        soup = parse(f"<body><main>Loading...</main><article>{LONG}</article></body>")

        assert ContentLocator().locate(soup).name == "article"

    def test_role_and_class_selectors(self):
        """Test ARIA role and documentation class selectors."""
        soup = parse(f'<body><div role="main">{LONG}</div></body>')
        assert ContentLocator().locate(soup).get("role") == "main"

        soup = parse(f'<body><div class="markdown-body">{LONG}</div></body>')
        assert ContentLocator().locate(soup)["class"] == ["markdown-body"]

    def test_custom_selectors(self):
        """Test that configured selectors replace the defaults."""
        soup = parse(f'<body><main>{LONG}</main><section id="reference">{LONG}</section></body>')
        locator = ContentLocator(content_selectors=["#reference"])

        assert locator.locate(soup).name == "section"


class TestLargestBlock:
    """Tests for the largest-div fallback."""

    def test_picks_largest_div(self):
        """Test that the div with the most text wins."""
        soup = parse(f'<body><div id="small">{LONG}</div><div id="large">{LONG}{LONG}</div></body>')

        assert ContentLocator().locate(soup)["id"] == "large"

    def test_tie_goes_to_first(self):
        """Test that of two equally long sibling divs the first is selected."""
        text = "x" * 150
        soup = parse(f'<body><div id="first">{text}</div><div id="second">{text}</div></body>')

        assert ContentLocator().locate(soup)["id"] == "first"

    def test_candidates_in_document_order(self):
        """Test that only divs above the threshold are candidates, in order."""
        soup = parse(f'<body><div id="a">{LONG}</div><div id="b">short</div><div id="c">{LONG}</div></body>')

        candidates = ContentLocator().candidates(soup)

        assert [c.element["id"] for c in candidates] == ["a", "c"]
        assert all(isinstance(c, ContentCandidate) for c in candidates)
        assert candidates[0].text_length == len(LONG.strip())

    def test_no_candidates(self):
        """Test that largest_block returns None without qualifying divs."""
        soup = parse("<body><div>tiny</div></body>")

        assert ContentLocator().largest_block(soup) is None


class TestBodyFallback:
    """Tests for the final fallback."""

    def test_falls_back_to_body(self):
        """Test that the body is returned when nothing qualifies."""
        soup = parse("<html><body><p>Short page</p></body></html>")

        assert ContentLocator().locate(soup).name == "body"

    def test_falls_back_to_document_without_body(self):
        """Test that the whole document is returned when there is no body."""
        soup = parse("<h1>Fragment</h1><p>No body element here</p>")

        assert ContentLocator().locate(soup) is soup

    def test_does_not_mutate_tree(self):
        """Test that locating leaves the document untouched."""
        soup = parse(f'<body><main>short</main><div id="a">{LONG}</div><div id="b">{LONG}</div></body>')
        before = str(soup)

        ContentLocator().locate(soup)

        assert str(soup) == before
