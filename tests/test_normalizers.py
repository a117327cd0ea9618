"""Tests for table and code block normalizers."""

from bs4 import BeautifulSoup

from apidocs2md.conversion import CodeBlockNormalizer, TableNormalizer


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestTableNormalizer:
    """Tests for TableNormalizer."""

    def test_wraps_rows_in_tbody(self):
        """Test that bare rows are wrapped in a tbody."""
        soup = parse("<table><tr><td>1</td></tr><tr><td>2</td></tr></table>")

        TableNormalizer().normalize(soup)

        tbody = soup.table.tbody
        assert tbody is not None
        assert len(tbody.find_all("tr")) == 2

    def test_promotes_header_row(self):
        """Test that an all-th first row moves into a new thead before the body."""
        soup = parse("<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td></tr></table>")

        TableNormalizer().normalize(soup)

        sections = [child.name for child in soup.table.find_all(["thead", "tbody"], recursive=False)]
        assert sections == ["thead", "tbody"]
        assert [th.get_text() for th in soup.table.thead.find_all("th")] == ["A", "B"]
        assert len(soup.table.tbody.find_all("tr")) == 1

    def test_mixed_first_row_not_promoted(self):
        """Test that a first row mixing th and td stays in the body."""
        soup = parse("<table><tr><th>Key</th><td>value</td></tr></table>")

        TableNormalizer().normalize(soup)

        assert soup.table.thead is None

    def test_existing_sections_kept(self):
        """Test that thead and tfoot rows are not moved into the body."""
        soup = parse(
            "<table><thead><tr><th>A</th></tr></thead>"
            "<tr><td>1</td></tr>"
            "<tfoot><tr><td>sum</td></tr></tfoot></table>"
        )

        TableNormalizer().normalize(soup)

        assert soup.table.thead.get_text() == "A"
        assert soup.table.tbody.get_text() == "1"
        assert soup.table.tfoot.get_text() == "sum"

    def test_nested_table_rows_stay_put(self):
        """Test that rows of a nested table are not taken by the outer one."""
        soup = parse("<table><tbody><tr><td><table><tr><td>inner</td></tr></table></td></tr></tbody></table>")

        TableNormalizer().normalize(soup)

        inner = soup.table.find("table")
        assert inner.tbody is not None
        assert inner.tbody.get_text() == "inner"
        assert len(soup.table.find_all("tbody", recursive=False)) == 1


class TestCodeBlockNormalizer:
    """Tests for CodeBlockNormalizer."""

    def test_unwraps_highlight_spans(self):
        """Test that syntax-highlighting spans are removed but their text kept."""
        soup = parse(
            '<pre><code class="language-python"><span class="k">def</span> '
            '<span class="nf">f</span>():</code></pre>'
        )

        CodeBlockNormalizer().normalize(soup)

        assert soup.code.find("span") is None
        assert soup.code.get_text() == "def f():"

    def test_copies_language_to_pre(self):
        """Test that the language class is copied onto the pre element."""
        soup = parse('<pre><code class="hljs language-typescript">let a = 1;</code></pre>')

        CodeBlockNormalizer().normalize(soup)

        assert soup.pre["class"] == "language-typescript"

    def test_line_breaks_become_newlines(self):
        """Test that br inside code becomes a newline character."""
        soup = parse("<pre><code>first<br>second<br/>third</code></pre>")

        CodeBlockNormalizer().normalize(soup)

        assert soup.code.get_text() == "first\nsecond\nthird"

    def test_other_markup_becomes_text(self):
        """Test that markup left in code is kept as literal text."""
        soup = parse("<pre><code><b>bold</b> &amp; more</code></pre>")

        CodeBlockNormalizer().normalize(soup)

        assert soup.code.find(True) is None
        assert soup.code.get_text() == "<b>bold</b> & more"

    def test_detect_language(self):
        """Test language detection from class names."""
        soup = parse('<code class="language-go"></code><code class="go"></code>')
        first, second = soup.find_all("code")

        assert CodeBlockNormalizer.detect_language(first) == "go"
        assert CodeBlockNormalizer.detect_language(second) == ""
