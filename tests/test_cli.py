"""Tests for the command-line interface."""

import pytest

from apidocs2md import cli
from apidocs2md.core import ConversionSession
from apidocs2md.errors import FetchError

PAGE_URL = "https://docs.example.com/api/"


@pytest.fixture
def html_file(tmp_path, page_html):
    """Saved copy of the sample page."""
    path = tmp_path / "page.html"
    path.write_text(page_html, encoding="utf-8")
    return path


@pytest.fixture
def use_fetcher(monkeypatch):
    """Make the CLI fetch through the given mock fetcher."""

    def install(fetcher):
        monkeypatch.setattr(cli, "ConversionSession", lambda config: ConversionSession(config, fetcher=fetcher))

    return install


class TestParser:
    """Tests for argument parsing and config building."""

    def test_overrides(self):
        """Test that flags land in the right config sections."""
        args = cli.create_parser().parse_args(
            [
                PAGE_URL,
                "--engine",
                "html2text",
                "--min-length",
                "20",
                "--timeout",
                "5",
                "--retries",
                "2",
                "--relay",
                "https://relay.example.com/?u={url}",
                "-o",
                "out.md",
                "-v",
            ]
        )

        config = cli.build_config(args)

        assert config.markdown.engine == "html2text"
        assert config.markdown.min_content_length == 20
        assert config.network.timeout == 5.0
        assert config.network.max_retries == 2
        assert config.network.relay_url == "https://relay.example.com/?u={url}"
        assert str(config.output.path) == "out.md"
        assert config.log_level == "DEBUG"

    def test_flags_override_config_file(self, tmp_path):
        """Test that command-line values win over the YAML file."""
        path = tmp_path / "config.yaml"
        path.write_text("markdown:\n  min_content_length: 10\nnetwork:\n  timeout: 30\n")
        args = cli.create_parser().parse_args([PAGE_URL, "--config", str(path), "--min-length", "5"])

        config = cli.build_config(args)

        assert config.markdown.min_content_length == 5
        assert config.network.timeout == 30

    def test_verbose_and_quiet_exclusive(self):
        """Test that -v and -q cannot be combined."""
        with pytest.raises(SystemExit):
            cli.create_parser().parse_args([PAGE_URL, "-v", "-q"])


class TestHtmlFile:
    """Tests for converting local files."""

    def test_stdout(self, html_file, capsys):
        """Test Markdown written to stdout."""
        exit_code = cli.main(["--html-file", str(html_file), "--base-url", PAGE_URL, "--stdout"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert out.startswith("# Payments API\n")
        assert "[integration guide](https://docs.example.com/guide)" in out

    def test_saves_file(self, html_file, tmp_path):
        """Test that the document is saved to --output."""
        output = tmp_path / "docs" / "payments.md"

        exit_code = cli.main(["--html-file", str(html_file), "--base-url", PAGE_URL, "-o", str(output), "-q"])

        assert exit_code == 0
        assert output.read_text(encoding="utf-8").startswith("# Payments API")

    def test_preview(self, html_file, capsys):
        """Test the rendered terminal preview."""
        exit_code = cli.main(["--html-file", str(html_file), "--base-url", PAGE_URL, "--preview"])

        assert exit_code == 0
        assert "Payments API" in capsys.readouterr().out

    def test_too_short(self, tmp_path, capsys):
        """Test that extraction errors are reported with exit code 1."""
        path = tmp_path / "tiny.html"
        path.write_text("<html><body><p>Loading...</p></body></html>")

        exit_code = cli.main(["--html-file", str(path), "--stdout"])

        assert exit_code == 1
        assert "too short" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        """Test that an unreadable file is reported."""
        exit_code = cli.main(["--html-file", str(tmp_path / "missing.html"), "--stdout"])

        assert exit_code == 1
        assert "Error" in capsys.readouterr().err


class TestUrl:
    """Tests for converting a fetched page."""

    def test_stdout(self, use_fetcher, mock_fetcher, capsys):
        """Test fetching and printing a page."""
        use_fetcher(mock_fetcher)

        exit_code = cli.main([PAGE_URL, "--stdout", "-q"])

        assert exit_code == 0
        assert capsys.readouterr().out.startswith("# Payments API")
        assert mock_fetcher.requested == [PAGE_URL]

    def test_progress_and_save(self, use_fetcher, mock_fetcher, tmp_path, capsys):
        """Test the default mode with progress output and a saved file."""
        use_fetcher(mock_fetcher)
        output = tmp_path / "api.md"

        exit_code = cli.main([PAGE_URL, "-o", str(output)])

        assert exit_code == 0
        assert output.exists()
        assert "Conversion completed successfully!" in capsys.readouterr().err

    def test_fetch_error(self, use_fetcher, make_fetcher, capsys):
        """Test that a failed fetch prints its message and exits with 1."""
        use_fetcher(make_fetcher(error=FetchError("Request timed out. Please try again.")))

        exit_code = cli.main([PAGE_URL, "--stdout"])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert "Request timed out" in captured.err
        assert captured.out == ""

    def test_requires_input(self, capsys):
        """Test that a URL or file is required."""
        assert cli.main([]) == 1
        assert "Please provide a URL" in capsys.readouterr().err
