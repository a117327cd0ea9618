"""Pydantic configuration models for apidocs2md."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

# Prioritized main-content selectors: semantic tags, ARIA roles, then the
# class/id names documentation generators commonly use.
DEFAULT_CONTENT_SELECTORS = [
    "main",
    "article",
    '[role="main"]',
    '[role="article"]',
    ".content",
    ".documentation",
    ".docs-content",
    ".api-content",
    "#main-content",
    ".markdown-body",
    ".readme",
    ".api-docs",
    ".main-content",
    "#docs-content",
]

DEFAULT_REMOVE_SELECTORS = [
    "script",
    "style",
    "nav",
    "footer",
    "header",
    "iframe",
    ".navigation",
    ".sidebar",
    ".menu",
    ".ads",
    ".cookie-banner",
    "#cookie-banner",
]

DEFAULT_PRESERVED_ATTRIBUTES = ["class", "href", "src", "alt", "title"]

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; APIDocsConverter/1.0;)"


class ExtractionConfig(BaseModel):
    """Configuration for content-region detection and DOM cleanup."""

    content_selectors: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTENT_SELECTORS),
        description="CSS selectors tried in order to find the main content",
    )
    remove_selectors: list[str] = Field(
        default_factory=list,
        description="Extra CSS selectors to remove (extends the built-in removal set)",
    )
    preserved_attributes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PRESERVED_ATTRIBUTES),
        description="Attributes kept on elements inside the main content",
    )
    min_candidate_length: int = Field(
        100,
        ge=0,
        description="Text length a content candidate must exceed to be selected",
    )

    model_config = {"extra": "forbid"}


class MarkdownConfig(BaseModel):
    """Configuration for Markdown generation and validation."""

    engine: Literal["rules", "html2text"] = Field(
        "rules",
        description="Conversion engine (rule-based converter or html2text)",
    )
    escape_markdown: bool = Field(True, description="Escape Markdown metacharacters in text")
    min_content_length: int = Field(
        100,
        ge=0,
        description="Minimum length of the final Markdown before extraction is considered failed",
    )

    model_config = {"extra": "forbid"}


class NetworkConfig(BaseModel):
    """Configuration for fetching documentation pages."""

    timeout: float = Field(10.0, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(0, ge=0, description="Retry attempts for 429/5xx responses")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header")
    relay_url: Optional[str] = Field(
        None,
        description="Relay URL template containing '{url}', e.g. https://api.allorigins.win/raw?url={url}",
    )
    allow_private_hosts: bool = Field(
        False,
        description="Allow localhost and private network addresses",
    )

    model_config = {"extra": "forbid"}

    @field_validator("relay_url")
    @classmethod
    def _check_relay_placeholder(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and "{url}" not in v:
            raise ValueError("relay_url must contain a '{url}' placeholder")
        return v


class OutputConfig(BaseModel):
    """Configuration for saving the converted document."""

    path: Path = Field(Path("api-documentation.md"), description="Markdown output file")
    overwrite: bool = Field(True, description="Replace an existing output file")

    model_config = {"extra": "forbid"}


class ConverterConfig(BaseModel):
    """
    Root configuration model for apidocs2md.

    Example:
        config = ConverterConfig(
            markdown=MarkdownConfig(min_content_length=50),
            network=NetworkConfig(timeout=20),
        )

    YAML format:
        extraction:
          remove_selectors: [".feedback"]
        markdown:
          engine: rules
        network:
          timeout: 20
        output:
          path: ./stripe-api.md
    """

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConverterConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ConverterConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
