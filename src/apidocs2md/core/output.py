"""Writing converted documents to disk."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILENAME = "api-documentation.md"


def save_markdown(markdown: str, path: Path | str = DEFAULT_OUTPUT_FILENAME, overwrite: bool = True) -> Path:
    """
    Save Markdown as a UTF-8 file.

    Args:
        markdown: Document text
        path: Destination file; parent directories are created
        overwrite: Replace an existing file

    Returns:
        Path that was written

    Raises:
        FileExistsError: If the file exists and overwrite is False
    """
    path = Path(path)
    if path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(markdown, encoding="utf-8")
    logger.info(f"Saved {len(markdown)} characters to {path}")
    return path
