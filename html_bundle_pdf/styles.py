from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .errors import FilesystemError
from .model import StyleSheet

logger = logging.getLogger(__name__)


def load_stylesheets(paths: Iterable[str | Path]) -> list[StyleSheet]:
    """Read every stylesheet into memory, keeping the given order.

    Either all files load or ``FilesystemError`` is raised for the first one
    that cannot be read.
    """

    sheets: list[StyleSheet] = []
    for raw_path in paths:
        path = Path(raw_path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemError(
                f"Cannot read stylesheet: {path}", stage="styles", original_error=e
            ) from e
        sheets.append(StyleSheet(path=path, text=text))

    if sheets:
        logger.info("Loaded %d stylesheet(s) to inject", len(sheets))
    return sheets
