from __future__ import annotations

import logging
from pathlib import Path

from bs4 import BeautifulSoup

from .errors import FilesystemError
from .model import Document

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIXES = (".html", ".xhtml")


def discover_documents(directory: str | Path) -> list[Document]:
    """List the HTML/XHTML files in ``directory``, oldest first.

    Files with the same modification time are ordered by name so the result
    never depends on the order the filesystem lists them in. An empty list
    is a normal result.
    """

    root = Path(directory)
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise FilesystemError(f"Cannot list directory: {root}", original_error=e) from e

    documents: list[Document] = []
    for entry in entries:
        if not entry.name.endswith(DOCUMENT_SUFFIXES):
            continue
        try:
            if not entry.is_file():
                continue
            mtime = entry.stat().st_mtime
        except OSError as e:
            raise FilesystemError(
                "Cannot read file metadata", document=str(entry), original_error=e
            ) from e

        documents.append(
            Document(
                path=entry,
                relative_path=entry.relative_to(root).as_posix(),
                mtime=mtime,
                title=read_title(entry),
            )
        )

    # sorted() is stable, so name order survives for equal timestamps.
    documents = sorted(documents, key=lambda d: d.mtime)
    logger.debug("Discovered %d document(s) in %s", len(documents), root)
    return documents


def read_title(html_path: Path) -> str:
    """Return the document's <title>, falling back to the file stem."""

    try:
        raw = html_path.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        raise FilesystemError("Cannot read document", document=str(html_path), original_error=e) from e

    soup = BeautifulSoup(raw, "lxml")
    if soup.title and soup.title.string and soup.title.string.strip():
        return soup.title.string.strip()
    return html_path.stem
