from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Sequence

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError

from .errors import MergeError

logger = logging.getLogger(__name__)


def merge_pdfs(
    pdf_paths: Sequence[str | Path],
    destination: str | Path,
    *,
    titles: Sequence[str] | None = None,
) -> int:
    """Concatenate ``pdf_paths`` page by page into ``destination``.

    Pages are copied as-is, in input order. The output is built in memory and
    written in one step; if anything fails, ``destination`` is not created
    (an existing file there is left untouched). When ``titles`` is given, each
    input gets an outline entry pointing at its first page.

    Returns the number of pages written.
    """

    if not pdf_paths:
        raise MergeError("No PDFs to merge", stage="merge")
    if titles is not None and len(titles) != len(pdf_paths):
        raise ValueError("titles must have one entry per input PDF")

    writer = PdfWriter()
    for index, pdf_path in enumerate(pdf_paths):
        try:
            reader = PdfReader(str(pdf_path))
            first_page = len(writer.pages)
            for page in reader.pages:
                writer.add_page(page)
        except (OSError, PyPdfError) as e:
            raise MergeError(
                "Cannot read intermediate PDF", stage="merge", document=str(pdf_path), original_error=e
            ) from e

        if titles is not None and len(writer.pages) > first_page:
            writer.add_outline_item(titles[index], first_page)

    page_count = len(writer.pages)
    buffer = io.BytesIO()
    try:
        writer.write(buffer)
    except PyPdfError as e:
        raise MergeError("Cannot serialize merged PDF", stage="merge", original_error=e) from e

    _write_atomically(Path(destination), buffer.getvalue())
    logger.info("PDFs merged into %s (%d pages)", destination, page_count)
    return page_count


def _write_atomically(destination: Path, data: bytes) -> None:
    # Created with a plain open so the umask applies as for any new file.
    tmp_path = destination.with_name(f".{destination.name}.{os.getpid()}.part")
    created = False
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "xb") as f:
            created = True
            f.write(data)
        os.replace(tmp_path, destination)
    except OSError as e:
        if created and tmp_path.exists():
            tmp_path.unlink()
        raise MergeError(
            "Cannot write merged PDF", stage="merge", document=str(destination), original_error=e
        ) from e
