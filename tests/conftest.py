"""
pytest fixtures shared by the test modules.
"""
import os
import socket
import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """A throwaway directory as a Path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_html():
    """Write an HTML document, optionally forcing its modification time."""

    def _make(directory, name, body="", title=None, mtime=None, head=""):
        path = Path(directory) / name
        title_tag = f"<title>{title}</title>" if title is not None else ""
        path.write_text(
            f"<!doctype html><html><head><meta charset=\"utf-8\">{title_tag}{head}</head>"
            f"<body>{body}</body></html>",
            encoding="utf-8",
        )
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make


@pytest.fixture
def make_pdf():
    """Write a PDF whose pages carry the text '<label> page <n>'."""
    canvas_module = pytest.importorskip("reportlab.pdfgen.canvas")
    pagesizes = pytest.importorskip("reportlab.lib.pagesizes")

    def _make(path, label, pages=1, pagesize=pagesizes.A4):
        c = canvas_module.Canvas(str(path), pagesize=pagesize)
        for n in range(1, pages + 1):
            c.drawString(72, 720, f"{label} page {n}")
            c.showPage()
        c.save()
        return Path(path)

    return _make


@pytest.fixture
def free_port():
    """A local port that was free a moment ago."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
