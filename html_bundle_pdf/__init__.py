"""Render a directory of HTML/XHTML documents and merge them into one PDF."""

from .errors import (
    FilesystemError,
    MergeError,
    NavigationError,
    PipelineError,
    RenderError,
    ResourceBusyError,
)
from .pipeline import convert_and_merge

__all__ = [
    "FilesystemError",
    "MergeError",
    "NavigationError",
    "PipelineError",
    "RenderError",
    "ResourceBusyError",
    "convert_and_merge",
]
