"""Exceptions raised by the conversion pipeline.

Every stage failure is a :class:`PipelineError`; the subclass tells which
kind of resource failed, and ``stage``/``document`` tell where.
"""
from __future__ import annotations


class PipelineError(Exception):
    """Base class for all pipeline failures."""

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        document: str | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        self.message = message
        self.stage = stage
        self.document = document
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        parts = []
        if self.stage:
            parts.append(f"[{self.stage}]")
        parts.append(self.message)
        if self.document:
            parts.append(f"(document: {self.document})")
        if self.original_error is not None:
            parts.append(f"- {self.original_error}")
        return " ".join(parts)

    def with_context(self, *, stage: str | None = None, document: str | None = None) -> PipelineError:
        """Fill in stage/document if the raiser did not know them."""
        if self.stage is None:
            self.stage = stage
        if self.document is None:
            self.document = document
        return self


class FilesystemError(PipelineError):
    """Listing, reading or writing a file failed."""


class ResourceBusyError(PipelineError):
    """The local server port is already bound."""


class NavigationError(PipelineError):
    """The browser could not load a document URL."""


class RenderError(PipelineError):
    """The browser failed to print a document to PDF."""


class MergeError(PipelineError):
    """An intermediate PDF was missing or malformed, or the output could not be written."""
