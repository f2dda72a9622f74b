from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class Document:
    path: Path
    relative_path: str
    mtime: float
    title: str


@dataclass(frozen=True)
class StyleSheet:
    path: Path
    text: str


@dataclass(frozen=True)
class RenderJob:
    """One document paired with the temporary PDF it renders to."""

    index: int
    document: Document
    artifact_path: Path


class PipelineState(Enum):
    IDLE = "idle"
    SERVER_STARTING = "server-starting"
    DISCOVERING = "discovering"
    EMPTY = "empty"
    RENDERING = "rendering"
    MERGING = "merging"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineResult:
    state: PipelineState
    output_path: Path | None
    documents: tuple[Document, ...]
    page_count: int = 0
