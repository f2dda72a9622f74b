from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .server import DEFAULT_PORT

DEFAULT_WORK_DIR = "temp_pdfs"


@dataclass(frozen=True)
class PipelineConfig:
    port: int = DEFAULT_PORT
    host: str = "127.0.0.1"
    work_dir: Path = field(default_factory=lambda: Path(DEFAULT_WORK_DIR))
    # Temp PDFs are left in work_dir after a successful run unless this is False.
    keep_temp: bool = True
    navigation_timeout_ms: int = 30_000
