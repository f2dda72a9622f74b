"""Conversion pipeline: serve, discover, render, merge.

The server and the browser session are context managers owned by
:meth:`Pipeline.run`, so both are released on every exit path. Documents,
temporary PDFs and merged page ranges stay aligned through the
:class:`~html_bundle_pdf.model.RenderJob` list built once per run.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Sequence

from .config import PipelineConfig
from .discovery import discover_documents
from .errors import FilesystemError, PipelineError
from .merge import merge_pdfs
from .model import Document, PipelineResult, PipelineState, RenderJob, StyleSheet
from .pdf import RenderingSession
from .server import StaticContentServer
from .styles import load_stylesheets

logger = logging.getLogger(__name__)

Merger = Callable[..., int]


class Pipeline:
    def __init__(
        self,
        config: PipelineConfig | None = None,
        *,
        server_factory: Callable[..., StaticContentServer] = StaticContentServer,
        session_factory: Callable[..., RenderingSession] = RenderingSession,
        merger: Merger = merge_pdfs,
    ) -> None:
        self.config = config or PipelineConfig()
        self.server_factory = server_factory
        self.session_factory = session_factory
        self.merger = merger
        self.state = PipelineState.IDLE

    def _transition(self, state: PipelineState) -> None:
        logger.debug("Pipeline state: %s -> %s", self.state.value, state.value)
        self.state = state

    def run(
        self,
        directory: str | Path,
        output: str | Path,
        stylesheet_paths: Iterable[str | Path] = (),
    ) -> PipelineResult:
        """Convert every document in ``directory`` and merge them into ``output``.

        An empty directory is not an error: nothing is rendered, no output is
        written and the returned result has state ``EMPTY``.
        """

        if self.state is not PipelineState.IDLE:
            raise RuntimeError("a Pipeline instance runs only once")

        directory = Path(directory)
        output = Path(output)
        try:
            result = self._run(directory, output, list(stylesheet_paths))
        except PipelineError as e:
            failed_in = self.state
            self._transition(PipelineState.FAILED)
            raise e.with_context(stage=failed_in.value)
        except BaseException:
            self._transition(PipelineState.FAILED)
            raise

        self._transition(PipelineState.DONE)
        return result

    def _run(self, directory: Path, output: Path, stylesheet_paths: list[str | Path]) -> PipelineResult:
        self._transition(PipelineState.SERVER_STARTING)
        with self.server_factory(directory, host=self.config.host, port=self.config.port) as server:
            self._transition(PipelineState.DISCOVERING)
            logger.info("Reading files from directory: %s", directory)
            documents = discover_documents(directory)
            if not documents:
                self._transition(PipelineState.EMPTY)
                logger.info("No HTML or XHTML files found in the specified directory.")
                return PipelineResult(state=PipelineState.EMPTY, output_path=None, documents=())
            logger.info("Found %d HTML/XHTML files.", len(documents))

            stylesheets = load_stylesheets(stylesheet_paths)
            jobs = self.plan_jobs(documents)

            self._transition(PipelineState.RENDERING)
            with self.session_factory(navigation_timeout_ms=self.config.navigation_timeout_ms) as session:
                for job in jobs:
                    self._render(session, server, job, stylesheets)

            self._transition(PipelineState.MERGING)
            logger.info("Merging PDF files...")
            page_count = self.merger(
                [job.artifact_path for job in jobs],
                output,
                titles=[job.document.title for job in jobs],
            )

            self._transition(PipelineState.FINALIZING)
            if not self.config.keep_temp:
                self._remove_artifacts(jobs)

        logger.info("Successfully merged %d document(s) into %s", len(jobs), output)
        return PipelineResult(
            state=PipelineState.DONE,
            output_path=output,
            documents=tuple(documents),
            page_count=page_count,
        )

    def plan_jobs(self, documents: Sequence[Document]) -> list[RenderJob]:
        """Pair each document with its temp PDF path, named by position."""

        work_dir = self.config.work_dir
        try:
            work_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create work directory: {work_dir}", original_error=e) from e

        return [
            RenderJob(index=i, document=doc, artifact_path=work_dir / f"temp_{i}.pdf")
            for i, doc in enumerate(documents)
        ]

    def _render(
        self,
        session: RenderingSession,
        server: StaticContentServer,
        job: RenderJob,
        stylesheets: Sequence[StyleSheet],
    ) -> None:
        url = server.url_for(job.document.relative_path)
        try:
            session.render(url, job.artifact_path, stylesheets)
        except PipelineError as e:
            raise e.with_context(document=str(job.document.path))

    def _remove_artifacts(self, jobs: Sequence[RenderJob]) -> None:
        logger.info("Cleaning up temporary PDF files...")
        for job in jobs:
            try:
                job.artifact_path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Could not remove %s: %s", job.artifact_path, e)


def convert_and_merge(
    directory: str | Path,
    output: str | Path,
    stylesheet_paths: Iterable[str | Path] = (),
    *,
    config: PipelineConfig | None = None,
) -> PipelineResult:
    return Pipeline(config).run(directory, output, stylesheet_paths)
