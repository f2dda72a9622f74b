from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .config import PipelineConfig
from .errors import PipelineError
from .logging_config import setup_logging
from .model import PipelineState
from .pipeline import convert_and_merge

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="html-bundle-pdf",
        description=(
            "Render every HTML/XHTML file in a directory with Chromium (oldest first) "
            "and merge the results into a single A4 PDF."
        ),
    )
    p.add_argument("--directory", "-d", required=True, help="Directory containing HTML files")
    p.add_argument("--output", "-o", required=True, help="Output PDF file path")
    p.add_argument(
        "--css",
        "-c",
        nargs="*",
        action="extend",
        default=[],
        metavar="CSS",
        help="CSS files to inject into every document, in cascade order",
    )
    p.add_argument(
        "--cleanup",
        action="store_true",
        help="Delete the per-document PDFs in temp_pdfs/ after a successful merge",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Log debug output, including server requests")
    p.add_argument("--log-file", default=None, help="Also write the log to this file")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    directory = Path(args.directory)
    if not directory.is_dir():
        logger.error("Directory not found: %s", directory)
        return 2

    config = PipelineConfig(keep_temp=not args.cleanup)
    try:
        result = convert_and_merge(directory, args.output, args.css, config=config)
    except PipelineError as e:
        logger.error("Conversion failed: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.error("Stopped by user.")
        return 130

    if result.state is not PipelineState.EMPTY:
        logger.info("PDFs from %s merged successfully into %s.", directory, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
