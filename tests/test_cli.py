"""
Command line entry point.
"""
import logging
from unittest.mock import patch

import pytest

from html_bundle_pdf.cli import build_parser, main
from html_bundle_pdf.errors import NavigationError
from html_bundle_pdf.model import PipelineResult, PipelineState


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("html_bundle_pdf")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def fake_convert():
    with patch("html_bundle_pdf.cli.convert_and_merge") as convert:
        convert.return_value = PipelineResult(state=PipelineState.DONE, output_path=None, documents=(), page_count=1)
        yield convert


class TestParser:

    def test_required_arguments(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--directory", "docs"])

    def test_css_list(self):
        args = build_parser().parse_args(["-d", "docs", "-o", "out.pdf", "-c", "a.css", "b.css", "--css", "c.css"])
        assert args.css == ["a.css", "b.css", "c.css"]

    def test_css_defaults_to_empty(self):
        args = build_parser().parse_args(["-d", "docs", "-o", "out.pdf"])
        assert args.css == []
        assert args.cleanup is False


class TestMain:

    def test_runs_pipeline(self, temp_dir, fake_convert):
        code = main(["-d", str(temp_dir), "-o", "out.pdf", "-c", "a.css", "b.css"])

        assert code == 0
        args, kwargs = fake_convert.call_args
        assert args == (temp_dir, "out.pdf", ["a.css", "b.css"])
        assert kwargs["config"].keep_temp is True
        assert kwargs["config"].port == 3000

    def test_cleanup_flag(self, temp_dir, fake_convert):
        main(["-d", str(temp_dir), "-o", "out.pdf", "--cleanup"])
        assert fake_convert.call_args.kwargs["config"].keep_temp is False

    def test_empty_directory_is_success(self, temp_dir, fake_convert, caplog):
        fake_convert.return_value = PipelineResult(state=PipelineState.EMPTY, output_path=None, documents=())
        assert main(["-d", str(temp_dir), "-o", "out.pdf"]) == 0
        assert "merged successfully" not in caplog.text

    def test_success_is_logged(self, temp_dir, fake_convert, caplog):
        assert main(["-d", str(temp_dir), "-o", "out.pdf"]) == 0
        assert "merged successfully into out.pdf" in caplog.text

    def test_pipeline_error_exit_code(self, temp_dir, fake_convert, caplog):
        fake_convert.side_effect = NavigationError("Navigation timed out", stage="rendering", document="a.html")

        assert main(["-d", str(temp_dir), "-o", "out.pdf"]) == 1
        assert "[rendering] Navigation timed out (document: a.html)" in caplog.text

    def test_missing_directory(self, temp_dir, fake_convert):
        assert main(["-d", str(temp_dir / "nope"), "-o", "out.pdf"]) == 2
        fake_convert.assert_not_called()

    def test_log_file(self, temp_dir, fake_convert):
        log_file = temp_dir / "logs" / "run.log"
        main(["-d", str(temp_dir), "-o", "out.pdf", "--log-file", str(log_file)])
        assert "merged successfully" in log_file.read_text(encoding="utf-8")
