"""
Stylesheet loading.
"""
import pytest

from html_bundle_pdf.errors import FilesystemError
from html_bundle_pdf.styles import load_stylesheets


class TestLoadStylesheets:

    def test_keeps_input_order(self, temp_dir):
        b = temp_dir / "b.css"
        a = temp_dir / "a.css"
        b.write_text("p { color: blue; }", encoding="utf-8")
        a.write_text("p { color: red; }", encoding="utf-8")

        sheets = load_stylesheets([b, str(a)])

        assert [s.path.name for s in sheets] == ["b.css", "a.css"]
        assert [s.text for s in sheets] == ["p { color: blue; }", "p { color: red; }"]

    def test_empty_list(self):
        assert load_stylesheets([]) == []

    def test_missing_file_fails_whole_load(self, temp_dir):
        ok = temp_dir / "ok.css"
        ok.write_text("body {}", encoding="utf-8")

        with pytest.raises(FilesystemError, match="missing.css") as excinfo:
            load_stylesheets([ok, temp_dir / "missing.css"])

        assert excinfo.value.stage == "styles"
        assert isinstance(excinfo.value.original_error, FileNotFoundError)

    def test_directory_is_unreadable(self, temp_dir):
        with pytest.raises(FilesystemError):
            load_stylesheets([temp_dir])

    def test_reads_utf8(self, temp_dir):
        css = temp_dir / "u.css"
        css.write_text('p::before { content: "§"; }', encoding="utf-8")

        (sheet,) = load_stylesheets([css])

        assert "§" in sheet.text
