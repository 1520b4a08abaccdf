"""
Unit tests for the nextasset CLI.

Tests:
- Exit codes (success, root failure, invalid invocation)
- find-duplicates report file and confirmation flow
- Other subcommands end to end on small trees
"""

import json
from unittest.mock import patch

import pytest
from PyPDF2 import PdfWriter

from nextasset.cli import ask_confirmation, format_size, main


@pytest.fixture
def dup_tree(public_dir, src_dir, write_file):
    write_file(public_dir / "a.txt", "hello")
    write_file(public_dir / "a_copy.txt", "hello")
    write_file(src_dir / "page.tsx", '<a href="/a_copy.txt">copy</a>')
    return public_dir, src_dir


def _answer(monkeypatch, answer: str):
    monkeypatch.setattr("builtins.input", lambda _prompt: answer)


class TestHelpers:
    @pytest.mark.parametrize(
        "size,expected",
        [(0, "0 B"), (512, "512 B"), (2048, "2.0 KB"), (5 * 1024 * 1024, "5.0 MB")],
    )
    def test_format_size(self, size, expected):
        assert format_size(size) == expected

    @pytest.mark.parametrize("answer,expected", [("y", True), (" YES ", True), ("n", False), ("", False)])
    def test_ask_confirmation(self, monkeypatch, answer, expected):
        _answer(monkeypatch, answer)

        assert ask_confirmation("? ") is expected

    def test_ask_confirmation_eof(self, monkeypatch):
        def _eof(_prompt):
            raise EOFError

        monkeypatch.setattr("builtins.input", _eof)

        assert ask_confirmation("? ") is False


class TestExitCodes:
    def test_report_only_success(self, dup_tree, capsys):
        public, _ = dup_tree

        assert main(["find-duplicates", str(public)]) == 0

        out = capsys.readouterr().out
        assert "KEEP" in out
        assert f"REMOVE  {public / 'a_copy.txt'}" in out

    def test_no_duplicates_is_success(self, public_dir, capsys):
        assert main(["find-duplicates", str(public_dir)]) == 0
        assert "No duplicate files found" in capsys.readouterr().out

    def test_missing_directory(self, tmp_path, capsys):
        assert main(["find-duplicates", str(tmp_path / "missing")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_unknown_command(self):
        assert main(["dedupe-everything"]) == 1

    def test_missing_required_flag(self, public_dir):
        assert main(["find-unused", str(public_dir)]) == 1

    def test_delete_and_archive_are_exclusive(self, public_dir, tmp_path):
        assert main(["find-duplicates", str(public_dir), "--delete", "--archive", str(tmp_path / "a")]) == 1

    def test_help(self, capsys):
        assert main(["--help"]) == 0
        assert "find-duplicates" in capsys.readouterr().out

    def test_invalid_config(self, public_dir, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("nextasset:\n  hash_algorithm: nope\n")

        assert main(["--config", str(config), "find-duplicates", str(public_dir)]) == 1

    def test_metadata_missing_directory(self, tmp_path):
        assert main(["extract-metadata", str(tmp_path / "missing")]) == 1


class TestFindDuplicatesCommand:
    def test_json_report(self, dup_tree, tmp_path):
        public, _ = dup_tree
        report = tmp_path / "report.json"

        assert main(["find-duplicates", str(public), "--output-file", str(report)]) == 0

        data = json.loads(report.read_text())
        assert data["success"] is True
        assert data["totalFiles"] == 2
        assert data["totalDuplicates"] == 1
        assert data["totalSavings"] == 5
        assert data["groups"][0]["files"] == [str(public / "a.txt"), str(public / "a_copy.txt")]
        assert "removedCount" not in data

    def test_csv_report(self, dup_tree, tmp_path):
        public, _ = dup_tree
        report = tmp_path / "report.csv"

        assert main(["find-duplicates", str(public), "--output-file", str(report)]) == 0

        content = report.read_text()
        assert "group_id,hash,file_path,size_bytes,action" in content
        assert content.count(",remove") == 1

    def test_delete_with_yes(self, dup_tree, tmp_path):
        public, src = dup_tree
        report = tmp_path / "report.json"

        code = main(
            [
                "find-duplicates",
                str(public),
                "--refs",
                str(src),
                "--delete",
                "--yes",
                "--output-file",
                str(report),
            ]
        )

        assert code == 0
        assert not (public / "a_copy.txt").exists()
        assert (public / "a.txt").exists()
        assert (src / "page.tsx").read_text() == '<a href="/a.txt">copy</a>'
        data = json.loads(report.read_text())
        assert data["removedCount"] == 1
        assert data["referencesUpdated"] == 1

    def test_confirmation_declined(self, dup_tree, monkeypatch, capsys):
        public, src = dup_tree
        _answer(monkeypatch, "n")

        assert main(["find-duplicates", str(public), "--refs", str(src), "--delete"]) == 0

        assert (public / "a_copy.txt").exists()
        assert "a_copy.txt" in (src / "page.tsx").read_text()
        assert "Duplicates kept." in capsys.readouterr().out

    def test_confirmation_accepted(self, dup_tree, monkeypatch, capsys):
        public, src = dup_tree
        _answer(monkeypatch, "y")

        assert main(["find-duplicates", str(public), "--refs", str(src), "--delete"]) == 0

        assert not (public / "a_copy.txt").exists()
        out = capsys.readouterr().out
        assert "Removed 1 duplicate(s)" in out
        assert "Updated references in 1 file(s)" in out

    def test_archive(self, dup_tree, tmp_path):
        public, _ = dup_tree
        archive = tmp_path / "archive"

        assert main(["find-duplicates", str(public), "--archive", str(archive), "--yes"]) == 0

        assert (archive / "a_copy.txt").exists()

    def test_trash(self, dup_tree):
        public, _ = dup_tree

        with patch("send2trash.send2trash") as mock_trash:
            assert main(["find-duplicates", str(public), "--trash", "--yes"]) == 0

        mock_trash.assert_called_once_with(str(public / "a_copy.txt"))

    def test_no_recursive(self, public_dir, write_file, capsys):
        write_file(public_dir / "a.txt", "hello")
        write_file(public_dir / "sub" / "b.txt", "hello")

        assert main(["find-duplicates", str(public_dir), "--no-recursive"]) == 0

        out = capsys.readouterr().out
        assert "Scanned 1 files" in out
        assert "No duplicate files found" in out


class TestOtherCommands:
    def test_find_unused(self, public_dir, src_dir, write_file, tmp_path, capsys):
        write_file(public_dir / "used.png", b"1")
        write_file(public_dir / "orphan.png", b"2")
        write_file(src_dir / "page.tsx", "used.png")
        output = tmp_path / "unused.json"

        code = main(["find-unused", str(public_dir), "--refs", str(src_dir), "--output-file", str(output)])

        assert code == 0
        assert "Found 1 unused assets" in capsys.readouterr().out
        assert json.loads(output.read_text())["unusedAssets"] == [str(public_dir / "orphan.png")]

    def test_find_unused_archive_confirmed(self, public_dir, src_dir, write_file, tmp_path, monkeypatch):
        write_file(public_dir / "orphan.png", b"2")
        archive = tmp_path / "archive"
        _answer(monkeypatch, "yes")

        assert main(["find-unused", str(public_dir), "--refs", str(src_dir), "--archive", str(archive)]) == 0

        assert (archive / "orphan.png").exists()
        assert not (public_dir / "orphan.png").exists()

    def test_extract_metadata(self, public_dir, make_image, tmp_path):
        make_image(public_dir / "hero.png", size=(20, 10))
        output = tmp_path / "meta.json"

        assert main(["extract-metadata", str(public_dir), "--output-file", str(output), "--no-size"]) == 0

        assert json.loads(output.read_text()) == {
            "hero.png": {"width": 20, "height": 10, "format": "png", "aspectRatio": 2.0}
        }

    def test_generate_placeholders(self, public_dir, make_image, tmp_path):
        make_image(public_dir / "hero.png")
        output = tmp_path / "ph.json"

        assert main(["generate-placeholders", str(public_dir), "--output-file", str(output), "--size", "4"]) == 0

        assert json.loads(output.read_text())["hero.png"].startswith("data:image/png;base64,")

    def test_convert_images_delete_with_yes(self, public_dir, src_dir, make_image, write_file):
        make_image(public_dir / "hero.png")
        write_file(src_dir / "page.tsx", "/hero.png")

        code = main(["convert-images", str(public_dir), "--refs", str(src_dir), "--delete", "--yes"])

        assert code == 0
        assert (public_dir / "hero.webp").exists()
        assert not (public_dir / "hero.png").exists()
        assert (src_dir / "page.tsx").read_text() == "/hero.webp"

    def test_convert_images_declined(self, public_dir, make_image, monkeypatch):
        make_image(public_dir / "hero.png")
        _answer(monkeypatch, "n")

        assert main(["convert-images", str(public_dir), "--delete"]) == 0

        assert (public_dir / "hero.png").exists()
        assert (public_dir / "hero.webp").exists()

    def test_resize_images(self, public_dir, make_image):
        make_image(public_dir / "hero.png", size=(100, 50))

        assert main(["resize-images", str(public_dir), "--widths", "20,40"]) == 0

        assert (public_dir / "hero-20.png").exists()
        assert (public_dir / "hero-40.png").exists()

    @pytest.mark.parametrize("widths", ["0", "abc", "10,-5"])
    def test_resize_images_invalid_widths(self, public_dir, widths):
        assert main(["resize-images", str(public_dir), "--widths", widths]) == 1

    def test_resize_missing_directory(self, tmp_path):
        assert main(["resize-images", str(tmp_path / "missing"), "--widths", "10"]) == 1


SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" viewBox="0 0 16 16">'
    "<!-- icon --><path d=\"M0 0L16 16\" stroke=\"#000\" stroke-width=\"2\"/></svg>"
)


class TestSvgAndPdfCommands:
    def test_optimize_svg_in_place(self, public_dir, write_file, capsys):
        icon = write_file(public_dir / "icon.svg", SVG)

        assert main(["optimize-svg", str(public_dir), "--precision", "3"]) == 0

        assert "<!--" not in icon.read_text()
        assert "Optimized 1/1 SVGs" in capsys.readouterr().out

    def test_optimize_svg_delete_needs_output(self, public_dir, write_file, capsys):
        icon = write_file(public_dir / "icon.svg", SVG)

        assert main(["optimize-svg", str(public_dir), "--delete", "--yes"]) == 0

        assert icon.exists()
        assert "need --output" in capsys.readouterr().out

    def test_optimize_svg_archive_confirmed(self, public_dir, write_file, tmp_path, monkeypatch):
        icon = write_file(public_dir / "icon.svg", SVG)
        out_dir = tmp_path / "out"
        archive = tmp_path / "archive"
        _answer(monkeypatch, "y")

        code = main(["optimize-svg", str(public_dir), "--output", str(out_dir), "--archive", str(archive)])

        assert code == 0
        assert (out_dir / "icon.svg").exists()
        assert (archive / "icon.svg").read_text() == SVG
        assert not icon.exists()

    @pytest.mark.parametrize("precision", ["0", "11", "x"])
    def test_optimize_svg_invalid_precision(self, public_dir, precision):
        assert main(["optimize-svg", str(public_dir), "--precision", precision]) == 1

    def test_svg_to_component(self, public_dir, write_file, tmp_path, capsys):
        write_file(public_dir / "close-icon.svg", SVG)
        out_dir = tmp_path / "components"

        assert main(["svg-to-component", str(public_dir), "--output", str(out_dir), "--js"]) == 0

        assert "const CloseIcon = (props) => (" in (out_dir / "CloseIcon.jsx").read_text()
        assert (out_dir / "index.js").exists()
        assert "CloseIcon <- " in capsys.readouterr().out

    def test_svg_to_component_invalid_prefix(self, public_dir):
        assert main(["svg-to-component", str(public_dir), "--prefix", "my-"]) == 1

    def test_optimize_pdf(self, public_dir, tmp_path, capsys):
        writer = PdfWriter()
        writer.add_blank_page(width=72, height=72)
        with open(public_dir / "doc.pdf", "wb") as f:
            writer.write(f)
        out_dir = tmp_path / "min"

        assert main(["optimize-pdf", str(public_dir), "--output", str(out_dir), "--delete", "--yes"]) == 0

        assert (out_dir / "doc.pdf").exists()
        assert not (public_dir / "doc.pdf").exists()
        assert "Optimized 1/1 PDFs" in capsys.readouterr().out

    def test_optimize_pdf_missing_directory(self, tmp_path):
        assert main(["optimize-pdf", str(tmp_path / "missing")]) == 1
