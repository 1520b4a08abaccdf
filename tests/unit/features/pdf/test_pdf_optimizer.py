"""Unit tests for PDF optimization."""

import pytest
from PyPDF2 import PdfReader, PdfWriter

from nextasset.config.exceptions import SourceDirectoryError
from nextasset.core.models import OriginalHandling
from nextasset.features.pdf import PdfOptimizeOptions, optimize_pdf, optimize_pdfs_in_folder
from nextasset.features.pdf import optimizer as optimizer_module


@pytest.fixture
def make_pdf():
    """Write a PDF with ``pages`` blank pages and a title."""

    def _make_pdf(path, pages=1, title="Brochure"):
        path.parent.mkdir(parents=True, exist_ok=True)
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=72, height=72)
        writer.add_metadata({"/Title": title})
        with open(path, "wb") as f:
            writer.write(f)
        return path

    return _make_pdf


@pytest.mark.asyncio
class TestOptimizePdf:
    async def test_in_place(self, public_dir, make_pdf):
        source = make_pdf(public_dir / "brochure.pdf", pages=3)

        result = await optimize_pdf(source, PdfOptimizeOptions(delete_originals=True))

        assert result.success is True
        assert result.output_path == str(source)
        assert result.page_count == 3
        assert result.original_handled == OriginalHandling.kept
        assert result.optimized_size == source.stat().st_size
        reader = PdfReader(str(source))
        assert len(reader.pages) == 3
        assert reader.metadata.title == "Brochure"

    async def test_output_dir_deletes_original(self, public_dir, make_pdf, tmp_path):
        source = make_pdf(public_dir / "brochure.pdf")
        out_dir = tmp_path / "min"

        result = await optimize_pdf(
            source, PdfOptimizeOptions(output_dir=out_dir, delete_originals=True, compress_streams=False)
        )

        assert result.original_handled == OriginalHandling.deleted
        assert not source.exists()
        assert len(PdfReader(str(out_dir / "brochure.pdf")).pages) == 1

    async def test_not_a_pdf(self, public_dir, write_file):
        source = write_file(public_dir / "fake.pdf", b"this is not a pdf")

        result = await optimize_pdf(source)

        assert result.success is False
        assert result.error
        assert source.read_bytes() == b"this is not a pdf"


@pytest.mark.asyncio
class TestOptimizeFolder:
    async def test_only_pdfs(self, public_dir, make_pdf, write_file):
        make_pdf(public_dir / "a.pdf")
        make_pdf(public_dir / "docs" / "b.PDF")
        write_file(public_dir / "c.txt", "text")

        results = await optimize_pdfs_in_folder(public_dir)

        assert sorted(r.input_path for r in results) == [
            str(public_dir / "a.pdf"),
            str(public_dir / "docs" / "b.PDF"),
        ]
        assert all(r.success for r in results)

    async def test_non_recursive(self, public_dir, make_pdf):
        make_pdf(public_dir / "a.pdf")
        make_pdf(public_dir / "docs" / "b.pdf")

        results = await optimize_pdfs_in_folder(public_dir, PdfOptimizeOptions(recursive=False))

        assert [r.input_path for r in results] == [str(public_dir / "a.pdf")]

    async def test_review_then_archive(self, public_dir, make_pdf, tmp_path):
        source = make_pdf(public_dir / "a.pdf")
        archive = tmp_path / "archive"

        results = await optimize_pdfs_in_folder(
            public_dir, PdfOptimizeOptions(output_dir=tmp_path / "out", archive_dir=archive)
        )
        assert source.exists()

        await optimizer_module.handle_originals_after_review(results, False, archive)

        assert not source.exists()
        assert (archive / "a.pdf").exists()
        assert results[0].original_handled == OriginalHandling.archived

    async def test_missing_root_raises(self, tmp_path):
        with pytest.raises(SourceDirectoryError):
            await optimize_pdfs_in_folder(tmp_path / "missing")
