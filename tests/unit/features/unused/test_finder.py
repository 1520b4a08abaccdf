"""
Unit tests for unused asset detection.

Tests:
- Substring matching of base names against reference files
- Archive / delete handling (with and without confirmation)
- JSON report
"""

import json

import pytest
from pydantic import ValidationError

from nextasset.core.models import FileOperation
from nextasset.features.unused import (
    UnusedAssetsOptions,
    find_unused_assets,
    handle_unused_assets,
)


@pytest.fixture
def asset_tree(public_dir, src_dir, write_file):
    write_file(public_dir / "used.png", b"1")
    write_file(public_dir / "icons" / "star.svg", b"2")
    write_file(public_dir / "orphan.jpg", b"3")
    write_file(src_dir / "page.tsx", '<Image src="/used.png" />')
    write_file(src_dir / "styles" / "app.css", ".star { background: url(/icons/star.svg); }")
    # Binary files are not reference files
    write_file(src_dir / "orphan.jpg.bak", b"orphan.jpg")
    return public_dir, src_dir


def test_reference_dirs_required():
    with pytest.raises(ValidationError):
        UnusedAssetsOptions(reference_dirs=[])


@pytest.mark.asyncio
class TestFindUnusedAssets:
    async def test_reports_unreferenced_assets(self, asset_tree):
        public, src = asset_tree

        result = await find_unused_assets(public, UnusedAssetsOptions(reference_dirs=[src]))

        assert result.success is True
        assert result.total_assets == 3
        assert result.unused_assets == [str(public / "orphan.jpg")]
        assert result.reference_dirs == [str(src)]
        assert result.deleted_count is None

    async def test_substring_match_counts_as_used(self, public_dir, src_dir, write_file):
        write_file(public_dir / "logo.png", b"x")
        write_file(src_dir / "a.ts", 'const src = "/my-logo.png";')

        result = await find_unused_assets(public_dir, UnusedAssetsOptions(reference_dirs=[src_dir]))

        assert result.unused_assets == []

    async def test_non_recursive(self, asset_tree):
        public, src = asset_tree

        result = await find_unused_assets(
            public, UnusedAssetsOptions(reference_dirs=[src], recursive=False)
        )

        assert result.total_assets == 2

    async def test_missing_root(self, tmp_path, src_dir):
        result = await find_unused_assets(
            tmp_path / "missing", UnusedAssetsOptions(reference_dirs=[src_dir])
        )

        assert result.success is False
        assert result.error

    async def test_destructive_needs_confirmation(self, asset_tree):
        public, src = asset_tree

        result = await find_unused_assets(
            public, UnusedAssetsOptions(reference_dirs=[src], delete_unused=True)
        )

        assert result.deleted_count is None
        assert (public / "orphan.jpg").exists()

    async def test_delete_with_skip_confirmation(self, asset_tree):
        public, src = asset_tree

        result = await find_unused_assets(
            public,
            UnusedAssetsOptions(reference_dirs=[src], delete_unused=True, skip_confirmation=True),
        )

        assert result.deleted_count == 1
        assert not (public / "orphan.jpg").exists()
        assert (public / "used.png").exists()

    async def test_archive_with_skip_confirmation(self, asset_tree, tmp_path):
        public, src = asset_tree
        archive = tmp_path / "archive"

        result = await find_unused_assets(
            public,
            UnusedAssetsOptions(reference_dirs=[src], archive_dir=archive, skip_confirmation=True),
        )

        assert result.archived_to == str(archive)
        assert (archive / "orphan.jpg").exists()
        assert result.deleted_count is None

    async def test_json_report(self, asset_tree, tmp_path):
        public, src = asset_tree
        output = tmp_path / "unused.json"

        await find_unused_assets(
            public, UnusedAssetsOptions(reference_dirs=[src], output_file=output)
        )

        data = json.loads(output.read_text())
        assert data["success"] is True
        assert data["unusedAssets"] == [str(public / "orphan.jpg")]
        assert data["totalAssets"] == 3
        assert data["referenceDirs"] == [str(src)]
        assert data["warnings"] == []


@pytest.mark.asyncio
class TestHandleUnusedAssets:
    async def test_archive_collisions(self, tmp_path, write_file):
        first = write_file(tmp_path / "a" / "bg.png", b"1")
        second = write_file(tmp_path / "b" / "bg.png", b"2")
        archive = tmp_path / "archive"

        outcome = await handle_unused_assets([str(first), str(second)], archive_dir=archive)

        assert outcome.archived_count == 2
        assert sorted(p.name for p in archive.iterdir()) == ["bg.png", "bg_1.png"]

    async def test_failure_recorded(self, tmp_path, write_file):
        present = write_file(tmp_path / "a.png", b"1")

        outcome = await handle_unused_assets(
            [str(tmp_path / "gone.png"), str(present)], delete_unused=True
        )

        assert outcome.deleted_count == 1
        assert len(outcome.warnings) == 1
        assert outcome.warnings[0].operation == FileOperation.delete

    async def test_no_action(self, tmp_path, write_file):
        path = write_file(tmp_path / "a.png", b"1")

        outcome = await handle_unused_assets([str(path)])

        assert outcome.deleted_count == 0
        assert outcome.archived_count == 0
        assert path.exists()
