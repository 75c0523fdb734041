"""
Unit tests for AssetMerger.
"""

import pytest

from aarbind.build.asset_merger import AssetEntry, AssetMap, AssetMerger
from aarbind.errors import ConflictError, PackagingIOError
from aarbind.packages import SourcePackage


def make_package(tmp_path, name, assets=None):
    pkg_dir = tmp_path / name
    pkg_dir.mkdir()
    for rel, content in (assets or {}).items():
        path = pkg_dir / 'assets' / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return SourcePackage(import_path=f'example.com/{name}', name=name, dir=pkg_dir)


class TestAssetMap:
    """Test suite for AssetMap."""

    def test_add_and_lookup(self, tmp_path):
        """Test basic mapping operations."""
        assets = AssetMap()
        entry = AssetEntry(name='assets/a.txt', package='example.com/a', path=tmp_path / 'a.txt')

        assets.add(entry)

        assert len(assets) == 1
        assert 'assets/a.txt' in assets
        assert assets['assets/a.txt'] is entry
        assert list(assets) == [entry]

    def test_conflict(self, tmp_path):
        """Test that a second owner for a name is rejected."""
        assets = AssetMap()
        assets.add(AssetEntry('assets/a.txt', 'example.com/a', tmp_path / 'a'))

        with pytest.raises(ConflictError) as exc_info:
            assets.add(AssetEntry('assets/a.txt', 'example.com/b', tmp_path / 'b'))

        error = exc_info.value
        assert error.path == 'assets/a.txt'
        assert error.package == 'example.com/b'
        assert error.original == 'example.com/a'
        assert 'already added from package example.com/a' in error.message


class TestAssetMerger:
    """Test suite for AssetMerger."""

    def test_no_assets(self, tmp_path):
        """Test packages without an assets directory."""
        pkg = make_package(tmp_path, 'hello')

        assert len(AssetMerger().merge([pkg])) == 0

    def test_merge_disjoint(self, tmp_path):
        """Test that assets from several packages are merged in order."""
        a = make_package(tmp_path, 'a', {'a.txt': 'A', 'sub/x.txt': 'X'})
        b = make_package(tmp_path, 'b', {'b.txt': 'B'})

        assets = AssetMerger().merge([a, b])

        assert assets.names() == ['assets/a.txt', 'assets/sub/x.txt', 'assets/b.txt']
        assert assets['assets/b.txt'].package == 'example.com/b'

    def test_conflict_between_packages(self, tmp_path):
        """Test that two packages contributing the same path conflict."""
        a = make_package(tmp_path, 'a', {'shared.txt': 'A'})
        b = make_package(tmp_path, 'b', {'shared.txt': 'B'})

        with pytest.raises(ConflictError, match='assets/shared.txt'):
            AssetMerger().merge([a, b])

    def test_assets_not_a_directory(self, tmp_path):
        """Test that a file named assets is reported."""
        pkg = make_package(tmp_path, 'odd')
        (pkg.dir / 'assets').write_text('')

        with pytest.raises(PackagingIOError, match='not a directory'):
            AssetMerger().merge([pkg])

    def test_progress_message(self, tmp_path, capsys):
        """Test the per-package summary."""
        pkg = make_package(tmp_path, 'a', {'a.txt': 'A'})

        AssetMerger(show_progress=True).merge([pkg])

        assert 'Merged 1 assets from example.com/a' in capsys.readouterr().out
