"""Asset Merger.

This module collects the assets/ trees of every bound package into one
conflict-checked mapping of archive names to files. No bytes are copied
here; the .aar assembler streams each file when it writes the entry.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Sequence

from ..errors import ConflictError, PackagingIOError
from ..packages.source_package import SourcePackage
from .archive_writer import iter_tree

ASSETS_PREFIX = "assets/"


@dataclass(frozen=True)
class AssetEntry:
    """One asset file and the package that contributed it."""

    name: str  # Archive name, assets/<relative path>
    package: str  # Owning package import path
    path: Path


class AssetMap:
    """Ordered, conflict-free mapping of archive names to assets."""

    def __init__(self):
        self._entries: Dict[str, AssetEntry] = {}

    def add(self, entry: AssetEntry) -> None:
        """Claim entry.name for entry.package.

        Raises:
            ConflictError: If another package already claimed the name
        """
        existing = self._entries.get(entry.name)
        if existing is not None:
            raise ConflictError(entry.name, package=entry.package, original=existing.package)
        self._entries[entry.name] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AssetEntry]:
        return iter(self._entries.values())

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __getitem__(self, name: str) -> AssetEntry:
        return self._entries[name]

    def names(self) -> List[str]:
        return list(self._entries)


class AssetMerger:
    """Merges per-package asset directories.

    Packages are processed in the given order; the first package to
    contribute a path owns it, and any later claim is a ConflictError. The
    whole mapping is computed before any asset is written.
    """

    def __init__(self, show_progress: bool = False):
        self.show_progress = show_progress

    def merge(self, packages: Sequence[SourcePackage]) -> AssetMap:
        """Merge the assets of packages.

        Args:
            packages: Bound packages, in command-line order

        Returns:
            AssetMap of every asset file

        Raises:
            ConflictError: If two packages contribute the same asset path
            PackagingIOError: If an asset directory cannot be read
        """
        assets = AssetMap()
        for pkg in packages:
            assets_dir = pkg.assets_dir
            if not assets_dir.exists():
                continue
            if not assets_dir.is_dir():
                raise PackagingIOError(f"{assets_dir} is not a directory", path=assets_dir)

            count = 0
            for rel_name, path in iter_tree(assets_dir):
                assets.add(AssetEntry(name=ASSETS_PREFIX + rel_name, package=pkg.import_path, path=path))
                count += 1

            if self.show_progress and count:
                print(f"Merged {count} assets from {pkg.import_path}")
        return assets
