"""Archive Writer.

This module writes ZIP containers: the generic jar writer used for
classes.jar and the -sources.jar, and the entry-level ArchiveBuilder the .aar
assembler uses.

Design:
    - Entries are streamed from disk, one open file handle at a time
    - Entry names are unique within one archive; a repeat is an error
    - Entries carry a fixed timestamp and tree walks are sorted, so the same
      input produces the same archive
    - Dry-run writes go to a NullSink that discards every byte
"""

import io
import os
import shutil
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional, Set, Tuple, Union

from ..errors import PackagingIOError, ValidationError

MANIFEST_NAME = "META-INF/MANIFEST.MF"
MANIFEST_HEADER = "Manifest-Version: 1.0\nCreated-By: 1.0 (aarbind)\n\n"

# Earliest timestamp a ZIP entry can carry
FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def iter_tree(root: Path) -> Iterator[Tuple[str, Path]]:
    """Yield (archive name, path) for every regular file beneath root.

    Names are relative to root with forward slashes. The walk is depth-first
    and sorted, and can be restarted by calling iter_tree again.

    Raises:
        PackagingIOError: If root or a subdirectory cannot be read
    """
    root = Path(root)
    if not root.is_dir():
        raise PackagingIOError(f"source directory not found: {root}", path=root)

    def on_error(err: OSError) -> None:
        raise PackagingIOError(f"failed to read {err.filename}: {err.strerror}", path=err.filename) from err

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if not path.is_file():
                continue
            yield path.relative_to(root).as_posix(), path


class NullSink(io.RawIOBase):
    """Writable stream that counts and discards everything written to it."""

    def __init__(self):
        super().__init__()
        self._pos = 0

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        n = len(b)
        self._pos += n
        return n

    def tell(self) -> int:
        return self._pos


@contextmanager
def open_destination(path: Path, dry_run: bool = False) -> Iterator[BinaryIO]:
    """Open an archive destination for writing.

    Yields a NullSink in dry-run mode so nothing is created on disk.

    Raises:
        PackagingIOError: If the destination cannot be created
    """
    if dry_run:
        sink = NullSink()
        try:
            yield sink  # type: ignore[misc]
        finally:
            sink.close()
        return

    path = Path(path)
    try:
        if path.parent != Path(""):
            path.parent.mkdir(parents=True, exist_ok=True)
        f = open(path, "wb")
    except OSError as e:
        raise PackagingIOError(f"cannot create {path}: {e}", path=path) from e
    with f:
        yield f


class ArchiveBuilder:
    """Single-writer, append-only ZIP entry writer.

    Usage:
        with ArchiveBuilder(fp, label="aar", verbose=True) as aar:
            aar.add_bytes("AndroidManifest.xml", manifest)
            aar.add_file("classes.jar", classes_jar)
            aar.add_directory("res/")
    """

    def __init__(self, fp: BinaryIO, label: str = "zip", verbose: bool = False):
        """Initialize archive builder.

        Args:
            fp: Writable binary stream the archive is written to
            label: Prefix used when echoing entry names
            verbose: Echo every entry name as it is written
        """
        self.label = label
        self.verbose = verbose
        self._names: Set[str] = set()
        self._zip = zipfile.ZipFile(fp, "w", compression=zipfile.ZIP_DEFLATED)

    def __enter__(self) -> "ArchiveBuilder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def names(self) -> Set[str]:
        return set(self._names)

    def _entry(self, name: str) -> zipfile.ZipInfo:
        if name in self._names:
            raise ValidationError(f"duplicate archive entry: {name}")
        self._names.add(name)
        if self.verbose:
            print(f"{self.label}: {name}")
        info = zipfile.ZipInfo(name, date_time=FIXED_DATE_TIME)
        if name.endswith("/"):
            info.external_attr = (0o40755 << 16) | 0x10
        else:
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
        return info

    def add_bytes(self, name: str, data: Union[bytes, str]) -> None:
        """Write an entry from in-memory content."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._zip.writestr(self._entry(name), data)

    def add_file(self, name: str, path: Path) -> None:
        """Stream a file from disk into an entry.

        Raises:
            PackagingIOError: If the file cannot be read
        """
        info = self._entry(name)
        try:
            with open(path, "rb") as src, self._zip.open(info, "w") as dst:
                shutil.copyfileobj(src, dst)
        except OSError as e:
            raise PackagingIOError(f"failed to add {path} as {name}: {e}", path=path) from e

    def add_directory(self, name: str) -> None:
        """Write an explicit empty directory entry (name must end in '/')."""
        if not name.endswith("/"):
            name += "/"
        self._zip.writestr(self._entry(name), b"")

    def add_tree(self, root: Path, prefix: str = "", exclude: Iterable[str] = ()) -> int:
        """Add every regular file beneath root, returning the entry count.

        Files whose relative name is in exclude are skipped.
        """
        skip = set(exclude)
        count = 0
        for name, path in iter_tree(root):
            if name in skip:
                continue
            self.add_file(prefix + name, path)
            count += 1
        return count

    def close(self) -> None:
        try:
            self._zip.close()
        except OSError as e:
            raise PackagingIOError(f"failed to finish {self.label} archive: {e}") from e


class JarWriter:
    """Writes a directory tree into a jar.

    The manifest entry always comes first, followed by one entry per regular
    file beneath the source root. The manifest name is reserved: a
    META-INF/MANIFEST.MF in the source tree is not copied.
    """

    def __init__(self, verbose: bool = False, dry_run: bool = False):
        """Initialize jar writer.

        Args:
            verbose: Echo each entry as ``jar: <name>``
            dry_run: Skip writing entirely
        """
        self.verbose = verbose
        self.dry_run = dry_run

    def write(
        self,
        destination: Path,
        source_root: Path,
        manifest_header: str = MANIFEST_HEADER,
    ) -> Optional[Path]:
        """Write source_root into a jar file at destination.

        A failed write leaves an unusable destination behind; callers discard
        it.

        Returns:
            The destination path, or None in dry-run mode

        Raises:
            PackagingIOError: If a source file is unreadable or the
                destination is unwritable
        """
        if self.dry_run:
            return None
        with open_destination(destination) as fp:
            self.write_to(fp, source_root, manifest_header)
        return Path(destination)

    def write_to(
        self,
        fp: BinaryIO,
        source_root: Path,
        manifest_header: str = MANIFEST_HEADER,
    ) -> None:
        """Write source_root as a jar into an open stream."""
        with ArchiveBuilder(fp, label="jar", verbose=self.verbose) as jar:
            jar.add_bytes(MANIFEST_NAME, manifest_header)
            jar.add_tree(source_root, exclude=(MANIFEST_NAME,))
