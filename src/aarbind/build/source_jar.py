"""Source Archive Packager.

Packs the generated Java source tree into the companion <base>-sources.jar
that IDEs attach to the .aar.
"""

from pathlib import Path
from typing import Optional

from .archive_writer import JarWriter


def sources_jar_path(aar_path: Path) -> Path:
    """Return <base>-sources.jar next to <base>.aar."""
    aar_path = Path(aar_path)
    return aar_path.with_name(f"{aar_path.stem}-sources.jar")


class SourceJarPackager:
    """Writes the -sources.jar for a bind run."""

    def __init__(self, verbose: bool = False, dry_run: bool = False):
        self.writer = JarWriter(verbose=verbose, dry_run=dry_run)

    def package(self, java_dir: Path, aar_path: Path) -> Optional[Path]:
        """Write java_dir into the sources jar belonging to aar_path.

        Returns:
            Path of the sources jar, or None in dry-run mode

        Raises:
            PackagingIOError: If the tree is unreadable or the jar unwritable
        """
        return self.writer.write(sources_jar_path(aar_path), java_dir)
