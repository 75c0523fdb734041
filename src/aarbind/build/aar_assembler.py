"""Distribution Archive Assembler.

AAR is the format for the binary distribution of an Android Library Project:
a ZIP archive with extension .aar. The entries written here sit directly at
the root of the archive:

    AndroidManifest.xml (mandatory)
    proguard.txt (optional)
    classes.jar (mandatory)
    assets/ (optional)
    jni/<abi>/libgojni.so
    R.txt (mandatory)
    res/ (mandatory)

R.txt and res/ are written empty: no Android resources are compiled.
"""

import os
from pathlib import Path
from typing import Optional, Sequence

from ..config.build_config import AAR_SUFFIX
from ..errors import PackagingIOError, ValidationError
from .archive_writer import ArchiveBuilder, open_destination
from .asset_merger import AssetMap
from .native_builder import NativeBuildResult

MANIFEST_TEMPLATE = (
    '<manifest xmlns:android="http://schemas.android.com/apk/res/android" package="{package}">\n'
    '<uses-sdk android:minSdkVersion="{min_api}"/></manifest>'
)
PROGUARD_RULES = "-keep class go.** { *; }\n"


def manifest_package(package_name: str) -> str:
    """Android package identifier derived from the primary Go package name."""
    return f"go.{package_name}.gojni"


class AarAssembler:
    """Assembles the .aar from the outputs of the earlier stages."""

    def __init__(self, verbose: bool = False, dry_run: bool = False):
        """Initialize assembler.

        Args:
            verbose: Echo each entry as ``aar: <name>``
            dry_run: Walk and validate everything but discard the bytes
        """
        self.verbose = verbose
        self.dry_run = dry_run

    @staticmethod
    def validate_output(output: Path) -> None:
        """Check the output file name before anything is written.

        Raises:
            ValidationError: If the name does not end in .aar
        """
        if not str(output).endswith(AAR_SUFFIX):
            raise ValidationError(f"output file name {str(output)!r} does not end in '{AAR_SUFFIX}'")

    @staticmethod
    def render_manifest(package_name: str, min_api: int) -> str:
        return MANIFEST_TEMPLATE.format(package=manifest_package(package_name), min_api=min_api)

    def assemble(
        self,
        output: Path,
        package_name: str,
        min_api: int,
        classes_jar: Optional[Path],
        native: Sequence[NativeBuildResult],
        assets: AssetMap,
    ) -> Optional[Path]:
        """Write the .aar.

        Args:
            output: Destination path (must end in .aar)
            package_name: Primary Go package name
            min_api: Minimum Android API level for the manifest
            classes_jar: Bytecode jar from the javac stage
            native: Per-architecture native build results
            assets: Merged asset mapping

        Returns:
            The output path, or None in dry-run mode

        Raises:
            ValidationError: If the output name is invalid
            PackagingIOError: If an input is unreadable or the output is
                unwritable
        """
        self.validate_output(output)

        with open_destination(output, dry_run=self.dry_run) as fp:
            with ArchiveBuilder(fp, label="aar", verbose=self.verbose) as aar:
                aar.add_bytes("AndroidManifest.xml", self.render_manifest(package_name, min_api))
                aar.add_bytes("proguard.txt", PROGUARD_RULES)
                self._add_classes(aar, classes_jar)

                for asset in assets:
                    aar.add_file(asset.name, asset.path)

                for result in native:
                    self._add_native(aar, result)

                aar.add_bytes("R.txt", b"")
                aar.add_directory("res/")

        return None if self.dry_run else Path(output)

    def _add_classes(self, aar: ArchiveBuilder, classes_jar: Optional[Path]) -> None:
        if classes_jar is not None and Path(classes_jar).is_file():
            aar.add_file("classes.jar", classes_jar)
        elif self.dry_run:
            aar.add_bytes("classes.jar", b"")
        else:
            raise PackagingIOError(f"classes.jar not found: {classes_jar}", path=classes_jar)

    def _add_native(self, aar: ArchiveBuilder, result: NativeBuildResult) -> None:
        if self.dry_run:
            for name in result.entries:
                aar.add_bytes(name, b"")
            return

        try:
            with os.scandir(result.directory) as it:
                names = sorted(entry.name for entry in it if entry.is_file())
        except OSError as e:
            raise PackagingIOError(
                f"native libraries for {result.abi} not found: {e}", path=result.directory
            ) from e
        for name in names:
            aar.add_file(f"jni/{result.abi}/{name}", result.directory / name)
