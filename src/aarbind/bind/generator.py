"""Binding generator contract.

The bridge sources are produced by an external generator before packaging
starts. BindingGenerator is the narrow contract the pipeline relies on; the
generator must populate, under the work layout:

    gomobile_bind/            Go glue package exporting the JNI entry points
    gen/                      Go packages wrapping referenced Java classes
    android/src/main/java/    Java classes for every bound package

GobindGenerator fulfils it with the ``gobind`` tool and then adds the cgo
main package and the Java support files.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

from ..config.work_layout import WorkLayout
from ..errors import PackagingIOError
from ..packages.source_package import SourcePackage
from .java_support import NativeMeta, write_java_support

if TYPE_CHECKING:
    from ..build.command_runner import CommandRunner

ANDROID_MAIN_FILE = """\
package main

import (
	_ "golang.org/x/mobile/bind/java"
	_ "../gomobile_bind"
)

func main() {}
"""


class BindingGenerator(ABC):
    """Produces the bridge source trees consumed by the pipeline."""

    @abstractmethod
    def generate(
        self,
        packages: Sequence[SourcePackage],
        meta: NativeMeta,
        layout: WorkLayout,
    ) -> None:
        """Generate Go glue and Java sources for packages into layout."""


class GobindGenerator(BindingGenerator):
    """Runs ``gobind`` once for all bound packages."""

    def __init__(self, runner: "CommandRunner", tool: str = "gobind"):
        """Initialize generator.

        Args:
            runner: Command runner (carries dry-run and -x settings)
            tool: gobind executable
        """
        self.runner = runner
        self.tool = tool

    def build_command(self, packages: Sequence[SourcePackage], layout: WorkLayout) -> list:
        return [
            self.tool,
            "-lang=go,java",
            f"-outdir={layout.root}",
        ] + [pkg.import_path for pkg in packages]

    def generate(
        self,
        packages: Sequence[SourcePackage],
        meta: NativeMeta,
        layout: WorkLayout,
    ) -> None:
        """Generate the bindings, main.go and LoadJNI.java.

        Raises:
            ToolInvocationError: If gobind fails
            PackagingIOError: If the generated files cannot be written
        """
        self.runner.run(self.build_command(packages, layout), env={"GOOS": "android"})
        if self.runner.dry_run:
            return

        try:
            layout.main_file.parent.mkdir(parents=True, exist_ok=True)
            with open(layout.main_file, "w", encoding="utf-8") as f:
                f.write(ANDROID_MAIN_FILE)
            write_java_support(meta, layout.java_dir)
        except OSError as e:
            raise PackagingIOError(f"failed to create the main package for android: {e}") from e
