"""Scratch directory layout used by one bind invocation."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class WorkLayout:
    """Paths inside the scratch directory of one pipeline run.

    Layout:
        <root>/android/src/main/java        generated Java sources
        <root>/android/src/main/jniLibs     per-ABI native libraries
        <root>/gomobile_bind                generated Go glue package
        <root>/gen                          Java class wrapper Go packages
        <root>/androidlib/main.go           cgo main entry point
        <root>/javac-output                 compiled classes
        <root>/classes.jar                  bytecode container
    """

    root: Path

    @property
    def android_dir(self) -> Path:
        return self.root / "android"

    @property
    def java_dir(self) -> Path:
        return self.android_dir / "src" / "main" / "java"

    @property
    def jni_libs_dir(self) -> Path:
        return self.android_dir / "src" / "main" / "jniLibs"

    @property
    def go_bind_dir(self) -> Path:
        return self.root / "gomobile_bind"

    @property
    def java_pkg_src(self) -> Path:
        return self.root / "gen"

    @property
    def main_file(self) -> Path:
        return self.root / "androidlib" / "main.go"

    @property
    def javac_output(self) -> Path:
        return self.root / "javac-output"

    @property
    def classes_jar(self) -> Path:
        return self.root / "classes.jar"

    def abi_dir(self, abi: str) -> Path:
        """Final native library directory for an ABI."""
        return self.jni_libs_dir / abi

    def abi_staging_dir(self, abi: str) -> Path:
        """Staging directory an ABI is built into before it is complete."""
        return self.jni_libs_dir / f".{abi}.partial"

    def create(self) -> None:
        """Create the directories every stage writes into."""
        for path in (self.java_dir, self.jni_libs_dir, self.go_bind_dir,
                     self.java_pkg_src, self.main_file.parent):
            path.mkdir(parents=True, exist_ok=True)
