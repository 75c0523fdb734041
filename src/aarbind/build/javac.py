"""Bytecode Compiler Wrapper.

This module compiles the generated Java bindings with javac against the
selected Android platform and packs the class files into classes.jar.

Design:
    - Resolves the boot classpath (android.jar) before anything else, so
      configuration errors surface in dry-run mode as well
    - Invokes javac once over every .java file in the source tree
    - Hands the class output directory to JarWriter
"""

import os
from pathlib import Path
from typing import List, Optional

from ..errors import ConfigurationError
from ..packages.platform_resolver import PlatformDirectory, PlatformResolver
from .archive_writer import JarWriter
from .command_runner import CommandRunner


class JavacCompiler:
    """Compiles a Java source tree into a jar.

    This class handles:
    - Boot classpath and extra classpath resolution
    - Building the javac command line
    - Jar creation from javac output
    """

    def __init__(
        self,
        runner: CommandRunner,
        resolver: PlatformResolver,
        sdk_root: Path,
        min_api: int,
        classpath: Optional[str] = None,
        target: str = "1.7",
        verbose: bool = False,
    ):
        """Initialize javac wrapper.

        Args:
            runner: Command runner (carries dry-run and -x settings)
            resolver: Android platform resolver
            sdk_root: Android SDK root
            min_api: Minimum Android API level
            classpath: Extra classpath appended to the javac invocation
            target: Java source and target version
            verbose: Echo jar entries
        """
        self.runner = runner
        self.resolver = resolver
        self.sdk_root = Path(sdk_root)
        self.min_api = min_api
        self.classpath = classpath
        self.target = target
        self.verbose = verbose

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    def resolve_classpath(self) -> PlatformDirectory:
        """Validate the boot classpath and extra classpath.

        Returns:
            Selected Android platform

        Raises:
            NotFoundError: If no platform satisfies min_api
            ConfigurationError: If an extra classpath entry does not exist
        """
        platform = self.resolver.find_platform(self.sdk_root, self.min_api)
        if self.classpath:
            for entry in self.classpath.split(os.pathsep):
                if entry and not Path(entry).exists():
                    raise ConfigurationError(f"classpath entry not found: {entry}")
        return platform

    def build_command(
        self,
        output_dir: Path,
        boot_classpath: Path,
        sources: List[str],
    ) -> List[str]:
        """Build the javac command line."""
        cmd = [
            "javac",
            "-d", str(output_dir),
            "-source", self.target,
            "-target", self.target,
            "-bootclasspath", str(boot_classpath),
        ]
        if self.classpath:
            cmd.extend(["-classpath", self.classpath])
        cmd.extend(sources)
        return cmd

    @staticmethod
    def find_sources(src_dir: Path) -> List[str]:
        """List .java files beneath src_dir, relative to it."""
        sources = []
        for dirpath, dirnames, filenames in os.walk(src_dir):
            dirnames.sort()
            for filename in sorted(filenames):
                if filename.endswith(".java"):
                    path = Path(dirpath) / filename
                    sources.append(path.relative_to(src_dir).as_posix())
        return sources

    def build_jar(self, src_dir: Path, output_dir: Path, jar_path: Path) -> Optional[Path]:
        """Compile src_dir and write the classes into jar_path.

        Args:
            src_dir: Root of the generated Java source tree
            output_dir: Scratch directory for class files
            jar_path: Destination jar

        Returns:
            jar_path, or None in dry-run mode

        Raises:
            NotFoundError: If no Android platform qualifies
            ConfigurationError: If the extra classpath is invalid
            ToolInvocationError: If javac fails
            PackagingIOError: If the jar cannot be written
        """
        platform = self.resolve_classpath()

        if self.dry_run:
            sources = ["*.java"]
        else:
            sources = self.find_sources(src_dir)
            output_dir.mkdir(parents=True, exist_ok=True)

        cmd = self.build_command(output_dir, platform.android_jar, sources)
        self.runner.run(cmd, cwd=src_dir)

        if self.dry_run:
            return None
        writer = JarWriter(verbose=self.verbose)
        return writer.write(jar_path, output_dir)
