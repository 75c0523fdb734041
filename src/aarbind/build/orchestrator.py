"""
Bind pipeline orchestration for aarbind.

This module coordinates the whole packaging run, from configuration checks
to the finished .aar and -sources.jar:
- Configuration checks (output name, SDK platform, NDK, architectures)
- Binding generation (once, shared by all architectures)
- Native library builds (once per architecture)
- javac compilation into classes.jar
- Asset merging with conflict detection
- .aar assembly
- -sources.jar packaging
"""

import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from ..bind.generator import BindingGenerator, GobindGenerator
from ..bind.java_support import NativeMeta
from ..config.build_config import BuildConfig
from ..config.work_layout import WorkLayout
from ..errors import BindError, PackagingIOError, ValidationError
from ..packages.ndk_toolchain import NDKToolchain
from ..packages.platform_resolver import PlatformResolver
from ..packages.source_package import SourcePackage
from .aar_assembler import AarAssembler
from .asset_merger import AssetMerger
from .command_runner import CommandRunner
from .javac import JavacCompiler
from .native_builder import NativeBuildOrchestrator
from .source_jar import SourceJarPackager


@dataclass
class BindResult:
    """Result of a complete bind run."""

    success: bool
    aar_path: Optional[Path]
    sources_path: Optional[Path]
    archs: List[str] = field(default_factory=list)
    build_time: float = 0.0
    message: str = ""


@contextmanager
def pipeline_stage(name: str) -> Iterator[None]:
    """Attach the stage name to errors leaving a pipeline stage.

    BindError subclasses keep their type and get ``stage`` filled in; a raw
    OSError becomes a PackagingIOError chained to the original.
    """
    try:
        yield
    except BindError as e:
        if e.stage is None:
            e.stage = name
        raise
    except OSError as e:
        raise PackagingIOError(str(e), path=e.filename, stage=name) from e


class BindOrchestrator:
    """
    Orchestrates packaging of Go bindings into an Android library.

    Phases:
    1. Validate configuration (output name, SDK platform, NDK, architectures)
    2. Generate Go glue and Java bindings
    3. Build libgojni.so per architecture and collect auxiliary libraries
    4. Compile Java bindings into classes.jar
    5. Merge package assets
    6. Assemble the .aar
    7. Package the -sources.jar

    Any failure aborts the run; outputs written before the failure must be
    discarded by the caller.

    Example usage:
        config = BuildConfig.from_environment(archs=["arm64"])
        orchestrator = BindOrchestrator(config)
        result = orchestrator.bind(packages)
        print(f"AAR: {result.aar_path}")
    """

    STEPS = 7

    def __init__(
        self,
        config: BuildConfig,
        generator: Optional[BindingGenerator] = None,
        runner: Optional[CommandRunner] = None,
        resolver: Optional[PlatformResolver] = None,
        toolchain: Optional[NDKToolchain] = None,
        show_progress: bool = False,
    ):
        """
        Initialize bind orchestrator.

        Args:
            config: Build configuration shared by every stage
            generator: Binding generator (defaults to gobind)
            runner: Command runner for external tools
            resolver: Android platform resolver
            toolchain: NDK toolchain lookup
            show_progress: Show a progress bar during native builds
        """
        self.config = config
        self.runner = runner or CommandRunner(
            base_env=config.base_env,
            dry_run=config.dry_run,
            print_commands=config.print_commands,
            timeout=config.tool_timeout,
        )
        self.generator = generator or GobindGenerator(self.runner)
        self.resolver = resolver or PlatformResolver()
        self.toolchain = toolchain or NDKToolchain(config.ndk_root)
        self.show_progress = show_progress

    def _step(self, n: int, text: str) -> None:
        if self.config.verbose:
            print(f"[{n}/{self.STEPS}] {text}")

    def bind(self, packages: Sequence[SourcePackage]) -> BindResult:
        """
        Run the whole pipeline.

        Args:
            packages: Bound packages; the first one names the output

        Returns:
            BindResult with the produced paths (None in dry-run mode)

        Raises:
            BindError: The first failure of any stage, with ``stage`` set
        """
        start_time = time.time()
        config = self.config

        self._step(1, "Checking configuration...")
        with pipeline_stage("configure"):
            if not packages:
                raise ValidationError("no packages to bind")
            output = config.resolve_output(packages[0].name)
            AarAssembler.validate_output(output)
            platform = self.resolver.find_platform(config.sdk_root, config.min_api)
            self.toolchain.validate()
            archs = [self.toolchain.architecture(name, config.min_api) for name in config.archs]

        if config.verbose:
            print(f"      Android platform: {platform.path} (API {platform.api_level})")
            print(f"      Architectures: {', '.join(a.abi for a in archs)}")

        import_paths = [pkg.import_path for pkg in packages]
        meta = NativeMeta(libs=list(config.native_libs))

        with self._work_dir() as root:
            layout = WorkLayout(root)
            if not config.dry_run:
                with pipeline_stage("configure"):
                    layout.create()

            self._step(2, "Generating bindings...")
            with pipeline_stage("generate"):
                self.generator.generate(packages, meta, layout)

            self._step(3, "Building native libraries...")
            with pipeline_stage("native"):
                builder = NativeBuildOrchestrator(
                    runner=self.runner,
                    layout=layout,
                    native_libs=config.native_libs,
                    native_lib_dir=config.native_lib_dir,
                    jobs=config.jobs,
                    show_progress=self.show_progress and not config.verbose and not config.dry_run,
                )
                native = builder.build_all(archs, import_paths)

            self._step(4, "Compiling Java bindings...")
            with pipeline_stage("javac"):
                javac = JavacCompiler(
                    runner=self.runner,
                    resolver=self.resolver,
                    sdk_root=config.sdk_root,
                    min_api=config.min_api,
                    classpath=config.classpath,
                    target=config.javac_target,
                    verbose=config.verbose,
                )
                classes_jar = javac.build_jar(layout.java_dir, layout.javac_output, layout.classes_jar)

            self._step(5, "Merging assets...")
            with pipeline_stage("assets"):
                assets = AssetMerger(show_progress=config.verbose).merge(packages)

            self._step(6, f"Writing {output}...")
            with pipeline_stage("aar"):
                assembler = AarAssembler(verbose=config.verbose, dry_run=config.dry_run)
                aar_path = assembler.assemble(
                    output=output,
                    package_name=packages[0].name,
                    min_api=config.min_api,
                    classes_jar=classes_jar,
                    native=native,
                    assets=assets,
                )

            self._step(7, "Writing sources jar...")
            with pipeline_stage("sources"):
                packager = SourceJarPackager(verbose=config.verbose, dry_run=config.dry_run)
                sources_path = packager.package(layout.java_dir, output)

        return BindResult(
            success=True,
            aar_path=aar_path,
            sources_path=sources_path,
            archs=[a.abi for a in archs],
            build_time=time.time() - start_time,
            message="dry run complete" if config.dry_run else "bind successful",
        )

    @contextmanager
    def _work_dir(self) -> Iterator[Path]:
        """Yield the scratch directory: the configured one, or a temp dir."""
        if self.config.work_dir is not None:
            if self.config.verbose:
                print(f"      WORK={self.config.work_dir}")
            yield Path(self.config.work_dir)
            return
        with tempfile.TemporaryDirectory(prefix="aarbind-") as tmp:
            if self.config.verbose:
                print(f"      WORK={tmp}")
            yield Path(tmp)
