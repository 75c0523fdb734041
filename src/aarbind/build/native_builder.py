"""Native Build Orchestrator.

This module builds the cgo glue library (libgojni.so) for every target
architecture and collects the auxiliary prebuilt libraries next to it.

Each architecture is built into a staging directory (.<abi>.partial) that is
renamed to <abi> only once every library is in place, so an interrupted or
failed build never leaves a directory that looks complete.
"""

import os
import shutil
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from tqdm import tqdm

from ..config.work_layout import WorkLayout
from ..errors import BindError, PackagingIOError
from ..packages.ndk_toolchain import Architecture
from .command_runner import CommandRunner

GOJNI_LIBRARY = "libgojni.so"

# Ideally this would be -buildmode=c-shared for the installed packages too
GO_SHARED_FLAGS = ["-gcflags=-shared", "-ldflags=-shared"]


@dataclass
class NativeBuildResult:
    """Native libraries produced for one architecture."""

    arch: str
    abi: str
    directory: Path
    libraries: List[str] = field(default_factory=list)

    @property
    def entries(self) -> List[str]:
        """Archive names of this architecture's libraries."""
        return [f"jni/{self.abi}/{name}" for name in self.libraries]


class NativeBuildOrchestrator:
    """Builds native libraries for all requested architectures.

    Architectures are independent: each writes only into its own ABI
    directory and runs the toolchain with its own environment. With jobs=1
    they are built sequentially in the given order and the first failure
    stops the loop; with jobs>1 they run on a thread pool and the first
    failure cancels the architectures that have not started, including ones
    a worker picks up before the pool is told to stop.
    """

    def __init__(
        self,
        runner: CommandRunner,
        layout: WorkLayout,
        native_libs: Sequence[str] = (),
        native_lib_dir: Optional[Path] = None,
        jobs: int = 1,
        show_progress: bool = False,
    ):
        """Initialize native build orchestrator.

        Args:
            runner: Command runner (carries dry-run and -x settings)
            layout: Scratch directory layout
            native_libs: Auxiliary library names to bundle (lib<name>.so)
            native_lib_dir: Directory with <abi>/lib<name>.so prebuilts
            jobs: Number of architectures built in parallel
            show_progress: Show a progress bar over architectures
        """
        self.runner = runner
        self.layout = layout
        self.native_libs = list(native_libs)
        self.native_lib_dir = Path(native_lib_dir) if native_lib_dir is not None else None
        self.jobs = max(1, jobs)
        self.show_progress = show_progress
        # Set by the first failing architecture; later ones are skipped
        self.cancelled = threading.Event()

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    def arch_env(self, arch: Architecture) -> Dict[str, str]:
        """Environment overrides for building one architecture.

        The generated Java class wrapper packages are put first on GOPATH so
        the glue package can import them.
        """
        env = dict(arch.env)
        gopath = self.runner.base_env.get("GOPATH", "")
        env["GOPATH"] = str(self.layout.java_pkg_src) + (os.pathsep + gopath if gopath else "")
        return env

    def prebuilt_path(self, abi: str, lib: str) -> Path:
        """Location of an auxiliary prebuilt library for an ABI."""
        base = self.native_lib_dir if self.native_lib_dir is not None else Path("libs")
        return base / abi / f"lib{lib}.so"

    def build_arch(self, arch: Architecture, import_paths: Sequence[str]) -> NativeBuildResult:
        """Build and collect the native libraries of one architecture.

        Raises:
            ToolInvocationError: If go install or go build fails
            PackagingIOError: If an auxiliary library is missing or cannot
                be copied
        """
        abi = arch.abi
        try:
            return self._build_arch(arch, abi, import_paths)
        except BindError as e:
            if e.stage is None:
                e.stage = f"native/{abi}"
            raise

    def _build_arch(self, arch: Architecture, abi: str, import_paths: Sequence[str]) -> NativeBuildResult:
        env = self.arch_env(arch)
        staging = self.layout.abi_staging_dir(abi)
        final = self.layout.abi_dir(abi)

        if not self.dry_run:
            # <abi> must only exist once this run has completed it
            try:
                for path in (final, staging):
                    if path.exists():
                        shutil.rmtree(path)
                staging.mkdir(parents=True)
            except OSError as e:
                raise PackagingIOError(f"cannot prepare {staging}: {e}", path=staging) from e

        if import_paths:
            self.runner.run(["go", "install"] + GO_SHARED_FLAGS + list(import_paths), env=env)

        self.runner.run(
            ["go", "build"] + GO_SHARED_FLAGS + [
                "-buildmode=c-shared",
                f"-o={staging / GOJNI_LIBRARY}",
                str(self.layout.main_file),
            ],
            env=env,
        )

        libraries = [GOJNI_LIBRARY]
        for lib in self.native_libs:
            name = f"lib{lib}.so"
            src = self.prebuilt_path(abi, lib)
            if not src.is_file():
                raise PackagingIOError(f"auxiliary native library not found: {src}", path=src)
            if not self.dry_run:
                try:
                    shutil.copyfile(src, staging / name)
                except OSError as e:
                    raise PackagingIOError(f"failed to copy {src}: {e}", path=src) from e
            libraries.append(name)

        if not self.dry_run:
            try:
                staging.rename(final)
            except OSError as e:
                raise PackagingIOError(f"cannot finalize {final}: {e}", path=final) from e

        return NativeBuildResult(arch=arch.name, abi=abi, directory=final, libraries=libraries)

    def build_all(
        self,
        archs: Sequence[Architecture],
        import_paths: Sequence[str],
    ) -> List[NativeBuildResult]:
        """Build every architecture.

        Args:
            archs: Resolved architectures, in build order
            import_paths: Bound package import paths (go install targets)

        Returns:
            One result per architecture, in the order of archs

        Raises:
            BindError: The first architecture failure
        """
        if self.jobs == 1 or len(archs) < 2:
            results = []
            with tqdm(archs, desc="Native libraries", unit="arch", disable=not self.show_progress) as progress:
                for arch in progress:
                    progress.set_postfix_str(arch.abi)
                    results.append(self.build_arch(arch, import_paths))
            return results

        self.cancelled.clear()
        with ThreadPoolExecutor(max_workers=min(self.jobs, len(archs))) as pool:
            futures = [pool.submit(self._build_task, arch, import_paths) for arch in archs]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()
            for future in futures:
                if future in done and future.exception() is not None:
                    raise future.exception()
            return [future.result() for future in futures]

    def _build_task(self, arch: Architecture, import_paths: Sequence[str]) -> Optional[NativeBuildResult]:
        if self.cancelled.is_set():
            return None
        try:
            return self.build_arch(arch, import_paths)
        except BaseException:
            self.cancelled.set()
            raise
