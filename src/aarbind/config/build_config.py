"""
Build configuration for aarbind.

BuildConfig is constructed once, before the pipeline starts, and handed to
every component. It snapshots the process environment so that no component
reads os.environ on its own.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..errors import ConfigurationError, ValidationError
from .arch_specs import DEFAULT_ARCHS, get_arch_spec

SDK_ROOT_VAR = "ANDROID_HOME"
NDK_ROOT_VAR = "ANDROID_NDK_HOME"

DEFAULT_MIN_API = 15
DEFAULT_JAVAC_TARGET = "1.7"
AAR_SUFFIX = ".aar"


@dataclass(frozen=True)
class BuildConfig:
    """Read-only configuration shared by all pipeline stages.

    Attributes:
        sdk_root: Android SDK root (ANDROID_HOME)
        ndk_root: Android NDK root
        output: Output .aar path, or None for <package>.aar
        dry_run: Validate and print commands without running or writing
        verbose: Echo archive entries and progress
        print_commands: Echo every external command
        classpath: Extra classpath for javac
        min_api: Minimum Android API level
        archs: Go architecture names to build, in build order
        native_libs: Auxiliary native library names (without lib/.so)
        native_lib_dir: Directory holding <abi>/lib<name>.so prebuilts
        work_dir: Scratch directory to use and keep, or None for a temp dir
        jobs: Number of architectures built in parallel
        tool_timeout: Seconds before an external tool is killed, or None
        javac_target: Java source/target version passed to javac
        base_env: Environment snapshot external tools run with
    """

    sdk_root: Path
    ndk_root: Path
    output: Optional[Path] = None
    dry_run: bool = False
    verbose: bool = False
    print_commands: bool = False
    classpath: Optional[str] = None
    min_api: int = DEFAULT_MIN_API
    archs: Tuple[str, ...] = DEFAULT_ARCHS
    native_libs: Tuple[str, ...] = ()
    native_lib_dir: Optional[Path] = None
    work_dir: Optional[Path] = None
    jobs: int = 1
    tool_timeout: Optional[float] = None
    javac_target: str = DEFAULT_JAVAC_TARGET
    base_env: Dict[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not self.archs:
            raise ValidationError("no target architectures specified")
        for arch in self.archs:
            if get_arch_spec(arch) is None:
                raise ValidationError(f"unsupported Android architecture: {arch}")
        if len(set(self.archs)) != len(self.archs):
            raise ValidationError(f"duplicate target architectures: {', '.join(self.archs)}")
        if self.jobs < 1:
            raise ValidationError(f"jobs must be at least 1, got {self.jobs}")
        for lib in self.native_libs:
            if not lib or "/" in lib or os.sep in lib:
                raise ValidationError(f"invalid native library name: {lib!r}")

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **options,
    ) -> "BuildConfig":
        """Create configuration from an environment mapping and options.

        Args:
            environ: Environment to read (defaults to os.environ)
            **options: Any other BuildConfig field

        Returns:
            BuildConfig instance

        Raises:
            ConfigurationError: If ANDROID_HOME is not set
            ValidationError: If options are structurally invalid
        """
        env = dict(os.environ if environ is None else environ)

        sdk = env.get(SDK_ROOT_VAR, "")
        if not sdk:
            raise ConfigurationError(
                f"this command requires {SDK_ROOT_VAR} environment variable (path to the Android SDK)"
            )
        sdk_root = Path(sdk)

        ndk_root = options.pop("ndk_root", None)
        if ndk_root is None:
            ndk = env.get(NDK_ROOT_VAR, "")
            ndk_root = Path(ndk) if ndk else sdk_root / "ndk-bundle"

        if "archs" in options:
            options["archs"] = tuple(options["archs"])
        if "native_libs" in options:
            options["native_libs"] = tuple(_split_names(options["native_libs"]))

        return cls(
            sdk_root=sdk_root,
            ndk_root=Path(ndk_root),
            base_env=env,
            **options,
        )

    def resolve_output(self, package_name: str) -> Path:
        """Return the .aar path for a primary package name.

        Args:
            package_name: Name of the first bound package

        Returns:
            Configured output path, or <package_name>.aar
        """
        if self.output is not None:
            return Path(self.output)
        return Path(f"{package_name}{AAR_SUFFIX}")


def _split_names(names: Iterable[str]) -> Iterable[str]:
    if isinstance(names, str):
        names = names.split(",")
    return [n.strip() for n in names if n and n.strip()]
