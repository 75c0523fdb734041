"""NDK toolchain lookup.

This module maps a Go architecture name to the NDK cross compilers and the
environment the Go toolchain needs to build a cgo shared library for it.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..config.arch_specs import ArchSpec, get_arch_spec
from ..errors import ConfigurationError
from .host_platform import PlatformDetector


@dataclass(frozen=True)
class Toolchain:
    """Cross compilers and ABI name for one architecture."""

    cc: Path
    cxx: Path
    abi: str


@dataclass(frozen=True)
class Architecture:
    """A resolved build target: name, toolchain and environment overrides."""

    name: str
    toolchain: Toolchain
    env: Mapping[str, str] = field(default_factory=dict)

    @property
    def abi(self) -> str:
        return self.toolchain.abi


class NDKToolchain:
    """Resolves NDK clang toolchains for Android architectures."""

    def __init__(self, ndk_root: Path, host_tag: Optional[str] = None):
        """Initialize toolchain lookup.

        Args:
            ndk_root: Android NDK root directory
            host_tag: NDK prebuilt host tag (detected if None)
        """
        self.ndk_root = Path(ndk_root)
        self._host_tag = host_tag

    @property
    def host_tag(self) -> str:
        if self._host_tag is None:
            self._host_tag = PlatformDetector.detect_ndk_host_tag()
        return self._host_tag

    @property
    def bin_dir(self) -> Path:
        return self.ndk_root / "toolchains" / "llvm" / "prebuilt" / self.host_tag / "bin"

    def validate(self) -> None:
        """Check that the NDK root exists.

        Raises:
            ConfigurationError: If the NDK cannot be found
        """
        if not self.ndk_root.is_dir():
            raise ConfigurationError(
                f"Android NDK not found at {self.ndk_root}; set ANDROID_NDK_HOME or install the ndk-bundle"
            )

    def resolve(self, arch: str, min_api: int) -> Toolchain:
        """Look up the compilers for an architecture.

        Args:
            arch: Go architecture name
            min_api: Minimum Android API level requested

        Returns:
            Toolchain for the architecture

        Raises:
            ConfigurationError: If the architecture is unknown
        """
        spec = self._spec(arch)
        api = max(min_api, spec.min_api)
        prefix = f"{spec.clang_triple}{api}"
        return Toolchain(
            cc=self.bin_dir / f"{prefix}-clang",
            cxx=self.bin_dir / f"{prefix}-clang++",
            abi=spec.abi,
        )

    def architecture(self, arch: str, min_api: int) -> Architecture:
        """Resolve an architecture with its Go cross-compilation environment."""
        spec = self._spec(arch)
        toolchain = self.resolve(arch, min_api)
        env: Dict[str, str] = {
            "GOOS": "android",
            "GOARCH": spec.name,
            "CC": str(toolchain.cc),
            "CXX": str(toolchain.cxx),
            "CGO_ENABLED": "1",
        }
        env.update(spec.go_env)
        return Architecture(name=spec.name, toolchain=toolchain, env=env)

    @staticmethod
    def _spec(arch: str) -> ArchSpec:
        spec = get_arch_spec(arch)
        if spec is None:
            raise ConfigurationError(f"unsupported Android architecture: {arch}")
        return spec
