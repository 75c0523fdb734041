"""
Architecture specifications for Android targets.

This module centralizes the per-architecture facts needed to cross-compile
the native glue library: the Go architecture name, the Android ABI directory
name, the NDK clang target triple and the lowest API level the NDK ships a
compiler for.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ArchSpec:
    """Static description of one Android target architecture."""

    name: str  # Go architecture name (GOARCH)
    abi: str  # Android ABI directory name
    clang_triple: str  # NDK clang target prefix, API level is appended
    min_api: int  # Lowest API level with an NDK compiler for this triple
    go_env: Dict[str, str] = field(default_factory=dict)  # Extra GO* variables


ANDROID_ARCHS: Dict[str, ArchSpec] = {
    "arm": ArchSpec(
        name="arm",
        abi="armeabi-v7a",
        clang_triple="armv7a-linux-androideabi",
        min_api=16,
        go_env={"GOARM": "7"},
    ),
    "arm64": ArchSpec(
        name="arm64",
        abi="arm64-v8a",
        clang_triple="aarch64-linux-android",
        min_api=21,
    ),
    "386": ArchSpec(
        name="386",
        abi="x86",
        clang_triple="i686-linux-android",
        min_api=16,
    ),
    "amd64": ArchSpec(
        name="amd64",
        abi="x86_64",
        clang_triple="x86_64-linux-android",
        min_api=21,
    ),
}

# Order used when no target is given
DEFAULT_ARCHS = ("arm", "arm64", "386", "amd64")


def get_arch_spec(name: str) -> Optional[ArchSpec]:
    """
    Get architecture specification by Go architecture name.

    Args:
        name: Go architecture name (e.g., 'arm64')

    Returns:
        ArchSpec if found, None otherwise
    """
    return ANDROID_ARCHS.get(name.lower())


def supported_archs() -> List[str]:
    """Return the supported architecture names in default build order."""
    return list(DEFAULT_ARCHS)
