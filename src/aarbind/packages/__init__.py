"""SDK, NDK and source package lookup for aarbind."""

from .host_platform import PlatformDetector
from .ndk_toolchain import Architecture, NDKToolchain, Toolchain
from .platform_resolver import PlatformDirectory, PlatformResolver
from .source_package import PackageLoader, SourcePackage

__all__ = [
    "PlatformDetector",
    "Architecture",
    "NDKToolchain",
    "Toolchain",
    "PlatformDirectory",
    "PlatformResolver",
    "PackageLoader",
    "SourcePackage",
]
