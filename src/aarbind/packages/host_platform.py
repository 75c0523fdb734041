"""Host Platform Detection.

This module detects the host the build runs on, which selects the NDK's
prebuilt LLVM toolchain directory (toolchains/llvm/prebuilt/<host-tag>).

Supported hosts:
    - Linux: linux-x86_64
    - macOS: darwin-x86_64 (also used on Apple Silicon)
    - Windows: windows-x86_64
"""

import platform

from ..errors import ConfigurationError


class PlatformDetector:
    """Detects the host platform for NDK toolchain selection."""

    @staticmethod
    def detect_ndk_host_tag() -> str:
        """Detect the NDK prebuilt host tag.

        Returns:
            Host tag (linux-x86_64, darwin-x86_64, windows-x86_64)

        Raises:
            ConfigurationError: If the host is unsupported
        """
        system = platform.system().lower()
        machine = platform.machine().lower()

        if system == "linux":
            if machine not in ("x86_64", "amd64"):
                raise ConfigurationError(f"Unsupported NDK host: {system} {machine}")
            return "linux-x86_64"
        elif system == "darwin":
            # The NDK ships x86_64 binaries only and runs them under Rosetta
            return "darwin-x86_64"
        elif system == "windows":
            return "windows-x86_64"
        else:
            raise ConfigurationError(f"Unsupported NDK host: {system} {machine}")
