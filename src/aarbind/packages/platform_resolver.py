"""Android SDK platform resolution.

This module selects the installed SDK platform (``platforms/android-N``)
that javac compiles the generated bindings against.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import NotFoundError

PLATFORM_PREFIX = "android-"
PLATFORM_MARKER = "android.jar"


@dataclass(frozen=True)
class PlatformDirectory:
    """An installed SDK platform directory and its API level."""

    path: Path
    api_level: int

    @property
    def android_jar(self) -> Path:
        """Boot classpath for javac."""
        return self.path / PLATFORM_MARKER


class PlatformResolver:
    """Finds the best installed Android SDK platform.

    If several platforms satisfy the minimum API level, the latest one is
    returned. A platform only counts if it contains android.jar.
    """

    def find_platform(self, sdk_root: Path, min_api: int) -> PlatformDirectory:
        """Return the highest installed platform with API level >= min_api.

        Args:
            sdk_root: Android SDK root directory
            min_api: Minimum API level

        Returns:
            PlatformDirectory for the selected platform

        Raises:
            NotFoundError: If the platforms directory cannot be read or no
                platform qualifies
        """
        platforms_dir = Path(sdk_root) / "platforms"
        try:
            with os.scandir(platforms_dir) as it:
                entries = list(it)
        except OSError as e:
            raise NotFoundError(
                f"failed to find android SDK platform (min API level: {min_api}): {e}",
                min_version=min_api,
            ) from e

        best: Optional[PlatformDirectory] = None
        for entry in entries:
            level = self._api_level(entry.name)
            if level is None or level < min_api or not entry.is_dir():
                continue
            path = platforms_dir / entry.name
            if not (path / PLATFORM_MARKER).is_file():
                continue
            if best is None or level > best.api_level:
                best = PlatformDirectory(path=path, api_level=level)

        if best is None:
            raise NotFoundError(
                f"failed to find android SDK platform (min API level: {min_api}) in {platforms_dir}",
                min_version=min_api,
            )
        return best

    @staticmethod
    def _api_level(name: str) -> Optional[int]:
        if not name.startswith(PLATFORM_PREFIX):
            return None
        try:
            return int(name[len(PLATFORM_PREFIX):])
        except ValueError:
            return None
