"""Go source package discovery.

Bound packages are named by Go import path patterns on the command line.
PackageLoader resolves them with ``go list -json`` into SourcePackage records
carrying the package name (used for the output file and the manifest
package) and its directory (searched for assets/).
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Sequence

from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..build.command_runner import CommandRunner


@dataclass(frozen=True)
class SourcePackage:
    """A Go package selected for binding."""

    import_path: str
    name: str
    dir: Path

    @property
    def assets_dir(self) -> Path:
        return self.dir / "assets"


class PackageLoader:
    """Resolves Go package patterns to SourcePackage records."""

    def __init__(self, runner: "CommandRunner", env: Optional[Mapping[str, str]] = None):
        """Initialize package loader.

        Args:
            runner: Command runner used to invoke ``go list``
            env: Environment overrides for ``go list`` (GOOS/GOARCH etc.)
        """
        self.runner = runner
        self.env = dict(env or {})

    def load(self, patterns: Sequence[str], cwd: Optional[Path] = None) -> List[SourcePackage]:
        """Resolve package patterns.

        Args:
            patterns: Go import paths or patterns (default ".")
            cwd: Directory relative patterns are resolved from

        Returns:
            Packages in ``go list`` order, without duplicates

        Raises:
            ConfigurationError: If a package is a main package or nothing matched
            ToolInvocationError: If ``go list`` fails
        """
        cmd = ["go", "list", "-json"] + list(patterns or ["."])
        output = self.runner.query(cmd, env=self.env, cwd=cwd)
        packages = self.parse(output)
        if not packages:
            raise ConfigurationError(f"no packages matched: {' '.join(patterns or ['.'])}")
        for pkg in packages:
            if pkg.name == "main":
                raise ConfigurationError(f"binding 'main' package ({pkg.import_path}) is not supported")
        return packages

    @staticmethod
    def parse(output: str) -> List[SourcePackage]:
        """Parse the concatenated JSON objects printed by ``go list -json``."""
        decoder = json.JSONDecoder()
        seen: Dict[str, SourcePackage] = {}
        pos = 0
        text = output.strip()
        while pos < len(text):
            try:
                obj, end = decoder.raw_decode(text, pos)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"unexpected go list output: {e}") from e
            pos = end
            while pos < len(text) and text[pos].isspace():
                pos += 1

            import_path = obj.get("ImportPath", "")
            if import_path and import_path not in seen:
                seen[import_path] = SourcePackage(
                    import_path=import_path,
                    name=obj.get("Name", ""),
                    dir=Path(obj.get("Dir", "")),
                )
        return list(seen.values())
