"""Java support files written next to the generated bindings."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

LOAD_JNI_TEMPLATE = """\
// Code generated by aarbind. DO NOT EDIT.

package go;

// LoadJNI loads the native libraries of the bound Go packages.
public class LoadJNI {{
    static {{
{loads}
    }}
}}
"""


@dataclass(frozen=True)
class NativeMeta:
    """Native libraries the bindings need at run time.

    Attributes:
        libs: Auxiliary library names (without lib prefix and .so suffix),
            loaded before the glue library
    """

    libs: List[str] = field(default_factory=list)

    @property
    def load_order(self) -> List[str]:
        return list(self.libs) + ["gojni"]


def render_load_jni(meta: NativeMeta) -> str:
    loads = "\n".join(f'        System.loadLibrary("{lib}");' for lib in meta.load_order)
    return LOAD_JNI_TEMPLATE.format(loads=loads)


def write_java_support(meta: NativeMeta, java_dir: Path) -> Path:
    """Write go/LoadJNI.java beneath java_dir.

    Returns:
        Path of the written file
    """
    path = Path(java_dir) / "go" / "LoadJNI.java"
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_load_jni(meta))
    return path
