"""Binding generator contract and Java support files."""

from .generator import BindingGenerator, GobindGenerator
from .java_support import NativeMeta, render_load_jni, write_java_support

__all__ = [
    "BindingGenerator",
    "GobindGenerator",
    "NativeMeta",
    "render_load_jni",
    "write_java_support",
]
