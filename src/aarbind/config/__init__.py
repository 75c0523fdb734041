"""Configuration modules for aarbind."""

from .arch_specs import ANDROID_ARCHS, DEFAULT_ARCHS, ArchSpec, get_arch_spec, supported_archs
from .build_config import AAR_SUFFIX, BuildConfig
from .work_layout import WorkLayout

__all__ = [
    "ANDROID_ARCHS",
    "DEFAULT_ARCHS",
    "ArchSpec",
    "get_arch_spec",
    "supported_archs",
    "AAR_SUFFIX",
    "BuildConfig",
    "WorkLayout",
]
