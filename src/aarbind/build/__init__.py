"""
Build system components for aarbind.

This module provides the packaging pipeline implementation including:
- External tool invocation (go, gobind, javac)
- Native library builds per architecture
- Java compilation into classes.jar
- Asset merging
- .aar and -sources.jar assembly
- Pipeline orchestration
"""

from .command_runner import CommandRunner
from .archive_writer import ArchiveBuilder, JarWriter, NullSink, iter_tree
from .asset_merger import AssetEntry, AssetMap, AssetMerger
from .javac import JavacCompiler
from .native_builder import NativeBuildOrchestrator, NativeBuildResult
from .aar_assembler import AarAssembler
from .source_jar import SourceJarPackager, sources_jar_path
from .orchestrator import BindOrchestrator, BindResult, pipeline_stage

__all__ = [
    'CommandRunner',
    'ArchiveBuilder',
    'JarWriter',
    'NullSink',
    'iter_tree',
    'AssetEntry',
    'AssetMap',
    'AssetMerger',
    'JavacCompiler',
    'NativeBuildOrchestrator',
    'NativeBuildResult',
    'AarAssembler',
    'SourceJarPackager',
    'sources_jar_path',
    'BindOrchestrator',
    'BindResult',
    'pipeline_stage',
]
