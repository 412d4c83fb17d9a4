"""Compile SIMD snippets for a chosen CPU and read llvm-mca's latency/throughput estimates."""

__version__ = "0.1.0"

from .core import (
    TargetCatalog, build_default_catalog, HostProfile, detect_host, filter_compatible,
    sort_for_display, parse_report, UNAVAILABLE, InstructionRecord, AnalysisResult,
    ToolchainDriver, analyze_snippet,
)
from .utils.toolchain import (
    ArchFamily, Stage, TargetDescriptor, AnalysisRequest, ToolchainConfig,
    AnalysisError, InvalidRequest, UnknownTargetError, ToolchainError,
)
