"""Toolchain package - re-exports for convenience"""
from .enums import ArchFamily, Stage, OptimizationLevel, ToolKind
from .data import TargetDescriptor, AnalysisRequest, ToolOutput, ExitInfo, ToolchainConfig
from .exceptions import AnalysisError, InvalidRequest, UnknownTargetError, ToolchainError
from .detector import ToolDetector
from .toolchain import Toolchain, LLVMToolchain
from .workspace import scoped_workspace, SOURCE_NAME, ASSEMBLY_NAME
from .source import compose_source, compile_flags, simulator_cpu

__all__ = [
    'ArchFamily','Stage','OptimizationLevel','ToolKind',
    'TargetDescriptor','AnalysisRequest','ToolOutput','ExitInfo','ToolchainConfig',
    'AnalysisError','InvalidRequest','UnknownTargetError','ToolchainError',
    'ToolDetector','Toolchain','LLVMToolchain',
    'scoped_workspace','SOURCE_NAME','ASSEMBLY_NAME',
    'compose_source','compile_flags','simulator_cpu'
]
