import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .enums import ArchFamily, OptimizationLevel, ToolKind


@dataclass(frozen=True)
class TargetDescriptor:
    """One analyzable CPU"""
    id: str
    label: str
    family: str
    arch: ArchFamily
    cross_target_triple: Optional[str] = None
    compile_arch: Optional[str] = None      # value for -march= (x86 only)
    simulator_cpu: Optional[str] = None     # value for -mcpu= (llvm-mca, ARM/PowerPC compile)
    is_native_auto: bool = False

    @property
    def is_cross(self) -> bool:
        return bool(self.cross_target_triple)

    @property
    def display_name(self) -> str:
        return f"{self.family} - {self.label}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'label': self.label,
            'family': self.family,
            'arch': self.arch.value,
            'cross_target_triple': self.cross_target_triple,
            'compile_arch': self.compile_arch,
            'simulator_cpu': self.simulator_cpu,
            'is_native_auto': self.is_native_auto,
        }


@dataclass(frozen=True)
class AnalysisRequest:
    """Source fragment plus the resolved target to analyze it for"""
    source: str
    target: TargetDescriptor


@dataclass(frozen=True)
class ToolOutput:
    """Captured result of one external tool invocation"""
    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class ExitInfo:
    """What a failed stage left behind"""
    argv: List[str] = field(default_factory=list)
    returncode: Optional[int] = None
    output: str = ""

    @classmethod
    def from_output(cls, result: ToolOutput) -> "ExitInfo":
        # compiler diagnostics land on stderr; llvm-mca prints some on stdout
        output = result.stderr if result.stderr.strip() else result.stdout
        return cls(argv=list(result.argv), returncode=result.returncode, output=output)


@dataclass
class ToolchainConfig:
    """Toolchain configuration"""
    compiler: str = ToolKind.COMPILER.value
    simulator: str = ToolKind.SIMULATOR.value
    optimization: OptimizationLevel = OptimizationLevel.MODERATE
    timeout: float = 30.0
    workspace_prefix: str = "simdmca-"

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "ToolchainConfig":
        """Build a config from SIMDMCA_* variables, falling back to PATH lookups"""
        from .detector import ToolDetector

        env = os.environ if environ is None else environ
        config = cls()

        compiler = env.get('SIMDMCA_CLANG')
        if not compiler:
            found = ToolDetector.find_tool(ToolKind.COMPILER)
            compiler = str(found) if found else None
        if compiler:
            config.compiler = compiler

        simulator = env.get('SIMDMCA_LLVM_MCA')
        if not simulator:
            found = ToolDetector.find_tool(ToolKind.SIMULATOR)
            simulator = str(found) if found else None
        if simulator:
            config.simulator = simulator

        timeout = env.get('SIMDMCA_TIMEOUT')
        if timeout:
            try:
                config.timeout = float(timeout)
            except ValueError:
                raise ValueError(f"SIMDMCA_TIMEOUT must be a number of seconds, got {timeout!r}")
        return config
