import logging
import shlex
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from .data import ToolchainConfig, ToolOutput

logger = logging.getLogger(__name__)


class Toolchain(ABC):
    """The two external capabilities the driver needs.

    Implementations return a ToolOutput for every process that ran, whatever
    its exit status, and raise OSError or subprocess.TimeoutExpired when the
    process could not be spawned or did not finish.
    """

    @abstractmethod
    def compile(self, source: str, output: str, flags: List[str], cwd: Path) -> ToolOutput:
        """Emit assembly for `source` into `output` (paths relative to cwd)."""

    @abstractmethod
    def simulate(self, assembly: str, cpu: str, cwd: Path) -> ToolOutput:
        """Run the scheduling simulator on `assembly` for `cpu`."""


class LLVMToolchain(Toolchain):
    """clang + llvm-mca driven through subprocess"""

    def __init__(self, config: Optional[ToolchainConfig] = None):
        self.config = config or ToolchainConfig()

    def compile_command(self, source: str, output: str, flags: List[str]) -> List[str]:
        return ([self.config.compiler, "-S", self.config.optimization.value]
                + list(flags) + ["-o", output, source])

    def simulate_command(self, assembly: str, cpu: str) -> List[str]:
        return [self.config.simulator, f"-mcpu={cpu}", assembly]

    def compile(self, source: str, output: str, flags: List[str], cwd: Path) -> ToolOutput:
        return self._run(self.compile_command(source, output, flags), cwd)

    def simulate(self, assembly: str, cpu: str, cwd: Path) -> ToolOutput:
        return self._run(self.simulate_command(assembly, cpu), cwd)

    def _run(self, cmd: List[str], cwd: Path) -> ToolOutput:
        logger.info(f"Running: {shlex.join(cmd)}")
        result = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            errors='replace',
            timeout=self.config.timeout
        )
        return ToolOutput(argv=cmd, returncode=result.returncode, stdout=result.stdout, stderr=result.stderr)
