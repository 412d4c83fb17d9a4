"""Shared fixtures: a process-free toolchain and canned llvm-mca reports."""

from pathlib import Path
from typing import List, Optional

import pytest

from simdmca.core.catalog import build_default_catalog
from simdmca.core.driver import ToolchainDriver
from simdmca.core.host import HostProfile
from simdmca.utils.toolchain.data import ToolOutput
from simdmca.utils.toolchain.enums import ArchFamily
from simdmca.utils.toolchain.toolchain import Toolchain


SAMPLE_ASSEMBLY = """\
\t.text
\t.file\t"input.cpp"
\t.globl\tadd8
add8:
\tvaddps\t%ymm1, %ymm0, %ymm0
\tvmulps\t(%rdi), %ymm0, %ymm0
\tretq
"""

SAMPLE_REPORT = """\
Iterations:        100
Instructions:      300
Total Cycles:      110
Total uOps:        400

Dispatch Width:    4
uOps Per Cycle:    3.64
IPC:               2.73
Block RThroughput: 1.0


Instruction Info:
[1]: #uOps
[2]: Latency
[3]: RThroughput
[4]: MayLoad
[5]: MayStore
[6]: HasSideEffects (U)

[1]    [2]    [3]    [4]    [5]    [6]    Instructions:
 1      3     1.00                        vaddps\t%ymm1, %ymm0, %ymm0
 2      8     0.50    *                   vmulps\t(%rdi), %ymm0, %ymm0
 1      1     1.00                  U     retq


Resources:
[0]   - SKLDivider
[1]   - SKLFPDivider


Resource pressure per iteration:
[0]    [1]
 -      -
"""


class FakeToolchain(Toolchain):
    """Records invocations instead of spawning processes"""

    def __init__(self, assembly: str = SAMPLE_ASSEMBLY, report: str = SAMPLE_REPORT,
                 compile_returncode: int = 0, simulate_returncode: int = 0,
                 compile_stderr: str = "", simulate_stderr: str = "",
                 compile_raises: Optional[BaseException] = None,
                 write_assembly: bool = True):
        self.assembly = assembly
        self.report = report
        self.compile_returncode = compile_returncode
        self.simulate_returncode = simulate_returncode
        self.compile_stderr = compile_stderr
        self.simulate_stderr = simulate_stderr
        self.compile_raises = compile_raises
        self.write_assembly = write_assembly
        self.calls: List[tuple] = []
        self.workspaces: List[Path] = []
        self.sources: List[str] = []

    @property
    def spawn_count(self) -> int:
        return len(self.calls)

    def compile(self, source, output, flags, cwd):
        self.calls.append(('compile', source, output, list(flags)))
        self.workspaces.append(Path(cwd))
        self.sources.append((Path(cwd) / source).read_text(encoding='utf-8'))
        if self.compile_raises is not None:
            raise self.compile_raises
        argv = ['clang', '-S', '-O2'] + list(flags) + ['-o', output, source]
        if self.compile_returncode == 0 and self.write_assembly:
            (Path(cwd) / output).write_text(self.assembly, encoding='utf-8')
        return ToolOutput(argv=argv, returncode=self.compile_returncode, stderr=self.compile_stderr)

    def simulate(self, assembly, cpu, cwd):
        self.calls.append(('simulate', assembly, cpu))
        argv = ['llvm-mca', f'-mcpu={cpu}', assembly]
        stdout = self.report if self.simulate_returncode == 0 else ""
        return ToolOutput(argv=argv, returncode=self.simulate_returncode,
                          stdout=stdout, stderr=self.simulate_stderr)


@pytest.fixture
def catalog():
    return build_default_catalog()


@pytest.fixture
def x86_host():
    return HostProfile(family=ArchFamily.X86, machine='x86_64')


@pytest.fixture
def fake_toolchain():
    return FakeToolchain()


@pytest.fixture
def driver(catalog, fake_toolchain, x86_host):
    return ToolchainDriver(catalog, toolchain=fake_toolchain, host=x86_host)
