#!/usr/bin/env python3
import logging
import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from ..utils.toolchain.data import AnalysisRequest, ExitInfo, TargetDescriptor, ToolchainConfig, ToolOutput
from ..utils.toolchain.enums import Stage
from ..utils.toolchain.exceptions import AnalysisError, InvalidRequest, ToolchainError
from ..utils.toolchain.source import compile_flags, compose_source, simulator_cpu
from ..utils.toolchain.toolchain import LLVMToolchain, Toolchain
from ..utils.toolchain.workspace import ASSEMBLY_NAME, SOURCE_NAME, scoped_workspace
from .catalog import TargetCatalog, build_default_catalog
from .host import HostProfile, detect_host
from .report import parse_report
from .results import AnalysisResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatrixOutcome:
    """Result or failure of one target in a matrix run"""
    target_id: str
    result: Optional[AnalysisResult] = None
    error: Optional[AnalysisError] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


def check_source(source: str):
    """Reject empty text and text that cannot be written out as UTF-8"""
    if not source or not source.strip():
        raise InvalidRequest("No code selected: source text is empty")
    try:
        source.encode('utf-8')
    except UnicodeEncodeError as e:
        raise InvalidRequest(f"Source text is not valid UTF-8: {e.reason} at position {e.start}") from e


class ToolchainDriver:
    """Compile a snippet for a target and run llvm-mca on the assembly.

    Holds no per-request state: every call gets its own workspace and
    process handles, so one driver can serve concurrent requests.
    """

    def __init__(self, catalog: TargetCatalog, toolchain: Optional[Toolchain] = None,
                 config: Optional[ToolchainConfig] = None, host: Optional[HostProfile] = None):
        self.catalog = catalog
        self.config = config or ToolchainConfig()
        self.toolchain = toolchain or LLVMToolchain(self.config)
        self.host = host or detect_host()

    def build_request(self, source: str, target_id: str) -> AnalysisRequest:
        check_source(source)
        return AnalysisRequest(source=source, target=self.catalog.lookup(target_id))

    def analyze(self, source: str, target_id: str) -> AnalysisResult:
        return self.run_analysis(self.build_request(source, target_id))

    def run_analysis(self, request: AnalysisRequest) -> AnalysisResult:
        check_source(request.source)
        target = request.target
        logger.info(f"Analyzing for {target.display_name}")

        with scoped_workspace(prefix=self.config.workspace_prefix) as workspace:
            self._write_source(workspace, request)
            assembly = self._compile(workspace, target)
            report = self._simulate(workspace, target)

        parsed = parse_report(report)
        logger.info(f"Parsed {len(parsed.instructions)} instructions "
                    f"(cycles={parsed.total_cycles}, rthroughput={parsed.block_throughput})")
        return AnalysisResult(
            target_id=target.id,
            target_label=target.display_name,
            summary=parsed.summary,
            instructions=parsed.instructions,
            assembly_text=assembly,
            raw_report_text=report,
        )

    def analyze_matrix(self, source: str, target_ids: Iterable[str], max_workers: int = 4) -> List[MatrixOutcome]:
        """Analyze one snippet for several targets; outcomes follow `target_ids` order.

        Invalid requests (empty source, unknown id) are raised up front;
        per-target toolchain failures are reported in the outcomes.
        """
        requests = [self.build_request(source, target_id) for target_id in target_ids]
        if not requests:
            return []

        def run(request: AnalysisRequest) -> MatrixOutcome:
            try:
                return MatrixOutcome(request.target.id, result=self.run_analysis(request))
            except ToolchainError as e:
                logger.error(f"{request.target.id}: {e}")
                return MatrixOutcome(request.target.id, error=e)

        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(requests)))) as executor:
            return list(executor.map(run, requests))

    def _write_source(self, workspace: Path, request: AnalysisRequest):
        source_text = compose_source(request.source, request.target, self.host.family)
        try:
            (workspace / SOURCE_NAME).write_text(source_text, encoding='utf-8')
        except OSError as e:
            raise ToolchainError(Stage.WORKSPACE_SETUP, f"Could not write source file: {e}") from e
        logger.debug(f"Written {SOURCE_NAME} with headers")

    def _compile(self, workspace: Path, target: TargetDescriptor) -> str:
        flags = compile_flags(target, self.host.family)
        result = self._invoke(Stage.COMPILE,
                              lambda: self.toolchain.compile(SOURCE_NAME, ASSEMBLY_NAME, flags, workspace))
        asm_file = workspace / ASSEMBLY_NAME
        if not result.ok:
            raise ToolchainError(Stage.COMPILE, f"Compilation failed for {target.display_name}",
                                 ExitInfo.from_output(result))
        try:
            return asm_file.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            raise ToolchainError(Stage.COMPILE, f"Compiler produced no assembly: {e}",
                                 ExitInfo.from_output(result)) from e

    def _simulate(self, workspace: Path, target: TargetDescriptor) -> str:
        cpu = simulator_cpu(target)
        result = self._invoke(Stage.SIMULATE,
                              lambda: self.toolchain.simulate(ASSEMBLY_NAME, cpu, workspace))
        if not result.ok:
            raise ToolchainError(Stage.SIMULATE, f"llvm-mca failed for -mcpu={cpu}",
                                 ExitInfo.from_output(result))
        return result.stdout

    @staticmethod
    def _invoke(stage: Stage, call) -> ToolOutput:
        try:
            return call()
        except subprocess.TimeoutExpired as e:
            output = e.stderr or e.output or ""
            if isinstance(output, bytes):
                output = output.decode('utf-8', errors='replace')
            raise ToolchainError(stage, f"{stage.value} timed out after {e.timeout}s",
                                 ExitInfo(argv=list(e.cmd) if isinstance(e.cmd, (list, tuple)) else [str(e.cmd)],
                                          output=output)) from e
        except OSError as e:
            raise ToolchainError(stage, f"Could not start {stage.value} tool: {e}",
                                 ExitInfo(output=str(e))) from e


def analyze_snippet(source: str, target_id: str, catalog: Optional[TargetCatalog] = None,
                    toolchain: Optional[Toolchain] = None) -> AnalysisResult:
    config = ToolchainConfig.from_env()
    driver = ToolchainDriver(catalog or build_default_catalog(), toolchain=toolchain, config=config)
    return driver.analyze(source, target_id)
