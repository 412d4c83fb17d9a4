#!/usr/bin/env python3
from typing import Dict, Iterable, List, Optional

from rich.markup import escape
from rich.table import Table

from ..utils.toolchain.data import TargetDescriptor
from ..utils.toolchain.enums import ToolKind
from .driver import MatrixOutcome
from .results import AnalysisResult, InstructionRecord


def targets_table(targets: Iterable[TargetDescriptor], title: str = "CPU targets") -> Table:
    table = Table(title=title)
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Label")
    table.add_column("Family")
    table.add_column("Cross target", style="dim")
    for target in targets:
        table.add_row(target.id, target.label, target.family, target.cross_target_triple or "")
    return table


def tools_table(tools: Dict[ToolKind, Optional[str]], versions: Dict[ToolKind, Optional[str]]) -> Table:
    table = Table(title="Toolchain")
    table.add_column("Tool", style="cyan")
    table.add_column("Path")
    table.add_column("Version")
    for kind in ToolKind:
        path = tools.get(kind)
        table.add_row(kind.value, path or "[red]not found[/red]", versions.get(kind) or "")
    return table


def summary_table(result: AnalysisResult) -> Table:
    table = Table(title=f"CPU Target: {escape(result.target_label)}", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    summary = result.summary
    table.add_row("Total Cycles", str(summary.total_cycles))
    table.add_row("Block RThroughput", str(summary.block_throughput))
    table.add_row("Instructions", str(len(result.instructions)))
    table.add_row("Iterations", str(summary.iterations))
    table.add_row("uOps Per Cycle", str(summary.uops_per_cycle))
    table.add_row("IPC", str(summary.ipc))
    return table


def _bar(value: str, peak: float, width: int = 12) -> str:
    try:
        fraction = float(value) / peak if peak > 0 else 0.0
    except ValueError:
        fraction = 0.0
    filled = int(round(fraction * width))
    return "█" * filled + " " * (width - filled)


def instructions_table(records: List[InstructionRecord]) -> Table:
    table = Table(title="Instruction Performance")
    table.add_column("#", justify="right")
    table.add_column("uOps", justify="right")
    table.add_column("Latency")
    table.add_column("Throughput")
    table.add_column("Instruction", style="green")
    peak_latency = max((float(r.latency) for r in records), default=0.0)
    peak_throughput = max((float(r.throughput) for r in records), default=0.0)
    for record in records:
        table.add_row(
            str(record.order),
            record.uops,
            f"[orange1]{_bar(record.latency, peak_latency)}[/orange1] {record.latency}",
            f"[orange1]{_bar(record.throughput, peak_throughput)}[/orange1] {record.throughput}",
            escape(record.instruction),
        )
    return table


def matrix_table(outcomes: List[MatrixOutcome], labels: Dict[str, str]) -> Table:
    table = Table(title="Target comparison")
    table.add_column("Target", style="cyan")
    table.add_column("Total Cycles", justify="right")
    table.add_column("Block RThroughput", justify="right")
    table.add_column("Instructions", justify="right")
    table.add_column("Status")
    for outcome in outcomes:
        label = labels.get(outcome.target_id, outcome.target_id)
        if outcome.ok:
            result = outcome.result
            table.add_row(escape(label), str(result.total_cycles), str(result.block_throughput),
                          str(len(result.instructions)), "[green]ok[/green]")
        else:
            stage = getattr(outcome.error, 'stage', None)
            status = f"{stage.value} failed" if stage else "failed"
            table.add_row(escape(label), "-", "-", "-", f"[red]{status}[/red]")
    return table
