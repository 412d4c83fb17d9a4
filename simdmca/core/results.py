#!/usr/bin/env python3
"""Structured outcome of one analysis, handed to presentation layers.

Instruction records keep the simulator's issue order. Callers may re-sort
them for display with `sorted_instructions`, and `issue_order` always gives
the canonical sequence back.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union


class Unavailable(Enum):
    """Marker for a metric the report did not contain (distinct from 0)"""
    TOKEN = "N/A"

    def __str__(self) -> str:
        return self.value


UNAVAILABLE = Unavailable.TOKEN

Count = Union[int, Unavailable]
Ratio = Union[float, Unavailable]

NUMERIC_COLUMNS = ('order', 'uops', 'latency', 'throughput')
TEXT_COLUMNS = ('instruction',)
SORTABLE_COLUMNS = NUMERIC_COLUMNS + TEXT_COLUMNS


def metric_value(value: Union[int, float, Unavailable]) -> Union[int, float, str]:
    """JSON-friendly form of a metric"""
    if value is UNAVAILABLE:
        return UNAVAILABLE.value
    return value


@dataclass(frozen=True)
class InstructionRecord:
    """One row of the Instruction Info table"""
    order: int
    uops: str
    latency: str
    throughput: str
    instruction: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'order': self.order,
            'uops': self.uops,
            'latency': self.latency,
            'throughput': self.throughput,
            'instruction': self.instruction,
        }


@dataclass(frozen=True)
class ReportSummary:
    """Header metrics printed above the per-instruction tables"""
    total_cycles: Count = UNAVAILABLE
    block_throughput: Ratio = UNAVAILABLE
    iterations: Count = UNAVAILABLE
    instruction_count: Count = UNAVAILABLE
    total_uops: Count = UNAVAILABLE
    dispatch_width: Count = UNAVAILABLE
    uops_per_cycle: Ratio = UNAVAILABLE
    ipc: Ratio = UNAVAILABLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_cycles': metric_value(self.total_cycles),
            'block_throughput': metric_value(self.block_throughput),
            'iterations': metric_value(self.iterations),
            'instruction_count': metric_value(self.instruction_count),
            'total_uops': metric_value(self.total_uops),
            'dispatch_width': metric_value(self.dispatch_width),
            'uops_per_cycle': metric_value(self.uops_per_cycle),
            'ipc': metric_value(self.ipc),
        }


@dataclass(frozen=True)
class ParsedReport:
    summary: ReportSummary
    instructions: Tuple[InstructionRecord, ...] = ()

    @property
    def total_cycles(self) -> Count:
        return self.summary.total_cycles

    @property
    def block_throughput(self) -> Ratio:
        return self.summary.block_throughput


@dataclass(frozen=True)
class AnalysisResult:
    """Metrics, instruction table and raw artifacts of one analysis"""
    target_id: str
    target_label: str
    summary: ReportSummary
    instructions: Tuple[InstructionRecord, ...] = field(default_factory=tuple)
    assembly_text: str = ""
    raw_report_text: str = ""

    @property
    def total_cycles(self) -> Count:
        return self.summary.total_cycles

    @property
    def block_throughput(self) -> Ratio:
        return self.summary.block_throughput

    def headline(self) -> str:
        return f"Latency: {self.total_cycles} cycles | Throughput: {self.block_throughput}"

    def issue_order(self) -> List[InstructionRecord]:
        return sorted(self.instructions, key=lambda r: r.order)

    def sorted_instructions(self, column: str, descending: bool = False) -> List[InstructionRecord]:
        """Display ordering by one column; ties keep issue order"""
        if column not in SORTABLE_COLUMNS:
            raise ValueError(f"Cannot sort by {column!r}. Valid: {', '.join(SORTABLE_COLUMNS)}")
        if column in TEXT_COLUMNS:
            key = lambda r: getattr(r, column)
        else:
            key = lambda r: float(getattr(r, column))
        return sorted(self.issue_order(), key=key, reverse=descending)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'target': self.target_id,
            'cpu_target': self.target_label,
            'total_cycles': metric_value(self.total_cycles),
            'block_throughput': metric_value(self.block_throughput),
            'summary': self.summary.to_dict(),
            'instructions': [record.to_dict() for record in self.instructions],
            'assembly': self.assembly_text,
            'full_report': self.raw_report_text,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
