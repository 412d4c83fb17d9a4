"""Tests for the analysis result model."""

import json

import pytest

from simdmca.core.report import parse_report
from simdmca.core.results import (
    UNAVAILABLE, AnalysisResult, InstructionRecord, ReportSummary, metric_value,
)

from conftest import SAMPLE_ASSEMBLY, SAMPLE_REPORT


def make_result(report=SAMPLE_REPORT):
    parsed = parse_report(report)
    return AnalysisResult(
        target_id="x86-haswell",
        target_label="x86-64 AVX2 - haswell",
        summary=parsed.summary,
        instructions=parsed.instructions,
        assembly_text=SAMPLE_ASSEMBLY,
        raw_report_text=report,
    )


class TestSorting:

    def test_sort_by_latency_descending(self):
        result = make_result()
        ordered = result.sorted_instructions('latency', descending=True)
        assert [r.latency for r in ordered] == ["8", "3", "1"]

    def test_numeric_columns_sort_as_numbers(self):
        records = (
            InstructionRecord(1, "1", "10", "1.00", "a"),
            InstructionRecord(2, "1", "9", "0.50", "b"),
        )
        result = AnalysisResult("t", "T", ReportSummary(), records)
        assert [r.order for r in result.sorted_instructions('latency')] == [2, 1]

    def test_ties_keep_issue_order(self):
        result = make_result()
        assert [r.order for r in result.sorted_instructions('uops')] == [1, 3, 2]
        assert [r.order for r in result.sorted_instructions('throughput', descending=True)] == [1, 3, 2]

    def test_sort_by_instruction_text(self):
        result = make_result()
        assert [r.instruction.split()[0] for r in result.sorted_instructions('instruction')] == [
            "retq", "vaddps", "vmulps",
        ]

    def test_issue_order_restored(self):
        result = make_result()
        result.sorted_instructions('latency', descending=True)
        assert [r.order for r in result.issue_order()] == [1, 2, 3]
        assert [r.order for r in result.instructions] == [1, 2, 3]

    def test_unknown_column(self):
        with pytest.raises(ValueError, match="Cannot sort"):
            make_result().sorted_instructions('pressure')


class TestSerialization:

    def test_headline(self):
        assert make_result().headline() == "Latency: 110 cycles | Throughput: 1.0"

    def test_headline_unavailable(self):
        result = make_result("no metrics\n")
        assert result.headline() == "Latency: N/A cycles | Throughput: N/A"

    def test_to_dict(self):
        data = make_result().to_dict()
        assert data['target'] == "x86-haswell"
        assert data['cpu_target'] == "x86-64 AVX2 - haswell"
        assert data['total_cycles'] == 110
        assert data['summary']['ipc'] == 2.73
        assert data['instructions'][1] == {
            'order': 2, 'uops': "2", 'latency': "8", 'throughput': "0.50",
            'instruction': "vmulps\t(%rdi), %ymm0, %ymm0",
        }
        assert data['full_report'] == SAMPLE_REPORT

    def test_unavailable_serializes_as_token(self):
        data = json.loads(make_result("nothing\n").to_json())
        assert data['total_cycles'] == "N/A"
        assert data['block_throughput'] == "N/A"
        assert data['instructions'] == []

    def test_metric_value(self):
        assert metric_value(UNAVAILABLE) == "N/A"
        assert metric_value(0) == 0
        assert str(UNAVAILABLE) == "N/A"
