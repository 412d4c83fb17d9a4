"""Tests for the llvm-mca report parser."""

from simdmca.core.report import ReportParser, parse_report
from simdmca.core.results import UNAVAILABLE

from conftest import SAMPLE_REPORT

TABLE_HEADER = """\
Instruction Info:
[1]: #uOps
[2]: Latency
[3]: RThroughput
[4]: MayLoad
[5]: MayStore
[6]: HasSideEffects (U)

[1]    [2]    [3]    [4]    [5]    [6]    Instructions:
"""


class TestSummary:

    def test_exact_values(self):
        parsed = parse_report("Total Cycles: 42\nBlock RThroughput: 3.5\n")
        assert parsed.total_cycles == 42
        assert isinstance(parsed.total_cycles, int)
        assert parsed.block_throughput == 3.5

    def test_missing_total_cycles_is_unavailable(self):
        parsed = parse_report("Block RThroughput: 3.5\n")
        assert parsed.total_cycles is UNAVAILABLE
        assert parsed.total_cycles != 0

    def test_zero_is_a_value(self):
        parsed = parse_report("Total Cycles: 0\nBlock RThroughput: 0.0\n")
        assert parsed.total_cycles == 0
        assert parsed.total_cycles is not UNAVAILABLE
        assert parsed.block_throughput == 0.0

    def test_first_occurrence_wins(self):
        parsed = parse_report("Total Cycles: 10\nTotal Cycles: 99\n")
        assert parsed.total_cycles == 10

    def test_full_summary(self):
        summary = parse_report(SAMPLE_REPORT).summary
        assert summary.iterations == 100
        assert summary.instruction_count == 300
        assert summary.total_cycles == 110
        assert summary.total_uops == 400
        assert summary.dispatch_width == 4
        assert summary.uops_per_cycle == 3.64
        assert summary.ipc == 2.73
        assert summary.block_throughput == 1.0

    def test_empty_and_garbage_input(self):
        for text in ("", None, "error: unknown target CPU 'foo'\n", "\x00\x01binary"):
            parsed = parse_report(text)
            assert parsed.total_cycles is UNAVAILABLE
            assert parsed.block_throughput is UNAVAILABLE
            assert parsed.instructions == ()


class TestInstructionTable:

    def test_sample_rows(self):
        records = parse_report(SAMPLE_REPORT).instructions
        assert [r.order for r in records] == [1, 2, 3]
        assert [(r.uops, r.latency, r.throughput) for r in records] == [
            ("1", "3", "1.00"), ("2", "8", "0.50"), ("1", "1", "1.00"),
        ]
        assert records[0].instruction == "vaddps\t%ymm1, %ymm0, %ymm0"
        assert records[1].instruction == "vmulps\t(%rdi), %ymm0, %ymm0"
        assert records[2].instruction == "retq"

    def test_skipped_lines_do_not_consume_order(self):
        text = TABLE_HEADER + (
            " 1      1     0.25                        addl\t%esi, %edi\n"
            "\n"
            " ---- separator ----\n"
            " 1      5     0.50    *                   movl\t(%rdi), %eax\n"
            " 1      1     1.00                  U     retq\n"
        )
        records = parse_report(text).instructions
        assert [r.order for r in records] == [1, 2, 3]
        assert [r.instruction for r in records] == ["addl\t%esi, %edi", "movl\t(%rdi), %eax", "retq"]

    def test_arbitrary_interior_spacing(self):
        text = TABLE_HEADER + " 12 140   12.5      *   *   U    fdiv   d0, d1, d2   \n"
        (record,) = parse_report(text).instructions
        assert (record.uops, record.latency, record.throughput) == ("12", "140", "12.5")
        assert record.instruction == "fdiv   d0, d1, d2"

    def test_section_stops_at_next_named_section(self):
        text = TABLE_HEADER + " 1      1     0.25                        nop\n\nResources:\n 1      1     0.25    nop\n"
        assert len(parse_report(text).instructions) == 1

    def test_table_to_end_of_text(self):
        text = TABLE_HEADER + " 1      1     0.25                        nop"
        (record,) = parse_report(text).instructions
        assert record.instruction == "nop"

    def test_missing_column_header(self):
        text = "Instruction Info:\n 1      1     0.25                        nop\n"
        assert parse_report(text).instructions == ()

    def test_missing_section(self):
        assert parse_report("Total Cycles: 5\n").instructions == ()

    def test_row_without_instruction_is_skipped(self):
        assert ReportParser.parse_row(" 1      1     0.25   ", 1) is None

    def test_parse_row_keeps_given_order(self):
        record = ReportParser.parse_row(" 3  4  2.00   vpaddd %xmm0, %xmm1, %xmm2", 7)
        assert record.order == 7
        assert record.instruction == "vpaddd %xmm0, %xmm1, %xmm2"
