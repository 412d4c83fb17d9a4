#!/usr/bin/env python3
import logging
import re
from typing import Callable, List, Optional, Union

from .results import UNAVAILABLE, InstructionRecord, ParsedReport, ReportSummary, Unavailable

logger = logging.getLogger(__name__)


class ReportParser:
    """Extract metrics and the Instruction Info table from llvm-mca text output.

    The report is a human-oriented fixed-width layout, so parsing is tolerant:
    missing fields become UNAVAILABLE, unrecognized table lines are skipped.
    """

    INT = r'(\d+)'
    DECIMAL = r'(\d+(?:\.\d+)?)'

    SUMMARY_FIELDS = {
        'iterations': (r'^Iterations:\s+' + INT, int),
        'instruction_count': (r'^Instructions:\s+' + INT, int),
        'total_cycles': (r'Total Cycles:\s+' + INT, int),
        'total_uops': (r'^Total uOps:\s+' + INT, int),
        'dispatch_width': (r'^Dispatch Width:\s+' + INT, int),
        'uops_per_cycle': (r'^uOps Per Cycle:\s+' + DECIMAL, float),
        'ipc': (r'^IPC:\s+' + DECIMAL, float),
        'block_throughput': (r'Block RThroughput:\s+' + DECIMAL, float),
    }

    SECTION_HEADER = re.compile(r'^Instruction Info:\s*$', re.MULTILINE)
    COLUMN_HEADER = re.compile(r'^\[1\]\s+\[2\]\s+\[3\].*Instructions:\s*$')
    # any column-0 "Name:" line, e.g. "Resources:" or "Timeline view:"
    NEXT_SECTION = re.compile(r'^[A-Za-z][^:]*:\s*$')
    ROW = re.compile(r'^\s*(\d+)\s+(\d+)\s+(\d+(?:\.\d+)?)\s+(\S.*?)\s*$')
    # MayLoad/MayStore/HasSideEffects markers and optional numeric columns
    FLAG_TOKEN = re.compile(r'^(?:\*|U|\d+(?:\.\d+)?)$')

    @staticmethod
    def extract_metric(text: str, pattern: str, convert: Callable[[str], Union[int, float]]) -> Union[int, float, Unavailable]:
        """First occurrence of a labelled numeric field, or UNAVAILABLE"""
        match = re.search(pattern, text, re.MULTILINE)
        if not match:
            return UNAVAILABLE
        try:
            return convert(match.group(1))
        except ValueError:
            return UNAVAILABLE

    @staticmethod
    def parse_summary(text: str) -> ReportSummary:
        values = {}
        for name, (pattern, convert) in ReportParser.SUMMARY_FIELDS.items():
            values[name] = ReportParser.extract_metric(text, pattern, convert)
            if values[name] is UNAVAILABLE:
                logger.debug(f"Report has no {name} field")
        return ReportSummary(**values)

    @staticmethod
    def table_lines(text: str) -> List[str]:
        """Lines between the Instruction Info column header and the next section"""
        section = ReportParser.SECTION_HEADER.search(text)
        if not section:
            return []
        lines = text[section.end():].splitlines()
        start = None
        for i, line in enumerate(lines):
            if ReportParser.COLUMN_HEADER.match(line):
                start = i + 1
                break
        if start is None:
            return []
        body = []
        for line in lines[start:]:
            if ReportParser.NEXT_SECTION.match(line):
                break
            body.append(line)
        return body

    @staticmethod
    def parse_row(line: str, order: int) -> Optional[InstructionRecord]:
        match = ReportParser.ROW.match(line)
        if not match:
            return None
        uops, latency, throughput, rest = match.groups()
        tokens = rest.split()
        skip = 0
        while skip < len(tokens) - 1 and ReportParser.FLAG_TOKEN.match(tokens[skip]):
            skip += 1
        instruction = rest
        for token in tokens[:skip]:
            instruction = instruction[instruction.index(token) + len(token):]
        instruction = instruction.strip()
        if not instruction:
            return None
        return InstructionRecord(order=order, uops=uops, latency=latency,
                                 throughput=throughput, instruction=instruction)

    @staticmethod
    def parse_instructions(text: str) -> List[InstructionRecord]:
        records = []
        for line in ReportParser.table_lines(text):
            record = ReportParser.parse_row(line, len(records) + 1)
            if record is None:
                if line.strip():
                    logger.debug(f"Skipping unrecognized table line: {line!r}")
                continue
            records.append(record)
        return records

    @staticmethod
    def parse(text: str) -> ParsedReport:
        return ParsedReport(
            summary=ReportParser.parse_summary(text),
            instructions=tuple(ReportParser.parse_instructions(text)),
        )


def parse_report(text: str) -> ParsedReport:
    """Parse raw llvm-mca output; never raises on malformed input"""
    return ReportParser.parse(text or "")
