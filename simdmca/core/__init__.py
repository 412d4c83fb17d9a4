from .catalog import TargetCatalog, build_default_catalog, NATIVE_ID
from .host import HostProfile, detect_host, is_compatible, filter_compatible, sort_for_display
from .report import ReportParser, parse_report
from .results import UNAVAILABLE, Unavailable, InstructionRecord, ReportSummary, ParsedReport, AnalysisResult
from .driver import ToolchainDriver, MatrixOutcome, analyze_snippet

__all__ = [
    'TargetCatalog','build_default_catalog','NATIVE_ID',
    'HostProfile','detect_host','is_compatible','filter_compatible','sort_for_display',
    'ReportParser','parse_report',
    'UNAVAILABLE','Unavailable','InstructionRecord','ReportSummary','ParsedReport','AnalysisResult',
    'ToolchainDriver','MatrixOutcome','analyze_snippet'
]
