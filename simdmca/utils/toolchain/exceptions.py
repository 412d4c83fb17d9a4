from typing import Optional

from .data import ExitInfo
from .enums import Stage


class AnalysisError(Exception):
    """Base class for analysis failures"""
    pass


class InvalidRequest(AnalysisError):
    """Request rejected before any process was spawned"""
    pass


class UnknownTargetError(InvalidRequest):
    """Target id not present in the catalog"""
    def __init__(self, target_id: str):
        self.target_id = target_id
        super().__init__(f"Unknown CPU target: {target_id}")


class ToolchainError(AnalysisError):
    """A pipeline stage failed; carries the captured tool output verbatim"""
    def __init__(self, stage: Stage, message: str, exit_info: Optional[ExitInfo] = None):
        self.stage = stage
        self.message = message
        self.exit_info = exit_info
        super().__init__(message)

    @property
    def diagnostic(self) -> str:
        if self.exit_info is None:
            return ""
        return self.exit_info.output

    def __str__(self) -> str:
        return f"[{self.stage.value}] {self.message}"
