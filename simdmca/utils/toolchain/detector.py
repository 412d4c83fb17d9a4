from typing import Dict, List, Optional
from pathlib import Path
import shutil
import subprocess
from .enums import ToolKind

# Distributions often ship only suffixed binaries (clang-18, llvm-mca-18)
_VERSION_SUFFIXES = range(21, 10, -1)


class ToolDetector:
    """Detect the compiler and simulator executables"""

    @staticmethod
    def candidate_names(kind: ToolKind) -> List[str]:
        base = kind.value
        return [base] + [f"{base}-{v}" for v in _VERSION_SUFFIXES]

    @staticmethod
    def find_tool(kind: ToolKind) -> Optional[Path]:
        """Find a specific tool on PATH"""
        for name in ToolDetector.candidate_names(kind):
            tool_path = shutil.which(name)
            if tool_path:
                return Path(tool_path)
        return None

    @staticmethod
    def detect_tools() -> Dict[ToolKind, Path]:
        """Detect available tools on the system"""
        tools = {}
        for kind in ToolKind:
            path = ToolDetector.find_tool(kind)
            if path:
                tools[kind] = path
        return tools

    @staticmethod
    def get_tool_version(tool_path: Path) -> Optional[str]:
        """Get the first non-empty line of `<tool> --version`"""
        try:
            result = subprocess.run(
                [str(tool_path), "--version"],
                capture_output=True,
                text=True,
                timeout=5
            )
        except (OSError, subprocess.TimeoutExpired):
            return None
        for line in result.stdout.splitlines():
            if line.strip():
                return line.strip()
        return None
