from enum import Enum


class ArchFamily(Enum):
    """Architecture families a host or target can belong to"""
    X86 = "x86_64"
    ARM = "aarch64"
    POWERPC = "ppc64"
    UNKNOWN = "unknown"


class Stage(Enum):
    """Pipeline stages that can fail independently"""
    WORKSPACE_SETUP = "workspaceSetup"
    COMPILE = "compile"
    SIMULATE = "simulate"
    CLEANUP = "cleanup"


class OptimizationLevel(Enum):
    """Optimization levels"""
    DEBUG = "-O0"
    BASIC = "-O1"
    MODERATE = "-O2"
    AGGRESSIVE = "-O3"
    SIZE = "-Os"


class ToolKind(Enum):
    """External executables the pipeline drives"""
    COMPILER = "clang"
    SIMULATOR = "llvm-mca"
