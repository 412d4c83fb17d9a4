"""Source composition and per-target flag selection"""
from typing import List

from .data import TargetDescriptor
from .enums import ArchFamily

NATIVE_CPU = "native"

FREESTANDING_FLAGS = ["-ffreestanding", "-nostdlibinc"]

HOSTED_HEADERS = ["stddef.h", "stdint.h"]

INTRINSICS_HEADERS = {
    ArchFamily.ARM: "arm_neon.h",
    ArchFamily.POWERPC: "altivec.h",
}
DEFAULT_INTRINSICS_HEADER = "immintrin.h"

TYPE_ALIASES = [
    ("uchar", "unsigned char"),
    ("uint", "unsigned int"),
    ("ushort", "unsigned short"),
]


def effective_arch(target: TargetDescriptor, host_arch: ArchFamily) -> ArchFamily:
    """Architecture the compiler will actually emit code for"""
    if target.is_native_auto:
        return host_arch
    return target.arch


def intrinsics_header(arch: ArchFamily) -> str:
    return INTRINSICS_HEADERS.get(arch, DEFAULT_INTRINSICS_HEADER)


def compose_source(code: str, target: TargetDescriptor, host_arch: ArchFamily = ArchFamily.UNKNOWN) -> str:
    """Prepend headers and type aliases to the user's code"""
    parts = []
    if not target.is_cross:
        parts.extend(f"#include <{name}>" for name in HOSTED_HEADERS)
    parts.append(f"#include <{intrinsics_header(effective_arch(target, host_arch))}>")
    parts.append("")
    for alias, actual in TYPE_ALIASES:
        parts.append(f"#ifndef {alias}")
        parts.append(f"typedef {actual} {alias};")
        parts.append("#endif")
    parts.append("")
    return '\n'.join(parts) + code


def arch_flag(target: TargetDescriptor, host_arch: ArchFamily = ArchFamily.UNKNOWN) -> str:
    if target.is_native_auto:
        # clang only accepts -mcpu=native outside x86
        if host_arch == ArchFamily.X86:
            return f"-march={NATIVE_CPU}"
        return f"-mcpu={NATIVE_CPU}"
    if target.compile_arch:
        return f"-march={target.compile_arch}"
    return f"-mcpu={target.simulator_cpu}"


def compile_flags(target: TargetDescriptor, host_arch: ArchFamily = ArchFamily.UNKNOWN) -> List[str]:
    """Target, architecture and freestanding flags, in command-line order"""
    flags = []
    if target.is_cross:
        flags.append(f"--target={target.cross_target_triple}")
    flags.append(arch_flag(target, host_arch))
    if target.is_cross:
        flags.extend(FREESTANDING_FLAGS)
    return flags


def simulator_cpu(target: TargetDescriptor) -> str:
    """CPU identifier for llvm-mca; x86 reuses the -march value"""
    if target.is_native_auto:
        return NATIVE_CPU
    return target.simulator_cpu or target.compile_arch
