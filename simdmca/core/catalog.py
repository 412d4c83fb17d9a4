#!/usr/bin/env python3
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..utils.toolchain.data import TargetDescriptor
from ..utils.toolchain.enums import ArchFamily
from ..utils.toolchain.exceptions import UnknownTargetError

NATIVE_ID = "native"

X86_CPUS = {
    "AVX512": [
        "cascadelake", "cannonlake", "cooperlake", "icelake-server", "icelake-client",
        "tigerlake", "rocketlake", "sapphirerapids", "emeraldrapids", "graniterapids",
        "graniterapids-d", "diamondrapids", "znver4", "znver5", "znver6",
    ],
    "AVX2": [
        "haswell", "core-avx2", "broadwell", "skylake", "alderlake", "raptorlake",
        "meteorlake", "gracemont", "arrowlake", "arrowlake-s", "lunarlake",
        "pantherlake", "wildcatlake", "novalake", "sierraforest", "grandridge",
        "clearwaterforest", "bdver4", "znver1", "znver2", "znver3",
    ],
    "AVX": [
        "sandybridge", "corei7-avx", "ivybridge", "core-avx-i", "bdver1",
        "bdver2", "bdver3", "lujiazui",
    ],
    "SSE": [
        "x86-64", "x86-64-v2", "x86-64-v3", "x86-64-v4", "pentium3m", "pentium-m",
        "pentium4", "pentium4m", "prescott", "nocona", "core2", "nehalem",
        "corei7", "westmere", "bonnell", "atom", "silvermont", "slm", "goldmont",
        "goldmont-plus", "tremont", "athlon", "athlon-tbird", "athlon-4",
        "athlon-xp", "athlon-mp", "k8", "opteron", "athlon64", "athlon-fx",
        "k8-sse3", "opteron-sse3", "athlon64-sse3", "amdfam10", "barcelona",
        "btver1", "btver2", "c3-2", "c7", "nehemiah", "esther", "eden-x2",
        "nano", "nano-1000", "nano-2000", "nano-3000", "nano-x2", "nano-x4",
    ],
}

ARM_CPUS = {
    "A32": ["cortex-a17", "cortex-a53"],
    "A64": [
        "cortex-a55", "cortex-a72", "cortex-a73", "cortex-a75", "cortex-a76",
        "cortex-a77", "cortex-a78", "cortex-x1", "cortex-x2", "cortex-x3",
        "cortex-a710", "cortex-a715", "neoverse-n1", "neoverse-n2",
        "neoverse-v1", "neoverse-v2", "ampere1", "ampere1a", "ampere1b",
    ],
    "v7": ["cortex-a9", "cortex-a15"],
}

POWER_CPUS = ["pwr8", "pwr9", "pwr10"]

ARM_TRIPLE = "aarch64-linux-gnu"
POWER_TRIPLE = "powerpc64le-linux-gnu"


class TargetCatalog:
    """Immutable, id-keyed set of analyzable targets in catalog order"""

    def __init__(self, descriptors: Iterable[TargetDescriptor]):
        targets: Dict[str, TargetDescriptor] = {}
        for descriptor in descriptors:
            self._validate(descriptor)
            if descriptor.id in targets:
                raise ValueError(f"Duplicate target id: {descriptor.id}")
            targets[descriptor.id] = descriptor
        self._targets = targets
        self._ordered: Tuple[TargetDescriptor, ...] = tuple(targets.values())

    @staticmethod
    def _validate(descriptor: TargetDescriptor):
        if not descriptor.id:
            raise ValueError("Target id must not be empty")
        if not descriptor.label:
            raise ValueError(f"Target {descriptor.id} has no label")
        if not descriptor.family:
            raise ValueError(f"Target {descriptor.id} has no family")
        explicit = bool(descriptor.compile_arch or descriptor.simulator_cpu)
        if explicit == descriptor.is_native_auto:
            raise ValueError(
                f"Target {descriptor.id} must set exactly one of an explicit CPU or native auto-detection")

    def list_targets(self) -> Tuple[TargetDescriptor, ...]:
        return self._ordered

    def lookup(self, target_id: str) -> TargetDescriptor:
        try:
            return self._targets[target_id]
        except KeyError:
            raise UnknownTargetError(target_id) from None

    def get(self, target_id: str, default: Optional[TargetDescriptor] = None) -> Optional[TargetDescriptor]:
        return self._targets.get(target_id, default)

    def families(self) -> List[str]:
        seen = []
        for descriptor in self._ordered:
            if descriptor.family not in seen:
                seen.append(descriptor.family)
        return seen

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._targets

    def __iter__(self) -> Iterator[TargetDescriptor]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)


def generate_descriptors() -> List[TargetDescriptor]:
    descriptors = [TargetDescriptor(
        id=NATIVE_ID,
        label="Native (Auto-detect)",
        family="Native",
        arch=ArchFamily.UNKNOWN,
        is_native_auto=True,
    )]

    # x86 compiles with -march, llvm-mca takes the same name via -mcpu
    for category, cpus in X86_CPUS.items():
        for cpu in cpus:
            descriptors.append(TargetDescriptor(
                id=f"x86-{cpu}",
                label=cpu,
                family=f"x86-64 {category}",
                arch=ArchFamily.X86,
                compile_arch=cpu,
                simulator_cpu=cpu,
            ))

    for category, cpus in ARM_CPUS.items():
        for cpu in cpus:
            descriptors.append(TargetDescriptor(
                id=f"arm-{cpu}",
                label=cpu,
                family=f"ARM {category}",
                arch=ArchFamily.ARM,
                cross_target_triple=ARM_TRIPLE,
                simulator_cpu=cpu,
            ))

    for cpu in POWER_CPUS:
        descriptors.append(TargetDescriptor(
            id=f"power-{cpu}",
            label=cpu,
            family="PowerPC",
            arch=ArchFamily.POWERPC,
            cross_target_triple=POWER_TRIPLE,
            simulator_cpu=cpu,
        ))

    return descriptors


def build_default_catalog() -> TargetCatalog:
    return TargetCatalog(generate_descriptors())
