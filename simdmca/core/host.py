#!/usr/bin/env python3
import locale
import logging
import platform
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..utils.toolchain.data import TargetDescriptor
from ..utils.toolchain.enums import ArchFamily

logger = logging.getLogger(__name__)

# substring -> family, checked in order against the lower-cased machine string
_MACHINE_PATTERNS = [
    (('x86_64', 'amd64'), ArchFamily.X86),
    (('aarch64', 'arm64'), ArchFamily.ARM),
    (('ppc64', 'powerpc'), ArchFamily.POWERPC),
]

_TRIPLE_PREFIXES = [
    (('aarch64', 'arm'), ArchFamily.ARM),
    (('powerpc', 'ppc'), ArchFamily.POWERPC),
    (('x86_64', 'i386', 'i486', 'i586', 'i686'), ArchFamily.X86),
]


@dataclass(frozen=True)
class HostProfile:
    """Architecture of the machine running the analysis"""
    family: ArchFamily
    machine: str = ""

    @property
    def is_known(self) -> bool:
        return self.family != ArchFamily.UNKNOWN


def classify_machine(machine: str) -> ArchFamily:
    m = machine.lower()
    for needles, family in _MACHINE_PATTERNS:
        if any(needle in m for needle in needles):
            return family
    return ArchFamily.UNKNOWN


def triple_family(triple: str) -> ArchFamily:
    t = triple.lower()
    for prefixes, family in _TRIPLE_PREFIXES:
        if t.startswith(prefixes):
            return family
    return ArchFamily.UNKNOWN


def detect_host(machine: Optional[str] = None) -> HostProfile:
    """Query the OS for the machine architecture; failures give an UNKNOWN profile"""
    if machine is None:
        try:
            machine = platform.machine()
        except OSError as e:
            logger.warning(f"Could not determine host architecture: {e}")
            machine = ""
    machine = (machine or "").strip()
    profile = HostProfile(family=classify_machine(machine), machine=machine)
    logger.debug(f"Host architecture: {machine or '<unknown>'} -> {profile.family.value}")
    return profile


def is_compatible(host: HostProfile, target: TargetDescriptor) -> bool:
    if target.is_native_auto:
        return True
    if not host.is_known:
        return False
    if target.is_cross:
        return triple_family(target.cross_target_triple) == host.family
    return target.arch == host.family


def filter_compatible(host: HostProfile, targets: Iterable[TargetDescriptor]) -> List[TargetDescriptor]:
    """Targets analyzable from `host`, in catalog order"""
    return [target for target in targets if is_compatible(host, target)]


def sort_for_display(targets: Iterable[TargetDescriptor]) -> List[TargetDescriptor]:
    """Family first, then label, collated by the process LC_COLLATE (the CLI sets it from the environment)"""
    return sorted(targets, key=lambda t: (locale.strxfrm(t.family), locale.strxfrm(t.label)))
