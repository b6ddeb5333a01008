from docscan.analysis.errors import IllegalTransitionError
from docscan.domain.enums import ScanStatus

_ALLOWED: dict[ScanStatus, frozenset[ScanStatus]] = {
    ScanStatus.uninitiated: frozenset({ScanStatus.scanning}),
    ScanStatus.scanning: frozenset({ScanStatus.completed, ScanStatus.failed}),
    ScanStatus.completed: frozenset({ScanStatus.scanning}),
    ScanStatus.failed: frozenset({ScanStatus.scanning}),
}


def can_transition(current: ScanStatus, target: ScanStatus) -> bool:
    return target in _ALLOWED[current]


def transition(current: ScanStatus, target: ScanStatus) -> ScanStatus:
    if not can_transition(current, target):
        raise IllegalTransitionError(current, target)
    return target


def sources_of(target: ScanStatus) -> list[ScanStatus]:
    """States from which ``target`` may be entered, in declaration order."""
    return [s for s in ScanStatus if target in _ALLOWED[s]]
