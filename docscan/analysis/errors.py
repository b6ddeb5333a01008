from __future__ import annotations

from docscan.domain.enums import CheckKind, ScanStatus


class OracleResponseError(Exception):
    """The oracle answered, but not with anything we can read."""


class UnsupportedDocumentError(Exception):
    def __init__(self, mime_type: str):
        super().__init__(f"unsupported_document_type:{mime_type}")
        self.mime_type = mime_type


class OverlappingCorrectionsError(Exception):
    def __init__(self, first: tuple[int, int], second: tuple[int, int]):
        super().__init__(f"overlapping_corrections:{first[0]}-{first[1]}:{second[0]}-{second[1]}")
        self.first = first
        self.second = second


class IllegalTransitionError(Exception):
    def __init__(self, current: ScanStatus, target: ScanStatus):
        super().__init__(f"illegal_transition:{current.value}->{target.value}")
        self.current = current
        self.target = target


class ScanConflictError(Exception):
    def __init__(self, document_id: int, kind: CheckKind):
        super().__init__(f"scan_in_progress:{document_id}:{kind.value}")
        self.document_id = document_id
        self.kind = kind
