from enum import Enum


class CheckKind(str, Enum):
    grammar = "grammar"
    plagiarism = "plagiarism"
    ai_detection = "ai-detection"


class ScanStatus(str, Enum):
    uninitiated = "uninitiated"
    scanning = "scanning"
    completed = "completed"
    failed = "failed"


class JobStatus(str, Enum):
    queued = "queued"
    running = "running"
    succeeded = "succeeded"
    failed = "failed"
