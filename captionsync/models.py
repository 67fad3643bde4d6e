"""Value types shared by the resolver, the reconciler and the batch orchestrator."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class Step(str, Enum):
    LIST = "list"
    DELETE = "delete"
    UPLOAD = "upload"


@dataclass(frozen=True)
class CaptionTrack:
    """A caption track as reported by the hosting service."""

    language: str
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_api(cls, item):
        return cls(language=item.get("srclang", ""), metadata=dict(item))


@dataclass(frozen=True)
class LocalCaptionFile:
    filename: str
    path: str
    video_id: Optional[str] = None


@dataclass(frozen=True)
class ReconciliationTarget:
    video_id: str
    caption_file: LocalCaptionFile
    language: str


@dataclass(frozen=True)
class Success:
    video_id: str
    language: str


@dataclass(frozen=True)
class Failure:
    step: Step
    video_id: str
    error: str


Outcome = Union[Success, Failure]


@dataclass(frozen=True)
class TargetResult:
    target: ReconciliationTarget
    outcome: Outcome


@dataclass
class BatchSummary:
    """Append-only record of one batch run, in processing order."""

    language: str
    results: List[TargetResult] = field(default_factory=list)
    unresolvable: List[LocalCaptionFile] = field(default_factory=list)
    nothing_to_do: bool = False
    stopped_early: bool = False

    def record(self, target, outcome):
        self.results.append(TargetResult(target, outcome))

    @property
    def success_count(self):
        return sum(1 for r in self.results if isinstance(r.outcome, Success))

    @property
    def failure_count(self):
        return len(self.failures)

    @property
    def failures(self):
        return [r for r in self.results if isinstance(r.outcome, Failure)]

    @property
    def has_failures(self):
        return bool(self.failures)
