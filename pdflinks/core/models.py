"""
Data model shared by the extraction pipeline.
Pages in, links and per-page text out, with a log of what happened on the way.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple


class LinkCategory(Enum):
    """Link classes, in the order the miner claims them."""
    LINKEDIN = "linkedin"
    GITHUB = "github"
    STACKOVERFLOW = "stackoverflow"
    EMAIL = "email"
    URL = "url"
    ANNOTATION = "annotation"


class Severity(Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class FailureKind(Enum):
    """Where a page-local step failed."""
    STRUCTURED_TEXT = "structured_text"
    RAW_CONTENT = "raw_content"
    NORMALIZATION = "normalization"
    LINK_MINING = "link_mining"
    ANNOTATION = "annotation"
    PAGE = "page"


@dataclass(frozen=True)
class Link:
    page: int
    category: LinkCategory
    uri: str
    rect: Optional[Tuple[float, float, float, float]] = None


@dataclass
class ExtractedText:
    page: int
    content: str = ''
    error: Optional[str] = None

    @property
    def characters(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class LogEvent:
    timestamp: datetime
    severity: Severity
    message: str


@dataclass
class AnalysisResult:
    """Root output of one analysis run. Belongs to the caller once returned."""
    links: List[Link] = field(default_factory=list)
    texts: List[ExtractedText] = field(default_factory=list)
    logs: List[LogEvent] = field(default_factory=list)
    source: Optional[str] = None
    page_count: int = 0

    def links_by_category(self, category: LinkCategory) -> List[Link]:
        return [link for link in self.links if link.category is category]


@dataclass(frozen=True)
class StepFailure:
    kind: FailureKind
    message: str


@dataclass(frozen=True)
class StepResult:
    """Outcome of one pipeline step: either a value or a classified failure."""
    value: Any = None
    failure: Optional[StepFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def value_or(self, default: Any) -> Any:
        return self.value if self.ok else default


def run_step(kind: FailureKind, func: Callable, *args, **kwargs) -> StepResult:
    """
    Call func and wrap the outcome in a StepResult.

    Args:
        kind: Classification attached to the failure if func raises
        func: Callable to run

    Returns:
        StepResult carrying the return value or a StepFailure
    """
    try:
        return StepResult(value=func(*args, **kwargs))
    except KeyboardInterrupt:
        raise
    except Exception as e:
        return StepResult(failure=StepFailure(kind=kind, message=f"{type(e).__name__}: {e}"))
