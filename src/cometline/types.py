"""Data types for the cometline status line."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from .cache.usage_cache import UsageCacheStore
    from .config.schema import AnsiColor


class FailureKind(str, Enum):
    """Why an external data source produced no value."""

    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class Failure:
    """Typed failure returned by adapters instead of raising."""

    kind: FailureKind
    detail: str = ""

    @classmethod
    def unavailable(cls, detail: str = "") -> "Failure":
        return cls(FailureKind.UNAVAILABLE, detail)

    @classmethod
    def timeout(cls, detail: str = "") -> "Failure":
        return cls(FailureKind.TIMEOUT, detail)

    @classmethod
    def parse_error(cls, detail: str = "") -> "Failure":
        return cls(FailureKind.PARSE_ERROR, detail)


@dataclass(frozen=True)
class ConfigError:
    """A malformed configuration field, reported but never fatal."""

    source: str
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.source}: {self.path}: {self.message}"


@dataclass(frozen=True)
class InvocationContext:
    """Snapshot of the host payload, created once per run."""

    model_id: str = ""
    model_display_name: str = ""
    workspace_dir: str = ""
    transcript_path: str = ""
    session_id: str = ""
    output_style: str = ""
    total_cost_usd: Optional[float] = None
    total_duration_ms: Optional[int] = None
    lines_added: int = 0
    lines_removed: int = 0
    current_context_tokens: Optional[int] = None
    context_window_size: Optional[int] = None


class GitTreeStatus(str, Enum):
    """Working tree classification."""

    CLEAN = "clean"
    DIRTY = "dirty"
    CONFLICTED = "conflicted"


DETACHED_HEAD = "detached"


@dataclass(frozen=True)
class GitState:
    """Git repository state, derived fresh on every run."""

    branch: str = DETACHED_HEAD
    status: GitTreeStatus = GitTreeStatus.CLEAN
    ahead: int = 0
    behind: int = 0
    has_remote: bool = False
    changed_paths: int = 0
    sha: Optional[str] = None


@dataclass(frozen=True)
class TranscriptUsage:
    """Token usage accumulated from one pass over the transcript."""

    context_tokens: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    cached_tokens: int = 0
    session_id: str = ""
    start_time: Optional[datetime] = None
    last_activity: Optional[datetime] = None

    @property
    def duration_seconds(self) -> int:
        if self.start_time is None or self.last_activity is None:
            return 0
        return int((self.last_activity - self.start_time).total_seconds())


@dataclass(frozen=True)
class ContextWindowState:
    """Context window consumption for the active model."""

    consumed_tokens: int
    context_limit: int

    @property
    def percentage(self) -> float:
        if self.context_limit <= 0:
            return 0.0
        return min(100.0, max(0.0, self.consumed_tokens * 100 / self.context_limit))


FIVE_HOUR_WINDOW = timedelta(hours=5)
SEVEN_DAY_WINDOW = timedelta(days=7)


@dataclass(frozen=True)
class UsageWindow:
    """Utilization of one rate-limit window."""

    utilization: float
    resets_at: Optional[datetime] = None
    window_start: Optional[datetime] = None


@dataclass(frozen=True)
class UsageSnapshot:
    """Both quota windows as returned by the usage endpoint."""

    five_hour: Optional[UsageWindow] = None
    seven_day: Optional[UsageWindow] = None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UsageCacheEntry:
    """A persisted snapshot and when/for whom it was fetched."""

    snapshot: UsageSnapshot
    fetched_at: float
    fingerprint: str


UsageResult = Union[UsageSnapshot, Failure]


@dataclass(frozen=True)
class SegmentData:
    """What a segment provider computed, before presentation is resolved."""

    primary: str
    secondary: str = ""
    utilization: Optional[float] = None
    dynamic_icon: Optional[str] = None
    color_override: Optional["AnsiColor"] = None

    @property
    def text(self) -> str:
        return f"{self.primary} {self.secondary}" if self.secondary else self.primary


@dataclass(frozen=True)
class RenderedFragment:
    """Rendered output of one segment for one run."""

    text: str
    color: Optional["AnsiColor"] = None
    icon: str = ""
    icon_color: Optional["AnsiColor"] = None
    background: Optional["AnsiColor"] = None
    bold: bool = False


@dataclass
class RenderContext:
    """Context passed to segment providers during rendering.

    Adapter results are filled in lazily by the providers that need them, so
    a disabled segment never triggers its subprocess, file or network I/O.
    """

    invocation: InvocationContext
    usage_store: Optional["UsageCacheStore"] = None
    usage_fingerprint: Optional[str] = None
    usage_ttl: float = 180
    git_state: Optional[Union[GitState, Failure]] = None
    transcript: Optional[Union[TranscriptUsage, Failure]] = None
    tz: Optional[tzinfo] = None
    icon_mode: str = "plain"
