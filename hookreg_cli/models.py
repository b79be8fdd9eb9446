"""Core data models shared by extraction, synthesis and matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

UNRESOLVED_SEGMENT = "[...]"


class PathKind(str, Enum):
    FUNCTION = "function"
    METHOD = "method"
    PROPERTY = "property"


class PathContext(str, Enum):
    """How a path was discovered in the source."""

    DECLARATION = "declaration"
    OBJECT_METHOD = "object_method"
    ASSIGNMENT = "assignment"
    VARIABLE_FUNCTION = "variable_function"
    PROPERTY_ACCESS = "property_access"
    FUNCTION_CALL = "function_call"
    RUNTIME = "runtime"


class PatternMode(str, Enum):
    EXACT = "exact"
    FLEXIBLE = "flexible"
    SMART = "smart"


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------

def is_computed_segment(segment: str) -> bool:
    return segment.startswith("[") and segment.endswith("]")


def segment_name(segment: str) -> Optional[str]:
    """Return the bare name a segment refers to, or None if unresolved.

    ``["user"]`` and ``[user]`` both resolve to ``user``; ``[...]`` does not
    resolve.
    """
    if not is_computed_segment(segment):
        return segment
    if segment == UNRESOLVED_SEGMENT:
        return None
    inner = segment[1:-1]
    if len(inner) >= 2 and inner[0] == inner[-1] and inner[0] in "\"'":
        return inner[1:-1]
    return inner


def render_segments(segments: Tuple[str, ...]) -> str:
    """Dot-join segments; computed segments attach in bracket form."""
    text = ""
    for segment in segments:
        if is_computed_segment(segment) or not text:
            text += segment
        else:
            text += "." + segment
    return text


@dataclass(frozen=True)
class Chain:
    """Ordered, non-empty root-to-leaf access segments."""

    segments: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("A chain needs at least one segment")

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[str]:
        return iter(self.segments)

    @property
    def computed(self) -> bool:
        return any(is_computed_segment(s) for s in self.segments)

    @property
    def name(self) -> Optional[str]:
        """Last resolvable segment name."""
        for segment in reversed(self.segments):
            resolved = segment_name(segment)
            if resolved is not None:
                return resolved
        return None

    def render(self) -> str:
        return render_segments(self.segments)

    def __str__(self) -> str:
        return self.render()


# ---------------------------------------------------------------------------
# Paths and catalogs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Path:
    kind: PathKind
    name: str
    text: str
    context: PathContext
    segments: Tuple[str, ...]
    computed: bool = False
    parameter_count: Optional[int] = None
    argument_count: Optional[int] = None
    line: Optional[int] = None

    @property
    def key(self) -> Tuple[PathKind, str]:
        """Identity used for de-duplication."""
        return (self.kind, self.text)

    @property
    def callable(self) -> bool:
        return self.kind in (PathKind.FUNCTION, PathKind.METHOD)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "text": self.text,
            "context": self.context.value,
            "segments": list(self.segments),
            "computed": self.computed,
            "parameter_count": self.parameter_count,
            "argument_count": self.argument_count,
            "line": self.line,
        }


@dataclass(frozen=True)
class Catalog:
    """De-duplicated, filtered paths from a single analysis run."""

    paths: Tuple[Path, ...] = ()

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths)

    def __getitem__(self, index: int) -> Path:
        return self.paths[index]

    def to_list(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self.paths]


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Pattern:
    """A synthesized regex. ``source`` is None when nothing could be built."""

    source: Optional[str]
    mode: PatternMode
    fragments: Tuple[str, ...] = ()
    paths: Tuple[Path, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.source is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "regex": self.source,
            "mode": self.mode.value,
            "fragments": list(self.fragments),
            "paths": [p.to_dict() for p in self.paths],
        }


@dataclass(frozen=True)
class HookTarget:
    """A user supplied hook string such as ``a.b.getName()``."""

    segments: Tuple[str, ...]
    is_call: bool = False

    def __str__(self) -> str:
        return ".".join(self.segments) + ("()" if self.is_call else "")


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RegexMatch:
    index: int
    text: str
    start: int
    length: int
    groups: Tuple[Optional[str], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "text": self.text,
            "start": self.start,
            "length": self.length,
            "groups": list(self.groups),
        }


@dataclass(frozen=True)
class MatchError:
    kind: str  # "no_pattern" | "compile" | "runtime"
    message: str
    pattern: Optional[str] = None


@dataclass(frozen=True)
class MatchResult:
    matches: Tuple[RegexMatch, ...] = ()
    error: Optional[MatchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __len__(self) -> int:
        return len(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {
                "success": False,
                "error": {
                    "kind": self.error.kind,
                    "message": self.error.message,
                    "pattern": self.error.pattern,
                },
            }
        return {"success": True, "matches": [m.to_dict() for m in self.matches]}


@dataclass
class CaseOutcome:
    name: str
    input: str
    should_match: bool
    matched: bool
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.error is None and self.matched == self.should_match


@dataclass(frozen=True)
class SampleCase:
    name: str
    input: str
    should_match: bool = True


@dataclass
class AnalysisSummary:
    """Counts reported by the CLI after an analysis run."""

    raw: int = 0
    kept: int = 0
    by_kind: Dict[str, int] = field(default_factory=dict)
