"""Regex synthesis for hook paths.

Three strategies:

* **exact** - the path text escaped literally, plus an optional call suffix
  for functions and methods.
* **flexible** - every identifier becomes a generic identifier class and every
  member step accepts either ``.name`` or ``[name]`` / ``["name"]``, so
  renamed identifiers and alternate access syntax still match.
* **smart** (tail anchored) - only the trailing segments are literal; the root
  and any middle segments are matched by short bounded classes tuned to
  minified identifier lengths.

Synthesis never returns an empty regex: with nothing to build from, the
result is a :class:`~hookreg_cli.models.Pattern` whose ``source`` is None.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .errors import ConfigError
from .models import (
    UNRESOLVED_SEGMENT,
    Chain,
    HookTarget,
    Path,
    PatternMode,
    Pattern,
    is_computed_segment,
    segment_name,
)

logger = logging.getLogger(__name__)

IDENTIFIER = r"[A-Za-z_$][\w$]*"
CALL_SUFFIX = r"(?:\(.*?\))?"
OPTIONAL_QUOTE = r"[\"']?"
UNRESOLVED_ACCESS = r"\[[^\]]+\]"
ROOT_BOUNDARY = r"(?<![\w$])"

# Tunable heuristics for minified code, not hard limits: roots of up to three
# characters and middle segments of up to six.
ROOT_CLASS = r"[A-Za-z$_0-9]{1,3}"
MIDDLE_CLASS = r"[A-Za-z$_0-9]{1,6}"

_IDENTIFIER_RE = re.compile(IDENTIFIER)
_BRACKET_KEY_RE = re.compile(r"\[\s*([\"'])(.*?)\1\s*\]")
# Trailing argument list, one level of nested parentheses.
_CALL_ARGS_RE = re.compile(r"\((?:[^()]|\([^()]*\))*\)$")


@dataclass(frozen=True)
class SynthesisOptions:
    """Knobs for exact/flexible synthesis.

    Attributes:
        keep_tail: In flexible mode, how many trailing segments keep their
            literal names (0 makes every identifier generic).
        call_suffix: Append the optional ``(...)`` group to functions and
            methods.
    """

    keep_tail: int = 0
    call_suffix: bool = True

    def __post_init__(self) -> None:
        if self.keep_tail < 0:
            raise ConfigError(f"keep_tail must be >= 0, got {self.keep_tail}")


def _is_identifier(name: str) -> bool:
    return _IDENTIFIER_RE.fullmatch(name) is not None


def _with_call_suffix(fragment: str, path: Path, options: SynthesisOptions) -> str:
    if options.call_suffix and path.callable:
        return fragment + CALL_SUFFIX
    return fragment


# ===================================================================
# Exact / flexible fragments
# ===================================================================

def exact_fragment(path: Path, options: Optional[SynthesisOptions] = None) -> str:
    options = options or SynthesisOptions()
    return _with_call_suffix(re.escape(path.text), path, options)


def _flexible_name(name: str, literal: bool) -> str:
    if literal or not _is_identifier(name):
        return re.escape(name)
    return IDENTIFIER


def _flexible_bracket(segment: str, literal: bool) -> str:
    """Bracket access form of *segment*, with or without quotes."""
    if segment == UNRESOLVED_SEGMENT:
        return UNRESOLVED_ACCESS
    key = _flexible_name(segment_name(segment) or segment, literal)
    return rf"\[{OPTIONAL_QUOTE}{key}{OPTIONAL_QUOTE}\]"


def _flexible_root(segment: str, literal: bool) -> str:
    if is_computed_segment(segment):
        return _flexible_bracket(segment, literal)
    # A root never starts inside a longer identifier, which also keeps
    # searches over long word runs linear.
    return ROOT_BOUNDARY + _flexible_name(segment, literal)


def _flexible_step(segment: str, literal: bool) -> str:
    """Pattern for one member step after the root, separator included."""
    if segment == UNRESOLVED_SEGMENT:
        return UNRESOLVED_ACCESS
    name = segment_name(segment) or segment
    bracket = _flexible_bracket(segment, literal)
    if is_computed_segment(segment) and not _is_identifier(name):
        return bracket
    return rf"(?:\.{_flexible_name(name, literal)}|{bracket})"


def flexible_fragment(path: Path, options: Optional[SynthesisOptions] = None) -> str:
    options = options or SynthesisOptions()
    segments = path.segments or (path.text,)
    literal_from = len(segments) - options.keep_tail

    parts = [_flexible_root(segments[0], literal_from <= 0)]
    for index, segment in enumerate(segments[1:], start=1):
        parts.append(_flexible_step(segment, index >= literal_from))
    return _with_call_suffix("".join(parts), path, options)


# ===================================================================
# Combination
# ===================================================================

def combine_fragments(fragments: Iterable[str]) -> Optional[str]:
    """De-duplicate and join fragments; None when there are none."""
    unique: List[str] = []
    for fragment in fragments:
        if fragment and fragment not in unique:
            unique.append(fragment)
    if not unique:
        return None
    if len(unique) == 1:
        return unique[0]
    return "(?:" + "|".join(unique) + ")"


def synthesize(
    paths: Union[Path, Iterable[Path]],
    mode: Union[PatternMode, str] = PatternMode.EXACT,
    options: Optional[SynthesisOptions] = None,
) -> Pattern:
    """Build one regex covering every path in *paths*."""
    mode = PatternMode(mode)
    if mode is PatternMode.SMART:
        raise ConfigError("smart patterns are built from a hook target, use build_hook_patterns()")
    options = options or SynthesisOptions()

    path_list = (paths,) if isinstance(paths, Path) else tuple(paths)
    builder = exact_fragment if mode is PatternMode.EXACT else flexible_fragment

    fragments: List[str] = []
    for path in path_list:
        fragment = builder(path, options)
        if fragment not in fragments:
            fragments.append(fragment)

    source = combine_fragments(fragments)
    if source is None:
        logger.debug("No paths to synthesize a %s pattern from", mode.value)
    return Pattern(source=source, mode=mode, fragments=tuple(fragments), paths=path_list)


# ===================================================================
# Tail-anchored patterns
# ===================================================================

def parse_hook(hook: str) -> HookTarget:
    """Parse ``a.b.c()`` / ``a.b.c(x)`` / ``a["b"].c`` into segments and a call flag."""
    text = hook.strip()
    call = _CALL_ARGS_RE.search(text)
    is_call = call is not None
    if is_call:
        text = text[:call.start()]
    text = _BRACKET_KEY_RE.sub(lambda m: "." + m.group(2), text)
    segments = tuple(s.strip() for s in text.split(".") if s.strip())
    if not segments:
        raise ConfigError(f"Hook string {hook!r} has no segments")
    return HookTarget(segments=segments, is_call=is_call)


def _tail_literal(tail_segments: Sequence[str]) -> str:
    return "".join(r"\." + re.escape(s) for s in tail_segments)


def tail_pattern(tail_segments: Sequence[str], is_call: bool = False) -> str:
    """Any short root and any number of middle segments, then the tail."""
    regex = rf"{ROOT_CLASS}(?:\.{MIDDLE_CLASS})*?" + _tail_literal(tail_segments)
    if is_call:
        regex += r"\(\)"
    return regex


def smart_pattern(tail_segments: Sequence[str], chain_length: int, is_call: bool = False) -> str:
    """Short root, exactly ``chain_length - len(tail) - 1`` middles, the tail."""
    regex = ROOT_CLASS
    unknown = chain_length - len(tail_segments)
    if unknown > 1:
        regex += rf"(?:\.{MIDDLE_CLASS}){{{unknown - 1}}}"
    regex += _tail_literal(tail_segments)
    if is_call:
        regex += r"\(\)"
    return regex


def smart_pattern_for_chain(chain: Chain, keep_tail: int, is_call: bool = False) -> str:
    """Smart pattern for an observed chain.

    The root is always generic, so at most ``len(chain) - 1`` segments are
    kept; a single-segment chain is matched literally. Only dotted chains
    are accepted: the root and middle classes cannot match bracket access.
    """
    if chain.computed:
        raise ConfigError(f"Smart patterns need a dotted chain, got {chain.render()}")
    names = list(chain.segments)
    if len(names) == 1:
        regex = re.escape(names[0])
        return regex + r"\(\)" if is_call else regex
    keep = max(1, min(keep_tail, len(names) - 1))
    return smart_pattern(names[-keep:], len(names), is_call)


def build_hook_patterns(
    target: HookTarget,
    best_chain: Optional[Chain],
    keep_tail: int = 2,
) -> Tuple[Pattern, Pattern]:
    """Return ``(tail, smart)`` patterns for a hook target.

    The tail pattern only needs the target itself; the smart pattern needs
    an observed chain and is the "no pattern" sentinel without one.
    """
    if keep_tail < 1:
        raise ConfigError(f"keep_tail must be >= 1, got {keep_tail}")
    tail = target.segments[-keep_tail:]
    tail_source = tail_pattern(tail, target.is_call)
    tail_result = Pattern(source=tail_source, mode=PatternMode.FLEXIBLE, fragments=(tail_source,))

    if best_chain is None:
        return tail_result, Pattern(source=None, mode=PatternMode.SMART)
    smart_source = smart_pattern_for_chain(best_chain, keep_tail, target.is_call)
    return tail_result, Pattern(source=smart_source, mode=PatternMode.SMART, fragments=(smart_source,))
