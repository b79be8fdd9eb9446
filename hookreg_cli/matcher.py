"""Round-trip testing of synthesized (or hand edited) patterns."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple, Union

from .models import MatchError, MatchResult, Pattern, RegexMatch

logger = logging.getLogger(__name__)

NO_PATTERN_MESSAGE = "No pattern to test: nothing survived filtering"


def compile_pattern(source: str) -> Tuple[Optional[re.Pattern], Optional[MatchError]]:
    """Compile *source*, returning either the regex or a compile error."""
    try:
        return re.compile(source), None
    except (re.error, OverflowError, RecursionError) as exc:
        return None, MatchError(kind="compile", message=str(exc), pattern=source)


def test(pattern: Union[Pattern, str, None], text: str) -> MatchResult:
    """Run *pattern* over *text* and report every non-overlapping match.

    Never raises for a bad pattern: a missing pattern, a compile failure and
    an engine failure during matching all come back as ``MatchResult.error``.
    A pattern that is fine but finds nothing is an ``ok`` result with no
    matches.
    """
    source = pattern.source if isinstance(pattern, Pattern) else pattern
    if not source:
        return MatchResult(error=MatchError(kind="no_pattern", message=NO_PATTERN_MESSAGE))

    compiled, error = compile_pattern(source)
    if error is not None:
        logger.debug("Pattern failed to compile: %s", error.message)
        return MatchResult(error=error)

    matches: List[RegexMatch] = []
    try:
        for index, match in enumerate(compiled.finditer(text), start=1):
            matches.append(RegexMatch(
                index=index,
                text=match.group(0),
                start=match.start(),
                length=match.end() - match.start(),
                groups=match.groups(),
            ))
    except (RecursionError, MemoryError) as exc:
        return MatchResult(error=MatchError(
            kind="runtime",
            message=f"{type(exc).__name__}: {exc}",
            pattern=source,
        ))

    return MatchResult(matches=tuple(matches))


# pytest would otherwise collect the module-level ``test`` function.
test.__test__ = False  # type: ignore[attr-defined]
