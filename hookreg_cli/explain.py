"""Plain-text explanation of how a pattern was put together."""

from __future__ import annotations

from typing import List

from .models import Pattern, PatternMode
from .regex_builder import CALL_SUFFIX, IDENTIFIER, MIDDLE_CLASS, ROOT_CLASS

_USES = {
    PatternMode.EXACT: [
        "precise interception of a specific call",
        "matching one known API exactly",
        "strict filtering with few false positives",
    ],
    PatternMode.FLEXIBLE: [
        "tracking functions through obfuscated code",
        "detecting dynamic property access",
        "one pattern for several access styles",
    ],
    PatternMode.SMART: [
        "hooking minified bundles where only the tail names survive",
    ],
}


def explain(pattern: Pattern) -> List[str]:
    if pattern.is_empty:
        return ["No pattern: no path survived the filters."]

    lines: List[str] = []
    if len(pattern.fragments) > 1:
        lines.append(f"Combined pattern matching any of {len(pattern.fragments)} paths:")
        lines.extend(f"  - {fragment}" for fragment in pattern.fragments)
    else:
        lines.append(f"Single pattern: {pattern.source}")

    lines.append("")
    lines.append("Features:")
    if pattern.mode is PatternMode.EXACT:
        lines.append("  - exact: the path text is matched character for character")
    elif pattern.mode is PatternMode.FLEXIBLE:
        lines.append("  - flexible: identifier names and access style may differ")
        lines.append(f"  - {IDENTIFIER} matches any identifier")
        lines.append(r"  - (?:\.name|\[name\]) accepts dot and bracket access")
    else:
        lines.append(f"  - {ROOT_CLASS} matches a short minified root")
        lines.append(rf"  - (?:\.{MIDDLE_CLASS}){{n}} matches n unknown middle segments")
        lines.append("  - the trailing segments are literal")
    if CALL_SUFFIX in (pattern.source or ""):
        lines.append(f"  - {CALL_SUFFIX} optionally matches the call arguments")

    lines.append("")
    lines.append("Typical use:")
    lines.extend(f"  - {use}" for use in _USES[pattern.mode])
    return lines
