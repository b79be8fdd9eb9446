"""Generated sample inputs for checking a pattern against its own paths."""

from __future__ import annotations

from typing import Iterable, List, Union

from .matcher import test as run_pattern
from .models import CaseOutcome, Path, Pattern, PatternMode, SampleCase, is_computed_segment


def bracketed_text(path: Path) -> str:
    """``a.b["c"]`` -> ``a["b"]["c"]``; the root stays bare."""
    root, *rest = path.segments
    return root + "".join(s if is_computed_segment(s) else f'["{s}"]' for s in rest)


def generate_test_cases(
    paths: Iterable[Path],
    mode: Union[PatternMode, str] = PatternMode.EXACT,
) -> List[SampleCase]:
    mode = PatternMode(mode)
    cases: List[SampleCase] = []
    for path in paths:
        cases.append(SampleCase(f"plain - {path.name}", path.text))
        if path.callable:
            cases.append(SampleCase(f"call - {path.name}", f"{path.text}()"))
            cases.append(SampleCase(f"call with arguments - {path.name}", f"{path.text}(arg1, arg2)"))
        if path.computed and len(path.segments) > 1:
            bracketed = bracketed_text(path)
            cases.append(SampleCase(
                f"computed access - {path.name}",
                bracketed,
                should_match=mode is PatternMode.FLEXIBLE or bracketed == path.text,
            ))
    return cases


def run_test_cases(pattern: Pattern, cases: Iterable[SampleCase]) -> List[CaseOutcome]:
    outcomes: List[CaseOutcome] = []
    for case in cases:
        result = run_pattern(pattern, case.input)
        outcomes.append(CaseOutcome(
            name=case.name,
            input=case.input,
            should_match=case.should_match,
            matched=bool(result.matches),
            error=result.error.message if result.error else None,
        ))
    return outcomes
