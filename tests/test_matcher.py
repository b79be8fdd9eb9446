"""Tests for pattern testing against sample text."""

from hookreg_cli.matcher import NO_PATTERN_MESSAGE, compile_pattern
from hookreg_cli.matcher import test as run_pattern
from hookreg_cli.models import Pattern, PatternMode


def test_reports_every_match():
    """Matches are numbered from 1 with their offsets."""
    result = run_pattern(r"a\.b(?:\(.*?\))?", "a.b() and a.b(x)")
    assert result.ok
    assert len(result) == 2

    first, second = result.matches
    assert (first.index, first.text, first.start, first.length) == (1, "a.b()", 0, 5)
    assert (second.index, second.text, second.start, second.length) == (2, "a.b(x)", 10, 6)


def test_full_call_is_one_match():
    """The exact pattern for a.b.c matches the whole call once."""
    result = run_pattern(r"a\.b\.c(?:\(.*?\))?", "a.b.c()")
    assert len(result) == 1
    assert result.matches[0].length == len("a.b.c()")


def test_capture_groups():
    result = run_pattern(r"(\w+)\.(\w+)", "foo.bar")
    assert result.matches[0].groups == ("foo", "bar")


def test_no_matches_is_ok():
    """A valid pattern that finds nothing is not an error."""
    result = run_pattern(r"nothing", "something else")
    assert result.ok
    assert len(result) == 0
    assert result.to_dict() == {"success": True, "matches": []}


def test_compile_error():
    """Invalid regexes come back as compile errors, not exceptions."""
    result = run_pattern("a.b(", "a.b(")
    assert not result.ok
    assert result.error.kind == "compile"
    assert result.error.pattern == "a.b("
    assert result.to_dict()["success"] is False


def test_compile_pattern():
    compiled, error = compile_pattern(r"x+")
    assert error is None
    assert compiled.search("xxx")

    compiled, error = compile_pattern("[unclosed")
    assert compiled is None
    assert error.kind == "compile"


def test_missing_pattern():
    """No pattern at all is reported, never treated as match-all."""
    for pattern in (None, "", Pattern(source=None, mode=PatternMode.EXACT)):
        result = run_pattern(pattern, "anything")
        assert not result.ok
        assert result.error.kind == "no_pattern"
        assert result.error.message == NO_PATTERN_MESSAGE


def test_accepts_pattern_objects():
    pattern = Pattern(source=r"hello", mode=PatternMode.EXACT, fragments=("hello",))
    result = run_pattern(pattern, "hello hello")
    assert [m.start for m in result.matches] == [0, 6]


def test_error_serialization():
    data = run_pattern("(", "x").to_dict()
    assert data["error"]["kind"] == "compile"
    assert data["error"]["pattern"] == "("
    assert data["error"]["message"]


def test_runtime_failure_is_reported(monkeypatch):
    """Recursion during matching becomes a runtime error."""

    class Exploding:
        def finditer(self, text):
            raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr("hookreg_cli.matcher.compile_pattern", lambda source: (Exploding(), None))
    result = run_pattern(r"a+", "aaaa")
    assert not result.ok
    assert result.error.kind == "runtime"
    assert result.error.pattern == "a+"
    assert "RecursionError" in result.error.message
