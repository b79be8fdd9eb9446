"""Tests for path filtering and de-duplication."""

from hookreg_cli.catalog import build_catalog, matches_kind, matches_target
from hookreg_cli.config import AnalysisConfig
from hookreg_cli.models import Path, PathContext, PathKind


def make_path(text, kind=PathKind.METHOD, context=PathContext.FUNCTION_CALL, line=1):
    segments = tuple(text.split("."))
    return Path(
        kind=kind,
        name=segments[-1],
        text=text,
        context=context,
        segments=segments,
        line=line,
    )


RAW = [
    make_path("hello", PathKind.FUNCTION, PathContext.DECLARATION, line=1),
    make_path("hello", PathKind.FUNCTION, PathContext.FUNCTION_CALL, line=5),
    make_path("MyApp.user.getName", line=7),
    make_path("MyApp.user.getName", line=9),
    make_path("MyApp.user", PathKind.PROPERTY, PathContext.PROPERTY_ACCESS, line=7),
    make_path("api.request", line=12),
]


def test_target_match_is_case_insensitive():
    """Target substrings match name or text regardless of case."""
    path = make_path("MyApp.user.getName")
    assert matches_target(path, "getname")
    assert matches_target(path, "MYAPP.USER")
    assert not matches_target(path, "profile")


def test_empty_target_matches_everything():
    assert matches_target(make_path("a.b"), "")


def test_kind_filter():
    """'all' accepts every kind, anything else must match exactly."""
    path = make_path("a.b", PathKind.PROPERTY)
    assert matches_kind(path, "all")
    assert matches_kind(path, "property")
    assert not matches_kind(path, "method")


def test_default_config_keeps_functions_once():
    """Default filters keep one path per (kind, text)."""
    catalog = build_catalog(RAW)
    assert [p.text for p in catalog] == ["hello"]
    assert catalog[0].line == 1


def test_dedup_keeps_first_occurrence():
    """Duplicates collapse onto the first path seen."""
    catalog = build_catalog(RAW, AnalysisConfig(kind="all"))
    assert [p.text for p in catalog] == ["hello", "MyApp.user.getName", "MyApp.user", "api.request"]
    assert catalog[1].line == 7
    assert len({p.key for p in catalog}) == len(catalog)


def test_same_text_different_kind_is_kept():
    """Identity is (kind, text), not text alone."""
    paths = [make_path("a.b", PathKind.METHOD), make_path("a.b", PathKind.PROPERTY)]
    assert len(build_catalog(paths, AnalysisConfig(kind="all"))) == 2


def test_target_then_kind():
    """Both filters apply; only paths passing both survive."""
    catalog = build_catalog(RAW, AnalysisConfig(target="user", kind="method"))
    assert [p.text for p in catalog] == ["MyApp.user.getName"]

    catalog = build_catalog(RAW, AnalysisConfig(target="user", kind="property"))
    assert [p.text for p in catalog] == ["MyApp.user"]


def test_nothing_survives():
    """An empty catalog is a valid result."""
    catalog = build_catalog(RAW, AnalysisConfig(target="nonexistent", kind="all"))
    assert len(catalog) == 0
    assert catalog.to_list() == []


def test_to_list_serializes_enums():
    catalog = build_catalog(RAW[:1])
    entry = catalog.to_list()[0]
    assert entry["kind"] == "function"
    assert entry["context"] == "declaration"
    assert entry["segments"] == ["hello"]
