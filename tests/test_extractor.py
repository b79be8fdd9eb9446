"""Tests for chain extraction and bounded traversal."""

from hookreg_cli.catalog import build_catalog
from hookreg_cli.config import AnalysisConfig
from hookreg_cli.extractor import extract_chain, find_best_chain, traverse
from hookreg_cli.models import HookTarget, PathContext, PathKind
from hookreg_cli.regex_builder import parse_hook


def _callee_of_first_statement(root):
    return root.children()[0].children()[0].callee


def _by_text(paths, kind=None):
    return {p.text: p for p in paths if kind is None or p.kind is kind}


ALL = AnalysisConfig(kind="all", depth=10)


class TestExtractChain:
    """Tests for extract_chain."""

    def test_dotted_chain(self, parse):
        """A plain dotted callee becomes its segments."""
        chain = extract_chain(_callee_of_first_statement(parse("MyApp.user.profile.getName();")))
        assert chain.segments == ("MyApp", "user", "profile", "getName")
        assert chain.render() == "MyApp.user.profile.getName"

    def test_this_root(self, parse):
        """Chains may start at `this`."""
        chain = extract_chain(_callee_of_first_statement(parse("this.profile.getName();")))
        assert chain.segments == ("this", "profile", "getName")

    def test_literal_computed_access(self, parse):
        """Literal keys render as ["key"] segments."""
        chain = extract_chain(_callee_of_first_statement(parse("window['MyApp']['user']['getName']();")))
        assert chain.segments == ("window", '["MyApp"]', '["user"]', '["getName"]')
        assert chain.render() == 'window["MyApp"]["user"]["getName"]'
        assert chain.name == "getName"
        assert chain.computed

    def test_identifier_computed_access(self, parse):
        """Identifier keys render as [name] segments."""
        chain = extract_chain(_callee_of_first_statement(parse("obj[key].run();")))
        assert chain.segments == ("obj", "[key]", "run")
        assert chain.render() == "obj[key].run"

    def test_unresolved_computed_access_keeps_position(self, parse):
        """Non-trivial keys become [...] and the chain continues."""
        chain = extract_chain(_callee_of_first_statement(parse("obj[a + b].run();")))
        assert chain.segments == ("obj", "[...]", "run")
        assert chain.name == "run"

    def test_call_result_root_is_unsupported(self, parse):
        """A chain rooted in a call result yields nothing."""
        assert extract_chain(_callee_of_first_statement(parse("foo().bar.baz();"))) is None

    def test_missing_node_yields_none(self):
        """Nothing in, nothing out."""
        assert extract_chain(None) is None


class TestTraverse:
    """Tests for traverse."""

    def test_declaration_and_call(self, parse):
        """A declared and called function yields one path per occurrence."""
        paths = traverse(parse("function hello(){return 1;} hello();"), AnalysisConfig())
        assert len(paths) == 2

        declaration, call = paths
        assert (declaration.kind, declaration.text, declaration.context) == (
            PathKind.FUNCTION, "hello", PathContext.DECLARATION,
        )
        assert declaration.parameter_count == 0
        assert (call.kind, call.text, call.context) == (
            PathKind.FUNCTION, "hello", PathContext.FUNCTION_CALL,
        )
        assert call.argument_count == 0

    def test_declaration_and_call_collapse_in_catalog(self, parse):
        """Both occurrences share (kind, text), so the catalog keeps the first."""
        paths = traverse(parse("function hello(){return 1;} hello();"))
        catalog = build_catalog(paths)
        assert len(catalog) == 1
        assert catalog[0].context is PathContext.DECLARATION

    def test_method_call_at_depth_three(self, parse):
        """The call a.b.c() is found at the default depth."""
        source = "var a = {b:{c:function(){return 1;}}}; a.b.c();"
        paths = traverse(parse(source), AnalysisConfig(kind="all", depth=3))
        methods = _by_text(paths, PathKind.METHOD)
        assert "a.b.c" in methods
        assert methods["a.b.c"].context is PathContext.FUNCTION_CALL
        assert methods["a.b.c"].argument_count == 0

    def test_object_methods_carry_binding_prefix(self, parse):
        """Nested object literal methods are named after their binding."""
        source = "var a = {b:{c:function(x, y){return 1;}}};"
        paths = traverse(parse(source), ALL)
        methods = _by_text(paths, PathKind.METHOD)
        assert methods["a.b.c"].context is PathContext.OBJECT_METHOD
        assert methods["a.b.c"].parameter_count == 2
        assert methods["a.b.c"].name == "c"

    def test_object_method_shorthand_and_arrow(self, parse):
        """Method shorthand and arrow values count as object methods."""
        source = "var api = { request: function(url, options) {}, ping() {}, stop: () => 1 };"
        methods = _by_text(traverse(parse(source), ALL), PathKind.METHOD)
        assert methods["api.request"].parameter_count == 2
        assert methods["api.ping"].parameter_count == 0
        assert "api.stop" in methods

    def test_assignment_target(self, parse):
        """Member assignment targets are property paths."""
        paths = traverse(parse("window.app.handler = function(e) {};"), AnalysisConfig(kind="all"))
        assignment = [p for p in paths if p.context is PathContext.ASSIGNMENT]
        assert len(assignment) == 1
        assert assignment[0].kind is PathKind.PROPERTY
        assert assignment[0].text == "window.app.handler"

    def test_assigned_object_literal_prefix(self, parse):
        """An object assigned to a member is prefixed with that member."""
        paths = traverse(parse("MyApp.utils = { hash: function(s) {} };"), ALL)
        assert "MyApp.utils.hash" in _by_text(paths, PathKind.METHOD)

    def test_unbound_object_literal_has_no_prefix(self, parse):
        """Object literals passed as arguments are not bound to anything."""
        paths = traverse(parse("register({ onLoad: function() {} });"), ALL)
        assert "onLoad" in _by_text(paths, PathKind.METHOD)

    def test_variable_functions(self, parse):
        """Function and arrow initialisers are variable functions."""
        source = "const greet = (name) => name;\nlet add = function(a, b) { return a + b; };"
        functions = _by_text(traverse(parse(source), ALL), PathKind.FUNCTION)
        assert functions["greet"].context is PathContext.VARIABLE_FUNCTION
        assert functions["greet"].parameter_count == 1
        assert functions["add"].parameter_count == 2

    def test_property_access(self, parse):
        """Non-call member reads are property paths."""
        paths = traverse(parse("var t = MyApp.user.preferences.theme;"), ALL)
        prop = _by_text(paths, PathKind.PROPERTY)["MyApp.user.preferences.theme"]
        assert prop.context is PathContext.PROPERTY_ACCESS

    def test_computed_method_call(self, parse):
        """Bracketed calls are methods with computed segments."""
        paths = traverse(parse("window['MyApp']['user']['getName']();"))
        methods = [p for p in paths if p.kind is PathKind.METHOD]
        assert len(methods) == 1
        assert methods[0].segments == ("window", '["MyApp"]', '["user"]', '["getName"]')
        assert methods[0].computed is True

    def test_call_result_base_is_skipped(self, parse):
        """Only the resolvable inner call survives for foo().bar.baz()."""
        paths = traverse(parse("foo().bar.baz();"), ALL)
        assert {p.text for p in paths} == {"foo"}

    def test_depth_bound(self, parse):
        """Nothing deeper than the configured level is emitted."""
        source = "function outer(){ function inner(){ deep.call(); } }"
        root = parse(source)

        assert traverse(root, AnalysisConfig(kind="all", depth=0)) == []
        assert [p.text for p in traverse(root, AnalysisConfig(kind="all", depth=1))] == ["outer"]
        assert [p.text for p in traverse(root, AnalysisConfig(kind="all", depth=3))] == ["outer", "inner"]
        deep = [p.text for p in traverse(root, AnalysisConfig(kind="all", depth=6))]
        assert "deep.call" in deep

    def test_idempotent(self, parse, sample_js):
        """Two runs over the same tree produce identical paths."""
        root = parse(sample_js)
        assert traverse(root, ALL) == traverse(root, ALL)
        assert traverse(parse(sample_js), ALL) == traverse(root, ALL)

    def test_partial_tree_does_not_abort(self, js_parser):
        """Broken statements are skipped, the rest is still extracted."""
        root = js_parser.parse("foo.bar();\nvar x = ;", tolerant=True)
        paths = traverse(root, ALL)
        assert "foo.bar" in _by_text(paths, PathKind.METHOD)

    def test_sample_finds_nested_methods(self, parse, sample_js):
        """The bundled sample exposes its deepest methods with enough depth."""
        methods = _by_text(traverse(parse(sample_js), ALL), PathKind.METHOD)
        assert "MyApp.user.profile.getName" in methods
        assert "MyApp.utils.crypto.encrypt" in methods


class TestFindBestChain:
    """Tests for find_best_chain."""

    SOURCE = (
        "a.b.user.profile.getName();\n"
        "this.user.profile.getName();\n"
        "y.profile.getName();\n"
        "x.profile.getName();\n"
        "z.profile.getName;\n"
    )

    def test_shortest_call_chain_wins(self, parse):
        """The shortest callee ending with the target is chosen."""
        chain = find_best_chain(parse(self.SOURCE), parse_hook("profile.getName()"))
        assert chain.render() == "y.profile.getName"

    def test_tie_break_last(self, parse):
        """tie_break='last' keeps the last of equally short chains."""
        chain = find_best_chain(parse(self.SOURCE), parse_hook("profile.getName()"), tie_break="last")
        assert chain.render() == "x.profile.getName"

    def test_property_target_ignores_calls(self, parse):
        """Non-call targets look at member expressions."""
        root = parse("z.profile.getName;")
        chain = find_best_chain(root, HookTarget(("profile", "getName")))
        assert chain.render() == "z.profile.getName"

    def test_bracket_chains_are_skipped(self, parse):
        """Chains with bracket access never qualify."""
        root = parse("w['profile']['getName']();\nobj[k].profile.getName();")
        assert find_best_chain(root, parse_hook("profile.getName()")) is None

    def test_dotted_chain_preferred_over_shorter_bracket_chain(self, parse):
        """A longer dotted chain wins over a shorter bracket one."""
        root = parse("w['profile']['getName']();\nq.r.profile.getName();")
        chain = find_best_chain(root, parse_hook("profile.getName()"))
        assert chain.render() == "q.r.profile.getName"

    def test_no_candidate(self, parse):
        """No chain ends with the target."""
        assert find_best_chain(parse("a.b();"), parse_hook("c.d()")) is None

    def test_invalid_tie_break(self, parse):
        """Unknown tie breaks are rejected."""
        import pytest

        from hookreg_cli.errors import ConfigError

        with pytest.raises(ConfigError):
            find_best_chain(parse("a.b();"), parse_hook("a.b()"), tie_break="random")
