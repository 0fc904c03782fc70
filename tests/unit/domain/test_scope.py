"""Unit tests for the scope tree and reference resolution."""

import astroid

from convention_linter.domain.entities import BindingKind
from convention_linter.domain.scope import ScopeResolver


def _names(tree, name):
    return [n for n in tree.nodes_of_class(astroid.nodes.Name) if n.name == name]


class TestResolveReference:
    """Python's lexical rules: innermost binding wins, class bodies are skipped."""

    def test_innermost_parameter_shadows_outer(self) -> None:
        tree = astroid.parse(
            "def outer(x):\n"
            "    def inner(x):\n"
            "        return x\n"
            "    return inner\n"
            "x\n"
        )
        resolver = ScopeResolver(tree)
        inner_ref, module_ref = _names(tree, "x")

        binding = resolver.resolve_reference(inner_ref)
        assert binding is not None
        assert binding.kind is BindingKind.PARAMETER
        assert binding.scope.node.name == "inner"
        assert resolver.resolve_reference(module_ref) is None

    def test_closure_reads_enclosing_function(self) -> None:
        tree = astroid.parse("x = 1\ndef outer():\n    x = 2\n    def inner():\n        return x\n")
        resolver = ScopeResolver(tree)
        (ref,) = _names(tree, "x")
        assert resolver.resolve_reference(ref).scope.node.name == "outer"

    def test_class_scope_is_invisible_to_methods(self) -> None:
        tree = astroid.parse("class A:\n    y = 1\n    def m(self):\n        return y\n")
        resolver = ScopeResolver(tree)
        (ref,) = _names(tree, "y")
        assert resolver.resolve_reference(ref) is None

    def test_builtins_are_free(self) -> None:
        tree = astroid.parse("print(1)\n")
        (ref,) = _names(tree, "print")
        assert ScopeResolver(tree).resolve_reference(ref) is None

    def test_comprehension_variable_is_local(self) -> None:
        tree = astroid.parse("items = [i for i in range(3)]\n")
        resolver = ScopeResolver(tree)
        (ref,) = _names(tree, "i")
        binding = resolver.resolve_reference(ref)
        assert isinstance(binding.scope.node, astroid.nodes.ListComp)
        assert "i" not in resolver.resolve().bindings

    def test_default_values_are_evaluated_outside(self) -> None:
        tree = astroid.parse("limit = 3\ndef f(limit=limit):\n    return limit\n")
        resolver = ScopeResolver(tree)
        default_ref, body_ref = _names(tree, "limit")
        assert resolver.resolve_reference(default_ref).scope.node is tree
        assert resolver.resolve_reference(body_ref).kind is BindingKind.PARAMETER


class TestBindings:
    def test_references_are_collected(self) -> None:
        tree = astroid.parse("def f():\n    pass\nf()\nf()\n")
        resolver = ScopeResolver(tree)
        binding = resolver.binding_for(tree.body[0])
        assert binding.kind is BindingKind.FUNCTION
        assert len([r for r in binding.references if isinstance(r, astroid.nodes.Name)]) == 2

    def test_global_declaration_binds_in_module(self) -> None:
        tree = astroid.parse("def f():\n    global counter\n    counter = 1\n")
        root = ScopeResolver(tree).resolve()
        assert "counter" in root.bindings
        assert "counter" in root.children[0].global_names

    def test_imports_bind_their_alias(self) -> None:
        tree = astroid.parse("import os.path\nfrom json import dumps as to_json\n")
        root = ScopeResolver(tree).resolve()
        assert root.bindings["os"].kind is BindingKind.IMPORT
        assert "to_json" in root.bindings

    def test_star_parameters_are_declared(self) -> None:
        tree = astroid.parse("def f(*args, **kwargs):\n    return args, kwargs\n")
        scope = ScopeResolver(tree).resolve().children[0]
        assert {"args", "kwargs"} <= scope.names()


class TestGenerateUniqueName:
    def test_free_name_is_kept(self) -> None:
        tree = astroid.parse("flag = True\n")
        root = ScopeResolver(tree).resolve()
        assert ScopeResolver.generate_unique_name("isFlag", root) == "isFlag"

    def test_taken_name_gets_a_suffix(self) -> None:
        tree = astroid.parse("isFlag = 1\nisFlag2 = 2\n")
        root = ScopeResolver(tree).resolve()
        assert ScopeResolver.generate_unique_name("isFlag", root) == "isFlag3"

    def test_enclosing_scopes_and_reserved_names_count(self) -> None:
        tree = astroid.parse("isFlag = 1\ndef f():\n    pass\n")
        scope = ScopeResolver(tree).resolve().children[0]
        assert ScopeResolver.generate_unique_name("isFlag", scope) == "isFlag2"
        assert ScopeResolver.generate_unique_name("isOk", scope, reserved={"isOk"}) == "isOk2"


def test_binding_named_only_sees_own_bindings():
    tree = astroid.parse("flag = True\ndef f():\n    local = 1\n")
    resolver = ScopeResolver(tree)
    root = resolver.resolve()
    function_scope = root.children[0]
    assert resolver.binding_named(function_scope, "local").kind is BindingKind.VARIABLE
    assert resolver.binding_named(function_scope, "flag") is None
    assert resolver.lookup(function_scope, "flag").kind is BindingKind.VARIABLE


def test_resolve_is_cached_per_resolver():
    tree = astroid.parse("flag = True\n")
    resolver = ScopeResolver(tree)
    root = resolver.resolve()
    assert resolver.resolve() is root
    assert root.node is tree
