"""Unit tests for the pre-order walk and per-kind dispatch."""

import astroid
import pytest

from convention_linter.domain.entities import Finding, Location, Severity, Span
from convention_linter.domain.traversal import (
    CHECK_CRASHED,
    NODE_KINDS,
    Dispatcher,
    Registration,
    iter_preorder,
    node_kind,
)


def _finding(check_id, node):
    return Finding(
        check_id=check_id,
        message_id="seen",
        node=node,
        span=Span(0, 0),
        location=Location(node.lineno, node.col_offset, node.lineno, node.col_offset),
    )


class TestPreorder:
    """Nodes are visited parent first, children left to right in source order."""

    def test_module_comes_first(self) -> None:
        tree = astroid.parse("x = 1\n")
        assert next(iter_preorder(tree)) is tree

    def test_names_in_source_order(self) -> None:
        tree = astroid.parse("a = b + c\nprint(d, e)\n")
        names = [n.name for n in iter_preorder(tree) if isinstance(n, astroid.nodes.Name)]
        assert names == ["b", "c", "print", "d", "e"]

    def test_parameters_and_defaults_interleave(self) -> None:
        tree = astroid.parse("def f(a, b=x, *, c: int = y): pass\n")
        seen = [
            n.name
            for n in iter_preorder(tree)
            if isinstance(n, (astroid.nodes.AssignName, astroid.nodes.Name)) and n.name != "int"
        ]
        assert seen == ["a", "b", "x", "c", "y"]

    def test_node_kind_is_lowercased_class_name(self) -> None:
        node = astroid.extract_node("f(1)")
        assert node_kind(node) == "call"
        assert "call" in NODE_KINDS


class TestDispatcher:
    def test_unknown_kind_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="nosuchnode"):
            Dispatcher({"nosuchnode": [Registration("x", lambda node: None)]})

    def test_callbacks_for_one_kind_run_in_registration_order(self) -> None:
        calls = []
        tree = astroid.parse("a\n")
        dispatcher = Dispatcher.from_registrations(
            [
                ("name", Registration("first", lambda node: calls.append("first"))),
                ("name", Registration("second", lambda node: calls.append("second"))),
            ]
        )
        dispatcher.run(tree)
        assert calls == ["first", "second"]

    def test_same_tree_gives_same_findings(self) -> None:
        tree = astroid.parse("a = b\nc = d\n")
        registrations = [("name", Registration("seen", lambda node: [_finding("seen", node)]))]
        first = Dispatcher.from_registrations(registrations).run(tree)
        second = Dispatcher.from_registrations(registrations).run(tree)
        assert [f.node.name for f in first] == ["b", "d"]
        assert [f.node for f in first] == [f.node for f in second]

    def test_crashing_callback_is_isolated(self) -> None:
        """One check raising does not stop other checks or later nodes."""

        def boom(node):
            raise RuntimeError("kaboom")

        tree = astroid.parse("a\nb\n")
        dispatcher = Dispatcher.from_registrations(
            [
                ("name", Registration("broken", boom)),
                ("name", Registration("working", lambda node: [_finding("working", node)])),
            ]
        )
        findings = dispatcher.run(tree)

        crashes = [f for f in findings if f.message_id == CHECK_CRASHED]
        working = [f for f in findings if f.check_id == "working"]
        assert len(crashes) == 2
        assert len(working) == 2
        assert crashes[0].check_id == "broken"
        assert crashes[0].severity is Severity.INFO
        assert crashes[0].data["error"] == "RuntimeError: kaboom"

    def test_no_registrations_visits_nothing(self) -> None:
        assert Dispatcher({}).run(astroid.parse("a\n")) == []
