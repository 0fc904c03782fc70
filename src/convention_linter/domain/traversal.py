"""Single-pass pre-order traversal and per-kind callback dispatch."""

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import NamedTuple, Optional

import astroid

from convention_linter.domain.entities import Finding, Location, Severity, Span

logger = logging.getLogger(__name__)

CHECK_CRASHED = "check-crashed"

#: Closed set of node kinds a callback can be registered for.
NODE_KINDS: frozenset[str] = frozenset(cls.__name__.lower() for cls in astroid.nodes.ALL_NODE_CLASSES)

Callback = Callable[[astroid.nodes.NodeNG], Optional[Iterable[Finding]]]
Locator = Callable[[astroid.nodes.NodeNG], tuple[Span, Location]]


class Registration(NamedTuple):
    """A callback contributed by one check for one node kind."""

    check_id: str
    callback: Callback


def node_kind(node: astroid.nodes.NodeNG) -> str:
    return type(node).__name__.lower()


def _position(node: astroid.nodes.NodeNG) -> Optional[tuple[int, int]]:
    lineno = getattr(node, "lineno", None)
    if lineno is None:
        return None
    return (lineno, getattr(node, "col_offset", None) or 0)


def ordered_children(node: astroid.nodes.NodeNG) -> list[astroid.nodes.NodeNG]:
    """
    Children in source order.

    astroid groups some children by role (``Arguments`` yields all names, then
    defaults, then annotations). Sorting by position restores source order;
    unpositioned children inherit the position of their predecessor so they
    keep their slot.
    """
    children = list(node.get_children())
    keyed: list[tuple[tuple[int, int], int, astroid.nodes.NodeNG]] = []
    last = (0, 0)
    for index, child in enumerate(children):
        position = _position(child)
        if position is not None:
            last = position
        keyed.append((last, index, child))
    keyed.sort(key=lambda item: (item[0], item[1]))
    return [child for _, _, child in keyed]


def iter_preorder(tree: astroid.nodes.NodeNG) -> Iterator[astroid.nodes.NodeNG]:
    """Deterministic left-to-right pre-order walk. Iterative, so deep trees do not recurse."""
    stack = [tree]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(ordered_children(node)))


class Dispatcher:
    """Walks a tree once, invoking every registered callback for each node's kind."""

    def __init__(
        self,
        registrations: Mapping[str, Sequence[Registration]],
        locate: Optional[Locator] = None,
    ) -> None:
        unknown = sorted(set(registrations) - NODE_KINDS)
        if unknown:
            raise ValueError(f"Unknown node kind(s): {', '.join(unknown)}")
        self._registrations = {kind: tuple(regs) for kind, regs in registrations.items() if regs}
        self._locate = locate

    @classmethod
    def from_registrations(cls, registrations: Iterable[tuple[str, Registration]], locate: Optional[Locator] = None) -> "Dispatcher":
        grouped: dict[str, list[Registration]] = defaultdict(list)
        for kind, registration in registrations:
            grouped[kind].append(registration)
        return cls(grouped, locate=locate)

    def run(self, tree: astroid.nodes.NodeNG) -> list[Finding]:
        findings: list[Finding] = []
        if not self._registrations:
            return findings
        for node in iter_preorder(tree):
            for registration in self._registrations.get(node_kind(node), ()):
                findings.extend(self._invoke(registration, node))
        return findings

    def _invoke(self, registration: Registration, node: astroid.nodes.NodeNG) -> list[Finding]:
        try:
            produced = registration.callback(node)
            return list(produced) if produced else []
        except Exception as exc:  # one crashing check must not abort the file
            logger.warning(
                "Check %s crashed on %s at line %s: %s",
                registration.check_id,
                node_kind(node),
                getattr(node, "lineno", "?"),
                exc,
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            return [self._crash_finding(registration.check_id, node, exc)]

    def _crash_finding(self, check_id: str, node: astroid.nodes.NodeNG, exc: Exception) -> Finding:
        if self._locate is not None:
            span, location = self._locate(node)
        else:
            line = getattr(node, "lineno", None) or 0
            column = getattr(node, "col_offset", None) or 0
            span, location = Span(0, 0), Location(line, column, line, column)
        return Finding(
            check_id=check_id,
            message_id=CHECK_CRASHED,
            node=node,
            span=span,
            location=location,
            data={"check": check_id, "error": f"{type(exc).__name__}: {exc}"},
            severity=Severity.INFO,
        )
