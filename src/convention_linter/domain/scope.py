"""Lexical scopes, bindings and reference resolution over an astroid tree."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional, Union

import astroid

from convention_linter.domain.entities import BindingKind
from convention_linter.domain.traversal import iter_preorder

ScopeNode = Union[
    astroid.nodes.Module,
    astroid.nodes.FunctionDef,
    astroid.nodes.Lambda,
    astroid.nodes.ClassDef,
    astroid.nodes.ComprehensionScope,
]

_SCOPE_TYPES = (
    astroid.nodes.Module,
    astroid.nodes.FunctionDef,
    astroid.nodes.Lambda,
    astroid.nodes.ClassDef,
    astroid.nodes.ComprehensionScope,
)
_FUNCTION_TYPES = (astroid.nodes.FunctionDef, astroid.nodes.Lambda)
_REFERENCE_TYPES = (astroid.nodes.Name, astroid.nodes.AssignName, astroid.nodes.DelName)


@dataclass(eq=False)
class Binding:
    """A declared name together with every place that reads or writes it."""

    name: str
    kind: BindingKind
    declaration: astroid.nodes.NodeNG
    scope: "Scope"
    references: list[astroid.nodes.NodeNG] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Binding({self.name!r}, {self.kind.value}, refs={len(self.references)})"


@dataclass(eq=False)
class Scope:
    """A module, function, lambda, class or comprehension body."""

    node: ScopeNode
    parent: Optional["Scope"] = None
    bindings: dict[str, Binding] = field(default_factory=dict)
    children: list["Scope"] = field(default_factory=list)
    global_names: set[str] = field(default_factory=set)
    nonlocal_names: set[str] = field(default_factory=set)

    @property
    def is_class(self) -> bool:
        return isinstance(self.node, astroid.nodes.ClassDef)

    @property
    def is_function(self) -> bool:
        return isinstance(self.node, _FUNCTION_TYPES)

    def names(self) -> set[str]:
        return set(self.bindings)

    def __repr__(self) -> str:
        return f"Scope({type(self.node).__name__}, {sorted(self.bindings)})"


def _evaluated_outside(scope_node: astroid.nodes.NodeNG, child: astroid.nodes.NodeNG, node: astroid.nodes.NodeNG) -> bool:
    """True when ``node`` (reached through ``child``) is evaluated in the scope enclosing ``scope_node``."""
    if isinstance(scope_node, _FUNCTION_TYPES):
        if child is scope_node.args:
            # Parameter names live inside; defaults and annotations outside.
            return not (isinstance(node, astroid.nodes.AssignName) and node.parent is child)
        decorators = getattr(scope_node, "decorators", None)
        return child is decorators or child is getattr(scope_node, "returns", None)
    if isinstance(scope_node, astroid.nodes.ClassDef):
        return child is scope_node.decorators or child in scope_node.bases or child in (scope_node.keywords or [])
    if isinstance(scope_node, astroid.nodes.ComprehensionScope):
        generators = scope_node.generators
        return bool(generators) and child is generators[0] and _within(node, generators[0].iter)
    return False


def _within(node: astroid.nodes.NodeNG, ancestor: astroid.nodes.NodeNG) -> bool:
    current: Optional[astroid.nodes.NodeNG] = node
    while current is not None:
        if current is ancestor:
            return True
        current = current.parent
    return False


class ScopeResolver:
    """
    Builds the scope tree of one file and links every identifier to its binding.

    The first pass declares bindings in every scope (Python hoists
    assignments to the whole function body), the second links references.
    Results are cached on the instance; build one resolver per file.
    """

    def __init__(self, tree: astroid.nodes.Module) -> None:
        self.tree = tree
        self._root: Optional[Scope] = None
        self._scopes: dict[astroid.nodes.NodeNG, Scope] = {}
        self._owner: dict[astroid.nodes.NodeNG, Scope] = {}
        self._resolved: dict[astroid.nodes.NodeNG, Optional[Binding]] = {}
        self._declared: dict[astroid.nodes.NodeNG, Binding] = {}

    # -- public API -------------------------------------------------------

    def resolve(self) -> Scope:
        if self._root is None:
            self._build()
        return self._scopes[self.tree]

    def scope_of(self, node: astroid.nodes.NodeNG) -> Scope:
        """Innermost scope the node is evaluated in. A scope node maps to its own scope."""
        self.resolve()
        if node in self._scopes:
            return self._scopes[node]
        return self._owner_of(node)

    def binding_named(self, scope: Scope, name: str) -> Optional[Binding]:
        """Binding declared directly in ``scope``."""
        return scope.bindings.get(name)

    def lookup(self, scope: Scope, name: str) -> Optional[Binding]:
        """Innermost visible binding following Python's lexical rules."""
        current: Optional[Scope] = scope
        first = True
        while current is not None:
            if first or not current.is_class:
                binding = current.bindings.get(name)
                if binding is not None:
                    return binding
            first = False
            current = current.parent
        return None

    def resolve_reference(self, node: astroid.nodes.NodeNG) -> Optional[Binding]:
        """Binding a ``Name``/``AssignName``/``DelName`` refers to; ``None`` for free names."""
        self.resolve()
        return self._resolved.get(node)

    def binding_for(self, node: astroid.nodes.NodeNG) -> Optional[Binding]:
        """Binding declared by ``node`` (a def, class, import or parameter)."""
        self.resolve()
        if node in self._declared:
            return self._declared[node]
        return self._resolved.get(node)

    def iter_scopes(self) -> list[Scope]:
        root = self.resolve()
        ordered: list[Scope] = []
        stack = [root]
        while stack:
            scope = stack.pop()
            ordered.append(scope)
            stack.extend(reversed(scope.children))
        return ordered

    @staticmethod
    def generate_unique_name(base: str, scope: Scope, reserved: Iterable[str] = ()) -> str:
        """``base`` if unused in the scope chain (and not ``reserved``), else ``base2``, ``base3``, ..."""
        taken: set[str] = set(reserved)
        current: Optional[Scope] = scope
        while current is not None:
            taken |= current.names()
            current = current.parent
        candidate = base
        index = 2
        while candidate in taken:
            candidate = f"{base}{index}"
            index += 1
        return candidate

    # -- construction -----------------------------------------------------

    def _owner_of(self, node: astroid.nodes.NodeNG) -> Scope:
        cached = self._owner.get(node)
        if cached is not None:
            return cached
        child = node
        parent = node.parent
        while parent is not None:
            if isinstance(parent, _SCOPE_TYPES) and not _evaluated_outside(parent, child, node):
                owner = self._scopes[parent]
                break
            child = parent
            parent = parent.parent
        else:
            owner = self._scopes[self.tree]
        self._owner[node] = owner
        return owner

    def _build(self) -> None:
        nodes = list(iter_preorder(self.tree))
        self._root = Scope(node=self.tree)
        self._scopes[self.tree] = self._root

        for node in nodes:
            if node is self.tree or not isinstance(node, _SCOPE_TYPES):
                continue
            parent_scope = self._owner_of(node)
            scope = Scope(node=node, parent=parent_scope)
            parent_scope.children.append(scope)
            self._scopes[node] = scope

        for node in nodes:
            if isinstance(node, astroid.nodes.Global):
                self._owner_of(node).global_names.update(node.names)
            elif isinstance(node, astroid.nodes.Nonlocal):
                self._owner_of(node).nonlocal_names.update(node.names)

        for node in nodes:
            self._declare(node)

        for node in nodes:
            if isinstance(node, _REFERENCE_TYPES):
                binding = self.lookup(self._owner_of(node), node.name)
                self._resolved[node] = binding
                if binding is not None:
                    binding.references.append(node)

    def _declare(self, node: astroid.nodes.NodeNG) -> None:
        if isinstance(node, astroid.nodes.FunctionDef):
            self._add(self._owner_of(node), node.name, BindingKind.FUNCTION, node)
            self._declare_star_params(node)
        elif isinstance(node, astroid.nodes.Lambda):
            self._declare_star_params(node)
        elif isinstance(node, astroid.nodes.ClassDef):
            self._add(self._owner_of(node), node.name, BindingKind.CLASS, node)
        elif isinstance(node, (astroid.nodes.Import, astroid.nodes.ImportFrom)):
            scope = self._owner_of(node)
            for name, alias in node.names:
                if name == "*":
                    continue
                bound = alias or (name.split(".")[0] if isinstance(node, astroid.nodes.Import) else name)
                self._add(scope, bound, BindingKind.IMPORT, node)
        elif isinstance(node, astroid.nodes.AssignName):
            is_parameter = isinstance(node.parent, astroid.nodes.Arguments)
            kind = BindingKind.PARAMETER if is_parameter else BindingKind.VARIABLE
            self._add(self._owner_of(node), node.name, kind, node)

    def _declare_star_params(self, node: Union[astroid.nodes.FunctionDef, astroid.nodes.Lambda]) -> None:
        scope = self._scopes[node]
        for name in (node.args.vararg, node.args.kwarg):
            if name:
                self._add(scope, name, BindingKind.PARAMETER, node.args)

    def _add(self, scope: Scope, name: str, kind: BindingKind, declaration: astroid.nodes.NodeNG) -> None:
        target = self._redirect(scope, name)
        binding = target.bindings.get(name)
        if binding is None:
            binding = Binding(name=name, kind=kind, declaration=declaration, scope=target)
            target.bindings[name] = binding
        elif kind is BindingKind.PARAMETER and binding.kind is not BindingKind.PARAMETER:
            # A parameter always wins over a later re-assignment in the body.
            binding.kind = kind
            binding.declaration = declaration
        if isinstance(declaration, (astroid.nodes.FunctionDef, astroid.nodes.ClassDef)):
            self._declared[declaration] = binding

    def _redirect(self, scope: Scope, name: str) -> Scope:
        if name in scope.global_names:
            return self._scopes[self.tree]
        if name in scope.nonlocal_names:
            enclosing = [s for s in self._parents(scope) if s.is_function]
            for candidate in enclosing:
                if name in candidate.bindings:
                    return candidate
            # The outer assignment may come later in the source.
            if enclosing:
                return enclosing[0]
        return scope

    @staticmethod
    def _parents(scope: Scope) -> list[Scope]:
        chain: list[Scope] = []
        current = scope.parent
        while current is not None:
            chain.append(current)
            current = current.parent
        return chain
