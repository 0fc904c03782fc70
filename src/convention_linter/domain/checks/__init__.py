"""Base contract shared by every convention check."""

from collections.abc import Hashable, Iterator, Mapping
from dataclasses import dataclass
from typing import ClassVar, Optional

import astroid

from convention_linter.domain.config import OptionSpec, validate_options
from convention_linter.domain.entities import BindingKind, Edit, Finding, Patch, Severity, Span
from convention_linter.domain.scope import Binding, ScopeResolver
from convention_linter.domain.source import SourceIndex
from convention_linter.domain.traversal import Callback
from convention_linter.domain.types import TypeQueryAdapter

BOOLEAN_PREFIXES = [
    "is",
    "are",
    "has",
    "have",
    "can",
    "should",
    "will",
    "did",
    "was",
    "does",
    "allow",
    "enable",
]


@dataclass(frozen=True)
class AnalysisContext:
    """Read-only state shared by all checks analysing one file."""

    filename: str
    tree: astroid.nodes.Module
    source: SourceIndex
    resolver: ScopeResolver
    types: TypeQueryAdapter


class ConventionCheck:
    """
    A single naming/usage convention.

    Subclasses declare ``check_id``, ``messages`` and ``options_schema`` and
    implement ``visit_<kind>`` methods (``visit_functiondef``,
    ``visit_call``, ...). One instance is created per file, so per-file state
    such as alias tables or dedupe sets lives on ``self``.
    """

    check_id: ClassVar[str] = ""
    description: ClassVar[str] = ""
    messages: ClassVar[dict[str, str]] = {}
    options_schema: ClassVar[dict[str, OptionSpec]] = {}

    def __init__(self, context: AnalysisContext, options: Optional[Mapping[str, object]] = None) -> None:
        self.context = context
        self.options: Mapping[str, object] = options if options is not None else self.validate({})
        self._reported: set[Hashable] = set()

    @classmethod
    def validate(cls, raw: Optional[Mapping[str, object]]) -> dict[str, object]:
        """Raises ConfigurationError when ``raw`` does not match ``options_schema``."""
        return validate_options(cls.check_id, cls.options_schema, raw)

    def callbacks(self) -> Iterator[tuple[str, Callback]]:
        """``(node kind, bound method)`` for every ``visit_<kind>`` method, in name order."""
        for attr in sorted(dir(type(self))):
            if attr.startswith("visit_"):
                yield attr[len("visit_"):], getattr(self, attr)

    def report_once(self, key: Hashable) -> bool:
        """True the first time ``key`` is seen in this file."""
        if key in self._reported:
            return False
        self._reported.add(key)
        return True

    def finding(
        self,
        node: astroid.nodes.NodeNG,
        message_id: str,
        data: Optional[Mapping[str, str]] = None,
        span: Optional[Span] = None,
        patch: Optional[Patch] = None,
        severity: Severity = Severity.WARNING,
    ) -> Finding:
        if span is None:
            span = self.context.source.name_span(node)
        return Finding(
            check_id=self.check_id,
            message_id=message_id,
            node=node,
            span=span,
            location=self.context.source.location(span),
            data=dict(data or {}),
            patch=patch,
            severity=severity,
        )

    def unique_name(self, base: str, node: astroid.nodes.NodeNG, binding: Optional[Binding] = None) -> str:
        """
        ``base`` made unique for a rename.

        Names visible from the binding's scope are taken, and so are names
        declared in any nested scope, where the new name would be shadowed.
        """
        scope = binding.scope if binding is not None else self.context.resolver.scope_of(node)
        reserved: set[str] = set()
        nested = list(scope.children)
        while nested:
            inner = nested.pop()
            reserved |= inner.names()
            nested.extend(inner.children)
        return ScopeResolver.generate_unique_name(base, scope, reserved)

    def rename_patch(self, binding: Optional[Binding], new_name: str) -> Optional[Patch]:
        """
        Rewrite a binding's declaration and every reference to ``new_name``.

        Keyword arguments naming a renamed parameter in same-file calls are
        rewritten too. Returns None when a safe rename is not possible:
        imports, ``*args``/``**kwargs``, names also declared ``global`` or
        ``nonlocal`` somewhere, or positions that do not spell the old name.
        """
        if binding is None or binding.kind is BindingKind.IMPORT or binding.scope.is_class:
            return None
        if binding.kind is BindingKind.PARAMETER and binding.scope.parent is not None and binding.scope.parent.is_class:
            # Method callers go through attributes we cannot follow.
            return None
        resolver = self.context.resolver
        for scope in resolver.iter_scopes():
            if binding.name in scope.global_names or binding.name in scope.nonlocal_names:
                return None

        sites: list[astroid.nodes.NodeNG] = list(binding.references)
        if isinstance(binding.declaration, (astroid.nodes.FunctionDef, astroid.nodes.ClassDef)):
            sites.append(binding.declaration)
        elif binding.declaration not in sites:
            return None
        if binding.kind is BindingKind.PARAMETER:
            sites.extend(self._keyword_sites(binding))

        spans: set[Span] = set()
        for site in sites:
            span = self._site_span(site, binding.name)
            if span is None:
                return None
            spans.add(span)
        return Patch.of(*(Edit.replace(span, new_name) for span in sorted(spans)))

    def _site_span(self, site: astroid.nodes.NodeNG, name: str) -> Optional[Span]:
        source = self.context.source
        if isinstance(site, astroid.nodes.Keyword):
            if site.lineno is None:
                return None
            start = source.offset(site.lineno, site.col_offset or 0)
            span = Span(start, start + len(name))
        else:
            span = source.name_span(site)
        return span if source.slice(span) == name else None

    def _keyword_sites(self, binding: Binding) -> list[astroid.nodes.Keyword]:
        function = binding.scope.node
        if not isinstance(function, astroid.nodes.FunctionDef):
            return []
        function_binding = self.context.resolver.binding_for(function)
        if function_binding is None:
            return []
        sites = []
        for reference in function_binding.references:
            call = reference.parent
            if isinstance(call, astroid.nodes.Call) and call.func is reference:
                sites.extend(kw for kw in call.keywords or [] if kw.arg == binding.name)
        return sites


def camel_join(prefix: str, name: str) -> str:
    """
    ``("is", "nima")`` gives ``isNima``.

    A name that is already snake_case keeps its shape, so ``click_count``
    gives ``is_click_count``.
    """
    stripped = name.lstrip("_")
    leading = name[: len(name) - len(stripped)]
    if "_" in stripped:
        return snake_join(prefix, name)
    if not stripped:
        return f"{leading}{prefix}"
    return f"{leading}{prefix}{stripped[0].upper()}{stripped[1:]}"


def snake_join(prefix: str, name: str) -> str:
    """``("is", "nima")`` gives ``is_nima``."""
    stripped = name.lstrip("_")
    leading = name[: len(name) - len(stripped)]
    return f"{leading}{prefix}_{stripped}" if stripped else f"{leading}{prefix}"
