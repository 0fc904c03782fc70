"""no-handler-suffix: prefer ``handle_click`` over ``click_handler``."""

import re
from collections.abc import Iterable

import astroid

from convention_linter.domain.checks import BOOLEAN_PREFIXES, ConventionCheck
from convention_linter.domain.config import OptionSpec
from convention_linter.domain.entities import Finding

_SNAKE_SUFFIX = re.compile(r"^(?P<base>.*?)_?handler$", re.IGNORECASE)


def has_handler_suffix(name: str) -> bool:
    lowered = name.lower()
    return lowered.endswith("handler") and lowered.lstrip("_") != "handler"


def _split_prefix(name: str, prefixes: Iterable[str]) -> tuple[str, str]:
    """``is_click_handler`` splits into ``is_`` and ``click_handler``; ``isClickHandler`` into ``is`` and ``ClickHandler``."""
    for prefix in sorted(prefixes, key=len, reverse=True):
        if not name.lower().startswith(prefix.lower()):
            continue
        rest = name[len(prefix):]
        if rest.startswith("_") and rest.lstrip("_"):
            return name[: len(prefix) + 1], rest[1:]
        if rest[:1].isupper():
            return name[: len(prefix)], rest
    return "", name


def handler_to_handle(name: str, keep_prefixes: Iterable[str] = ()) -> str:
    """
    ``click_handler`` gives ``handle_click`` and ``clickHandler`` gives ``handleClick``.

    A leading prefix from ``keep_prefixes`` stays in front, so with ``is``
    kept ``isClickHandler`` gives ``isHandleClick``.
    """
    stripped = name.lstrip("_")
    leading = name[: len(name) - len(stripped)]
    kept, stripped = _split_prefix(stripped, keep_prefixes)
    match = _SNAKE_SUFFIX.match(stripped)
    base = match.group("base") if match else stripped
    if kept.endswith("_") or "_" in stripped or stripped.islower():
        return f"{leading}{kept}handle_{base}" if base else f"{leading}{kept}handle"
    handle = "Handle" if kept else "handle"
    return f"{leading}{kept}{handle}{base[:1].upper()}{base[1:]}"


class HandlerSuffixCheck(ConventionCheck):
    """
    Functions and function-valued variables must not end in ``handler``.

    A leading boolean prefix (``keep_prefixes``) stays in front of
    ``handle`` so the rename agrees with boolean-naming-convention.
    """

    check_id = "no-handler-suffix"
    description = "Name event callbacks handle_<event> instead of <event>_handler."
    messages = {
        "bad-handler-name": "Avoid the 'handler' suffix, use the handle prefix instead ('{{suggestion}}')",
    }
    options_schema = {
        "keep_prefixes": OptionSpec("array", BOOLEAN_PREFIXES, items="string"),
    }

    def _check(self, node: astroid.nodes.NodeNG, name: str) -> list[Finding]:
        if not has_handler_suffix(name):
            return []
        if not self.report_once((name, node.lineno)):
            return []
        binding = self.context.resolver.binding_for(node)
        keep = list(self.options["keep_prefixes"])  # type: ignore[call-overload]
        suggestion = self.unique_name(handler_to_handle(name, keep), node, binding)
        patch = self.rename_patch(binding, suggestion)
        return [self.finding(node, "bad-handler-name", {"name": name, "suggestion": suggestion}, patch=patch)]

    def visit_functiondef(self, node: astroid.nodes.FunctionDef) -> list[Finding]:
        if node.is_method():
            # Overrides of framework hooks keep their names.
            return []
        return self._check(node, node.name)

    visit_asyncfunctiondef = visit_functiondef

    def visit_assignname(self, node: astroid.nodes.AssignName) -> list[Finding]:
        """``click_handler = lambda event: ...``"""
        parent = node.parent
        if isinstance(parent, astroid.nodes.Assign) and isinstance(parent.value, astroid.nodes.Lambda):
            return self._check(node, node.name)
        return []
