"""params-naming-convention: limit positional parameters, push the rest to keyword-only."""

from typing import Optional

import astroid

from convention_linter.domain.checks import ConventionCheck
from convention_linter.domain.config import OptionSpec
from convention_linter.domain.entities import Edit, Finding, Patch, Span
from convention_linter.domain.matching import matches_name


class ParamsNamingCheck(ConventionCheck):
    """
    Flags functions with more positional parameters than allowed.

    ``self``/``cls`` and names starting with an ignored prefix do not count.
    The fix inserts ``*, `` before the first excess parameter, which makes it
    and the following ones keyword-only. No fix is offered for methods,
    functions that already have ``*args`` or a bare ``*``, positional-only
    excess, or when a call in the same file passes the excess parameters
    positionally.
    """

    check_id = "params-naming-convention"
    description = "Functions should take few positional parameters; make the rest keyword-only."
    messages = {
        "too-many-positional": (
            "Function '{{name}}' has {{count}} extra positional parameter(s). "
            "Make {{params}} keyword-only or prefix them with '{{prefix}}'."
        ),
    }
    options_schema = {
        "allowed_parameters": OptionSpec("number", 2),
        "ignore": OptionSpec("array", ["self", "cls"], items="string"),
        "ignore_functions": OptionSpec("array", [], items="string"),
        "ignore_prefixes": OptionSpec("array", ["_"], items="string"),
    }

    def _counts(self, arg: astroid.nodes.AssignName) -> bool:
        if matches_name(arg.name, self.options["ignore"]):  # type: ignore[arg-type]
            return False
        return not any(arg.name.startswith(prefix) for prefix in self.options["ignore_prefixes"])  # type: ignore[attr-defined]

    def visit_functiondef(self, node: astroid.nodes.FunctionDef) -> list[Finding]:
        if matches_name(node.name, self.options["ignore_functions"]):  # type: ignore[arg-type]
            return []
        args = node.args
        positional = list(args.posonlyargs or []) + list(args.args or [])
        counted = [arg for arg in positional if self._counts(arg)]
        allowed = int(self.options["allowed_parameters"])  # type: ignore[call-overload]
        if len(counted) <= allowed:
            return []
        excess = counted[allowed:]
        prefixes = list(self.options["ignore_prefixes"])  # type: ignore[call-overload]
        data = {
            "name": node.name,
            "count": str(len(excess)),
            "params": ", ".join(arg.name for arg in excess),
            "prefix": prefixes[0] if prefixes else "_",
        }
        patch = self._keyword_only_patch(node, positional, excess[0])
        return [self.finding(node, "too-many-positional", data, patch=patch)]

    visit_asyncfunctiondef = visit_functiondef

    def _keyword_only_patch(
        self,
        node: astroid.nodes.FunctionDef,
        positional: list[astroid.nodes.AssignName],
        first: astroid.nodes.AssignName,
    ) -> Optional[Patch]:
        args = node.args
        if node.is_method() or args.vararg or args.kwonlyargs or first in (args.posonlyargs or []):
            return None
        index = positional.index(first)
        if self._called_positionally(node, index):
            return None
        start = self._param_span(args, first).start
        end = self._param_span(args, positional[-1]).end
        original = self.context.source.slice(Span(start, end))
        return Patch.of(Edit.replace(Span(start, end), f"*, {original}"))

    def _param_span(self, args: astroid.nodes.Arguments, arg: astroid.nodes.AssignName) -> Span:
        """Name through annotation and default value."""
        source = self.context.source
        span = source.name_span(arg)
        end = span.end
        positional = list(args.posonlyargs or []) + list(args.args or [])
        annotations = list(args.posonlyargs_annotations or []) + list(args.annotations or [])
        index = positional.index(arg)
        if index < len(annotations) and annotations[index] is not None:
            end = max(end, source.node_span(annotations[index]).end)
        defaults = list(args.defaults or [])
        offset = len(positional) - len(defaults)
        if index >= offset:
            end = max(end, source.node_span(defaults[index - offset]).end)
        return Span(span.start, end)

    def _called_positionally(self, node: astroid.nodes.FunctionDef, index: int) -> bool:
        binding = self.context.resolver.binding_for(node)
        if binding is None:
            return False
        for reference in binding.references:
            call = reference.parent
            if not (isinstance(call, astroid.nodes.Call) and call.func is reference):
                continue
            if len(call.args) > index or any(isinstance(a, astroid.nodes.Starred) for a in call.args):
                return True
        return False
