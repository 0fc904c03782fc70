"""restrict-function-usage: per-location allow and deny lists for called functions."""

from collections.abc import Mapping
from typing import Optional

import astroid

from convention_linter.domain.checks import AnalysisContext, ConventionCheck
from convention_linter.domain.config import OptionSpec
from convention_linter.domain.entities import Finding
from convention_linter.domain.matching import is_restricted

RULE_FIELDS = {
    "allow_functions": OptionSpec("array", [], items="string"),
    "disable_functions": OptionSpec("array", [], items="string"),
    "files": OptionSpec("array", [], items="string"),
    "folders": OptionSpec("array", [], items="string"),
}


class FunctionUsageCheck(ConventionCheck):
    """
    Reports calls to restricted functions.

    ``foo()`` and ``obj.foo()`` are both checked as ``foo``. Aliases from
    ``from m import foo as bar`` seen earlier in the file are followed, so
    ``bar()`` is checked as ``foo``.
    """

    check_id = "restrict-function-usage"
    description = "Restrict which functions may be called where."
    messages = {
        "function-disallowed": "Calling '{{name}}' is not allowed in {{filename}}",
    }
    options_schema = {
        "rules": OptionSpec("array", [], items="object", fields=RULE_FIELDS),
    }

    def __init__(self, context: AnalysisContext, options: Optional[Mapping[str, object]] = None) -> None:
        super().__init__(context, options)
        self.aliases: dict[str, str] = {}

    def _restricted(self, name: str) -> bool:
        filename = self.context.filename
        return any(
            is_restricted(
                name,
                filename,
                allow=rule["allow_functions"],
                disable=rule["disable_functions"],
                folders=rule["folders"],
                files=rule["files"],
            )
            for rule in self.options["rules"]  # type: ignore[attr-defined]
        )

    def visit_importfrom(self, node: astroid.nodes.ImportFrom) -> None:
        for name, alias in node.names:
            if alias and name != "*":
                self.aliases[alias] = name

    def visit_call(self, node: astroid.nodes.Call) -> list[Finding]:
        func = node.func
        if isinstance(func, astroid.nodes.Name):
            name = self.aliases.get(func.name, func.name)
        elif isinstance(func, astroid.nodes.Attribute):
            name = func.attrname
        else:
            return []
        if not self._restricted(name):
            return []
        return [self.finding(func, "function-disallowed", {"name": name, "filename": self.context.filename})]
