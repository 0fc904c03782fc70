"""restrict-imports: per-location allow and deny lists for imported names."""

import astroid

from convention_linter.domain.checks import ConventionCheck
from convention_linter.domain.config import OptionSpec
from convention_linter.domain.entities import Finding
from convention_linter.domain.matching import is_restricted, matches_glob

RULE_FIELDS = {
    "allow_imports": OptionSpec("array", [], items="string"),
    "disable_imports": OptionSpec("array", [], items="string"),
    "files": OptionSpec("array", [], items="string"),
    "folders": OptionSpec("array", [], items="string"),
    "from": OptionSpec("array", [], items="string"),
}


class RestrictImportsCheck(ConventionCheck):
    """
    Each rule may narrow itself to modules (``from`` globs against the module
    path) and to files (``folders``/``files`` globs). A name is reported when
    any rule restricts it.

    For ``import a.b as c`` the checked name is ``a.b``; for
    ``from m import x as y`` it is ``x``.
    """

    check_id = "restrict-imports"
    description = "Restrict which names may be imported where."
    messages = {
        "import-disallowed": "Importing '{{name}}' is not allowed in {{filename}}",
    }
    options_schema = {
        "rules": OptionSpec("array", [], items="object", fields=RULE_FIELDS),
    }

    def _restricted(self, name: str, module: str) -> bool:
        filename = self.context.filename
        for rule in self.options["rules"]:  # type: ignore[attr-defined]
            sources = rule["from"]
            if sources and not any(matches_glob(module, pattern) for pattern in sources):
                continue
            if is_restricted(
                name,
                filename,
                allow=rule["allow_imports"],
                disable=rule["disable_imports"],
                folders=rule["folders"],
                files=rule["files"],
            ):
                return True
        return False

    def _report(self, node: astroid.nodes.NodeNG, names: list[tuple[str, str]]) -> list[Finding]:
        findings = []
        span = self.context.source.node_span(node)
        for name, module in names:
            if self._restricted(name, module):
                findings.append(
                    self.finding(node, "import-disallowed", {"name": name, "filename": self.context.filename}, span=span)
                )
        return findings

    def visit_import(self, node: astroid.nodes.Import) -> list[Finding]:
        return self._report(node, [(name, name) for name, _alias in node.names])

    def visit_importfrom(self, node: astroid.nodes.ImportFrom) -> list[Finding]:
        module = "." * (node.level or 0) + (node.modname or "")
        return self._report(node, [(name, module) for name, _alias in node.names if name != "*"])
