"""restrict-console-methods: keep ad-hoc console output out of library code."""

from typing import Optional

import astroid

from convention_linter.domain.checks import ConventionCheck
from convention_linter.domain.config import OptionSpec
from convention_linter.domain.entities import BindingKind, Finding

CONSOLE_BUILTINS = ("print", "breakpoint", "pprint")
CONSOLE_STREAMS = ("stdout", "stderr")


class ConsoleMethodsCheck(ConventionCheck):
    """
    Reports ``print``/``breakpoint`` calls and direct ``sys.stdout``/``sys.stderr`` writes.

    Only free references count: a local function named ``print`` shadows the
    builtin and is left alone. Method names listed in ``allow`` (``print``,
    ``breakpoint``, ``pprint``, ``stdout``, ``stderr``) are permitted.
    """

    check_id = "restrict-console-methods"
    description = "Use logging instead of console output."
    messages = {
        "no-console": "Unexpected console output via '{{method}}', use logging instead",
    }
    options_schema = {
        "allow": OptionSpec("array", [], items="string"),
    }

    def _allowed(self, method: str) -> bool:
        return method in self.options["allow"]  # type: ignore[operator]

    def visit_call(self, node: astroid.nodes.Call) -> list[Finding]:
        func = node.func
        if isinstance(func, astroid.nodes.Name):
            method = self._builtin(func)
            if method is None or self._allowed(method):
                return []
            return [self.finding(func, "no-console", {"method": method})]
        stream = self._stream_write(func)
        if stream is None or self._allowed(stream):
            return []
        return [self.finding(func, "no-console", {"method": f"sys.{stream}.{func.attrname}"})]

    def _builtin(self, func: astroid.nodes.Name) -> Optional[str]:
        if func.name not in CONSOLE_BUILTINS:
            return None
        binding = self.context.resolver.resolve_reference(func)
        if binding is None:
            return func.name if func.name != "pprint" else None
        declaration = binding.declaration
        if isinstance(declaration, astroid.nodes.ImportFrom) and declaration.modname == "pprint":
            return func.name
        return None

    def _stream_write(self, func: astroid.nodes.NodeNG) -> Optional[str]:
        """``sys.stdout.write`` where ``sys`` is the imported module."""
        if not (isinstance(func, astroid.nodes.Attribute) and func.attrname in ("write", "writelines")):
            return None
        stream = func.expr
        if not (isinstance(stream, astroid.nodes.Attribute) and stream.attrname in CONSOLE_STREAMS):
            return None
        module = stream.expr
        if not (isinstance(module, astroid.nodes.Name) and module.name == "sys"):
            return None
        binding = self.context.resolver.resolve_reference(module)
        if binding is not None and binding.kind is not BindingKind.IMPORT:
            return None
        return stream.attrname
