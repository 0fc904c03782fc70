"""
Pylint plugin entry point - composition root for the checker plugin.
Lives in infrastructure as it creates the container and wires dependencies.

Enable with ``load-plugins = ["convention_linter.infrastructure.checker"]``.
"""

from typing import TYPE_CHECKING, Optional

import astroid  # type: ignore[import-untyped]
from pylint.checkers import BaseChecker

from convention_linter.domain.entities import Finding
from convention_linter.domain.messages import MessageCatalog
from convention_linter.domain.traversal import CHECK_CRASHED
from convention_linter.infrastructure.di.container import ConventionLinterContainer
from convention_linter.use_cases.analyze_file import AnalyzeFileUseCase

if TYPE_CHECKING:
    from pylint.lint import PyLinter

#: Stable pylint message ids, one per check.
CHECK_MESSAGE_IDS: dict[str, str] = {
    "boolean-naming-convention": "C9501",
    "params-naming-convention": "R9502",
    "no-handler-suffix": "C9503",
    "restrict-console-methods": "W9504",
    "restrict-imports": "W9505",
    "restrict-function-usage": "W9506",
}
CRASH_SYMBOL = "convention-check-crashed"
CONFIG_SYMBOL = "convention-configuration-error"


class ConventionChecker(BaseChecker):
    """Runs the convention checks on each module pylint parses and re-emits the findings."""

    name: str = "convention-linter"

    def __init__(
        self,
        linter: "PyLinter",
        analyzer: Optional[AnalyzeFileUseCase] = None,
        messages: Optional[MessageCatalog] = None,
    ) -> None:
        if analyzer is None or messages is None:
            container = ConventionLinterContainer.get_instance()
            analyzer = analyzer or AnalyzeFileUseCase(
                container.get_astroid_gateway(),
                container.get_config_loader(),
                container.get_registry(),
            )
            messages = messages or container.get_message_catalog()
        self.analyzer = analyzer
        self.catalog = messages
        self.msgs = {
            "I9599": (
                "%s",
                CRASH_SYMBOL,
                "A convention check raised while visiting a node; the rest of the module was still checked.",
            ),
            "E9598": (
                "%s",
                CONFIG_SYMBOL,
                "A convention check's options are invalid; that check is disabled for the run.",
            ),
        }
        for check in analyzer.registry.classes():
            msgid = CHECK_MESSAGE_IDS.get(check.check_id)
            if msgid is not None:
                self.msgs[msgid] = ("%s", check.check_id, check.description)
        self._config_reported = False
        super().__init__(linter)

    def visit_module(self, node: astroid.nodes.Module) -> None:
        if not self._config_reported:
            self._config_reported = True
            for error in self.analyzer.configuration_errors:
                self.add_message(CONFIG_SYMBOL, node=node, args=(error,))

        with node.stream() as stream:
            source = stream.read().decode(node.file_encoding or "utf-8")
        for finding in self.analyzer.run_checks(node.file or node.name, source, node):
            self._emit(finding)

    def _emit(self, finding: Finding) -> None:
        if finding.message_id == CHECK_CRASHED:
            symbol = CRASH_SYMBOL
        elif finding.check_id in CHECK_MESSAGE_IDS:
            symbol = finding.check_id
        else:
            return
        location = finding.location
        self.add_message(
            symbol,
            node=finding.node,
            line=location.line,
            col_offset=location.column,
            end_lineno=location.end_line,
            end_col_offset=location.end_column,
            args=(self.catalog.render(finding),),
        )


def register(linter: "PyLinter") -> None:
    """Register checkers."""
    linter.register_checker(ConventionChecker(linter))
