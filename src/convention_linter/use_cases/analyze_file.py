"""Use Case: analyse one file with every active check."""

import logging
from typing import Optional

import astroid  # type: ignore[import-untyped]

from convention_linter.domain.checks import AnalysisContext
from convention_linter.domain.checks.registry import Activation, CheckRegistry
from convention_linter.domain.config import ConfigurationLoader
from convention_linter.domain.entities import FileReport, Finding, Location, Span
from convention_linter.domain.errors import SourceParseError
from convention_linter.domain.patches import compose
from convention_linter.domain.protocols import ParserProtocol
from convention_linter.domain.scope import ScopeResolver
from convention_linter.domain.source import SourceIndex
from convention_linter.domain.traversal import Dispatcher, Registration
from convention_linter.domain.types import TypeQueryAdapter

logger = logging.getLogger(__name__)


class AnalyzeFileUseCase:
    """
    Parse, dispatch, sort and compose for one file at a time.

    Check options are validated once, when the use case is built. Every call
    to ``execute`` builds fresh per-file state (resolver, type adapter, check
    instances), so separate instances can analyse files in parallel.
    """

    def __init__(
        self,
        parser: ParserProtocol,
        config_loader: ConfigurationLoader,
        registry: Optional[CheckRegistry] = None,
    ) -> None:
        self.parser = parser
        self.config_loader = config_loader
        self.registry = registry or CheckRegistry()
        self.activation: Activation = self.registry.activate(config_loader)

    @property
    def configuration_errors(self) -> tuple[str, ...]:
        return self.activation.errors

    def execute(self, path: str, source: Optional[str] = None) -> FileReport:
        """Analyse ``path``; ``source`` overrides the file contents when given."""
        try:
            if source is None:
                source = self.parser.read_source(path)
            tree = self.parser.parse_source(source, path)
        except SourceParseError as exc:
            logger.error("Skipping %s: %s", path, exc)
            return FileReport(path=path, errors=(str(exc),))

        findings = self.run_checks(path, source, tree)
        result = compose(findings, path)
        findings.sort(key=Finding.sort_key)
        logger.debug(
            "%s: %d finding(s), %d edit(s), withheld fixes from %s",
            path,
            len(findings),
            len(result.edits),
            sorted(result.withheld) or "none",
        )
        return FileReport(path=path, findings=tuple(findings), compose=result)

    def run_checks(self, path: str, source: str, tree: astroid.nodes.Module) -> list[Finding]:
        """Findings in discovery order."""
        index = SourceIndex(source)
        context = AnalysisContext(
            filename=path.replace("\\", "/"),
            tree=tree,
            source=index,
            resolver=ScopeResolver(tree),
            types=TypeQueryAdapter(self.parser.type_checker()),
        )
        registrations: list[tuple[str, Registration]] = []
        for active in self.activation.checks:
            check = active.check(context, active.options)
            registrations.extend((kind, Registration(check.check_id, callback)) for kind, callback in check.callbacks())

        def locate(node: astroid.nodes.NodeNG) -> tuple[Span, Location]:
            span = index.name_span(node)
            return span, index.location(span)

        return Dispatcher.from_registrations(registrations, locate=locate).run(tree)
