"""Use Case: Apply Fixes to Source Code."""

import logging
from dataclasses import replace
from typing import Optional

from convention_linter.domain.entities import FileReport
from convention_linter.domain.errors import FixRejectedError, SourceParseError
from convention_linter.domain.protocols import FixerGatewayProtocol
from convention_linter.use_cases.analyze_file import AnalyzeFileUseCase

logger = logging.getLogger(__name__)

MAX_PASSES = 10


class ApplyFixesUseCase:
    """
    Repeatedly analyse and rewrite one file until no fix lands.

    Each pass applies the composed edit list of the previous analysis. A
    rewrite the fixer gateway rejects (the result no longer parses) aborts the
    whole run for that file and leaves it unchanged.
    """

    def __init__(
        self,
        analyzer: AnalyzeFileUseCase,
        fixer_gateway: FixerGatewayProtocol,
        max_passes: int = MAX_PASSES,
    ) -> None:
        self.analyzer = analyzer
        self.fixer_gateway = fixer_gateway
        self.max_passes = max_passes

    def execute(self, path: str, source: Optional[str] = None, write: bool = True) -> FileReport:
        """
        Fix ``path`` and return the report of the final pass.

        ``fixed_source`` holds the rewritten text when anything changed. With
        ``write`` the file on disk is updated too.
        """
        if source is None:
            try:
                source = self.analyzer.parser.read_source(path)
            except SourceParseError as exc:
                logger.error("Skipping %s: %s", path, exc)
                return FileReport(path=path, errors=(str(exc),))

        current = source
        report = self.analyzer.execute(path, current)
        passes = 0
        while not report.has_errors and report.compose.has_edits:
            if passes == self.max_passes:
                logger.warning("%s: fixes did not settle after %d passes", path, self.max_passes)
                break
            try:
                rewritten = self.fixer_gateway.apply_edits(current, report.compose.edits)
            except FixRejectedError as exc:
                logger.warning("Rejected fixes for %s: %s", path, exc)
                original = self.analyzer.execute(path, source)
                return replace(original, errors=original.errors + (str(exc),))
            if rewritten == current:
                break
            passes += 1
            current = rewritten
            report = self.analyzer.execute(path, current)

        if report.has_errors and current != source:
            logger.warning("%s no longer analyses after fixing; leaving it unchanged", path)
            original = self.analyzer.execute(path, source)
            return replace(original, errors=original.errors + report.errors)

        if current == source:
            return report
        if write:
            self.fixer_gateway.write_source(path, current)
        logger.info("%s: applied fixes in %d pass(es)", path, passes)
        return replace(report, fixed_source=current)
