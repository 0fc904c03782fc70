"""Interface for finding reporting."""

import json
from collections.abc import Callable, Sequence
from typing import Protocol, TextIO

import typer

from convention_linter.domain.entities import FileReport, Finding, Severity

_SEVERITY_COLORS = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


class Reporter(Protocol):
    """Protocol for reporting analysis results."""

    def report(self, reports: Sequence[FileReport], configuration_errors: Sequence[str] = ()) -> None:
        """Report the results of a run to the user."""
        ...


class TextReporter:
    """One line per finding: ``path:line:col: check-id message``."""

    def __init__(self, render: Callable[[Finding], str], stream: TextIO, color: bool = False) -> None:
        self.render = render
        self.stream = stream
        self.color = color

    def format_finding(self, path: str, finding: Finding) -> str:
        fix = " [fixable]" if finding.fixable else ""
        return f"{path}:{finding.location}: {finding.check_id} {self.render(finding)}{fix}"

    def _write(self, line: str, fg: str = "") -> None:
        if self.color and fg:
            line = typer.style(line, fg=fg)
        self.stream.write(line + "\n")

    def report(self, reports: Sequence[FileReport], configuration_errors: Sequence[str] = ()) -> None:
        for error in configuration_errors:
            self._write(f"error: {error}", "red")
        total = 0
        fixable = 0
        for file_report in reports:
            for error in file_report.errors:
                self._write(f"{file_report.path}: error: {error}", "red")
            for finding in file_report.findings:
                total += 1
                fixable += finding.fixable
                self._write(self.format_finding(file_report.path, finding), _SEVERITY_COLORS[finding.severity])
            if file_report.compose.withheld:
                withheld = ", ".join(sorted(file_report.compose.withheld))
                self._write(f"{file_report.path}: fixes withheld (overlapping edits) from: {withheld}")
        self._write(f"{total} finding(s) in {len(reports)} file(s), {fixable} fixable.")


class JsonReporter:
    """Machine readable report: one JSON document for the whole run."""

    def __init__(self, render: Callable[[Finding], str], stream: TextIO) -> None:
        self.render = render
        self.stream = stream

    def report(self, reports: Sequence[FileReport], configuration_errors: Sequence[str] = ()) -> None:
        document = {
            "configuration_errors": list(configuration_errors),
            "files": [r.to_dict(self.render) for r in reports],
        }
        json.dump(document, self.stream, indent=2)
        self.stream.write("\n")
