"""CLI entry points for convention-linter - Thin Controller using Typer."""

import difflib
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from convention_linter.domain.checks.registry import CheckRegistry
from convention_linter.domain.config import ConfigurationLoader
from convention_linter.domain.entities import FileReport
from convention_linter.domain.errors import SourceParseError
from convention_linter.domain.messages import MessageCatalog
from convention_linter.domain.protocols import FileSystemProtocol, FixerGatewayProtocol, ParserProtocol
from convention_linter.interface.reporters import JsonReporter, Reporter, TextReporter
from convention_linter.use_cases.analyze_file import AnalyzeFileUseCase
from convention_linter.use_cases.apply_fixes import ApplyFixesUseCase

# B008: avoid function call in default; use module-level singletons for Typer options
_PATHS_ARGUMENT = typer.Argument(None, help="Files or directories (default: src/ if present, else .)")
_FORMAT_OPTION = typer.Option("text", "--format", "-f", help="Output format: text or json")

OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    registry: CheckRegistry
    messages: MessageCatalog
    parser: ParserProtocol
    fixer_gateway: FixerGatewayProtocol
    filesystem: FileSystemProtocol


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def resolve_target_paths(paths: Optional[list[Path]]) -> list[str]:
        """Explicit paths, else src/ if it exists, else '.'."""
        if paths:
            return [str(p) for p in paths]
        src_dir = Path.cwd() / "src"
        if src_dir.is_dir():
            return ["src"]
        return ["."]

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
            force=True,
        )

    @staticmethod
    def make_reporter(output_format: str, deps: CLIDependencies) -> Reporter:
        if output_format == "json":
            return JsonReporter(deps.messages.render, sys.stdout)
        return TextReporter(deps.messages.render, sys.stdout, color=sys.stdout.isatty())

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies. No Service Locator."""
        app = typer.Typer(
            name="convention-linter",
            help="Naming and usage conventions for Python code, with safe automatic fixes.",
            add_completion=False,
        )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
        ) -> None:
            CLIAppFactory.configure_logging(verbose)

        def collect_files(paths: Optional[list[Path]]) -> list[str]:
            files: list[str] = []
            for target in CLIAppFactory.resolve_target_paths(paths):
                files.extend(deps.filesystem.glob_python_files(target))
            return files

        def check_format(output_format: str) -> None:
            if output_format not in OUTPUT_FORMATS:
                typer.echo(f"Unknown format '{output_format}' (expected text or json)", err=True)
                raise typer.Exit(2)

        def exit_code(reports: list[FileReport], configuration_errors: tuple[str, ...]) -> int:
            failed = configuration_errors or any(r.findings or r.errors for r in reports)
            return 1 if failed else 0

        @app.command()
        def check(
            paths: Optional[list[Path]] = _PATHS_ARGUMENT,
            output_format: str = _FORMAT_OPTION,
        ) -> None:
            """Report convention violations without changing any file."""
            check_format(output_format)
            analyzer = AnalyzeFileUseCase(deps.parser, deps.config_loader, deps.registry)
            reports = [analyzer.execute(path) for path in collect_files(paths)]
            CLIAppFactory.make_reporter(output_format, deps).report(reports, analyzer.configuration_errors)
            raise typer.Exit(exit_code(reports, analyzer.configuration_errors))

        @app.command()
        def fix(
            paths: Optional[list[Path]] = _PATHS_ARGUMENT,
            output_format: str = _FORMAT_OPTION,
            diff: bool = typer.Option(False, "--diff", help="Print a unified diff instead of writing files"),
        ) -> None:
            """Apply the non-overlapping fixes, then report what is left."""
            check_format(output_format)
            analyzer = AnalyzeFileUseCase(deps.parser, deps.config_loader, deps.registry)
            use_case = ApplyFixesUseCase(analyzer, deps.fixer_gateway)
            reports: list[FileReport] = []
            for path in collect_files(paths):
                original = None
                if diff:
                    try:
                        original = deps.parser.read_source(path)
                    except SourceParseError:
                        original = None
                report = use_case.execute(path, source=original, write=not diff)
                if diff and original is not None and report.fixed_source is not None:
                    typer.echo(
                        "".join(
                            difflib.unified_diff(
                                original.splitlines(keepends=True),
                                report.fixed_source.splitlines(keepends=True),
                                fromfile=f"a/{path}",
                                tofile=f"b/{path}",
                            )
                        ),
                        nl=False,
                    )
                reports.append(report)
            if not diff:
                CLIAppFactory.make_reporter(output_format, deps).report(reports, analyzer.configuration_errors)
            raise typer.Exit(exit_code(reports, analyzer.configuration_errors))

        @app.command(name="list-checks")
        def list_checks() -> None:
            """Show every available check and whether it is enabled."""
            for check_class in deps.registry.classes():
                state = "on " if deps.config_loader.is_enabled(check_class.check_id) else "off"
                typer.echo(f"[{state}] {check_class.check_id}: {check_class.description}")

        return app


def create_app(deps: CLIDependencies) -> typer.Typer:
    return CLIAppFactory.create_app(deps)
