"""Pytest configuration and shared fixtures.

Run pytest from this project's root; pythonpath in pyproject.toml puts
src/ on the import path.
"""

import textwrap
from collections.abc import Callable, Iterator
from typing import Any, Optional

import pytest

from convention_linter.domain.config import ConfigurationLoader
from convention_linter.domain.entities import FileReport
from convention_linter.infrastructure.di.container import ConventionLinterContainer
from convention_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from convention_linter.infrastructure.gateways.libcst_fixer_gateway import LibCSTFixerGateway
from convention_linter.use_cases.analyze_file import AnalyzeFileUseCase
from convention_linter.use_cases.apply_fixes import ApplyFixesUseCase

DEFAULT_PATH = "src/app/example.py"


def only(check_id: str, **options: Any) -> dict[str, object]:
    """Configuration that runs a single check with the given options."""
    config: dict[str, object] = {"enable": [check_id]}
    if options:
        config["checks"] = {check_id: options}
    return config


@pytest.fixture(autouse=True)
def reset_container() -> Iterator[None]:
    """Keep the global container from leaking between tests."""
    ConventionLinterContainer.reset()
    yield
    ConventionLinterContainer.reset()


@pytest.fixture
def analyze() -> Callable[..., FileReport]:
    """Analyse dedented source text with a real astroid parser."""

    def _analyze(
        source: str,
        config: Optional[dict[str, object]] = None,
        path: str = DEFAULT_PATH,
        type_information: bool = True,
    ) -> FileReport:
        use_case = AnalyzeFileUseCase(
            AstroidGateway(type_information=type_information),
            ConfigurationLoader(config or {}),
        )
        return use_case.execute(path, textwrap.dedent(source))

    return _analyze


@pytest.fixture
def check() -> Callable[..., FileReport]:
    """Run one check (by id, with options) over dedented source."""

    def _check(check_id: str, source: str, path: str = DEFAULT_PATH, **options: Any) -> FileReport:
        use_case = AnalyzeFileUseCase(AstroidGateway(), ConfigurationLoader(only(check_id, **options)))
        return use_case.execute(path, textwrap.dedent(source))

    return _check


@pytest.fixture
def fix() -> Callable[..., FileReport]:
    """Fix dedented source in memory and return the final report."""

    def _fix(source: str, config: Optional[dict[str, object]] = None, path: str = DEFAULT_PATH) -> FileReport:
        analyzer = AnalyzeFileUseCase(AstroidGateway(), ConfigurationLoader(config or {}))
        use_case = ApplyFixesUseCase(analyzer, LibCSTFixerGateway())
        return use_case.execute(path, source=textwrap.dedent(source), write=False)

    return _fix
