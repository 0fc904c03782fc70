"""Catalog of built-in checks and per-run activation."""

import logging
from collections.abc import Iterable, Mapping
from typing import NamedTuple

from convention_linter.domain.checks import ConventionCheck
from convention_linter.domain.checks.boolean_naming import BooleanNamingCheck
from convention_linter.domain.checks.console_methods import ConsoleMethodsCheck
from convention_linter.domain.checks.function_usage import FunctionUsageCheck
from convention_linter.domain.checks.handler_suffix import HandlerSuffixCheck
from convention_linter.domain.checks.params_naming import ParamsNamingCheck
from convention_linter.domain.checks.restrict_imports import RestrictImportsCheck
from convention_linter.domain.config import ConfigurationLoader
from convention_linter.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

ALL_CHECKS: tuple[type[ConventionCheck], ...] = (
    BooleanNamingCheck,
    ParamsNamingCheck,
    HandlerSuffixCheck,
    ConsoleMethodsCheck,
    RestrictImportsCheck,
    FunctionUsageCheck,
)


class ActiveCheck(NamedTuple):
    """A check class together with its validated options."""

    check: type[ConventionCheck]
    options: Mapping[str, object]


class Activation(NamedTuple):
    checks: tuple[ActiveCheck, ...]
    errors: tuple[str, ...]


class CheckRegistry:
    """Looks up checks by id and activates them against a configuration."""

    def __init__(self, checks: Iterable[type[ConventionCheck]] = ALL_CHECKS) -> None:
        self._checks: dict[str, type[ConventionCheck]] = {}
        for check in checks:
            if check.check_id in self._checks:
                raise ValueError(f"Duplicate check id: {check.check_id}")
            self._checks[check.check_id] = check

    def __contains__(self, check_id: object) -> bool:
        return check_id in self._checks

    def get(self, check_id: str) -> type[ConventionCheck]:
        return self._checks[check_id]

    def ids(self) -> list[str]:
        return list(self._checks)

    def classes(self) -> list[type[ConventionCheck]]:
        return list(self._checks.values())

    def activate(self, config: ConfigurationLoader) -> Activation:
        """
        Validate the options of every enabled check.

        A check whose options are invalid is left out and its error is
        returned; the other checks are unaffected.
        """
        for check_id in sorted((config.enabled | config.disabled) - set(self._checks)):
            logger.warning("Unknown check id in configuration: %s", check_id)

        active: list[ActiveCheck] = []
        errors: list[str] = []
        for check_id, check in self._checks.items():
            if not config.is_enabled(check_id):
                logger.debug("Check %s disabled by configuration", check_id)
                continue
            try:
                options = check.validate(config.options_for(check_id))
            except ConfigurationError as exc:
                logger.error("Disabling %s: %s", check_id, exc.reason)
                errors.append(f"Invalid configuration for {check_id}: {exc.reason}")
                continue
            active.append(ActiveCheck(check, options))
        return Activation(tuple(active), tuple(errors))
