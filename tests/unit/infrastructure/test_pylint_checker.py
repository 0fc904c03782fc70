"""Unit tests for the pylint plugin bridge."""

from unittest.mock import MagicMock

import astroid
from pylint.lint import PyLinter
from pylint.testutils import UnittestLinter

from convention_linter.domain.checks.registry import ALL_CHECKS
from convention_linter.domain.config import ConfigurationLoader
from convention_linter.domain.messages import MessageCatalog
from convention_linter.infrastructure.checker import (
    CHECK_MESSAGE_IDS,
    CONFIG_SYMBOL,
    ConventionChecker,
    register,
)
from convention_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from convention_linter.use_cases.analyze_file import AnalyzeFileUseCase


def make_checker(config):
    linter = UnittestLinter()
    analyzer = AnalyzeFileUseCase(AstroidGateway(), ConfigurationLoader(config))
    checker = ConventionChecker(linter, analyzer=analyzer, messages=MessageCatalog(ALL_CHECKS))
    return linter, checker


class TestConventionChecker:
    def test_findings_become_pylint_messages(self) -> None:
        linter, checker = make_checker({"enable": ["restrict-console-methods"]})
        checker.visit_module(astroid.parse("x = 1\nprint(x)\n"))

        (message,) = linter.release_messages()
        assert message.msg_id == "restrict-console-methods"
        assert message.line == 2
        assert message.col_offset == 0
        assert message.args == ("Unexpected console output via 'print', use logging instead",)

    def test_parameter_finding_is_anchored_at_the_name(self) -> None:
        linter, checker = make_checker(
            {"enable": ["boolean-naming-convention"], "checks": {"boolean-naming-convention": {"allowed_prefixes": ["is", "has"]}}}
        )
        checker.visit_module(astroid.parse("def f(nima: bool): pass\n"))

        (message,) = linter.release_messages()
        assert (message.line, message.col_offset, message.end_col_offset) == (1, 6, 10)
        assert "isNima" in message.args[0]

    def test_configuration_errors_are_reported_once(self) -> None:
        linter, checker = make_checker({"checks": {"restrict-imports": {"rules": "os"}}})
        checker.visit_module(astroid.parse("x = 1\n"))
        checker.visit_module(astroid.parse("y = 2\n"))

        messages = [m for m in linter.release_messages() if m.msg_id == CONFIG_SYMBOL]
        assert len(messages) == 1
        assert "restrict-imports" in messages[0].args[0]

    def test_message_table_covers_every_check(self) -> None:
        _, checker = make_checker({})
        symbols = {definition[1] for definition in checker.msgs.values()}
        assert set(CHECK_MESSAGE_IDS) <= symbols


def test_register_adds_the_checker():
    linter = MagicMock()
    register(linter)
    (checker,) = linter.register_checker.call_args[0]
    assert isinstance(checker, ConventionChecker)


def test_message_ids_are_registered_with_pylint():
    linter = PyLinter()
    register(linter)
    (definition,) = linter.msgs_store.get_message_definitions("W9504")
    assert definition.symbol == "restrict-console-methods"
