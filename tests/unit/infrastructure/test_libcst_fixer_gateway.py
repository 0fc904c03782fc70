"""Unit tests for LibCSTFixerGateway."""

import pytest

from convention_linter.domain.entities import Edit
from convention_linter.domain.errors import FixRejectedError
from convention_linter.infrastructure.gateways.libcst_fixer_gateway import LibCSTFixerGateway


class TestLibCSTFixerGateway:
    def test_apply_edits_rewrites_only_the_ranges(self) -> None:
        source = "def f(nima: bool):  # odd   spacing\n    return nima\n"
        result = LibCSTFixerGateway().apply_edits(source, [Edit(6, 10, "isNima"), Edit(47, 51, "isNima")])
        assert result == "def f(isNima: bool):  # odd   spacing\n    return isNima\n"

    def test_no_edits_returns_source_unchanged(self) -> None:
        assert LibCSTFixerGateway().apply_edits("x = (\n 1)\n", []) == "x = (\n 1)\n"

    def test_result_that_does_not_parse_is_rejected(self) -> None:
        with pytest.raises(FixRejectedError):
            LibCSTFixerGateway().apply_edits("x = 1\n", [Edit(0, 1, "1x")])

    def test_write_source_writes_changes(self, tmp_path) -> None:
        path = tmp_path / "mod.py"
        path.write_text("x = 1\n")
        gateway = LibCSTFixerGateway()
        assert gateway.write_source(str(path), "y = 1\n") is True
        assert path.read_text() == "y = 1\n"
        assert gateway.write_source(str(path), "y = 1\n") is False

    def test_write_source_refuses_invalid_code(self, tmp_path) -> None:
        path = tmp_path / "mod.py"
        path.write_text("x = 1\n")
        with pytest.raises(FixRejectedError):
            LibCSTFixerGateway().write_source(str(path), "def (:\n")
        assert path.read_text() == "x = 1\n"
