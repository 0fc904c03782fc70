import astroid
import pytest

from convention_linter.domain.errors import SourceParseError
from convention_linter.infrastructure.gateways.astroid_gateway import AstroidGateway, AstroidTypeChecker


def test_parse_source_returns_module():
    module = AstroidGateway().parse_source("x = 1\n", "src/pkg/mod.py")
    assert isinstance(module, astroid.nodes.Module)
    assert module.name == "mod"


def test_syntax_error_becomes_source_parse_error():
    with pytest.raises(SourceParseError) as excinfo:
        AstroidGateway().parse_source("def broken(:\n", "bad.py")
    assert excinfo.value.path == "bad.py"
    assert excinfo.value.line == 1


def test_read_source_preserves_line_endings(tmp_path):
    path = tmp_path / "crlf.py"
    path.write_bytes(b"x = 1\r\ny = 2\r\n")
    assert AstroidGateway().read_source(str(path)) == "x = 1\r\ny = 2\r\n"


def test_unreadable_file_is_a_parse_error(tmp_path):
    with pytest.raises(SourceParseError, match="cannot read"):
        AstroidGateway().read_source(str(tmp_path / "missing.py"))


def test_undecodable_file_is_a_parse_error(tmp_path):
    path = tmp_path / "latin.py"
    path.write_bytes(b"name = '\xe9'\n")
    with pytest.raises(SourceParseError):
        AstroidGateway().read_source(str(path))


def test_type_checker_follows_configuration():
    assert isinstance(AstroidGateway().type_checker(), AstroidTypeChecker)
    assert AstroidGateway(type_information=False).type_checker() is None


def test_type_checker_infers_values():
    checker = AstroidTypeChecker()
    node = astroid.extract_node("x = True\nx #@\n")
    (value,) = checker.infer(node)
    assert value.value is True
