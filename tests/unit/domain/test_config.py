"""Unit tests for option schemas and the run configuration."""

import pytest

from convention_linter.domain.config import ConfigurationLoader, OptionSpec, validate_options
from convention_linter.domain.errors import ConfigurationError

SCHEMA = {
    "allowed_parameters": OptionSpec("number", 2),
    "ignore": OptionSpec("array", ["self"], items="string"),
    "strict": OptionSpec("boolean", False),
    "rules": OptionSpec(
        "array",
        [],
        items="object",
        fields={"folders": OptionSpec("array", [], items="string"), "name": OptionSpec("string", "")},
    ),
}


class TestValidateOptions:
    def test_defaults_are_filled(self) -> None:
        assert validate_options("demo", SCHEMA, None) == {
            "allowed_parameters": 2,
            "ignore": ["self"],
            "strict": False,
            "rules": [],
        }

    def test_defaults_are_copies(self) -> None:
        first = validate_options("demo", SCHEMA, {})
        first["ignore"].append("cls")
        assert validate_options("demo", SCHEMA, {})["ignore"] == ["self"]

    def test_unknown_option_names_the_check(self) -> None:
        with pytest.raises(ConfigurationError) as excinfo:
            validate_options("demo", SCHEMA, {"allowed": 3})
        assert excinfo.value.check_id == "demo"
        assert "allowed" in str(excinfo.value)

    def test_type_mismatch(self) -> None:
        with pytest.raises(ConfigurationError, match="allowed_parameters"):
            validate_options("demo", SCHEMA, {"allowed_parameters": "three"})

    def test_boolean_is_not_a_number(self) -> None:
        with pytest.raises(ConfigurationError):
            validate_options("demo", SCHEMA, {"allowed_parameters": True})

    def test_array_items_are_checked(self) -> None:
        with pytest.raises(ConfigurationError, match=r"ignore\[1\]"):
            validate_options("demo", SCHEMA, {"ignore": ["self", 3]})

    def test_object_fields_get_defaults(self) -> None:
        options = validate_options("demo", SCHEMA, {"rules": [{"folders": ["**/domain"]}]})
        assert options["rules"] == [{"folders": ["**/domain"], "name": ""}]

    def test_unknown_object_field(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown field"):
            validate_options("demo", SCHEMA, {"rules": [{"folder": ["x"]}]})

    def test_unknown_kind_is_a_programming_error(self) -> None:
        with pytest.raises(ValueError):
            OptionSpec("integer")


class TestConfigurationLoader:
    def test_everything_enabled_by_default(self) -> None:
        assert ConfigurationLoader().is_enabled("restrict-imports")

    def test_enable_list_is_exclusive(self) -> None:
        loader = ConfigurationLoader({"enable": ["no-handler-suffix"]})
        assert loader.is_enabled("no-handler-suffix")
        assert not loader.is_enabled("restrict-imports")

    def test_disable_wins_over_enable(self) -> None:
        loader = ConfigurationLoader({"enable": ["restrict-imports"], "disable": ["restrict-imports"]})
        assert not loader.is_enabled("restrict-imports")

    def test_options_for_returns_a_copy(self) -> None:
        raw = {"checks": {"restrict-imports": {"rules": [{"disable_imports": ["os"]}]}}}
        loader = ConfigurationLoader(raw)
        options = loader.options_for("restrict-imports")
        options["rules"].clear()
        raw["checks"]["restrict-imports"]["rules"].clear()
        assert loader.options_for("restrict-imports") == {"rules": [{"disable_imports": ["os"]}]}

    def test_non_table_options_are_a_configuration_error(self) -> None:
        loader = ConfigurationLoader({"checks": {"restrict-imports": "strict"}})
        with pytest.raises(ConfigurationError):
            loader.options_for("restrict-imports")

    def test_type_information_defaults_on(self) -> None:
        assert ConfigurationLoader().type_information is True
        assert ConfigurationLoader({"type_information": False}).type_information is False
