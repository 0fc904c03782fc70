"""Check option schemas and the run-wide configuration."""

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional

from convention_linter.domain.errors import ConfigurationError

OPTION_KINDS = frozenset({"string", "number", "boolean", "array", "object"})


@dataclass(frozen=True)
class OptionSpec:
    """
    Declared shape of one check option.

    ``items`` names the element kind of an ``array`` option; ``fields`` gives
    the schema of ``object`` elements (rule lists such as restrict-imports).
    """

    kind: str
    default: object = None
    items: Optional[str] = None
    fields: Mapping[str, "OptionSpec"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.kind not in OPTION_KINDS:
            raise ValueError(f"Unknown option kind: {self.kind}")
        if self.items is not None and self.items not in OPTION_KINDS:
            raise ValueError(f"Unknown item kind: {self.items}")


def _is_kind(value: object, kind: str) -> bool:
    if kind == "string":
        return isinstance(value, str)
    if kind == "boolean":
        return isinstance(value, bool)
    if kind == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if kind == "array":
        return isinstance(value, (list, tuple))
    return isinstance(value, Mapping)


def _check_value(check_id: str, path: str, value: object, option_spec: OptionSpec) -> object:
    if not _is_kind(value, option_spec.kind):
        raise ConfigurationError(check_id, f"option '{path}' must be a {option_spec.kind}, got {type(value).__name__}")
    if option_spec.kind == "array":
        checked = []
        for index, item in enumerate(value):  # type: ignore[arg-type]
            item_path = f"{path}[{index}]"
            if option_spec.items == "object":
                checked.append(_check_object(check_id, item_path, item, option_spec.fields))
            elif option_spec.items is not None:
                checked.append(_check_value(check_id, item_path, item, OptionSpec(option_spec.items)))
            else:
                checked.append(item)
        return checked
    if option_spec.kind == "object":
        return _check_object(check_id, path, value, option_spec.fields)
    return value


def _check_object(check_id: str, path: str, value: object, fields: Mapping[str, OptionSpec]) -> dict[str, object]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(check_id, f"option '{path}' must be an object, got {type(value).__name__}")
    unknown = sorted(set(value) - set(fields))
    if fields and unknown:
        raise ConfigurationError(check_id, f"option '{path}' has unknown field(s): {', '.join(unknown)}")
    result: dict[str, object] = {}
    for name, option_spec in fields.items():
        if name in value:
            result[name] = _check_value(check_id, f"{path}.{name}", value[name], option_spec)
        else:
            result[name] = copy.deepcopy(option_spec.default)
    return result


def validate_options(
    check_id: str,
    schema: Mapping[str, OptionSpec],
    raw: Optional[Mapping[str, object]],
) -> dict[str, object]:
    """
    Validate user options against a check's schema and fill in defaults.

    Raises ConfigurationError naming the check on the first unknown option
    or type mismatch.
    """
    raw = raw or {}
    unknown = sorted(set(raw) - set(schema))
    if unknown:
        raise ConfigurationError(check_id, f"unknown option(s): {', '.join(unknown)}")
    options: dict[str, object] = {}
    for name, option_spec in schema.items():
        if name in raw:
            options[name] = _check_value(check_id, name, raw[name], option_spec)
        else:
            options[name] = copy.deepcopy(option_spec.default)
    return options


class ConfigurationLoader:
    """
    Read-only view of the ``[tool.convention-linter]`` table for one run.

    Recognised keys: ``enable`` (only these checks run), ``disable``,
    ``type_information`` (bind astroid inference, default true) and
    ``checks.<check-id>`` option tables.
    """

    def __init__(self, config: Optional[Mapping[str, object]] = None) -> None:
        data = copy.deepcopy(dict(config or {}))
        self._config = MappingProxyType(data)

    @property
    def config(self) -> Mapping[str, object]:
        return self._config

    @property
    def enabled(self) -> frozenset[str]:
        return frozenset(self._string_list("enable"))

    @property
    def disabled(self) -> frozenset[str]:
        return frozenset(self._string_list("disable"))

    @property
    def type_information(self) -> bool:
        return bool(self._config.get("type_information", True))

    def _string_list(self, key: str) -> list[str]:
        value = self._config.get(key, [])
        if isinstance(value, str):
            return [value]
        if isinstance(value, Iterable):
            return [str(item) for item in value]
        return []

    def is_enabled(self, check_id: str) -> bool:
        if check_id in self.disabled:
            return False
        return not self.enabled or check_id in self.enabled

    def options_for(self, check_id: str) -> dict[str, object]:
        """Raw (unvalidated) option table of one check; a copy the caller may keep."""
        checks = self._config.get("checks", {})
        if not isinstance(checks, Mapping):
            return {}
        options = checks.get(check_id, {})
        if not isinstance(options, Mapping):
            raise ConfigurationError(check_id, f"options must be a table, got {type(options).__name__}")
        return copy.deepcopy(dict(options))
