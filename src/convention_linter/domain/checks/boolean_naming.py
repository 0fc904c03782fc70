"""boolean-naming-convention: booleans must read as predicates (``is_ready``, ``hasItems``)."""

from collections.abc import Mapping
from typing import Optional

import astroid

from convention_linter.domain.checks import BOOLEAN_PREFIXES, AnalysisContext, ConventionCheck, camel_join, snake_join
from convention_linter.domain.checks.handler_suffix import has_handler_suffix, handler_to_handle
from convention_linter.domain.config import OptionSpec
from convention_linter.domain.entities import Finding, TypeDescriptor
from convention_linter.domain.errors import ConfigurationError
from convention_linter.domain.matching import compile_ignore_pattern, has_prefix
from convention_linter.domain.types import iter_parameters

SUGGESTION_STYLES = {"camel": camel_join, "snake": snake_join}

_PROPERTY_DECORATORS = {"property", "cached_property", "functools.cached_property"}


def _decorator_names(node: astroid.nodes.FunctionDef) -> set[str]:
    names = set()
    for decorator in node.decorators.nodes if node.decorators else []:
        if isinstance(decorator, astroid.nodes.Name):
            names.add(decorator.name)
        elif isinstance(decorator, astroid.nodes.Attribute):
            names.add(decorator.attrname)
            names.add(decorator.as_string())
    return names


class BooleanNamingCheck(ConventionCheck):
    """
    Functions returning booleans, boolean parameters, properties and
    variables must start with one of the allowed prefixes.

    Names are compared case-insensitively after leading underscores, so
    ``_is_ready`` passes. Local bindings get a rename fix; attributes and
    dict keys are reported without one.
    """

    check_id = "boolean-naming-convention"
    description = "Boolean names should start with a predicate prefix such as is, has or can."
    messages = {
        "function-prefix": "Function '{{name}}' returns a boolean, use a prefix like '{{suggestion}}'",
        "parameter-prefix": "Boolean parameter '{{name}}' should use a prefix like '{{suggestion}}'",
        "property-prefix": "Boolean property '{{name}}' should use a prefix like '{{suggestion}}'",
        "variable-prefix": "Boolean variable '{{name}}' should use a prefix like '{{suggestion}}'",
    }
    options_schema = {
        "allowed_prefixes": OptionSpec("array", BOOLEAN_PREFIXES, items="string"),
        "check_functions": OptionSpec("boolean", True),
        "check_parameters": OptionSpec("boolean", True),
        "check_properties": OptionSpec("boolean", True),
        "check_variables": OptionSpec("boolean", True),
        "ignore": OptionSpec("string", "filter"),
        "suggestion_style": OptionSpec("string", "camel"),
    }

    @classmethod
    def validate(cls, raw: Optional[Mapping[str, object]]) -> dict[str, object]:
        options = super().validate(raw)
        if options["suggestion_style"] not in SUGGESTION_STYLES:
            raise ConfigurationError(
                cls.check_id,
                f"suggestion_style must be one of {', '.join(sorted(SUGGESTION_STYLES))}",
            )
        if not options["allowed_prefixes"]:
            raise ConfigurationError(cls.check_id, "allowed_prefixes must not be empty")
        return options

    def __init__(self, context: AnalysisContext, options: Optional[Mapping[str, object]] = None) -> None:
        super().__init__(context, options)
        self.prefixes: list[str] = list(self.options["allowed_prefixes"])  # type: ignore[call-overload]
        self.ignore = compile_ignore_pattern(str(self.options["ignore"]))
        self._join = SUGGESTION_STYLES[str(self.options["suggestion_style"])]
        self._suggestion_prefix = "is" if "is" in self.prefixes else self.prefixes[0]

    # -- naming policy ----------------------------------------------------

    def _is_exempt(self, name: str) -> bool:
        if not name or name == "_" or (name.startswith("__") and name.endswith("__")):
            return True
        if self.ignore is not None and self.ignore.search(name):
            return True
        return has_prefix(name.lstrip("_"), self.prefixes)

    def suggest(self, name: str) -> str:
        """Final name, already in the form no-handler-suffix accepts."""
        if has_handler_suffix(name):
            name = handler_to_handle(name)
        return self._join(self._suggestion_prefix, name)

    def _report(
        self,
        node: astroid.nodes.NodeNG,
        name: str,
        message_id: str,
        binding_node: Optional[astroid.nodes.NodeNG] = None,
    ) -> list[Finding]:
        if self._is_exempt(name) or not self.report_once((name, node.lineno)):
            return []
        suggestion = self.suggest(name)
        patch = None
        if binding_node is not None:
            binding = self.context.resolver.binding_for(binding_node)
            if binding is not None:
                if not self.report_once(("binding", id(binding))):
                    return []
                suggestion = self.unique_name(suggestion, binding_node, binding)
                patch = self.rename_patch(binding, suggestion)
        return [self.finding(node, message_id, {"name": name, "suggestion": suggestion}, patch=patch)]

    # -- visitors ---------------------------------------------------------

    def visit_functiondef(self, node: astroid.nodes.FunctionDef) -> list[Finding]:
        findings: list[Finding] = []
        is_property = bool(_decorator_names(node) & _PROPERTY_DECORATORS)
        wanted = self.options["check_properties"] if is_property else self.options["check_functions"]
        if wanted and self.context.types.return_type(node).is_boolean:
            message_id = "property-prefix" if is_property else "function-prefix"
            findings.extend(self._report(node, node.name, message_id, binding_node=node))
        if self.options["check_parameters"]:
            findings.extend(self._check_parameters(node))
        return findings

    visit_asyncfunctiondef = visit_functiondef

    def visit_lambda(self, node: astroid.nodes.Lambda) -> list[Finding]:
        if not self.options["check_parameters"]:
            return []
        return self._check_parameters(node)

    def _check_parameters(self, node: astroid.nodes.Lambda) -> list[Finding]:
        findings: list[Finding] = []
        parameters = iter_parameters(node.args)
        if isinstance(node, astroid.nodes.FunctionDef) and node.type in ("method", "classmethod") and parameters:
            parameters = parameters[1:]
        for arg, _annotation in parameters:
            if self.context.types.parameter_type(node, arg.name).is_boolean:
                findings.extend(self._report(arg, arg.name, "parameter-prefix", binding_node=arg))
        return findings

    def visit_assignname(self, node: astroid.nodes.AssignName) -> list[Finding]:
        parent = node.parent
        if isinstance(parent, astroid.nodes.Arguments):
            return []
        descriptor = self._assigned_type(node)
        if not descriptor.is_boolean:
            return []
        if isinstance(node.scope(), astroid.nodes.ClassDef):
            if not self.options["check_properties"]:
                return []
            return self._report(node, node.name, "property-prefix")
        if not self.options["check_variables"]:
            return []
        return self._report(node, node.name, "variable-prefix", binding_node=node)

    def _assigned_type(self, node: astroid.nodes.AssignName) -> TypeDescriptor:
        parent = node.parent
        types = self.context.types
        if isinstance(parent, astroid.nodes.AnnAssign):
            return types.annotation_type(parent.annotation)
        if isinstance(parent, astroid.nodes.Assign) and node in parent.targets:
            return types.type_of(parent.value)
        if isinstance(parent, astroid.nodes.NamedExpr):
            return types.type_of(parent.value)
        return TypeDescriptor.UNKNOWN

    def visit_assignattr(self, node: astroid.nodes.AssignAttr) -> list[Finding]:
        """``self.visible = True`` declares a boolean instance attribute."""
        if not self.options["check_properties"]:
            return []
        parent = node.parent
        if not (isinstance(node.expr, astroid.nodes.Name) and node.expr.name in ("self", "cls")):
            return []
        if isinstance(parent, astroid.nodes.AnnAssign):
            descriptor = self.context.types.annotation_type(parent.annotation)
        elif isinstance(parent, astroid.nodes.Assign) and node in parent.targets:
            descriptor = self.context.types.type_of(parent.value)
        else:
            return []
        if not descriptor.is_boolean:
            return []
        return self._report(node, node.attrname, "property-prefix")

    def visit_dict(self, node: astroid.nodes.Dict) -> list[Finding]:
        if not self.options["check_properties"]:
            return []
        findings: list[Finding] = []
        for key, value in node.items:
            if not (isinstance(key, astroid.nodes.Const) and isinstance(key.value, str)):
                continue
            if not key.value.isidentifier():
                continue
            if self.context.types.type_of(value).is_boolean:
                findings.extend(self._report(key, key.value, "property-prefix"))
        return findings
