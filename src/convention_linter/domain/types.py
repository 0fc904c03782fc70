"""Type Query Adapter: coarse type descriptors on top of a fallible external checker."""

import logging
from collections.abc import Callable, Iterable
from typing import Optional

import astroid

from convention_linter.domain.entities import TypeDescriptor
from convention_linter.domain.protocols import TypeCheckerProtocol

logger = logging.getLogger(__name__)

_QNAME_TYPES: dict[str, TypeDescriptor] = {
    "builtins.bool": TypeDescriptor.BOOLEAN,
    "builtins.str": TypeDescriptor.STRING,
    "builtins.int": TypeDescriptor.NUMBER,
    "builtins.float": TypeDescriptor.NUMBER,
    "builtins.complex": TypeDescriptor.NUMBER,
    "builtins.bytes": TypeDescriptor.OTHER_PRIMITIVE,
    "builtins.NoneType": TypeDescriptor.OTHER_PRIMITIVE,
    "builtins.list": TypeDescriptor.ARRAY,
    "builtins.tuple": TypeDescriptor.ARRAY,
    "builtins.set": TypeDescriptor.ARRAY,
    "builtins.frozenset": TypeDescriptor.ARRAY,
    "builtins.dict": TypeDescriptor.OBJECT,
    "builtins.function": TypeDescriptor.CALLABLE,
    "builtins.method": TypeDescriptor.CALLABLE,
}

_ANNOTATION_NAMES: dict[str, TypeDescriptor] = {
    "bool": TypeDescriptor.BOOLEAN,
    "str": TypeDescriptor.STRING,
    "int": TypeDescriptor.NUMBER,
    "float": TypeDescriptor.NUMBER,
    "complex": TypeDescriptor.NUMBER,
    "bytes": TypeDescriptor.OTHER_PRIMITIVE,
    "None": TypeDescriptor.OTHER_PRIMITIVE,
    "list": TypeDescriptor.ARRAY,
    "tuple": TypeDescriptor.ARRAY,
    "set": TypeDescriptor.ARRAY,
    "frozenset": TypeDescriptor.ARRAY,
    "dict": TypeDescriptor.OBJECT,
    "Callable": TypeDescriptor.CALLABLE,
}

_CALLABLE_VALUES = (
    astroid.nodes.Lambda,  # FunctionDef derives from Lambda
    astroid.nodes.ClassDef,
    astroid.bases.UnboundMethod,  # BoundMethod derives from UnboundMethod
)


def _annotation_name(annotation: astroid.nodes.NodeNG) -> Optional[str]:
    if isinstance(annotation, astroid.nodes.Name):
        return annotation.name
    if isinstance(annotation, astroid.nodes.Attribute):
        return annotation.attrname
    if isinstance(annotation, astroid.nodes.Const):
        if annotation.value is None:
            return "None"
        if isinstance(annotation.value, str):
            return annotation.value.strip()
    return None


def _literal_type(annotation: astroid.nodes.NodeNG) -> Optional[TypeDescriptor]:
    """``Literal[True]`` / ``Literal[False]`` / ``Literal[True, False]``."""
    if not isinstance(annotation, astroid.nodes.Subscript):
        return None
    if _annotation_name(annotation.value) != "Literal":
        return None
    values = annotation.slice.elts if isinstance(annotation.slice, astroid.nodes.Tuple) else [annotation.slice]
    if not values or not all(isinstance(v, astroid.nodes.Const) and isinstance(v.value, bool) for v in values):
        return None
    flags = {v.value for v in values}
    if flags == {True}:
        return TypeDescriptor.BOOLEAN_TRUE
    if flags == {False}:
        return TypeDescriptor.BOOLEAN_FALSE
    return TypeDescriptor.BOOLEAN


def is_bool_annotation(annotation: Optional[astroid.nodes.NodeNG]) -> bool:
    """Purely syntactic: ``bool``, ``builtins.bool``, ``"bool"`` or a boolean ``Literal``."""
    if annotation is None:
        return False
    if _annotation_name(annotation) == "bool":
        return True
    literal = _literal_type(annotation)
    return literal is not None and literal.is_boolean


def classify_value(value: object) -> TypeDescriptor:
    """Descriptor for one value produced by astroid inference."""
    if value is astroid.Uninferable:
        return TypeDescriptor.UNKNOWN
    if isinstance(value, astroid.nodes.Const):
        raw = value.value
        if raw is True:
            return TypeDescriptor.BOOLEAN_TRUE
        if raw is False:
            return TypeDescriptor.BOOLEAN_FALSE
        if isinstance(raw, str):
            return TypeDescriptor.STRING
        if isinstance(raw, (int, float, complex)):
            return TypeDescriptor.NUMBER
        return TypeDescriptor.OTHER_PRIMITIVE
    if isinstance(value, (astroid.nodes.List, astroid.nodes.Tuple, astroid.nodes.Set)):
        return TypeDescriptor.ARRAY
    if isinstance(value, (astroid.nodes.Dict, astroid.nodes.Module)):
        return TypeDescriptor.OBJECT
    if isinstance(value, _CALLABLE_VALUES):
        return TypeDescriptor.CALLABLE
    if isinstance(value, astroid.bases.Instance):
        return _QNAME_TYPES.get(value.pytype(), TypeDescriptor.OBJECT)
    return TypeDescriptor.UNKNOWN


def combine(descriptors: Iterable[TypeDescriptor]) -> TypeDescriptor:
    """Merge the descriptors of every inferred value; disagreement degrades to UNKNOWN."""
    found = set(descriptors)
    if not found or TypeDescriptor.UNKNOWN in found:
        return TypeDescriptor.UNKNOWN
    if len(found) == 1:
        return found.pop()
    if all(d.is_boolean for d in found):
        return TypeDescriptor.BOOLEAN
    return TypeDescriptor.UNKNOWN


class TypeQueryAdapter:
    """
    Answers coarse type questions for one file.

    Every query degrades to ``TypeDescriptor.UNKNOWN`` when no checker is
    bound, the node cannot be resolved, or the checker raises. Nothing
    propagates to the calling check and nothing is retried or cached across
    files.
    """

    def __init__(self, checker: Optional[TypeCheckerProtocol] = None) -> None:
        self.checker = checker

    @property
    def available(self) -> bool:
        return self.checker is not None

    def _query(self, what: str, node: object, query: Callable[[], TypeDescriptor]) -> TypeDescriptor:
        try:
            return query()
        except Exception as exc:  # checker failures are final for this query
            logger.debug("Type query %s failed for %r: %s", what, node, exc)
            return TypeDescriptor.UNKNOWN

    def _infer(self, node: astroid.nodes.NodeNG) -> TypeDescriptor:
        if self.checker is None:
            return TypeDescriptor.UNKNOWN
        return combine(classify_value(value) for value in self.checker.infer(node))

    def type_of(self, node: Optional[astroid.nodes.NodeNG]) -> TypeDescriptor:
        """Descriptor of an expression's value."""
        if node is None:
            return TypeDescriptor.UNKNOWN
        return self._query("type_of", node, lambda: self._infer(node))

    def annotation_type(self, annotation: Optional[astroid.nodes.NodeNG]) -> TypeDescriptor:
        """Descriptor of the type an annotation names. Builtin names need no checker."""
        if annotation is None:
            return TypeDescriptor.UNKNOWN
        return self._query("annotation_type", annotation, lambda: self._annotation(annotation))

    def _annotation(self, annotation: astroid.nodes.NodeNG) -> TypeDescriptor:
        literal = _literal_type(annotation)
        if literal is not None:
            return literal
        target = annotation.value if isinstance(annotation, astroid.nodes.Subscript) else annotation
        name = _annotation_name(target)
        if name in _ANNOTATION_NAMES:
            return _ANNOTATION_NAMES[name]
        if self.checker is None or isinstance(annotation, astroid.nodes.Const):
            return TypeDescriptor.UNKNOWN
        found = []
        for value in self.checker.infer(target):
            if isinstance(value, astroid.nodes.ClassDef):
                found.append(_QNAME_TYPES.get(value.qname(), TypeDescriptor.OBJECT))
            else:
                found.append(TypeDescriptor.UNKNOWN)
        return combine(found)

    def return_type(self, function: astroid.nodes.NodeNG) -> TypeDescriptor:
        """
        What calling ``function`` produces.

        A declared return annotation wins; otherwise the checker's call
        result inference is used. Lambdas are classified by their body.
        """
        if isinstance(function, astroid.nodes.FunctionDef):
            if function.returns is not None:
                return self.annotation_type(function.returns)
            if self.checker is None:
                return TypeDescriptor.UNKNOWN
            checker = self.checker
            return self._query(
                "return_type",
                function,
                lambda: combine(classify_value(v) for v in checker.infer_call_result(function)),
            )
        if isinstance(function, astroid.nodes.Lambda):
            return self.type_of(function.body)
        return TypeDescriptor.UNKNOWN

    def parameter_type(self, function: astroid.nodes.NodeNG, name: str) -> TypeDescriptor:
        """Declared annotation of a parameter, else the type of its default value."""
        return self._query("parameter_type", function, lambda: self._parameter(function, name))

    def _parameter(self, function: astroid.nodes.NodeNG, name: str) -> TypeDescriptor:
        args = function.args
        annotation = parameter_annotation(args, name)
        if annotation is not None:
            return self.annotation_type(annotation)
        default = parameter_default(args, name)
        if default is None or (isinstance(default, astroid.nodes.Const) and default.value is None):
            return TypeDescriptor.UNKNOWN
        return self.type_of(default)

    def member_type(self, class_node: astroid.nodes.ClassDef, name: str) -> TypeDescriptor:
        """Type of a class-level attribute (dataclass / TypedDict field or plain attribute)."""
        return self._query("member_type", class_node, lambda: self._member(class_node, name))

    def _member(self, class_node: astroid.nodes.ClassDef, name: str) -> TypeDescriptor:
        for statement in class_node.body:
            if isinstance(statement, astroid.nodes.AnnAssign):
                target = statement.target
                if isinstance(target, astroid.nodes.AssignName) and target.name == name:
                    return self.annotation_type(statement.annotation)
            elif isinstance(statement, astroid.nodes.Assign):
                for target in statement.targets:
                    if isinstance(target, astroid.nodes.AssignName) and target.name == name:
                        return self.type_of(statement.value)
        return TypeDescriptor.UNKNOWN

    def argument_types(self, call: astroid.nodes.Call) -> list[TypeDescriptor]:
        """Descriptor of each positional argument of a call, in order."""
        return [self.type_of(arg) for arg in call.args]


def _all_arguments(args: astroid.nodes.Arguments) -> list[tuple[astroid.nodes.AssignName, Optional[astroid.nodes.NodeNG]]]:
    posonly = list(args.posonlyargs or [])
    kwonly = list(args.kwonlyargs or [])
    names = posonly + list(args.args or []) + kwonly
    annotations = (
        list(args.posonlyargs_annotations or [None] * len(posonly))
        + list(args.annotations or [None] * len(args.args or []))
        + list(args.kwonlyargs_annotations or [None] * len(kwonly))
    )
    return list(zip(names, annotations))


def parameter_annotation(args: astroid.nodes.Arguments, name: str) -> Optional[astroid.nodes.NodeNG]:
    for arg, annotation in _all_arguments(args):
        if arg.name == name:
            return annotation
    if name == args.vararg:
        return args.varargannotation
    if name == args.kwarg:
        return args.kwargannotation
    return None


def parameter_default(args: astroid.nodes.Arguments, name: str) -> Optional[astroid.nodes.NodeNG]:
    try:
        return args.default_value(name)
    except astroid.NoDefault:
        return None


def iter_parameters(args: astroid.nodes.Arguments) -> list[tuple[astroid.nodes.AssignName, Optional[astroid.nodes.NodeNG]]]:
    """Named parameters with their annotations, in declaration order."""
    return _all_arguments(args)
