"""Domain entities shared by the analysis engine, the checks and the reporters."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import astroid


class TypeDescriptor(Enum):
    """Coarse, deliberately lossy classification of a node's static type."""

    BOOLEAN_TRUE = "boolean-literal-true"
    BOOLEAN_FALSE = "boolean-literal-false"
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    OTHER_PRIMITIVE = "other-primitive"
    CALLABLE = "callable"
    OBJECT = "object-with-properties"
    ARRAY = "array"
    UNKNOWN = "unknown"

    @property
    def is_boolean(self) -> bool:
        return self in (TypeDescriptor.BOOLEAN, TypeDescriptor.BOOLEAN_TRUE, TypeDescriptor.BOOLEAN_FALSE)


class Severity(Enum):
    """Severity attached to a finding."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class BindingKind(Enum):
    """What declared a name."""

    PARAMETER = "parameter"
    VARIABLE = "variable"
    FUNCTION = "function"
    CLASS = "class"
    IMPORT = "import"


@dataclass(frozen=True, order=True)
class Span:
    """Half-open character range [start, end) in the source text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span: {self.start}..{self.end}")


@dataclass(frozen=True)
class Location:
    """Human facing position: 1-based lines, 0-based columns."""

    line: int
    column: int
    end_line: int
    end_column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Edit:
    """Replace the text in [start, end) with ``text``. Zero width means insertion."""

    start: int
    end: int
    text: str

    @classmethod
    def replace(cls, span: Span, text: str) -> "Edit":
        return cls(start=span.start, end=span.end, text=text)

    @classmethod
    def insert(cls, offset: int, text: str) -> "Edit":
        return cls(start=offset, end=offset, text=text)

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end

    def conflicts_with(self, other: "Edit") -> bool:
        """
        True when applying both edits would be ambiguous.

        Ranges that intersect conflict, two edits starting at the same offset
        conflict, and an insertion strictly inside another edit conflicts.
        Touching ranges such as [0, 3) and [3, 5) do not.
        """
        if self.start == other.start:
            return True
        if self.is_insertion:
            return other.start < self.start < other.end
        if other.is_insertion:
            return self.start < other.start < self.end
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class Patch:
    """An ordered list of edits proposed by one finding."""

    edits: tuple[Edit, ...]

    @classmethod
    def of(cls, *edits: Edit) -> "Patch":
        return cls(edits=tuple(edits))

    @property
    def start(self) -> int:
        return self.edits[0].start if self.edits else 0

    def is_valid(self) -> bool:
        """Edits must be sorted by start offset and pairwise non-conflicting."""
        if not self.edits:
            return False
        for previous, current in zip(self.edits, self.edits[1:]):
            if current.start < previous.start or current.conflicts_with(previous):
                return False
        return True


@dataclass(frozen=True)
class Finding:
    """One reported convention violation, optionally carrying a proposed fix."""

    check_id: str
    message_id: str
    node: astroid.nodes.NodeNG
    span: Span
    location: Location
    data: dict[str, str] = field(default_factory=dict)
    patch: Optional[Patch] = None
    severity: Severity = Severity.WARNING

    @property
    def fixable(self) -> bool:
        return self.patch is not None

    def sort_key(self) -> tuple[int, int, str, str]:
        return (self.span.start, self.span.end, self.check_id, self.message_id)


@dataclass(frozen=True)
class ComposeResult:
    """Outcome of merging the patches of one file's findings."""

    edits: tuple[Edit, ...] = ()
    withheld: frozenset[str] = frozenset()
    withheld_findings: tuple[Finding, ...] = ()
    invalid_findings: tuple[Finding, ...] = ()

    @property
    def has_edits(self) -> bool:
        return bool(self.edits)


@dataclass(frozen=True)
class FileReport:
    """Everything one analysis pass produced for a file."""

    path: str
    findings: tuple[Finding, ...] = ()
    compose: ComposeResult = field(default_factory=ComposeResult)
    errors: tuple[str, ...] = ()
    fixed_source: Optional[str] = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self, render: Any = None) -> dict[str, Any]:
        """Convert to a JSON serializable mapping. ``render`` turns a finding into its message."""
        return {
            "path": self.path,
            "errors": list(self.errors),
            "withheld_fixes": sorted(self.compose.withheld),
            "findings": [
                {
                    "check": f.check_id,
                    "message_id": f.message_id,
                    "message": render(f) if render else f.message_id,
                    "severity": f.severity.value,
                    "line": f.location.line,
                    "column": f.location.column,
                    "end_line": f.location.end_line,
                    "end_column": f.location.end_column,
                    "data": dict(f.data),
                    "fixable": f.fixable,
                }
                for f in self.findings
            ],
        }
