from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional, Protocol

import astroid

if TYPE_CHECKING:
    from convention_linter.domain.entities import Edit


class TypeCheckerProtocol(Protocol):
    """External type-checker bound to one file. Any method may raise; callers must degrade."""

    def infer(self, node: astroid.nodes.NodeNG) -> Iterable[object]:
        """Possible runtime values of ``node``."""
        ...

    def infer_call_result(self, function: astroid.nodes.NodeNG) -> Iterable[object]:
        """Possible values returned by calling ``function``."""
        ...


class ParserProtocol(Protocol):
    """External parser producing astroid trees."""

    def read_source(self, path: str) -> str:
        """Read a file verbatim. Raises SourceParseError when it cannot be read."""
        ...

    def parse_source(self, source: str, path: str) -> astroid.nodes.Module:
        """Parse ``source``. Raises SourceParseError when the text is not valid Python."""
        ...

    def type_checker(self) -> Optional[TypeCheckerProtocol]:
        """Checker to bind to freshly parsed trees, or None when type information is off."""
        ...


class FixerGatewayProtocol(Protocol):
    """Applies composed edit lists to text and files."""

    def apply_edits(self, source: str, edits: "Iterable[Edit]") -> str:
        """Return the rewritten text. Raises FixRejectedError when the result does not parse."""
        ...

    def write_source(self, file_path: str, source: str) -> bool:
        """Validate and write ``source`` to ``file_path``. Returns True if the file changed."""
        ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python files in path (recursive if directory), sorted."""
        ...
