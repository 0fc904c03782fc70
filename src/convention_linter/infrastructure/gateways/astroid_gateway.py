import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

import astroid  # type: ignore[import-untyped]

from convention_linter.domain.errors import SourceParseError
from convention_linter.domain.protocols import ParserProtocol, TypeCheckerProtocol

logger = logging.getLogger(__name__)


class AstroidTypeChecker(TypeCheckerProtocol):
    """astroid inference exposed as the external type-checker of a file."""

    def infer(self, node: astroid.nodes.NodeNG) -> Iterable[object]:
        return list(node.infer())

    def infer_call_result(self, function: astroid.nodes.NodeNG) -> Iterable[object]:
        return list(function.infer_call_result(None))


class AstroidGateway(ParserProtocol):
    """Parses Python source into astroid trees and hands out the inference-backed checker."""

    def __init__(self, type_information: bool = True) -> None:
        self.type_information = type_information

    def parse_source(self, source: str, path: str) -> astroid.nodes.Module:
        """Parse ``source``; syntax errors become SourceParseError."""
        module_name = Path(path).stem if path else ""
        try:
            return astroid.parse(source, module_name=module_name, path=path or None)
        except astroid.AstroidSyntaxError as exc:
            error = getattr(exc, "error", None)
            line = getattr(error, "lineno", None)
            message = getattr(error, "msg", None) or str(exc)
            raise SourceParseError(path, message, line) from exc
        except (astroid.AstroidBuildingError, ValueError, RecursionError) as exc:
            raise SourceParseError(path, str(exc)) from exc

    def read_source(self, path: str) -> str:
        """Read a file verbatim (line endings preserved). Unreadable files are parse errors too."""
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceParseError(path, f"cannot read file: {exc}") from exc

    def type_checker(self) -> Optional[TypeCheckerProtocol]:
        if not self.type_information:
            logger.debug("Type information disabled; type queries will report unknown")
            return None
        return AstroidTypeChecker()
