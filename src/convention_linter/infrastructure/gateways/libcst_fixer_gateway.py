"""LibCST based Fixer Gateway."""

import logging
from collections.abc import Iterable

import libcst as cst

from convention_linter.domain.entities import Edit
from convention_linter.domain.errors import FixRejectedError
from convention_linter.domain.patches import apply_edits
from convention_linter.domain.protocols import FixerGatewayProtocol

logger = logging.getLogger(__name__)


class LibCSTFixerGateway(FixerGatewayProtocol):
    """Applies composed edit lists and refuses any result LibCST cannot parse."""

    def validate(self, source: str) -> cst.Module:
        """Parse ``source`` with LibCST. Raises FixRejectedError when it is not valid Python."""
        try:
            return cst.parse_module(source)
        except cst.ParserSyntaxError as exc:
            raise FixRejectedError(f"rewritten source does not parse: {exc.message} (line {exc.raw_line})") from exc

    def apply_edits(self, source: str, edits: Iterable[Edit]) -> str:
        """Return the rewritten text, byte-for-byte identical outside the edited ranges."""
        rewritten = apply_edits(source, list(edits))
        if rewritten != source:
            # LibCST round-trips exactly, so the parsed module's code is the text itself.
            rewritten = self.validate(rewritten).code
        return rewritten

    def write_source(self, file_path: str, source: str) -> bool:
        """
        Write rewritten source to a file.

        Args:
            file_path: Path to the file to modify
            source: Complete new file contents

        Returns:
            True if the file was modified, False otherwise
        """
        self.validate(source)
        with open(file_path, encoding="utf-8", newline="") as f:
            if f.read() == source:
                return False
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            f.write(source)
        logger.info("Rewrote %s", file_path)
        return True
