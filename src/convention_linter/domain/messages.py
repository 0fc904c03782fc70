"""Message templates and their ``{{placeholder}}`` substitution."""

import re
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from convention_linter.domain.traversal import CHECK_CRASHED

if TYPE_CHECKING:
    from convention_linter.domain.checks import ConventionCheck
    from convention_linter.domain.entities import Finding

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_]\w*)\s*\}\}")

ENGINE_MESSAGES: dict[str, str] = {
    CHECK_CRASHED: "Check '{{check}}' crashed and was skipped for this node: {{error}}",
}


def render_message(template: str, data: Mapping[str, str]) -> str:
    """Substitute ``{{key}}`` placeholders. Unknown keys are left as written."""
    return _PLACEHOLDER.sub(lambda match: str(data.get(match.group(1), match.group(0))), template)


class MessageCatalog:
    """Message templates of a set of checks, keyed by (check id, message id)."""

    def __init__(self, checks: Iterable[type["ConventionCheck"]]) -> None:
        self._templates: dict[tuple[str, str], str] = {}
        for check in checks:
            for message_id, template in check.messages.items():
                self._templates[(check.check_id, message_id)] = template

    def template(self, check_id: str, message_id: str) -> str:
        if message_id in ENGINE_MESSAGES:
            return ENGINE_MESSAGES[message_id]
        return self._templates.get((check_id, message_id), message_id)

    def render(self, finding: "Finding") -> str:
        return render_message(self.template(finding.check_id, finding.message_id), finding.data)
