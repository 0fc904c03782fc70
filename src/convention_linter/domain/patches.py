"""Patch Composer: merges the fixes of one file's findings into a single edit list."""

import logging
from collections.abc import Iterable, Sequence

from convention_linter.domain.entities import ComposeResult, Edit, Finding

logger = logging.getLogger(__name__)


def _conflicts(edit: Edit, accepted: Sequence[Edit]) -> bool:
    return any(edit.conflicts_with(other) for other in accepted)


def compose(findings: Iterable[Finding], path: str = "<unknown>") -> ComposeResult:
    """
    Select at most one fix per overlapping source region.

    Patches are considered in order of their first edit's start offset, ties
    broken by discovery order. A patch is accepted as a whole when none of its
    edits conflicts with an already accepted edit; otherwise its fix is
    withheld and the check id recorded. Diagnostics are never dropped here.
    """
    candidates = [(f.patch.start, index, f, f.patch) for index, f in enumerate(findings) if f.patch is not None]
    candidates.sort(key=lambda item: (item[0], item[1]))

    accepted: list[Edit] = []
    withheld: set[str] = set()
    withheld_findings: list[Finding] = []
    invalid: list[Finding] = []

    for _, _, finding, patch in candidates:
        if not patch.is_valid():
            invalid.append(finding)
            continue
        if any(_conflicts(edit, accepted) for edit in patch.edits):
            withheld.add(finding.check_id)
            withheld_findings.append(finding)
            logger.debug("Withholding fix of %s at %s in %s", finding.check_id, finding.location, path)
            continue
        accepted.extend(patch.edits)

    if invalid:
        checks = sorted({f.check_id for f in invalid})
        logger.warning(
            "Dropped %d invalid fix(es) from %s in %s (unsorted or overlapping edits)",
            len(invalid),
            ", ".join(checks),
            path,
        )

    accepted.sort(key=lambda edit: (edit.start, edit.end))
    return ComposeResult(
        edits=tuple(accepted),
        withheld=frozenset(withheld),
        withheld_findings=tuple(withheld_findings),
        invalid_findings=tuple(invalid),
    )


def apply_edits(source: str, edits: Sequence[Edit]) -> str:
    """Apply sorted, non-conflicting edits. Works back to front so offsets stay valid."""
    result = source
    for edit in sorted(edits, key=lambda e: (e.start, e.end), reverse=True):
        if edit.end > len(result):
            raise ValueError(f"Edit {edit.start}..{edit.end} is outside the source ({len(result)} chars)")
        result = result[: edit.start] + edit.text + result[edit.end :]
    return result
