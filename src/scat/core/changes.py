"""Per-line change classification against the last committed revision."""

from collections.abc import Sequence
from difflib import SequenceMatcher

from scat.models import ChangeTag, DeletionMarker, LineChanges


def classify_changes(committed: Sequence[bytes] | None, current: Sequence[bytes]) -> LineChanges:
    """Align *committed* and *current* line by line and tag every current line.

    Lines are opaque tokens compared for byte equality. Paired lines of a
    replaced run are MODIFIED, surplus new lines are ADDED and surplus old
    lines become a DeletionMarker after the last new line of the run.
    """
    if committed is None:
        return LineChanges.untracked(len(current))

    tags = [ChangeTag.UNCHANGED] * len(current)
    deletions: list[DeletionMarker] = []
    matcher = SequenceMatcher(None, list(committed), list(current), autojunk=False)

    for opcode, i1, i2, j1, j2 in matcher.get_opcodes():
        if opcode == "equal":
            continue
        old_len = i2 - i1
        new_len = j2 - j1
        paired = min(old_len, new_len) if opcode == "replace" else 0
        for offset in range(new_len):
            tags[j1 + offset] = ChangeTag.MODIFIED if offset < paired else ChangeTag.ADDED
        if old_len > new_len:
            # j2 is exclusive and 0-based, so it is the 1-based number of the line before the gap
            deletions.append(DeletionMarker(after_line=j2, count=old_len - new_len))

    return LineChanges(tags=tuple(tags), deletions=tuple(deletions))
