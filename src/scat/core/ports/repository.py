from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from scat.models import LineChanges


class ChangeSource(Protocol):
    def __call__(self, file_path: Path, current_lines: Sequence[bytes]) -> LineChanges: ...
