"""Line range selection: ``--lines 10-20`` and ``file.py#L10-L20``."""

from dataclasses import dataclass

_SEPARATORS = ("-", ":", ",")
_RANGE_HELP = "start-end, start:end, start,end, or start"


@dataclass(frozen=True)
class LineRange:
    start: int
    end: int

    def __contains__(self, line_number: object) -> bool:
        return isinstance(line_number, int) and self.start <= line_number <= self.end


@dataclass(frozen=True)
class FileSpec:
    path: str
    line_range: LineRange | None = None

    @property
    def is_stdin(self) -> bool:
        return self.path == "-"


def _strip_line_prefix(raw: str) -> str:
    return raw[1:] if raw[:1] in ("L", "l") else raw


def parse_line_range(raw: str) -> LineRange | None:
    raw = _strip_line_prefix(raw.strip())
    if not raw:
        return None
    for separator in _SEPARATORS:
        if separator in raw:
            start_raw, end_raw = raw.split(separator, 1)
            break
    else:
        if not raw.isdigit() or int(raw) == 0:
            return None
        return LineRange(int(raw), int(raw))

    start_raw = start_raw.strip()
    end_raw = _strip_line_prefix(end_raw.strip())
    if not start_raw.isdigit() or not end_raw.isdigit():
        return None
    start, end = int(start_raw), int(end_raw)
    if start == 0 or end == 0 or end < start:
        return None
    return LineRange(start, end)


def parse_line_range_arg(raw: str) -> LineRange:
    line_range = parse_line_range(raw)
    if line_range is None:
        raise ValueError(f"invalid line range '{raw}' (expected {_RANGE_HELP})")
    return line_range


def parse_file_spec(raw: str, default_range: LineRange | None = None) -> FileSpec:
    """Split an optional ``#L<range>`` suffix off a file argument."""
    for marker in ("#L", "#l"):
        path_part, found, range_part = raw.rpartition(marker)
        if not found:
            continue
        if not path_part:
            raise ValueError("missing file path before line range")
        if not range_part:
            raise ValueError("missing line range after #L")
        line_range = parse_line_range(range_part)
        if line_range is None:
            raise ValueError(f"invalid line range '#L{range_part}' (expected #L followed by {_RANGE_HELP})")
        return FileSpec(path_part, line_range)
    return FileSpec(raw, default_range)
