"""Small helpers for files, strings, timing and formatting of results."""

from __future__ import annotations

import os
import time
from collections.abc import Callable, Iterable, Iterator, Sequence
from datetime import datetime, timedelta
from typing import IO, Any, TypeVar

T = TypeVar("T")

LOG_LEVELS = ("0-trace", "1-debug", "2-info", "3-warn", "4-err", "5-critical", "6-off")


def get_current_time() -> datetime:
    """Return the current timestamp."""
    return datetime.now()


def get_duration(t1: datetime, t2: datetime) -> float:
    """Return seconds from t1 to t2, truncated to whole milliseconds."""
    millis = int((t2 - t1) / timedelta(milliseconds=1))
    return millis / 1000.0


def format_time(timestamp: datetime) -> str:
    """Return a human readable line describing a timestamp."""
    return "Time " + time.ctime(timestamp.timestamp()) + "\n"


def file_exists(filename: str | os.PathLike) -> bool:
    """Return True if a file or directory exists at the path."""
    return os.path.exists(filename)


def folder_exist(folder_name: str) -> bool:
    """Return True if the folder exists; an empty name means the current one."""
    if not folder_name:
        return True
    return os.path.isdir(folder_name)


def get_file_directory(fn: str) -> str:
    """Return the part of a path before the last '/', or an empty string."""
    found = fn.rfind("/")
    return fn[:found] if found >= 0 else ""


def string2bool(text: str) -> bool:
    """Return True for "true", "t" or "1"."""
    return text in ("true", "t", "1")


def bool2string(value: bool) -> str:
    """Return "true" for a truthy value and "false" otherwise."""
    if value:
        return "true"
    return "false"


def split_string(text: str) -> list[str]:
    """Split a comma separated string; a trailing empty field is dropped."""
    parts = text.split(",")
    if parts[-1] == "":
        parts.pop()
    return parts


def check_file_extension(filename: str, extension_list_str: str) -> bool:
    """Return True if the file extension is in a comma separated list."""
    extension = filename[filename.rfind(".") + 1:]
    return extension in split_string(extension_list_str)


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


def vec2string(values: Iterable[Any]) -> str:
    """Join values with commas."""
    return ",".join(_format_value(v) for v in values)


def string2vec(text: str, convert: Callable[[str], T] = int) -> list[T]:
    """Parse comma separated values, stopping at the first that fails."""
    result: list[T] = []
    if not text.strip():
        return result
    for part in text.split(","):
        try:
            result.append(convert(part.strip()))
        except ValueError:
            break
    return result


def iter_safe_lines(stream: IO[str], delim: str = "\n") -> Iterator[str]:
    """Yield lines ending in \\n, \\r\\n, \\r or the delimiter character."""
    buf: list[str] = []
    skip_lf = False
    for chunk in iter(lambda: stream.read(8192), ""):
        for ch in chunk:
            if skip_lf:
                skip_lf = False
                if ch == "\n":
                    continue
            if ch == "\n" or ch == delim:
                yield "".join(buf)
                buf = []
            elif ch == "\r":
                yield "".join(buf)
                buf = []
                skip_lf = True
            else:
                buf.append(ch)
    if buf:
        yield "".join(buf)


def format_candidates(tr_cs: Sequence[Sequence[Any]]) -> str:
    """Render the candidates of a trajectory as a table."""
    lines = [
        "\nCandidate "
        f"{'step':>4};{'index':>6};{'offset':>8};{'distance':>8};{'edge_id':>8}\n"
    ]
    for step, candidates in enumerate(tr_cs):
        for c in candidates:
            lines.append(
                "Candidate "
                f"{step:>4};{c.index:>6};{c.offset:>8.6f};"
                f"{c.dist:>8.6f};{c.edge.id:>8}\n"
            )
    return "".join(lines)


def format_opt_path(opath: Iterable[Any]) -> str:
    """Return the edge ids of an optimal candidate path, comma separated."""
    return ",".join(str(c.edge.id) for c in opath)


def point_to_wkt(point: Any) -> str:
    """Return the WKT of a point with 12 significant digits."""
    return f"POINT({point.x:.12g} {point.y:.12g})"