"""Locate record stream files by consensus timestamp."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ln_common.errors import InvalidTimestampError, RecordFileNotFoundError

TIMESTAMP_RE = re.compile(r"^\d{10}[.-]\d{9}$")
SIGNATURE_SUFFIX = ".rcd_sig"
_RECORD_NAME_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})T(?P<h>\d{2})_(?P<m>\d{2})_(?P<s>\d{2})"
    r"(?:\.(?P<fraction>\d+))?Z$"
)


@dataclass(frozen=True)
class RecordFileMatch:
    record: Path
    signature: Path


def parse_debug_timestamp(timestamp: str) -> int:
    """Convert `seconds.nanos` or `seconds-nanos` to epoch milliseconds."""
    if not TIMESTAMP_RE.match(timestamp):
        raise InvalidTimestampError(timestamp)
    digits = timestamp.replace(".", "", 1).replace("-", "", 1)
    return int(digits[:13])


def record_file_timestamp(file_name: str, extension: str) -> int | None:
    """Epoch milliseconds embedded in a record file name, or None."""
    suffix = f".{extension}"
    if not file_name.endswith(suffix):
        return None
    match = _RECORD_NAME_RE.match(file_name[: -len(suffix)])
    if match is None:
        return None
    moment = datetime.strptime(
        f"{match['date']} {match['h']}:{match['m']}:{match['s']}", "%Y-%m-%d %H:%M:%S"
    ).replace(tzinfo=timezone.utc)
    millis = int((match["fraction"] or "0")[:3].ljust(3, "0"))
    return int(moment.timestamp()) * 1000 + millis


def find_record_file(directory: Path, timestamp: str, extension: str = "rcd") -> RecordFileMatch:
    """Return the first record file at or after *timestamp*.

    Files are scanned in name order, which is also time order.
    """
    target = parse_debug_timestamp(timestamp)
    if directory.is_dir():
        for entry in sorted(directory.iterdir()):
            file_timestamp = record_file_timestamp(entry.name, extension)
            if file_timestamp is None or file_timestamp < target:
                continue
            stem = entry.name[: -len(extension) - 1]
            return RecordFileMatch(record=entry, signature=directory / f"{stem}{SIGNATURE_SUFFIX}")
    raise RecordFileNotFoundError(timestamp, directory)
