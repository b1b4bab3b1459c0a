"""Directory listing model and LIST output parser for webftp."""

import posixpath
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EntryKind(Enum):
    """Kind of a directory entry as reported by the server."""
    FILE = "file"
    DIRECTORY = "dir"
    LINK = "link"


_MONTHS = {
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
}

# Type character + 9 mode characters, optional ACL/xattr marker
_PERMISSIONS_PATTERN = re.compile(r"^[bcdlps-][rwxsStT-]{9}[@+.]?$")

# "<day> <HH:MM>" for recent files, "<day> <year>" for older ones
_DAY_PATTERN = re.compile(r"^\d{1,2}$")
_TIME_OR_YEAR_PATTERN = re.compile(r"^(\d{1,2}:\d{2}|\d{4})$")


@dataclass
class DirectoryEntry:
    """One entry of a remote directory listing."""
    name: str
    kind: EntryKind
    size: int
    day: str
    month: str
    time: str
    permissions: str
    path: str
    owner: Optional[str] = None
    group: Optional[str] = None

    @property
    def is_dir(self) -> bool:
        """True if the entry is a directory."""
        return self.kind == EntryKind.DIRECTORY

    @property
    def modified_time(self) -> str:
        """Modification time exactly as the server gave it: "<day> <month> <time>"."""
        return f"{self.day} {self.month} {self.time}"

    def to_dict(self) -> dict:
        """Convert entry to the dictionary shape returned to callers."""
        return {
            "name": self.name,
            "type": self.kind.value,
            "size": self.size,
            "modifiedTime": self.modified_time,
            "permissions": self.permissions,
            "path": self.path,
            "owner": self.owner,
            "group": self.group,
        }


def join_remote(directory: str, name: str) -> str:
    """
    Build the remote path of a name inside a listed directory.

    The result has the same form as the directory: relative listings
    (sent from the login directory) give relative paths, absolute
    listings give absolute ones.

    Args:
        directory: Listed directory ("" is the login directory)
        name: Entry name

    Returns:
        Path such as "pub/file.txt" or "/pub/file.txt"
    """
    if not directory:
        return name
    return posixpath.join(directory, name)


def parse_list_line(line: str, directory: str) -> Optional[DirectoryEntry]:
    """
    Parse one line of unix-style LIST output.

    Example line:
        "drwxr-xr-x   2 owner  group   4096 Oct 19 05:12 backups"

    Args:
        line: Raw LIST line
        directory: Directory the listing was taken from

    Returns:
        DirectoryEntry, or None for "total" lines, "." / ".." and
        lines that are not in unix format
    """
    text = line.rstrip("\r\n").strip()
    if not text or text.startswith("total "):
        return None

    parts = text.split()
    if len(parts) < 6 or not _PERMISSIONS_PATTERN.match(parts[0]):
        return None

    month_idx = -1
    for i, token in enumerate(parts[1:], start=1):
        if token.lower() in _MONTHS and i + 2 < len(parts) \
                and _DAY_PATTERN.match(parts[i + 1]) and _TIME_OR_YEAR_PATTERN.match(parts[i + 2]):
            month_idx = i
            break
    # Need <size> before and <day> <time|year> <name> after the month
    if month_idx < 2 or month_idx + 3 >= len(parts):
        return None

    try:
        size = int(parts[month_idx - 1])
    except ValueError:
        size = 0

    # Name is everything after the time column, spaces included
    name = text.split(None, month_idx + 3)[-1]
    permissions = parts[0]

    if permissions.startswith("d"):
        kind = EntryKind.DIRECTORY
    elif permissions.startswith("l"):
        kind = EntryKind.LINK
        name = name.split(" -> ", 1)[0]
    else:
        kind = EntryKind.FILE

    if name in (".", ".."):
        return None

    owner = parts[2] if month_idx >= 4 else None
    group = parts[3] if month_idx >= 5 else None

    return DirectoryEntry(
        name=name,
        kind=kind,
        size=size,
        day=parts[month_idx + 1],
        month=parts[month_idx],
        time=parts[month_idx + 2],
        permissions=permissions,
        path=join_remote(directory, name),
        owner=owner,
        group=group,
    )
