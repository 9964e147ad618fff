# ABOUTME: Version header handling shared by builder.conf and mixer.state
# ABOUTME: Detects the "#VERSION x.y" marker and renders versioned TOML documents
"""
Versioned document support.

Both persisted documents start with a single header line::

    #VERSION 1.0

followed by a blank line and a TOML body. The header decides whether a
file can be decoded directly or has to be upgraded first.
"""

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

import tomli_w

from mixconf.utils import atomic_write

logger = logging.getLogger(__name__)

VERSION_PREFIX = "#VERSION"

_HEADER_RE = re.compile(r"^#VERSION\s+(\S+)\s*$")


class VersionedDocument(Protocol):
    """Anything persisted with a version header."""

    def get_filename(self) -> str: ...

    def get_version(self) -> str: ...

    def get_latest_version(self) -> str: ...


class VersionStatus(Enum):
    """Where a file stands relative to the schema the tool understands."""

    MISSING = "missing"
    UNVERSIONED = "unversioned"
    STALE = "stale"
    CURRENT = "current"

    @property
    def is_current(self) -> bool:
        return self is VersionStatus.CURRENT


def read_header(path: Path | str) -> str | None:
    """Return the version token of the first line, or None if there is none.

    Raises FileNotFoundError when the file does not exist.
    """
    with open(path, "rb") as f:
        raw = f.readline()

    try:
        first_line = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None

    match = _HEADER_RE.match(first_line.rstrip("\r\n"))
    if match is None:
        return None
    return match.group(1)


def detect_version(path: Path | str, latest: str) -> tuple[VersionStatus, str | None]:
    """Classify a file's version header against the latest known version."""
    try:
        found = read_header(path)
    except FileNotFoundError:
        return VersionStatus.MISSING, None

    if found is None:
        logger.debug(f"{path} has no version header")
        return VersionStatus.UNVERSIONED, None
    if found != latest:
        logger.debug(f"{path} is at version {found}, latest is {latest}")
        return VersionStatus.STALE, found
    return VersionStatus.CURRENT, found


def parse_version(doc: VersionedDocument) -> bool:
    """Report whether the document's file is already at the latest version.

    A missing file or a missing/malformed header is "not current" rather
    than an error; callers convert or re-save in that case.
    """
    status, _ = detect_version(doc.get_filename(), doc.get_latest_version())
    return status.is_current


def render_document(version: str, body: dict[str, dict[str, Any]]) -> str:
    """Render the header line, a blank line, then the TOML body."""
    return f"{VERSION_PREFIX} {version}\n\n" + tomli_w.dumps(body)


def write_document(path: Path | str, version: str, body: dict[str, dict[str, Any]]) -> None:
    atomic_write(path, render_document(version, body))
