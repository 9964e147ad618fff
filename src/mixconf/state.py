# ABOUTME: mixer.state document tracking the mix FORMAT and offline mode
# ABOUTME: Creates itself on first load and bumps stale versions in place
"""Mix state (mixer.state)"""

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mixconf.exceptions import ParseError
from mixconf.format_resolver import FormatResolver
from mixconf.versioning import VersionStatus, detect_version, write_document

logger = logging.getLogger(__name__)

CURRENT_STATE_VERSION = "1.1"
STATE_FILENAME = "mixer.state"

# Section and on-disk keys
MIX_SECTION = "Mix"
_KEYS = {"format": "FORMAT", "offline": "OFFLINE"}


@dataclass
class MixSection:
    format: str = ""
    offline: str = ""


class MixState:
    """Current state of the mix."""

    def __init__(self, resolver: FormatResolver | None = None):
        self.mix = MixSection()
        self.resolver = resolver or FormatResolver()

        # Hidden properties
        self._filename = ""
        self._version = ""
        # Where the FORMAT value came from, for diagnostics
        self.format_source = ""

    def _load_base_defaults(self) -> None:
        self.mix.offline = "false"
        self._filename = STATE_FILENAME
        self._version = CURRENT_STATE_VERSION

    def load_defaults(self) -> None:
        """Initialize the state with sane values."""
        self._load_base_defaults()
        self._load_default_format()

    def _load_default_format(self) -> None:
        resolved = self.resolver.resolve()
        self.mix.format = resolved.value
        self.format_source = resolved.source

    # -- accessors ----------------------------------------------------------

    @property
    def format(self) -> str:
        return self.mix.format

    @format.setter
    def format(self, value: str) -> None:
        self.mix.format = str(value)
        self.format_source = "set explicitly"

    @property
    def offline(self) -> bool:
        return self.mix.offline.strip().lower() == "true"

    @offline.setter
    def offline(self, value: bool) -> None:
        self.mix.offline = "true" if value else "false"

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {MIX_SECTION: {key: getattr(self.mix, attr) for attr, key in _KEYS.items()}}

    # -- persistence --------------------------------------------------------

    def save(self) -> None:
        """Create or overwrite the state file."""
        write_document(self._filename, self._version, self.to_dict())

    def load(self, filename: str | Path | None = None) -> None:
        """Load the state file, creating it with defaults on first run."""
        self._load_base_defaults()
        self.mix.format = ""
        self.format_source = ""
        if filename:
            self._filename = str(filename)

        status, found = detect_version(self._filename, self.get_latest_version())

        if status is VersionStatus.MISSING:
            self._load_default_format()
            logger.warning(f"Using FORMAT value from {self.format_source}")
            self.save()
            return

        if status.is_current:
            self._parse()
        else:
            # Only the version changes; whatever still decodes is carried over
            try:
                self._parse()
            except ParseError as e:
                logger.warning(f"Discarding unreadable state values: {e}")
                self.mix = MixSection(offline="false")
                self.format_source = ""

        if not self.mix.format:
            self._load_default_format()

        if not status.is_current:
            logger.warning(f"Converting state to version {CURRENT_STATE_VERSION}")
            self._version = CURRENT_STATE_VERSION
            self.save()
        else:
            self._version = found

    def _parse(self) -> None:
        try:
            with open(self._filename, "rb") as f:
                data = tomllib.load(f)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ParseError(f"Unable to parse {self._filename}: {e}") from e

        table = data.get(MIX_SECTION, {})
        if not isinstance(table, dict):
            raise ParseError(f"{self._filename}: [{MIX_SECTION}] must be a table")
        self._decode(table)

    def _decode(self, table: dict[str, Any]) -> None:
        for attr, key in _KEYS.items():
            if key not in table:
                continue
            value = table[key]
            if not isinstance(value, str):
                raise ParseError(
                    f"{self._filename}: {MIX_SECTION}.{key} must be a string, "
                    f"got {type(value).__name__}"
                )
            setattr(self.mix, attr, value)
        if "FORMAT" in table:
            self.format_source = self._filename

    # -- hidden properties --------------------------------------------------

    def set_filename(self, filename: str | Path) -> None:
        self._filename = str(filename)

    def get_filename(self) -> str:
        return self._filename

    def set_version(self, version: str) -> None:
        self._version = version

    def get_version(self) -> str:
        return self._version

    def get_latest_version(self) -> str:
        return CURRENT_STATE_VERSION

    def __repr__(self):
        return f"MixState(filename={self._filename!r}, format={self.mix.format!r})"


def load_state(
    filename: str | Path | None = None,
    config=None,
    resolver: FormatResolver | None = None,
) -> MixState:
    """Load mixer.state; a converted MixConfig can hand over its legacy FORMAT."""
    if resolver is None and config is not None:
        resolver = FormatResolver(
            config_path=config.get_filename() or "builder.conf",
            legacy_format=config.legacy_format,
        )
    state = MixState(resolver)
    state.load(filename)
    return state
