# ABOUTME: Reader for outdated builder.conf files (pre-versioning INI or stale TOML)
# ABOUTME: Maps case-insensitive legacy keys onto the current schema and captures FORMAT
"""Legacy builder.conf conversion"""

import configparser
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mixconf.exceptions import ParseError
from mixconf.schema import CONFIG_FIELDS, LEGACY_FORMAT_KEY, ConfigField

logger = logging.getLogger(__name__)

# section (lower-cased) -> key (lower-cased) -> raw value
Sections = dict[str, dict[str, str]]


@dataclass
class LegacyConfig:
    """Values recovered from a legacy file, keyed by the current schema."""

    values: dict[ConfigField, str] = field(default_factory=dict)
    format: str | None = None

    @property
    def has_format_field(self) -> bool:
        return self.format is not None


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _scalar(value: Any) -> str | None:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


class LegacyConverter:
    """Translate outdated [Builder]/[swupd]/[Server]/[Mixer] layouts.

    A body that is valid TOML (an older versioned file) is decoded as TOML
    so quoting and escapes are honoured; anything else is read as the
    informal INI layout. Section names and keys are matched
    case-insensitively. Sections and keys the current schema does not know
    are ignored; a file that cannot be parsed at all raises ParseError.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _parse_error(self, error: Exception) -> ParseError:
        return ParseError(
            f"Unable to parse legacy config {self.path}: {error}",
            recovery_hint="Fix the file by hand or recreate it with 'mixconf init'",
        )

    def _from_toml(self, text: str) -> Sections | None:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError:
            return None

        sections: Sections = {}
        for name, table in data.items():
            if not isinstance(table, dict):
                continue
            keys = sections.setdefault(name.lower(), {})
            for key, value in table.items():
                value = _scalar(value)
                if value is not None:
                    keys[key.lower()] = value
        return sections

    def _from_ini(self, text: str) -> Sections:
        parser = configparser.ConfigParser(
            interpolation=None, strict=False, inline_comment_prefixes=("#", ";")
        )
        try:
            parser.read_string(text, source=str(self.path))
        except configparser.Error as e:
            raise self._parse_error(e) from e

        # configparser lower-cases option names already
        return {
            name.lower(): {key: _unquote(value) for key, value in parser[name].items()}
            for name in parser.sections()
        }

    def sections(self) -> Sections:
        """Parse the file. FileNotFoundError propagates to the caller."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise self._parse_error(e) from e

        sections = self._from_toml(text)
        if sections is None:
            sections = self._from_ini(text)
        return sections

    def read(self) -> LegacyConfig:
        sections = self.sections()
        result = LegacyConfig()

        for entry in CONFIG_FIELDS:
            section = sections.get(entry.section.lower())
            if section is None:
                continue
            for key in (entry.key, *entry.legacy_keys):
                if key.lower() in section:
                    value = section[key.lower()]
                    if value:
                        result.values[entry] = value
                    break

        swupd = sections.get("swupd")
        if swupd is not None and LEGACY_FORMAT_KEY.lower() in swupd:
            result.format = swupd[LEGACY_FORMAT_KEY.lower()]
            logger.debug(f"Found legacy FORMAT={result.format} in {self.path}")

        return result
