# ABOUTME: builder.conf document: defaults, legacy conversion, TOML load/save
# ABOUTME: Expands environment variables and validates required fields on load
"""
Mix configuration (builder.conf).

A MixConfig holds four sections of string values. Loading goes through a
fixed pipeline:

    resolve path -> check version header -> convert legacy file if needed
    -> decode TOML over defaults -> expand $VARS -> validate

Any step failing raises; a partially loaded document is never returned.
"""

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any, TextIO

from mixconf.envexpand import check_defined, expand
from mixconf.exceptions import ConfigError, ParseError, ValidationError
from mixconf.legacy import LegacyConverter
from mixconf.schema import (
    CONFIG_FIELDS,
    CURRENT_CONFIG_VERSION,
    LEGACY_FORMAT_KEY,
    SECTIONS,
    BuilderSection,
    ConfigField,
    MixerSection,
    ServerSection,
    SwupdSection,
)
from mixconf.versioning import detect_version, render_document, write_document

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "builder.conf"


def _cwd() -> str:
    try:
        return os.getcwd()
    except OSError as e:
        raise ConfigError(f"Unable to determine working directory: {e}") from e


class MixConfig:
    """Config parameters found in the builder config file."""

    def __init__(self):
        self.builder = BuilderSection()
        self.swupd = SwupdSection()
        self.server = ServerSection()
        self.mixer = MixerSection()

        # Hidden properties
        self._filename = ""
        self._version = ""
        # FORMAT moved into mixer.state; set when a loaded config still has it.
        # The value is re-saved under [Swupd] until the file is recreated.
        self.has_format_field = False
        self.legacy_format: str | None = None

    # -- field access -------------------------------------------------------

    def get(self, entry: ConfigField) -> str:
        return getattr(getattr(self, SECTIONS[entry.section]), entry.attr)

    def set(self, entry: ConfigField, value: str) -> None:
        setattr(getattr(self, SECTIONS[entry.section]), entry.attr, value)

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Section -> on-disk key -> value, in schema order."""
        body: dict[str, dict[str, str]] = {name: {} for name in SECTIONS}
        for entry in CONFIG_FIELDS:
            body[entry.section][entry.key] = self.get(entry)
        # Deprecated FORMAT stays on disk where FormatResolver looks for it
        if self.has_format_field and self.legacy_format is not None:
            body["Swupd"][LEGACY_FORMAT_KEY] = self.legacy_format
        return body

    def mount_paths(self) -> list[str]:
        """Paths the build container needs bind-mounted."""
        return [self.get(entry) for entry in CONFIG_FIELDS if entry.mount and self.get(entry)]

    # -- defaults -----------------------------------------------------------

    def load_defaults(self) -> None:
        """Set sane values using the working directory as base path."""
        self.load_defaults_for_path(_cwd())

    def load_defaults_for_path(self, path: str | Path) -> None:
        """Set sane values using `path` as base directory."""
        path = str(path)

        # [Builder]
        self.builder.cert = os.path.join(path, "Swupd_Root.pem")
        self.builder.server_state_dir = os.path.join(path, "update")
        self.builder.version_path = path
        self.builder.dnf_conf = os.path.join(path, ".yum-mix.conf")

        # [Swupd]
        self.swupd.bundle = "os-core-update"
        self.swupd.content_url = "<URL where the content will be hosted>"
        self.swupd.version_url = "<URL where the version of the mix will be hosted>"

        # [Server]
        self.server.debug_info_banned = "true"
        self.server.debug_info_lib = "/usr/lib/debug"
        self.server.debug_info_src = "/usr/src/debug"

        # [Mixer]
        self.mixer.local_bundle_dir = os.path.join(path, "local-bundles")
        self.mixer.local_repo_dir = os.path.join(path, "local-yum")
        self.mixer.local_rpm_dir = os.path.join(path, "local-rpms")
        self.mixer.docker_image_path = "clearlinux/mixer"

        self._version = CURRENT_CONFIG_VERSION
        self._filename = os.path.join(path, CONFIG_FILENAME)

        self.has_format_field = False
        self.legacy_format = None

    def init_config_path(self, fullpath: str | Path | None = None) -> None:
        """Use fullpath as the config file, or <cwd>/builder.conf if none is given."""
        if fullpath:
            self._filename = str(fullpath)
            return
        self._filename = os.path.join(_cwd(), CONFIG_FILENAME)

    def create_default_config(self, filename: str | Path | None = None) -> None:
        """Create a default config at filename, or <cwd>/builder.conf.

        Default values are always derived from the working directory.
        """
        self.load_defaults()
        self.init_config_path(filename)
        logger.info(f"Creating new configuration file {self._filename}...")
        self.save()

    # -- persistence --------------------------------------------------------

    def dumps(self) -> str:
        return render_document(self._version, self.to_dict())

    def save(self) -> None:
        """Write the version header and TOML body to the config file."""
        write_document(self._filename, self._version, self.to_dict())

    def print(self, file: TextIO | None = None) -> None:
        """Print the current in-memory values as TOML."""
        print(self.dumps(), file=file or sys.stdout)

    def load(self, filename: str | Path | None = None) -> None:
        """Load a config file from filename, or from the working directory."""
        self.init_config_path(filename)

        status, found = detect_version(self._filename, self.get_latest_version())
        if status.is_current:
            self._version = found
        else:
            logger.info(
                f"Converting {self._filename} ({status.value}"
                f"{' ' + found if found else ''}) to version {self.get_latest_version()}"
            )
            self._convert()

        self._parse()
        self._expand_env()
        self.validate()

    def convert(self, filename: str | Path | None = None) -> bool:
        """Upgrade a legacy config file in place.

        Returns False when the file was already at the latest version.
        """
        self.init_config_path(filename)
        target = self._filename
        self.load_defaults()
        self._filename = target

        status, _ = detect_version(self._filename, self.get_latest_version())
        if status.is_current:
            return False
        self._convert()
        return True

    def _convert(self) -> None:
        try:
            legacy = LegacyConverter(self._filename).read()
        except FileNotFoundError as e:
            raise ConfigError(
                f"Config file not found: {self._filename}",
                recovery_hint="Run 'mixconf init' to create a default builder.conf",
            ) from e

        for entry, value in legacy.values.items():
            self.set(entry, value)
        if legacy.has_format_field:
            self.has_format_field = True
            self.legacy_format = legacy.format

        self._version = self.get_latest_version()
        self.save()

    def _parse(self) -> None:
        try:
            with open(self._filename, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {self._filename}") from e
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ParseError(f"Unable to parse {self._filename}: {e}") from e

        for section in SECTIONS:
            table = data.get(section)
            if table is None:
                continue
            if not isinstance(table, dict):
                raise ParseError(f"{self._filename}: [{section}] must be a table")
            self._decode_section(section, table)

    def _decode_section(self, section: str, table: dict[str, Any]) -> None:
        for entry in CONFIG_FIELDS:
            if entry.section != section or entry.key not in table:
                continue
            value = table[entry.key]
            if not isinstance(value, str):
                raise ParseError(
                    f"{self._filename}: {section}.{entry.key} must be a string, "
                    f"got {type(value).__name__}"
                )
            self.set(entry, value)

        if section == "Swupd" and LEGACY_FORMAT_KEY in table:
            self.has_format_field = True
            if self.legacy_format is None:
                self.legacy_format = str(table[LEGACY_FORMAT_KEY])

    def _expand_env(self) -> None:
        values = [self.get(entry) for entry in CONFIG_FIELDS]
        check_defined(values)
        for entry in CONFIG_FIELDS:
            self.set(entry, expand(self.get(entry)))

    def validate(self) -> None:
        """Raise ValidationError naming the first empty required field."""
        for entry in CONFIG_FIELDS:
            if entry.required and self.get(entry) == "":
                raise ValidationError(entry.display_name)

        if self.has_format_field:
            logger.warning("FORMAT value was transferred to mixer.state file")

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
        return CURRENT_CONFIG_VERSION

    def __eq__(self, other):
        if not isinstance(other, MixConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"MixConfig(filename={self._filename!r}, version={self._version!r})"


def load_config(filename: str | Path | None = None) -> MixConfig:
    """Build a MixConfig from defaults and load filename over them."""
    config = MixConfig()
    config.load_defaults()
    config.load(filename)
    return config
