# ABOUTME: Resolves the default build format for a new mixer.state
# ABOUTME: Tries legacy builder.conf FORMAT, then the swupd system default, then a literal
"""Default format resolution"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_FORMAT_PATH = "/usr/share/defaults/swupd/format"
FALLBACK_FORMAT = "1"
FALLBACK_SOURCE = "Mixer internal value"

# FORMAT = 3, FORMAT="3" or FORMAT = "3" on a line of its own
_FORMAT_RE = re.compile(r'^\s*FORMAT[\s"=]*([0-9]+)[\s"]*$', re.MULTILINE)


@dataclass
class ResolvedFormat:
    value: str
    source: str


class FormatResolver:
    """Pick the format value a freshly defaulted state should start with.

    Sources are tried in order and the first hit wins:

    1. a FORMAT value handed over by a config conversion, or a FORMAT line
       in the raw text of builder.conf (migrated or not)
    2. the whole, trimmed content of the swupd system default file
    3. FALLBACK_FORMAT
    """

    def __init__(
        self,
        config_path: Path | str = "builder.conf",
        system_path: Path | str | None = None,
        legacy_format: str | None = None,
    ):
        self.config_path = Path(config_path)
        self.system_path = Path(system_path or DEFAULT_FORMAT_PATH)
        self.legacy_format = legacy_format

    def from_config(self) -> str | None:
        if self.legacy_format:
            return self.legacy_format
        try:
            text = self.config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"No FORMAT from {self.config_path}: {e}")
            return None
        match = _FORMAT_RE.search(text)
        return match.group(1) if match else None

    def from_system(self) -> str | None:
        try:
            value = self.system_path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"No FORMAT from {self.system_path}: {e}")
            return None
        return value or None

    def resolve(self) -> ResolvedFormat:
        value = self.from_config()
        if value:
            return ResolvedFormat(value, self.config_path.name)

        value = self.from_system()
        if value:
            return ResolvedFormat(value, str(self.system_path))

        return ResolvedFormat(FALLBACK_FORMAT, FALLBACK_SOURCE)
