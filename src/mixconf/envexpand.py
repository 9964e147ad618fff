# ABOUTME: Environment variable expansion for builder.conf values
# ABOUTME: Checks every $NAME / ${NAME} reference before substituting any of them
"""Environment variable expansion"""

import os
import re
from collections.abc import Iterable, Mapping

from mixconf.exceptions import UndefinedVariableError

# $NAME or ${NAME}
_VAR_RE = re.compile(r"\$(?:\{(\w+)\}|(\w+))")


def referenced_variables(value: str) -> list[str]:
    """Names of the variables referenced in value, in order of appearance."""
    return [braced or bare for braced, bare in _VAR_RE.findall(value)]


def check_defined(values: Iterable[str], environ: Mapping[str, str] | None = None) -> None:
    """Raise UndefinedVariableError for the first reference that is not set."""
    environ = os.environ if environ is None else environ
    for value in values:
        for name in referenced_variables(value):
            if name not in environ:
                raise UndefinedVariableError(name)


def expand(value: str, environ: Mapping[str, str] | None = None) -> str:
    """Substitute references in value; every variable must already be defined."""
    environ = os.environ if environ is None else environ
    return _VAR_RE.sub(lambda m: environ[m.group(1) or m.group(2)], value)
