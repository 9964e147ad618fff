# ABOUTME: Custom exception hierarchy for mixconf error handling
# ABOUTME: Provides specialized exceptions with recovery hints for config and state documents
"""Custom exceptions for mixconf"""


class MixconfError(Exception):
    """Base exception for all mixconf errors"""

    def __init__(self, message: str, recovery_hint: str | None = None):
        super().__init__(message)
        self.recovery_hint = recovery_hint

    def __str__(self):
        base = super().__str__()
        if self.recovery_hint:
            return f"{base}\nHint: {self.recovery_hint}"
        return base


class ConfigError(MixconfError):
    """Configuration file could not be located or opened"""

    pass


class ParseError(MixconfError):
    """Malformed document body (TOML or legacy INI)"""

    pass


class ValidationError(MixconfError):
    """A required field is empty"""

    def __init__(self, field: str, recovery_hint: str | None = None):
        super().__init__(f"Missing required field in config file: {field}", recovery_hint)
        self.field = field


class UndefinedVariableError(MixconfError):
    """A value references an environment variable that is not set"""

    def __init__(self, variable: str, recovery_hint: str | None = None):
        super().__init__(
            f"builder.conf contains an undefined environment variable: {variable}",
            recovery_hint or f"Export {variable} or define it in a .env file",
        )
        self.variable = variable


class StorageError(MixconfError):
    """Writing a document to disk failed"""

    pass
