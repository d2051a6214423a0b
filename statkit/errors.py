"""Statistics errors."""


class StatisticsError(Exception):
    """Base class for statistics errors."""

    def __init__(self, message: str = "Statistics error"):
        self.message = message
        super().__init__(self.message)


class UnknownFilterKeyError(StatisticsError):
    """A filter key has no rule and is not a time range key."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"Invalid filter key: {key}")


class TransientBackendError(StatisticsError):
    """Backend conflict that is safe to retry."""

    def __init__(self, message: str = "Transient backend failure"):
        super().__init__(message)


class InvalidStatisticError(StatisticsError):
    """Malformed statistic definition."""


class UnknownScopeError(StatisticsError):
    """Scope is not declared on the model."""

    def __init__(self, model: str, scope: str):
        self.model = model
        self.scope = scope
        super().__init__(f"Unknown scope {scope!r} on {model}")
