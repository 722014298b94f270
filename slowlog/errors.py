"""Error kinds raised by the slow-log pipeline."""


class SlowlogError(Exception):
    """Base class for every error this package raises on purpose."""


class ConfigurationError(SlowlogError):
    """Fatal startup problem: bad rule kind, sort rule, or config value."""


class FieldCoercionError(SlowlogError):
    """A matched field value could not be converted to its declared kind.

    Recoverable: the field is left out of the record and parsing continues.
    """

    def __init__(self, field: str, raw: str, reason: str):
        self.field = field
        self.raw = raw
        self.reason = reason
        super().__init__(f"unable to parse {field}: {raw!r} ({reason})")


class InputReadError(SlowlogError):
    """The line source failed for a reason other than end of input."""
