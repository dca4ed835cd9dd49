class OrderParseError(ValueError):
    """A labeled field holds a value that fails validation.

    Fatal to the parse. `message` is shown verbatim to the submitter and
    `field` names the offending draft-order field.
    """

    def __init__(self, message: str, field: str, original_value: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.original_value = original_value


class TimeNormalizationError(ValueError):
    """Raised when a delivery time cannot be turned into HH:MM."""
