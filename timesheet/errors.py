"""Domain errors raised by the timesheet core.

Every error carries a localization token in ``code`` so the UI can render
a translated message instead of a literal string.
"""


class TimesheetError(Exception):
    """Base error for the timesheet service."""

    default_code = "notifications.error"

    def __init__(self, code: str | None = None, message: str | None = None):
        self.code = code or self.default_code
        super().__init__(message or self.code)


class AuthError(TimesheetError):
    """Caller is unauthenticated, inactive, or lacks admin rights."""

    default_code = "notifications.auth_error_method"

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        admin_required: bool = False,
    ):
        super().__init__(code, message)
        self.admin_required = admin_required


class InvalidPeriod(TimesheetError, ValueError):
    """Unrecognized period token."""

    default_code = "notifications.invalid_period"

    def __init__(self, period: str):
        self.period = period
        super().__init__(message=f"Unknown period: {period!r}")


class ValidationError(TimesheetError, ValueError):
    """User input that must not be written (e.g. an empty task name)."""

    default_code = "notifications.validation_error"
