"""Normalized journal error types."""


class JournalError(Exception):
    """Base class for all journal errors."""

    code = "journal_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(JournalError):
    """Missing or malformed input, rejected before any computation."""

    code = "validation_error"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, code)
        self.field = field


class TradeArithmeticError(ValidationError):
    """Input makes a derived value undefined (e.g. zero entry price)."""

    code = "arithmetic_error"


class NotFoundError(JournalError):
    """Referenced record does not exist or belongs to another owner."""

    code = "not_found"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        super().__init__(message, code)
        self.resource_id = resource_id


class InvalidStateError(JournalError):
    """Operation is not allowed in the record's current state."""

    code = "invalid_state"
