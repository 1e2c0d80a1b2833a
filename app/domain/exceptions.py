from __future__ import annotations


class BusinessValidationError(Exception):
    """Raised when a domain/business rule is violated."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class IncompleteSoapNoteError(BusinessValidationError):
    """Raised when a recognized SOAP note is required to be complete but is not.

    `errors` holds the itemized per-section messages so callers can show them next
    to the offending note instead of a generic failure.
    """

    def __init__(self, errors: list[str] | tuple[str, ...]):
        super().__init__("SOAP note is incomplete")
        self.errors = list(errors)
