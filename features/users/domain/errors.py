import enum


class UserValidationError(Exception):
    """Input failed a format rule, or a looked-up user does not exist.

    The message is always safe to return to the caller.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NoRowsAffectedError(Exception):
    """Raised by the repository when a delete matched no row."""

    def __init__(self, message: str = "no rows affected"):
        super().__init__(message)
        self.message = message


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    FAILURE = "failure"


def classify_error(exc: BaseException) -> ErrorKind:
    """Maps an exception raised below the routes onto its ErrorKind."""
    if isinstance(exc, UserValidationError):
        return ErrorKind.VALIDATION
    if isinstance(exc, NoRowsAffectedError):
        return ErrorKind.NOT_FOUND
    return ErrorKind.FAILURE
